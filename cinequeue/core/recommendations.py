"""Genre-based recommendation generator."""

import asyncio
from collections.abc import Iterable, Sequence
from typing import Protocol

from cinequeue import log
from cinequeue.core.omdb import OmdbClient
from cinequeue.exceptions import NoBasisForRecommendationError, UpstreamError
from cinequeue.models.db.watchlist import WatchStatus
from cinequeue.models.schemas.media import MediaItem, SearchPage

__all__ = ["MAX_RECOMMENDATIONS", "RecommendationGenerator", "collect_genres"]

MAX_RECOMMENDATIONS = 20


class WatchedTitle(Protocol):
    """Minimal view of a watchlist entry needed to recommend from it."""

    external_id: str
    status: WatchStatus | str
    genres: list[str]


def collect_genres(entries: Iterable[WatchedTitle]) -> list[str]:
    """Return the distinct genre tags of ``entries`` in first-seen order.

    Tags are stripped and compared case-insensitively; blank tags are dropped.
    The first spelling seen is the one kept.
    """
    seen: set[str] = set()
    genres: list[str] = []
    for entry in entries:
        for raw in entry.genres or []:
            genre = str(raw).strip()
            key = genre.casefold()
            if not genre or key in seen:
                continue
            seen.add(key)
            genres.append(genre)
    return genres


class RecommendationGenerator:
    """Recommends movies sharing genres with the titles a user has completed.

    Each genre is searched once, all genres concurrently. Results are merged in
    genre order, keeping the provider's order within a genre, with titles
    already on the watchlist (in any status) and duplicates removed. The merged
    list is capped at ``MAX_RECOMMENDATIONS``.

    A genre whose search fails contributes nothing. Only when every genre
    search fails is the last failure raised.
    """

    def __init__(self, client: OmdbClient, limit: int = MAX_RECOMMENDATIONS) -> None:
        self.client = client
        self.limit = min(limit, MAX_RECOMMENDATIONS)

    async def generate(self, watchlist: Sequence[WatchedTitle]) -> list[MediaItem]:
        """Build recommendations for the owner of ``watchlist``.

        Args:
            watchlist (Sequence[WatchedTitle]): Every entry on the user's list.

        Returns:
            list[MediaItem]: At most ``limit`` titles not on the watchlist.

        Raises:
            NoBasisForRecommendationError: If nothing on the list is completed.
            UpstreamError: If every genre search failed.
        """
        completed = [
            entry for entry in watchlist if entry.status == WatchStatus.COMPLETED
        ]
        if not completed:
            raise NoBasisForRecommendationError(
                "Complete some titles on your watchlist to get recommendations"
            )

        genres = collect_genres(completed)
        if not genres:
            log.info("No genres on completed titles, nothing to recommend from")
            return []

        log.debug(
            f"Searching $${{genres: {len(genres)}}}$$ genres for recommendations"
        )
        pages = await asyncio.gather(
            *(self.client.search(genre, "movie") for genre in genres),
            return_exceptions=True,
        )

        excluded = {entry.external_id for entry in watchlist}
        results: list[MediaItem] = []
        failures: list[BaseException] = []

        for genre, page in zip(genres, pages, strict=True):
            if isinstance(page, BaseException):
                if not isinstance(page, UpstreamError):
                    raise page
                log.warning(f"Genre search for $$'{genre}'$$ failed: {page}")
                failures.append(page)
                continue
            results.extend(self._take_new(page, excluded))

        if failures and len(failures) == len(genres):
            raise failures[-1]

        return results[: self.limit]

    @staticmethod
    def _take_new(page: SearchPage, excluded: set[str]) -> list[MediaItem]:
        """Return items of ``page`` not in ``excluded``, adding them to it."""
        fresh: list[MediaItem] = []
        for item in page.results:
            if item.external_id in excluded:
                continue
            excluded.add(item.external_id)
            fresh.append(item)
        return fresh
