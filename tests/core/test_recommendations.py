"""Tests for the recommendation generator."""

import asyncio
from dataclasses import dataclass, field

import pytest

from cinequeue.core.recommendations import (
    MAX_RECOMMENDATIONS,
    RecommendationGenerator,
    collect_genres,
)
from cinequeue.exceptions import (
    NoBasisForRecommendationError,
    ProviderError,
    TransportError,
)
from cinequeue.models.db.watchlist import WatchStatus
from cinequeue.models.schemas.media import MediaItem, SearchPage


@dataclass
class Entry:
    """Watchlist entry stand-in."""

    external_id: str
    status: WatchStatus
    genres: list[str] = field(default_factory=list)


def _items(prefix: str, count: int) -> list[MediaItem]:
    return [
        MediaItem(external_id=f"{prefix}{i}", title=f"{prefix} {i}")
        for i in range(count)
    ]


class FakeClient:
    """Serves canned search pages per genre and records concurrency."""

    def __init__(self, pages: dict[str, list[MediaItem] | Exception]) -> None:
        self.pages = pages
        self.queries: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def search(self, query: str, media_type: str = "movie", page: int = 1):
        self.queries.append((query, media_type))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        result = self.pages.get(query, [])
        if isinstance(result, Exception):
            raise result
        return SearchPage(page=page, total_results=len(result), results=result)


def test_collect_genres_dedupes_case_insensitively_in_order():
    """Genres keep first-seen order and spelling; blanks are dropped."""
    entries = [
        Entry("tt1", WatchStatus.COMPLETED, ["Drama", " sci-fi ", ""]),
        Entry("tt2", WatchStatus.COMPLETED, ["drama", "Sci-Fi", "Comedy"]),
    ]

    assert collect_genres(entries) == ["Drama", "sci-fi", "Comedy"]


@pytest.mark.asyncio
async def test_requires_a_completed_entry():
    """Without completed titles there is no basis to recommend from."""
    generator = RecommendationGenerator(FakeClient({}))
    watchlist = [Entry("tt1", WatchStatus.WATCHING, ["Drama"])]

    with pytest.raises(NoBasisForRecommendationError):
        await generator.generate(watchlist)


@pytest.mark.asyncio
async def test_merges_in_genre_order_and_excludes_watchlist():
    """Results follow genre order, skip known titles and duplicates."""
    client = FakeClient(
        {
            "Drama": [
                MediaItem(external_id="tt10", title="A"),
                MediaItem(external_id="tt-pending", title="On list"),
                MediaItem(external_id="tt11", title="B"),
            ],
            "Comedy": [
                MediaItem(external_id="tt11", title="B again"),
                MediaItem(external_id="tt12", title="C"),
            ],
        }
    )
    watchlist = [
        Entry("tt1", WatchStatus.COMPLETED, ["Drama", "Comedy"]),
        Entry("tt-pending", WatchStatus.PENDING, ["Horror"]),
    ]

    result = await RecommendationGenerator(client).generate(watchlist)

    assert [item.external_id for item in result] == ["tt10", "tt11", "tt12"]
    assert client.queries == [("Drama", "movie"), ("Comedy", "movie")]


@pytest.mark.asyncio
async def test_genre_queries_run_concurrently():
    """All genre searches are in flight at the same time."""
    client = FakeClient({"A": _items("a", 1), "B": _items("b", 1), "C": _items("c", 1)})
    watchlist = [Entry("tt1", WatchStatus.COMPLETED, ["A", "B", "C"])]

    await RecommendationGenerator(client).generate(watchlist)

    assert client.max_in_flight == 3


@pytest.mark.asyncio
async def test_results_are_capped():
    """No more than MAX_RECOMMENDATIONS titles are returned."""
    client = FakeClient({"A": _items("a", 15), "B": _items("b", 15)})
    watchlist = [Entry("tt1", WatchStatus.COMPLETED, ["A", "B"])]

    result = await RecommendationGenerator(client).generate(watchlist)

    assert len(result) == MAX_RECOMMENDATIONS == 20
    assert result[0].external_id == "a0"
    assert result[-1].external_id == "b4"


@pytest.mark.asyncio
async def test_failed_genre_contributes_nothing():
    """One failing genre does not sink the whole batch."""
    client = FakeClient({"A": TransportError("down"), "B": _items("b", 2)})
    watchlist = [Entry("tt1", WatchStatus.COMPLETED, ["A", "B"])]

    result = await RecommendationGenerator(client).generate(watchlist)

    assert [item.external_id for item in result] == ["b0", "b1"]


@pytest.mark.asyncio
async def test_all_genres_failing_raises_last_error():
    """When every genre fails the caller sees an upstream error."""
    client = FakeClient(
        {"A": TransportError("first"), "B": ProviderError("Invalid API key!")}
    )
    watchlist = [Entry("tt1", WatchStatus.COMPLETED, ["A", "B"])]

    with pytest.raises(ProviderError):
        await RecommendationGenerator(client).generate(watchlist)


@pytest.mark.asyncio
async def test_completed_entries_without_genres_yield_nothing():
    """Completed titles without genre tags produce an empty list."""
    client = FakeClient({})
    watchlist = [Entry("tt1", WatchStatus.COMPLETED, [])]

    assert await RecommendationGenerator(client).generate(watchlist) == []
    assert client.queries == []
