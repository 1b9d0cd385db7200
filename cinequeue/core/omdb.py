"""OMDb Client."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import aiohttp
from limiter import Limiter

from cinequeue import __version__, log
from cinequeue.exceptions import (
    MediaNotFoundError,
    ProviderError,
    RateLimitedError,
    TransportError,
    UpstreamError,
)
from cinequeue.models.schemas.media import (
    EpisodeDetails,
    EpisodeSummary,
    MediaDetails,
    MediaItem,
    RatingSource,
    SearchPage,
    SeasonDetails,
)
from cinequeue.utils.cache import TTLCache
from cinequeue.utils.retry import RetryPolicy

__all__ = ["OmdbClient"]

# OMDb does not publish a per-second limit; keep bursts small
omdb_limiter = Limiter(rate=10, capacity=10, jitter=False)

MISSING_VALUE = "N/A"


def _clean(value: Any) -> str | None:
    """Map blanks and the provider's "N/A" sentinel to None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == MISSING_VALUE:
        return None
    return text


def _parse_int(value: Any, default: int | None = None) -> int | None:
    """Parse integers like "1,024" or "3", returning ``default`` on failure."""
    text = _clean(value)
    if text is None:
        return default
    try:
        return int(text.replace(",", ""))
    except ValueError:
        return default


def _split_genres(value: Any) -> list[str]:
    """Split OMDb's comma separated genre string into a list."""
    text = _clean(value)
    if text is None:
        return []
    return [genre.strip() for genre in text.split(",") if genre.strip()]


class OmdbClient:
    """Client for the OMDb HTTP API.

    Every request is a single GET against ``base_url`` carrying the API key and
    the operation's query parameters. Transport failures and rate limiting are
    retried according to ``retry_policy``; errors reported in the response body
    are raised as ``ProviderError`` right away. Successful payloads are kept in
    the optional TTL cache.

    The raw operations (``search_by_title``, ``get_details_by_id``, ...) return
    provider payloads. The normalized helpers (``search``, ``details``, ...)
    return schemas from ``cinequeue.models.schemas.media`` and never expose
    provider field names.
    """

    DEFAULT_BASE_URL = "http://www.omdbapi.com"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        retry_policy: RetryPolicy | None = None,
        cache: TTLCache[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the OMDb client.

        Args:
            api_key (str): OMDb API key sent with every request.
            base_url (str): OMDb endpoint.
            timeout (float): Per-attempt timeout in seconds.
            retry_policy (RetryPolicy | None): Retry behaviour; three retries
                with a one second delay when omitted.
            cache (TTLCache | None): Cache for successful payloads.
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.cache = cache
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            aiohttp.ClientSession: The active session for making HTTP requests.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Accept": "application/json",
                    "User-Agent": f"CineQueue/{__version__}",
                }
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    # Raw provider operations

    async def search_by_title(
        self, query: str, media_type: str = "movie", page: int = 1
    ) -> dict[str, Any]:
        """Search titles by name.

        Args:
            query (str): Title text to search for.
            media_type (str): ``movie``, ``series`` or ``episode``.
            page (int): 1-based result page, passed through verbatim.

        Returns:
            dict[str, Any]: Raw OMDb search payload.
        """
        return await self._request({"s": query, "type": media_type, "page": page})

    async def get_details_by_id(
        self, external_id: str, media_type: str | None = None
    ) -> dict[str, Any]:
        """Fetch full details (including the long plot) for one title.

        Args:
            external_id (str): IMDb identifier, e.g. ``tt0133093``.
            media_type (str | None): Restrict the lookup to this type.

        Returns:
            dict[str, Any]: Raw OMDb title payload.
        """
        params: dict[str, Any] = {"i": external_id, "plot": "full"}
        if media_type:
            params["type"] = media_type
        return await self._request(params)

    async def get_season_details(self, external_id: str, season: int) -> dict[str, Any]:
        """Fetch the episode listing for one season of a series."""
        return await self._request({"i": external_id, "Season": season})

    async def get_episode_details(
        self, external_id: str, season: int, episode: int
    ) -> dict[str, Any]:
        """Fetch details for one episode of a series."""
        return await self._request(
            {"i": external_id, "Season": season, "Episode": episode}
        )

    async def search_by_year(
        self, year: int | str, page: int = 1, query: str | None = None
    ) -> dict[str, Any]:
        """Search movies released in ``year``.

        OMDb only searches by title; without ``query`` the provider answers with
        an error, which surfaces as ``ProviderError``.
        """
        params: dict[str, Any] = {"y": year, "type": "movie", "page": page}
        if query:
            params["s"] = query
        return await self._request(params)

    # Normalized operations

    async def search(
        self, query: str, media_type: str = "movie", page: int = 1
    ) -> SearchPage:
        """Search titles and normalize the result page.

        A provider answer meaning "nothing matched" becomes an empty page; other
        provider errors propagate.
        """
        try:
            raw = await self.search_by_title(query, media_type=media_type, page=page)
        except ProviderError as e:
            if not e.is_not_found:
                raise
            log.debug(f"No results for $$'{query}'$$ ($${{page: {page}}}$$)")
            return SearchPage(page=page)
        return self.search_page(raw, page)

    async def search_year(
        self, year: int | str, page: int = 1, query: str | None = None
    ) -> SearchPage:
        """Search titles by release year and normalize the result page."""
        try:
            raw = await self.search_by_year(year, page=page, query=query)
        except ProviderError as e:
            if not e.is_not_found:
                raise
            return SearchPage(page=page)
        return self.search_page(raw, page)

    async def details(
        self, external_id: str, media_type: str | None = None
    ) -> MediaDetails:
        """Fetch and normalize details for one title.

        Raises:
            MediaNotFoundError: If the provider does not know the title.
        """
        try:
            raw = await self.get_details_by_id(external_id, media_type=media_type)
        except ProviderError as e:
            if e.is_not_found:
                raise MediaNotFoundError(e.message) from e
            raise
        item = self.format_details(raw)
        if item is None:
            raise MediaNotFoundError(f"No usable details for '{external_id}'")
        return item

    async def season(self, external_id: str, season: int) -> SeasonDetails:
        """Fetch and normalize a season listing.

        Raises:
            MediaNotFoundError: If the series or season does not exist.
        """
        try:
            raw = await self.get_season_details(external_id, season)
        except ProviderError as e:
            if e.is_not_found:
                raise MediaNotFoundError(e.message) from e
            raise
        result = self.format_season(raw, season)
        if result is None:
            raise MediaNotFoundError(f"Season {season} of '{external_id}' not found")
        return result

    async def episode(
        self, external_id: str, season: int, episode: int
    ) -> EpisodeDetails:
        """Fetch and normalize a single episode.

        Raises:
            MediaNotFoundError: If the episode does not exist.
        """
        try:
            raw = await self.get_episode_details(external_id, season, episode)
        except ProviderError as e:
            if e.is_not_found:
                raise MediaNotFoundError(e.message) from e
            raise
        result = self.format_episode(raw)
        if result is None:
            raise MediaNotFoundError(
                f"Episode {episode} of season {season} of '{external_id}' not found"
            )
        return result

    # Formatting

    @staticmethod
    def format_search_result(item: Any) -> MediaItem | None:
        """Normalize one search hit.

        Returns None instead of raising when the hit is not a mapping or lacks
        an id or title.
        """
        if not isinstance(item, Mapping):
            return None
        external_id = _clean(item.get("imdbID"))
        title = _clean(item.get("Title"))
        if external_id is None or title is None:
            return None

        return MediaItem(
            external_id=external_id,
            title=title,
            media_type=_clean(item.get("Type")) or "movie",
            year=_clean(item.get("Year")),
            poster_url=_clean(item.get("Poster")),
            rating=_clean(item.get("imdbRating")),
            genres=_split_genres(item.get("Genre")),
        )

    @classmethod
    def format_details(cls, item: Any) -> MediaDetails | None:
        """Normalize a full title payload; None when id or title is missing."""
        summary = cls.format_search_result(item)
        if summary is None:
            return None

        ratings = []
        for rating in item.get("Ratings") or []:
            if not isinstance(rating, Mapping):
                continue
            source, value = _clean(rating.get("Source")), _clean(rating.get("Value"))
            if source and value:
                ratings.append(RatingSource(source=source, value=value))

        return MediaDetails(
            **summary.model_dump(),
            plot=_clean(item.get("Plot")),
            rated=_clean(item.get("Rated")),
            released=_clean(item.get("Released")),
            runtime=_clean(item.get("Runtime")),
            director=_clean(item.get("Director")),
            writer=_clean(item.get("Writer")),
            actors=_clean(item.get("Actors")),
            language=_clean(item.get("Language")),
            country=_clean(item.get("Country")),
            awards=_clean(item.get("Awards")),
            ratings=ratings,
            metascore=_clean(item.get("Metascore")),
            votes=_clean(item.get("imdbVotes")),
            box_office=_clean(item.get("BoxOffice")),
            production=_clean(item.get("Production")),
            website=_clean(item.get("Website")),
            total_seasons=_parse_int(item.get("totalSeasons")),
        )

    @staticmethod
    def format_season(item: Any, season: int) -> SeasonDetails | None:
        """Normalize a season listing, skipping malformed episodes."""
        if not isinstance(item, Mapping):
            return None
        title = _clean(item.get("Title"))
        if title is None:
            return None

        episodes = []
        for raw_episode in item.get("Episodes") or []:
            if not isinstance(raw_episode, Mapping):
                continue
            external_id = _clean(raw_episode.get("imdbID"))
            episode_title = _clean(raw_episode.get("Title"))
            if external_id is None or episode_title is None:
                continue
            episodes.append(
                EpisodeSummary(
                    external_id=external_id,
                    title=episode_title,
                    episode=_parse_int(raw_episode.get("Episode")),
                    released=_clean(raw_episode.get("Released")),
                    rating=_clean(raw_episode.get("imdbRating")),
                )
            )

        return SeasonDetails(
            title=title,
            season=_parse_int(item.get("Season"), season),
            total_seasons=_parse_int(item.get("totalSeasons")),
            episodes=episodes,
        )

    @classmethod
    def format_episode(cls, item: Any) -> EpisodeDetails | None:
        """Normalize a single episode payload."""
        details = cls.format_details(item)
        if details is None:
            return None
        return EpisodeDetails(
            **details.model_dump(),
            season=_parse_int(item.get("Season")),
            episode=_parse_int(item.get("Episode")),
            series_id=_clean(item.get("seriesID")),
        )

    @classmethod
    def search_page(cls, raw: Mapping[str, Any], page: int) -> SearchPage:
        """Build a result page, dropping hits that fail normalization."""
        results = [
            item
            for item in map(cls.format_search_result, raw.get("Search") or [])
            if item is not None
        ]
        return SearchPage(
            page=page,
            total_results=_parse_int(raw.get("totalResults"), 0) or 0,
            results=results,
        )

    # Transport

    @staticmethod
    def _cache_key(params: Mapping[str, Any]) -> str:
        return "omdb:" + urlencode(sorted((k, str(v)) for k, v in params.items()))

    async def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        """Perform a cached, retried request.

        Args:
            params (dict[str, Any]): Operation-specific query parameters.

        Returns:
            dict[str, Any]: Decoded response payload.

        Raises:
            ProviderError: If the provider reported an error in the body.
            ExhaustedRetriesError: If every attempt failed in transit.
            UpstreamError: For non-retryable HTTP errors.
        """
        key = self._cache_key(params)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                log.debug(f"Cache hit $${{params: {params}}}$$")
                return cached

        data = await self.retry_policy.call(
            self._fetch, params, on_retry=self._log_retry
        )

        if self.cache is not None:
            self.cache.set(key, data)
        return data

    def _log_retry(self, attempt: int, error: BaseException, wait: float) -> None:
        log.warning(
            f"Attempt $$'{attempt}'$$ failed ({error}), retrying in {wait:.2f} seconds"
        )

    @omdb_limiter()
    async def _fetch(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Issue exactly one GET request.

        Raises:
            RateLimitedError: On HTTP 429.
            TransportError: On connection errors, timeouts, HTTP 5xx and
                undecodable bodies.
            ProviderError: If the body carries an ``Error`` field.
            UpstreamError: On any other HTTP error status.
        """
        session = await self._get_session()
        query = {"apikey": self.api_key, **{k: str(v) for k, v in params.items()}}

        log.debug(f"Requesting OMDb $${{params: {dict(params)}}}$$")
        try:
            async with session.get(
                self.base_url,
                params=query,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                status = response.status
                if status == 429:
                    raise RateLimitedError("OMDb rate limit exceeded (HTTP 429)")
                if status >= 500:
                    raise TransportError(f"OMDb returned HTTP {status}")
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    if status >= 400:
                        raise UpstreamError(f"OMDb returned HTTP {status}") from e
                    raise TransportError("OMDb returned an undecodable body") from e
        except (TimeoutError, aiohttp.ClientError) as e:
            raise TransportError(f"Connection error contacting OMDb: {e!r}") from e

        if isinstance(data, Mapping) and (
            data.get("Error") or data.get("Response") == "False"
        ):
            raise ProviderError(str(data.get("Error") or "Unknown OMDb error"))
        if status >= 400:
            raise UpstreamError(f"OMDb returned HTTP {status}")
        if not isinstance(data, dict):
            raise TransportError("OMDb returned an unexpected payload")
        return data
