"""
Search gateway abstraction layer.

Provides a unified async interface for web search providers:
- Google Custom Search JSON API
- Serper (Google results)
- Brave Search API

Contract:
- zero results is an empty list, never an error
- transport, auth and HTTP status errors raise SearchFailure
- hits without a usable absolute link are dropped and counted
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx
import structlog
from pydantic import ValidationError

from reading_recommender.config import settings
from reading_recommender.errors import MalformedCandidateError, SearchFailure
from reading_recommender.models.candidates import Candidate


logger = structlog.get_logger(__name__)

# Google Custom Search returns at most 10 results per request
GOOGLE_MAX_RESULTS = 10
SERPER_MAX_RESULTS = 100
BRAVE_MAX_RESULTS = 20


# ============================================================================
# RESULT PARSING
# ============================================================================

def parse_candidates(
    items: Iterable[Dict[str, Any]],
    title_key: str,
    link_key: str,
    snippet_key: str,
    thumbnail_getter=None
) -> Tuple[List[Candidate], int]:
    """
    Convert provider result items into Candidates.

    Returns:
        (candidates in provider order, number of dropped items)
    """
    candidates = []
    dropped = 0

    for item in items:
        if not isinstance(item, dict):
            dropped += 1
            continue
        try:
            candidates.append(
                Candidate.from_search_item(
                    title=item.get(title_key),
                    link=item.get(link_key),
                    snippet=item.get(snippet_key),
                    thumbnail_url=thumbnail_getter(item) if thumbnail_getter else None,
                )
            )
        except (MalformedCandidateError, ValidationError) as e:
            dropped += 1
            logger.debug("search_item_dropped", reason=str(e))

    return candidates, dropped


def _google_thumbnail(item: Dict[str, Any]) -> Optional[str]:
    pagemap = item.get("pagemap")
    thumbnails = pagemap.get("cse_thumbnail") if isinstance(pagemap, dict) else None
    if isinstance(thumbnails, list) and thumbnails and isinstance(thumbnails[0], dict):
        return thumbnails[0].get("src")
    return None


def _brave_thumbnail(item: Dict[str, Any]) -> Optional[str]:
    thumbnail = item.get("thumbnail")
    if isinstance(thumbnail, dict):
        return thumbnail.get("src")
    return None


# ============================================================================
# ABSTRACT BASE CLASS
# ============================================================================

class SearchGateway(ABC):
    """
    Abstract base class for search gateways.

    Concrete gateways implement _request() (one HTTP call returning the
    decoded JSON body) and _parse() (body -> candidates).
    """

    provider_name: str = "unknown"

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            timeout_seconds: Per-request timeout (default: from settings)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout_seconds = timeout_seconds or settings.search_timeout_seconds
        self.transport = transport
        self.logger = logger.bind(search_gateway=self.__class__.__name__)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport)

    async def search(self, query_text: str, filters: Optional[Dict[str, Any]] = None) -> List[Candidate]:
        """Execute a query and return candidates in provider order."""
        candidates, _ = await self.search_with_stats(query_text, filters)
        return candidates

    async def search_with_stats(
        self,
        query_text: str,
        filters: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[Candidate], int]:
        """
        Execute a query, also reporting how many hits were dropped.

        Args:
            query_text: Provider query string
            filters: Request hints from the query adapter (num, video_syndicated)

        Returns:
            (candidates in provider order, possibly empty; dropped hit count)

        Raises:
            SearchFailure: On transport, auth or HTTP status errors
        """
        filters = filters or {}

        try:
            async with self._client() as client:
                data = await self._request(client, query_text, filters)
        except httpx.HTTPStatusError as e:
            self.logger.error(
                "search_http_error",
                status_code=e.response.status_code,
                provider=self.provider_name
            )
            raise SearchFailure(
                f"{self.provider_name} search returned HTTP {e.response.status_code}",
                provider=self.provider_name
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(
                "search_transport_error",
                error=str(e),
                error_type=type(e).__name__,
                provider=self.provider_name
            )
            raise SearchFailure(
                f"{self.provider_name} search failed: {type(e).__name__}: {e}",
                provider=self.provider_name
            ) from e
        except ValueError as e:
            # Undecodable JSON body
            raise SearchFailure(
                f"{self.provider_name} search returned an invalid body: {e}",
                provider=self.provider_name
            ) from e

        candidates, dropped = self._parse(data if isinstance(data, dict) else {})

        self.logger.info(
            "search_completed",
            provider=self.provider_name,
            results_count=len(candidates),
            dropped_count=dropped
        )

        return candidates, dropped

    @abstractmethod
    async def _request(
        self,
        client: httpx.AsyncClient,
        query_text: str,
        filters: Dict[str, Any]
    ) -> Any:
        """Perform the HTTP call; raise_for_status() and return response.json()."""

    @abstractmethod
    def _parse(self, data: Dict[str, Any]) -> Tuple[List[Candidate], int]:
        """Provider body -> (candidates, dropped count)."""


# ============================================================================
# GOOGLE CUSTOM SEARCH
# ============================================================================

class GoogleCustomSearchGateway(SearchGateway):
    """Google Custom Search JSON API (customsearch/v1)."""

    provider_name = "google"
    endpoint = "https://www.googleapis.com/customsearch/v1"

    def __init__(self, api_key: str, engine_id: str, **kwargs):
        super().__init__(**kwargs)
        if not api_key or not engine_id:
            raise ValueError(
                "Google search requires GOOGLE_SEARCH_API_KEY and GOOGLE_SEARCH_ENGINE_ID"
            )
        self.api_key = api_key
        self.engine_id = engine_id

    async def _request(self, client, query_text, filters):
        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query_text,
            "num": min(int(filters.get("num", GOOGLE_MAX_RESULTS)), GOOGLE_MAX_RESULTS),
        }
        if filters.get("video_syndicated"):
            params["videoSyndicated"] = "true"

        response = await client.get(self.endpoint, params=params)
        response.raise_for_status()
        return response.json()

    def _parse(self, data):
        # No "items" key means zero results
        return parse_candidates(
            data.get("items") or [],
            title_key="title",
            link_key="link",
            snippet_key="snippet",
            thumbnail_getter=_google_thumbnail,
        )


# ============================================================================
# SERPER
# ============================================================================

class SerperSearchGateway(SearchGateway):
    """Serper API (Google results as JSON)."""

    provider_name = "serper"
    endpoint = "https://google.serper.dev/search"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("Serper search requires SERPER_API_KEY")
        self.api_key = api_key

    async def _request(self, client, query_text, filters):
        response = await client.post(
            self.endpoint,
            headers={
                "X-API-KEY": self.api_key,
                "Content-Type": "application/json",
            },
            json={
                "q": query_text,
                "num": min(int(filters.get("num", 10)), SERPER_MAX_RESULTS),
            },
        )
        response.raise_for_status()
        return response.json()

    def _parse(self, data):
        return parse_candidates(
            data.get("organic") or [],
            title_key="title",
            link_key="link",
            snippet_key="snippet",
            thumbnail_getter=lambda item: item.get("imageUrl"),
        )


# ============================================================================
# BRAVE
# ============================================================================

class BraveSearchGateway(SearchGateway):
    """Brave Search API (web results)."""

    provider_name = "brave"
    endpoint = "https://api.search.brave.com/res/v1/web/search"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("Brave search requires BRAVE_API_KEY")
        self.api_key = api_key

    async def _request(self, client, query_text, filters):
        response = await client.get(
            self.endpoint,
            headers={
                "X-Subscription-Token": self.api_key,
                "Accept": "application/json",
            },
            params={
                "q": query_text,
                "count": min(int(filters.get("num", 10)), BRAVE_MAX_RESULTS),
            },
        )
        response.raise_for_status()
        return response.json()

    def _parse(self, data):
        return parse_candidates(
            (data.get("web") or {}).get("results") or [],
            title_key="title",
            link_key="url",
            snippet_key="description",
            thumbnail_getter=_brave_thumbnail,
        )


# ============================================================================
# GATEWAY FACTORY
# ============================================================================

SUPPORTED_SEARCH_PROVIDERS = ("google", "serper", "brave")


def create_search_gateway(provider: Optional[str] = None, **override_kwargs) -> SearchGateway:
    """
    Factory function to create a search gateway from configuration.

    Args:
        provider: "google", "serper" or "brave" (default: from settings)
        **override_kwargs: api_key, engine_id, timeout_seconds, transport

    Raises:
        ValueError: If provider is unknown or credentials are missing
    """
    provider = (provider or settings.search_provider).lower()
    common = {
        "timeout_seconds": override_kwargs.get("timeout_seconds"),
        "transport": override_kwargs.get("transport"),
    }

    logger.info("creating_search_gateway", provider=provider)

    if provider == "google":
        return GoogleCustomSearchGateway(
            api_key=override_kwargs.get("api_key", settings.google_search_api_key),
            engine_id=override_kwargs.get("engine_id", settings.google_search_engine_id),
            **common
        )
    elif provider == "serper":
        return SerperSearchGateway(
            api_key=override_kwargs.get("api_key", settings.serper_api_key),
            **common
        )
    elif provider == "brave":
        return BraveSearchGateway(
            api_key=override_kwargs.get("api_key", settings.brave_api_key),
            **common
        )
    else:
        raise ValueError(
            f"Unknown search provider: {provider}. "
            f"Supported: {', '.join(SUPPORTED_SEARCH_PROVIDERS)}"
        )
