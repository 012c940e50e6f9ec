"""Async client for ArcGIS REST portals.

PortalClient wraps an ``httpx.AsyncClient`` and exposes the four requests
the catalog needs:

- fetch_services: the services directory of a portal
- fetch_metadata_summary: per-service metadata, availability and extent
- fetch_layer_details: the layers of one service
- fetch_sample_records: a handful of feature attributes from one layer

Failures are logged and reported as ``None`` (or an "unavailable" summary)
rather than raised, so one broken service never fails a whole catalog.
Successful results are kept in a TTLCache shared by all requests made
through the client.

Example:
    async with PortalClient() as client:
        directory = await client.fetch_services(DEFAULT_PORTAL_URL)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import time
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from .cache import TTLCache
from .config import (
    MAX_CONCURRENT_REQUESTS,
    REQUEST_TIMEOUT_SECONDS,
    SAMPLE_RECORD_COUNT,
    USER_AGENT,
)
from .exceptions import ArcGISServiceError, FetchError
from .models import Availability, LayerDetail, MetadataChecks, MetadataSummary

if TYPE_CHECKING:
    from types import TracebackType

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FetcherConfig:
    """Configuration for the portal client.

    Attributes:
        max_concurrent: Maximum parallel requests.
        timeout: Request timeout in seconds.
        user_agent: User-Agent header for requests.
        sample_record_count: Features returned by fetch_sample_records.
    """

    max_concurrent: int = MAX_CONCURRENT_REQUESTS
    timeout: float = REQUEST_TIMEOUT_SECONDS
    user_agent: str = USER_AGENT
    sample_record_count: int = SAMPLE_RECORD_COUNT


class PortalClient:
    """HTTP client for an ArcGIS REST services directory.

    Features:
    - Semaphore-bounded concurrency for metadata fan-out
    - Response timing for availability reporting
    - ArcGIS error payload detection
    - In-memory TTL caching of successful results

    Example:
        async with PortalClient() as client:
            summary = await client.fetch_metadata_summary(url)
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        cache: TTLCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize PortalClient.

        Args:
            config: Optional client configuration. Uses defaults if not provided.
            cache: Cache for successful results. A private one is created if
                not provided.
            transport: Optional httpx transport, used by tests.
        """
        self._config = config or FetcherConfig()
        self.cache = cache if cache is not None else TTLCache()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._semaphore = asyncio.Semaphore(self._config.max_concurrent)

    async def __aenter__(self) -> PortalClient:
        """Initialize HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close HTTP client on context exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[dict[str, Any], float]:
        """GET a JSON document.

        Args:
            url: The URL to fetch.
            params: Query parameters; ``f=json`` is added when missing.

        Returns:
            Tuple of the decoded payload and the round-trip time in ms.

        Raises:
            RuntimeError: If client not initialized (not used as context manager).
            FetchError: On transport errors, HTTP errors, invalid JSON or a
                payload that is not a JSON object.
            ArcGISServiceError: If the payload is an ArcGIS error document.
        """
        if not self._client:
            msg = "PortalClient not initialized. Use as async context manager."
            raise RuntimeError(msg)

        query = {"f": "json", **(params or {})}

        async with self._semaphore:
            started = time.perf_counter()
            try:
                response = await self._client.get(url, params=query)
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as e:
                raise FetchError(url, str(e) or type(e).__name__) from e
            except ValueError as e:
                raise FetchError(url, "response is not valid JSON") from e
            elapsed_ms = (time.perf_counter() - started) * 1000

        if not isinstance(payload, dict):
            raise FetchError(url, "expected a JSON object")

        if isinstance(payload.get("error"), dict):
            error = payload["error"]
            raise ArcGISServiceError(
                url, error.get("message", "Unknown error"), code=error.get("code")
            )

        return payload, elapsed_ms

    async def fetch_services(self, portal_url: str) -> dict[str, Any] | None:
        """Fetch a portal's services directory.

        Args:
            portal_url: The ``.../rest/services`` directory URL.

        Returns:
            The directory document, or None if the request failed.
        """
        cache_key = f"services_{portal_url}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data, _ = await self.get_json(portal_url)
        except FetchError as e:
            logger.error("Error fetching services", url=portal_url, error=str(e))
            return None

        self.cache.set(cache_key, data)
        return data

    async def fetch_metadata_summary(self, service_url: str) -> MetadataSummary:
        """Fetch and summarize a service's metadata.

        The extent is the service's ``initialExtent``. FeatureServers often
        have none; for those the extent of layer 0 is queried instead.

        Args:
            service_url: URL of a MapServer, FeatureServer or similar.

        Returns:
            MetadataSummary. On failure the summary is marked unavailable
            and is not cached.
        """
        cache_key = f"metadata_{service_url}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            metadata, elapsed_ms = await self.get_json(service_url)
        except FetchError as e:
            logger.error(
                "Error fetching metadata summary", url=service_url, error=str(e)
            )
            return MetadataSummary(
                availability=Availability(is_available=False, error=str(e)),
            )

        extent = metadata.get("initialExtent")
        if not extent and "featureserver" in service_url.lower():
            extent = await self._query_extent(service_url)

        summary = MetadataSummary(
            metadata=metadata,
            checks=MetadataChecks(
                has_description=bool(metadata.get("description")),
                has_tags=bool(metadata.get("tags")),
                has_spatial_reference=bool(metadata.get("spatialReference")),
            ),
            availability=Availability(
                is_available=True, response_time=round(elapsed_ms)
            ),
            spatial_reference=metadata.get("spatialReference") or None,
            extent=extent or None,
        )
        self.cache.set(cache_key, summary)
        return summary

    async def _query_extent(self, service_url: str) -> dict[str, Any] | None:
        """Query the extent of a FeatureServer's first layer."""
        query_url = f"{service_url}/0/query"
        try:
            data, _ = await self.get_json(
                query_url, {"where": "1=1", "returnExtentOnly": "true"}
            )
        except FetchError as e:
            logger.error("Error querying extent", url=service_url, error=str(e))
            return None
        return data.get("extent")

    async def fetch_layer_details(self, service_url: str) -> list[LayerDetail] | None:
        """Fetch the layers of a service.

        Args:
            service_url: URL of a MapServer or FeatureServer.

        Returns:
            Layer details in service order, or None if the request failed.
        """
        cache_key = f"layerDetails_{service_url}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data, _ = await self.get_json(f"{service_url}/layers")
        except FetchError as e:
            logger.error("Error fetching layer details", url=service_url, error=str(e))
            return None

        layers = [
            LayerDetail(
                id=layer["id"],
                name=layer.get("name", ""),
                description=layer.get("description") or "N/A",
                spatial_reference=(layer.get("extent") or {}).get("spatialReference"),
                geometry_type=layer.get("geometryType") or "N/A",
                fields=layer.get("fields") or [],
            )
            for layer in data.get("layers") or []
            if layer.get("id") is not None
        ]
        self.cache.set(cache_key, layers)
        return layers

    async def fetch_sample_records(
        self,
        service_url: str,
        layer_id: int | str,
    ) -> list[dict[str, Any]] | None:
        """Fetch a few feature attribute records from a layer.

        Args:
            service_url: URL of a MapServer or FeatureServer.
            layer_id: Layer ID within the service.

        Returns:
            Attribute dicts of the first features, or None if the request
            failed.
        """
        query_url = f"{service_url}/{layer_id}/query"
        cache_key = f"sampleRecords_{query_url}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data, _ = await self.get_json(
                query_url,
                {
                    "where": "1=1",
                    "outFields": "*",
                    "resultRecordCount": self._config.sample_record_count,
                },
            )
        except FetchError as e:
            logger.error("Error fetching sample records", url=query_url, error=str(e))
            return None

        records = [feature.get("attributes", {}) for feature in data.get("features") or []]
        self.cache.set(cache_key, records)
        return records


def service_url_for(portal_url: str, name: str, service_type: str) -> str:
    """Return the endpoint URL of a service in a portal's directory."""
    return f"{portal_url.rstrip('/')}/{name}/{service_type}"
