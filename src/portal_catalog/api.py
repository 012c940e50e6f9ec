"""REST API for the portal catalog.

Endpoints:
- GET /services: the catalog of a portal (types, keywords, tagged rows)
- GET /services/{service_name}/{service_type}/layers: layer details
- GET /services/{service_name}/{service_type}/layers/{layer_id}/records:
  sample feature attributes
- GET /health: liveness probe

Every endpoint accepts a ``portalUrl`` query parameter defaulting to
ESRI_PORTAL_URL (or DEFAULT_PORTAL_URL). One PortalClient is shared by all
requests so its cache lives as long as the process.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
import structlog

from .catalog import build_catalog
from .config import get_portal_url
from .exceptions import CatalogError
from .fetcher import PortalClient, service_url_for
from .keywords import SpacyTokenizer, TextNormalizer
from .models import LayerDetail, ServiceCatalog

logger = structlog.get_logger(__name__)


def create_app(
    client: PortalClient | None = None,
    normalizer: TextNormalizer | None = None,
) -> FastAPI:
    """Create the API application.

    Args:
        client: Portal client to use. A default one is created if not given.
        normalizer: Keyword normalizer. Defaults to a spaCy-backed one.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        portal_client = client or PortalClient()
        async with portal_client:
            app.state.client = portal_client
            app.state.normalizer = normalizer or TextNormalizer(SpacyTokenizer())
            yield

    app = FastAPI(title="portal-catalog", lifespan=lifespan)
    default_portal_url = get_portal_url()

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        logger.error("Request failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/services", response_model=ServiceCatalog)
    async def get_services(
        request: Request,
        portal_url: str = Query(default_portal_url, alias="portalUrl"),
    ) -> ServiceCatalog:
        logger.info("Fetching services from portal", url=portal_url)
        catalog = await build_catalog(
            portal_url, request.app.state.client, request.app.state.normalizer
        )
        if catalog is None:
            raise HTTPException(
                status_code=500, detail="Failed to fetch services from portal."
            )
        return catalog

    @app.get(
        "/services/{service_name:path}/{service_type}/layers",
        response_model=list[LayerDetail],
    )
    async def get_layers(
        request: Request,
        service_name: str,
        service_type: str,
        portal_url: str = Query(default_portal_url, alias="portalUrl"),
    ) -> list[LayerDetail]:
        service_url = service_url_for(portal_url, service_name, service_type)
        layers = await request.app.state.client.fetch_layer_details(service_url)
        return layers or []

    @app.get("/services/{service_name:path}/{service_type}/layers/{layer_id}/records")
    async def get_records(
        request: Request,
        service_name: str,
        service_type: str,
        layer_id: int,
        portal_url: str = Query(default_portal_url, alias="portalUrl"),
    ) -> list[dict[str, Any]]:
        service_url = service_url_for(portal_url, service_name, service_type)
        records = await request.app.state.client.fetch_sample_records(
            service_url, layer_id
        )
        return records or []

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "OK", "timestamp": datetime.now(UTC).isoformat()}

    return app
