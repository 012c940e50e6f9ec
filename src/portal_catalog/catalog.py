"""Catalog building for a portal's services directory.

Pipeline:
1. Fetch the services directory
2. Fan out metadata requests for every listed service
3. Build ServiceEntity rows from directory entries and metadata
4. Group by type and extract the keyword index
5. Tag each row with the index keywords its text contains
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from .fetcher import service_url_for
from .keywords import categorize_services, match_row_keywords
from .models import CatalogRow, MetadataSummary, ServiceCatalog, ServiceEntity

if TYPE_CHECKING:
    from .fetcher import PortalClient
    from .keywords import TextNormalizer

logger = structlog.get_logger(__name__)


def build_entity(
    portal_url: str,
    listing: dict[str, Any],
    summary: MetadataSummary,
) -> ServiceEntity:
    """Combine a directory listing entry with its metadata summary.

    Args:
        portal_url: Services directory URL.
        listing: Entry of the directory's ``services`` array.
        summary: Metadata summary of that service.

    Returns:
        The service entity; its description is "" when the metadata
        is missing or has none.
    """
    name = listing.get("name", "")
    service_type = listing.get("type", "")
    description = (summary.metadata or {}).get("description") or ""

    return ServiceEntity(
        name=name,
        type=service_type,
        description=description,
        url=service_url_for(portal_url, name, service_type),
        metadata_checks=summary.checks,
        availability=summary.availability,
        spatial_reference=summary.spatial_reference,
        extent=summary.extent,
    )


async def fetch_entities(portal_url: str, client: PortalClient) -> list[ServiceEntity] | None:
    """Fetch and enrich every service listed in a portal's directory.

    Metadata requests run concurrently; the returned list keeps directory
    order and is complete before it is returned.

    Returns:
        Service entities, or None if the directory could not be fetched or
        has no ``services`` array.
    """
    directory = await client.fetch_services(portal_url)
    if not directory or "services" not in directory:
        logger.warning("Services directory unavailable", url=portal_url)
        return None

    listings: list[dict[str, Any]] = directory["services"] or []
    summaries = await asyncio.gather(
        *(
            client.fetch_metadata_summary(
                service_url_for(portal_url, s.get("name", ""), s.get("type", ""))
            )
            for s in listings
        )
    )

    return [
        build_entity(portal_url, listing, summary)
        for listing, summary in zip(listings, summaries, strict=True)
    ]


def assemble_catalog(
    portal_url: str,
    entities: list[ServiceEntity],
    normalizer: TextNormalizer,
) -> ServiceCatalog:
    """Categorize entities and lay them out as a catalog document."""
    categories = categorize_services(entities, normalizer)
    keywords = list(categories.keywords)

    return ServiceCatalog(
        portal_url=portal_url,
        generated_at=datetime.now(UTC),
        rows=[
            CatalogRow(service=entity, keywords=match_row_keywords(entity, keywords))
            for entity in entities
        ],
        types=categories.type_names(),
        keywords=categories.keyword_names(),
    )


async def build_catalog(
    portal_url: str,
    client: PortalClient,
    normalizer: TextNormalizer,
) -> ServiceCatalog | None:
    """Build the catalog for a portal.

    Args:
        portal_url: Services directory URL.
        client: Open portal client.
        normalizer: Text normalizer for keyword extraction.

    Returns:
        The catalog, or None if the services directory is unavailable.
    """
    logger.info("Building catalog", url=portal_url)

    entities = await fetch_entities(portal_url, client)
    if entities is None:
        return None

    # Keyword extraction is CPU-bound under spaCy
    catalog = await asyncio.to_thread(assemble_catalog, portal_url, entities, normalizer)

    unavailable = sum(
        1 for e in entities if e.availability and not e.availability.is_available
    )
    logger.info(
        "Catalog built",
        url=portal_url,
        services=catalog.service_count,
        types=len(catalog.types),
        keywords=len(catalog.keywords),
        unavailable=unavailable,
    )
    return catalog
