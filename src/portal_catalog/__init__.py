"""Portal Catalog.

Discovers the geospatial web services exposed by an ArcGIS REST portal,
enriches each with metadata (extent, spatial reference, availability),
extracts keyword tags from service names and descriptions, and serves the
result as a filterable catalog.

Usage:
    from portal_catalog import PortalClient, TextNormalizer, SpacyTokenizer
    from portal_catalog import build_catalog
    import asyncio

    async def main():
        normalizer = TextNormalizer(SpacyTokenizer())
        async with PortalClient() as client:
            return await build_catalog(DEFAULT_PORTAL_URL, client, normalizer)

    catalog = asyncio.run(main())

    # Keyword engine only, over services already in memory
    categories = categorize_services(services, normalizer)
"""

# =============================================================================
# CORE MODELS
# =============================================================================
from .models import (
    Availability,
    CatalogRow,
    LayerDetail,
    MetadataChecks,
    MetadataSummary,
    ServiceCatalog,
    ServiceEntity,
)

# =============================================================================
# KEYWORD ENGINE
# =============================================================================
from .keywords import (
    CategoryIndex,
    KeywordIndex,
    Singularizer,
    SpacyTokenizer,
    TextNormalizer,
    Tokenizer,
    categorize_services,
    extract_keywords,
    match_row_keywords,
)

# =============================================================================
# PORTAL CLIENT AND CATALOG
# =============================================================================
from .availability import availability_color, availability_status
from .cache import TTLCache
from .catalog import assemble_catalog, build_catalog, fetch_entities
from .config import DEFAULT_PORTAL_URL
from .fetcher import FetcherConfig, PortalClient, service_url_for

# =============================================================================
# EXCEPTIONS
# =============================================================================
from .exceptions import (
    ArcGISServiceError,
    CatalogError,
    FetchError,
    NLPModelNotAvailableError,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "Availability",
    "CatalogRow",
    "LayerDetail",
    "MetadataChecks",
    "MetadataSummary",
    "ServiceCatalog",
    "ServiceEntity",
    # Keyword engine
    "CategoryIndex",
    "KeywordIndex",
    "Singularizer",
    "SpacyTokenizer",
    "TextNormalizer",
    "Tokenizer",
    "categorize_services",
    "extract_keywords",
    "match_row_keywords",
    # Portal client and catalog
    "DEFAULT_PORTAL_URL",
    "FetcherConfig",
    "PortalClient",
    "TTLCache",
    "assemble_catalog",
    "availability_color",
    "availability_status",
    "build_catalog",
    "fetch_entities",
    "service_url_for",
    # Exceptions
    "ArcGISServiceError",
    "CatalogError",
    "FetchError",
    "NLPModelNotAvailableError",
]
