"""Configuration for the portal catalog.

Values are module-level defaults; the ones that vary per deployment can be
overridden through environment variables (loaded from ``.env`` by the CLI).
"""

import os

DEFAULT_PORTAL_URL = "https://portal.spatial.nsw.gov.au/server/rest/services"
DEFAULT_PORT = 3000

# Request configuration
REQUEST_TIMEOUT_SECONDS = 30.0
MAX_CONCURRENT_REQUESTS = 10  # Fan-out width for metadata requests
USER_AGENT = "PortalCatalog/0.1.0"

# Cache entries older than this are ignored on read
CACHE_TTL_SECONDS = 5 * 60

# Number of features returned by the sample-records query
SAMPLE_RECORD_COUNT = 5

# Availability thresholds (milliseconds)
AVAILABILITY_GOOD_MS = 500
AVAILABILITY_WARNING_MS = 1000

# =============================================================================
# KEYWORD EXTRACTION
# =============================================================================

DEFAULT_SPACY_MODEL = "en_core_web_sm"

# Domain terms that say nothing about what a service contains.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "service",
        "services",
        "layer",
        "layers",
        "data",
        "map",
        "portal",
        "server",
        "rest",
    }
)

MIN_KEYWORD_LENGTH = 3

# Keywords found in more than this fraction of services are dropped.
MAX_KEYWORD_FRACTION = 0.8


# =============================================================================
# ENVIRONMENT OVERRIDES
# =============================================================================
# Read at call time so values from a .env file loaded by the CLI apply.


def get_portal_url() -> str:
    """Return the default services directory URL (``ESRI_PORTAL_URL``)."""
    return os.getenv("ESRI_PORTAL_URL") or DEFAULT_PORTAL_URL


def get_port() -> int:
    """Return the default API port (``PORT``)."""
    return int(os.getenv("PORT") or DEFAULT_PORT)


def get_spacy_model() -> str:
    """Return the spaCy model name (``PORTAL_CATALOG_SPACY_MODEL``)."""
    return os.getenv("PORTAL_CATALOG_SPACY_MODEL") or DEFAULT_SPACY_MODEL
