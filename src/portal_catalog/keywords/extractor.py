"""Keyword index extraction.

Builds the keyword index used for faceted filtering of a service catalog.
Keywords are counted once per service; keywords present in more than
MAX_KEYWORD_FRACTION of services are dropped as non-discriminative.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from portal_catalog.config import MAX_KEYWORD_FRACTION

if TYPE_CHECKING:
    from portal_catalog.keywords.normalizer import TextNormalizer
    from portal_catalog.models import ServiceEntity

logger = structlog.get_logger(__name__)

KeywordIndex = dict[str, list["ServiceEntity"]]


def extract_keywords(
    entities: Sequence[ServiceEntity],
    normalizer: TextNormalizer,
    max_fraction: float = MAX_KEYWORD_FRACTION,
) -> KeywordIndex:
    """Build the keyword index for a fully materialized list of services.

    Runs two passes over ``entities``. The first normalizes each service's
    ``name + " " + description`` and counts, per keyword, the number of
    services containing it. The second appends each service to the index
    entry of every keyword whose count is within the threshold.

    Args:
        entities: Services in catalog order.
        normalizer: Text normalizer producing per-service keywords.
        max_fraction: Largest fraction of services a keyword may occur in.

    Returns:
        Keyword to services containing it. Keys appear in order of first
        occurrence across the services' text; each list keeps catalog order.

    Example:
        >>> index = extract_keywords(services, normalizer)
        >>> [s.name for s in index["hydrant"]]
        ['Water/Hydrants']
    """
    # Pass 1: per-service keywords and document frequencies
    keyword_lists: list[list[str]] = []
    counts: Counter[str] = Counter()
    for entity in entities:
        keywords = normalizer.ordered_keywords(entity.text)
        keyword_lists.append(keywords)
        counts.update(keywords)

    threshold = len(entities) * max_fraction

    # Pass 2: assign services to keywords that survive the threshold
    index: KeywordIndex = {}
    for entity, keywords in zip(entities, keyword_lists, strict=True):
        for keyword in keywords:
            if counts[keyword] <= threshold:
                index.setdefault(keyword, []).append(entity)

    logger.debug(
        "Keyword extraction complete",
        services=len(entities),
        candidates=len(counts),
        keywords=len(index),
        threshold=threshold,
    )

    return index
