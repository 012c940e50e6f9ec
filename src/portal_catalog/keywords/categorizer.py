"""Grouping of services by type plus keyword indexing."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from portal_catalog.keywords.extractor import KeywordIndex, extract_keywords

if TYPE_CHECKING:
    from portal_catalog.keywords.normalizer import TextNormalizer
    from portal_catalog.models import ServiceEntity


@dataclass(frozen=True)
class CategoryIndex:
    """Services grouped by type, with the keyword index over all of them.

    Attributes:
        types: Service type to services of that type, in catalog order.
        keywords: Keyword index over the full service list.
    """

    types: dict[str, list[ServiceEntity]] = field(default_factory=dict)
    keywords: KeywordIndex = field(default_factory=dict)

    def type_names(self) -> dict[str, list[str]]:
        """Service type to service names."""
        return {t: [s.name for s in group] for t, group in self.types.items()}

    def keyword_names(self) -> dict[str, list[str]]:
        """Keyword to service names."""
        return {k: [s.name for s in group] for k, group in self.keywords.items()}


def categorize_services(
    entities: Sequence[ServiceEntity],
    normalizer: TextNormalizer,
) -> CategoryIndex:
    """Group services by exact ``type`` and build their keyword index.

    Args:
        entities: Services in catalog order.
        normalizer: Text normalizer used for keyword extraction.

    Returns:
        CategoryIndex holding every service exactly once under its type.
    """
    types: dict[str, list[ServiceEntity]] = {}
    for entity in entities:
        types.setdefault(entity.type, []).append(entity)

    return CategoryIndex(types=types, keywords=extract_keywords(entities, normalizer))


def match_row_keywords(entity: ServiceEntity, keywords: Iterable[str]) -> list[str]:
    """Return the keywords a catalog row is tagged with.

    A row is tagged with a keyword when the keyword occurs anywhere in the
    lower-cased ``name + " " + description``. This is a plain substring
    test, looser than the noun-phrase membership used to build the index:
    "road" tags a service described as "railroad crossings".

    Args:
        entity: The service of the row.
        keywords: Index keywords, in display order.

    Returns:
        Matching keywords, in the order given.
    """
    text = entity.text.lower()
    return [keyword for keyword in keywords if keyword in text]
