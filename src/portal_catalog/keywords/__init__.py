"""Keyword extraction and categorization for service catalogs.

This package provides:
- Tokenizer / Singularizer protocols and a spaCy implementation
- Text normalization into singular, filtered keyword candidates
- Keyword index extraction with frequency filtering
- Grouping of services by type and per-row keyword tagging
"""

from portal_catalog.keywords.categorizer import (
    CategoryIndex,
    categorize_services,
    match_row_keywords,
)
from portal_catalog.keywords.extractor import KeywordIndex, extract_keywords
from portal_catalog.keywords.normalizer import TextNormalizer
from portal_catalog.keywords.tokenizer import Singularizer, SpacyTokenizer, Tokenizer

__all__ = [
    # NLP capabilities
    "Singularizer",
    "SpacyTokenizer",
    "Tokenizer",
    # Normalization
    "TextNormalizer",
    # Extraction
    "KeywordIndex",
    "extract_keywords",
    # Categorization
    "CategoryIndex",
    "categorize_services",
    "match_row_keywords",
]
