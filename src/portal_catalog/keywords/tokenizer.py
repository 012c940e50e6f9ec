"""Pluggable NLP capabilities for keyword extraction.

Keyword extraction needs two things from a natural-language toolkit:
noun-phrase candidate words and a noun singularizer. Both are expressed as
protocols so the toolkit can be swapped without touching the extractor:

- Tokenizer: text -> candidate words from noun-phrase-like spans
- Singularizer: word -> singular form

SpacyTokenizer implements both with a spaCy pipeline.

Example:
    tokenizer = SpacyTokenizer()
    tokenizer.extract_candidate_words("roads and highways of the state")
    # ['roads', 'highways', 'state']
    tokenizer.singularize("highways")
    # 'highway'
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

import structlog

from portal_catalog.config import get_spacy_model
from portal_catalog.exceptions import NLPModelNotAvailableError

if TYPE_CHECKING:
    from spacy.language import Language

logger = structlog.get_logger(__name__)


@runtime_checkable
class Tokenizer(Protocol):
    """Extracts candidate keyword words from free text."""

    def extract_candidate_words(self, text: str) -> Sequence[str]:
        """Return the words of noun-phrase-like spans in ``text``.

        Implementations must be deterministic for the same input. Words
        may repeat and may contain non-alphabetic characters; callers
        apply their own filtering.
        """
        ...


@runtime_checkable
class Singularizer(Protocol):
    """Maps a noun to its singular form."""

    def singularize(self, word: str) -> str:
        """Return the singular form of ``word``, or "" if unknown."""
        ...


class SpacyTokenizer:
    """Tokenizer and singularizer backed by a spaCy pipeline.

    Candidate words come from ``doc.noun_chunks``. Function words and
    punctuation inside a chunk are skipped so "the roads" yields only
    "roads". The singular form of a word is the lemma of the word parsed
    on its own when spaCy tags it as a noun.

    The model is loaded lazily on first use.
    """

    SKIPPED_POS: ClassVar[frozenset[str]] = frozenset(
        {"DET", "PRON", "PUNCT", "ADP", "CCONJ", "SCONJ", "PART", "SPACE"}
    )
    NOUN_POS: ClassVar[frozenset[str]] = frozenset({"NOUN", "PROPN"})

    def __init__(self, model: str | None = None, nlp: Language | None = None) -> None:
        """Initialize the tokenizer.

        Args:
            model: spaCy model name to load. Defaults to
                PORTAL_CATALOG_SPACY_MODEL or en_core_web_sm.
            nlp: An already loaded pipeline; ``model`` is ignored if given.
        """
        self.model_name = model or get_spacy_model()
        self._nlp = nlp
        self._singular_cache: dict[str, str] = {}

    @property
    def nlp(self) -> Language:
        """The loaded spaCy pipeline.

        Raises:
            NLPModelNotAvailableError: If spaCy or the model is not installed.
        """
        if self._nlp is None:
            self._nlp = self._load_model()
        return self._nlp

    def _load_model(self) -> Language:
        try:
            import spacy
        except ImportError as e:
            raise NLPModelNotAvailableError(self.model_name) from e

        try:
            nlp = spacy.load(self.model_name, disable=["ner"])
        except OSError as e:
            raise NLPModelNotAvailableError(self.model_name) from e

        logger.info("Loaded spaCy model", model=self.model_name)
        return nlp

    def extract_candidate_words(self, text: str) -> list[str]:
        """Return the words of every noun chunk in ``text``, in order."""
        if not text or not text.strip():
            return []

        doc = self.nlp(text)
        words: list[str] = []
        for chunk in doc.noun_chunks:
            words.extend(self._chunk_words(chunk))
        return words

    def _chunk_words(self, chunk: Any) -> list[str]:
        return [
            token.text
            for token in chunk
            if token.pos_ not in self.SKIPPED_POS and not token.is_space
        ]

    def singularize(self, word: str) -> str:
        """Return the singular form of a noun, or "" if ``word`` is not one."""
        if word in self._singular_cache:
            return self._singular_cache[word]

        doc = self.nlp(word)
        singular = ""
        if len(doc) == 1 and doc[0].pos_ in self.NOUN_POS:
            singular = doc[0].lemma_.lower()

        self._singular_cache[word] = singular
        return singular
