"""Text normalization into candidate keywords.

Turns a service's free text into a set of lower-case, singular keyword
candidates:

1. Lower-case the input
2. Collect noun-phrase words through the Tokenizer
3. Keep alphabetic runs only (``[a-z]+``)
4. Drop runs shorter than MIN_KEYWORD_LENGTH
5. Drop stop-words
6. Singularize, keeping the original word when no singular is known
"""

from __future__ import annotations

from collections.abc import Iterable
import re

from portal_catalog.config import MIN_KEYWORD_LENGTH, STOP_WORDS
from portal_catalog.keywords.tokenizer import Singularizer, Tokenizer

WORD_PATTERN = re.compile(r"[a-z]+")


class _IdentitySingularizer:
    def singularize(self, word: str) -> str:
        return word


class TextNormalizer:
    """Normalizes free text into a set of keyword candidates.

    Example:
        >>> normalizer = TextNormalizer(SpacyTokenizer())
        >>> sorted(normalizer.normalize("Road Network roads and highways"))
        ['highway', 'network', 'road']
    """

    def __init__(
        self,
        tokenizer: Tokenizer,
        singularizer: Singularizer | None = None,
        stop_words: Iterable[str] = STOP_WORDS,
        min_length: int = MIN_KEYWORD_LENGTH,
    ) -> None:
        """Initialize the normalizer.

        Args:
            tokenizer: Source of noun-phrase candidate words.
            singularizer: Singular-form lookup. Defaults to the tokenizer
                when it also implements Singularizer, otherwise words are
                kept as they are.
            stop_words: Words that are never keywords.
            min_length: Minimum keyword length.
        """
        if singularizer is None:
            singularizer = (
                tokenizer
                if isinstance(tokenizer, Singularizer)
                else _IdentitySingularizer()
            )
        self.tokenizer = tokenizer
        self.singularizer = singularizer
        self.stop_words = frozenset(stop_words)
        self.min_length = min_length

    def normalize(self, text: str | None) -> set[str]:
        """Return the keyword candidates found in ``text``."""
        return set(self.ordered_keywords(text))

    def ordered_keywords(self, text: str | None) -> list[str]:
        """Return the keyword candidates of ``text`` in order of first occurrence."""
        if not text:
            return []

        keywords: dict[str, None] = {}
        for phrase in self.tokenizer.extract_candidate_words(text.lower()):
            for word in WORD_PATTERN.findall(phrase.lower()):
                if not self._is_candidate(word):
                    continue
                singular = (self.singularizer.singularize(word) or word).lower()
                # "maps" passes the stop-word check but "map" must not
                if self._is_candidate(singular):
                    keywords.setdefault(singular)
        return list(keywords)

    def _is_candidate(self, word: str) -> bool:
        return len(word) >= self.min_length and word not in self.stop_words

    __call__ = normalize
