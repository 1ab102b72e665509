"""Tokenization and normalization of raw document text.

Two views of a document are produced:

* unigrams, filtered against the stopword set, digits and short tokens;
* n-grams (bigrams by default) over the *unfiltered* word stream. Stopword
  filtering for n-grams happens later, in the co-occurrence graph builder.

Both views are restartable: iterating a stream twice yields the same tokens.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import AbstractSet, Literal

from . import Document, NGram, Token
from .errors import ConfigurationError

__all__ = [
    "NGramStream",
    "UnigramStream",
    "normalize_words",
    "tokenize",
    "unigrams",
    "ngrams",
]

TokenMode = Literal["unigram", "bigram"]

# Letters and digits, no underscore; apostrophes and hyphens split words.
_WORD_PATTERN = re.compile(r"[^\W_]+")
_DIGIT_PATTERN = re.compile(r"\d")


def normalize_words(text: str) -> Iterator[str]:
    """Case-fold the text and yield its words with punctuation stripped."""

    if not text:
        return
    for match in _WORD_PATTERN.finditer(text.casefold()):
        yield match.group(0)


@dataclass(frozen=True, slots=True)
class UnigramStream:
    """Filtered unigram tokens of a single document."""

    document: Document
    stopwords: AbstractSet[str] = field(default_factory=frozenset)
    min_length: int = 3

    def __iter__(self) -> Iterator[Token]:
        position = 0
        for word in normalize_words(self.document.text):
            if word in self.stopwords:
                continue
            if _DIGIT_PATTERN.search(word):
                continue
            if len(word) < self.min_length:
                continue
            yield Token(document_id=self.document.document_id, position=position, term=word)
            position += 1

    def terms(self) -> Iterator[str]:
        for token in self:
            yield token.term


@dataclass(frozen=True, slots=True)
class NGramStream:
    """Adjacent word windows of size ``n`` over the unfiltered word stream."""

    document: Document
    n: int = 2

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ConfigurationError(f"n-gram size must be positive, got {self.n}")

    def __iter__(self) -> Iterator[NGram]:
        window: list[str] = []
        position = 0
        for word in normalize_words(self.document.text):
            window.append(word)
            if len(window) < self.n:
                continue
            if len(window) > self.n:
                del window[0]
            yield NGram(document_id=self.document.document_id, position=position, terms=tuple(window))
            position += 1

    def pairs(self) -> Iterator[tuple[str, str]]:
        for gram in self:
            yield gram.left, gram.right


def unigrams(
    document: Document,
    stopwords: AbstractSet[str] = frozenset(),
    *,
    min_length: int = 3,
) -> UnigramStream:
    return UnigramStream(document=document, stopwords=stopwords, min_length=min_length)


def ngrams(document: Document, n: int = 2) -> NGramStream:
    return NGramStream(document=document, n=n)


def tokenize(
    document: Document,
    stopwords: AbstractSet[str] = frozenset(),
    *,
    mode: TokenMode = "unigram",
    n: int = 2,
    min_length: int = 3,
) -> Iterable[Token] | Iterable[NGram]:
    """Return the token stream for ``document`` in the requested mode."""

    if mode == "unigram":
        return unigrams(document, stopwords, min_length=min_length)
    if mode == "bigram":
        return ngrams(document, n)
    raise ConfigurationError(f"Unknown tokenization mode: {mode}")
