"""Stopword set construction.

Base lists come from the NLTK Snowball stopword corpus, which holds
function words only. Language codes are ISO 639-1 and map onto the corpus
file names NLTK uses.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable

import nltk
from nltk.corpus import stopwords as nltk_stopwords

from .errors import ConfigurationError

__all__ = ["SNOWBALL_LANGUAGES", "build_stopword_set", "language_stopwords"]

logger = logging.getLogger(__name__)

SNOWBALL_LANGUAGES: dict[str, str] = {
    "pt": "portuguese",
    "en": "english",
    "es": "spanish",
    "fr": "french",
    "de": "german",
    "it": "italian",
    "nl": "dutch",
    "sv": "swedish",
    "da": "danish",
    "no": "norwegian",
    "fi": "finnish",
    "ru": "russian",
}


def _ensure_corpus() -> None:
    try:
        nltk.data.find("corpora/stopwords")
    except LookupError:
        logger.info("Downloading the NLTK stopwords corpus")
        nltk.download("stopwords", quiet=True)


@lru_cache(maxsize=None)
def _snowball_words(name: str) -> frozenset[str]:
    _ensure_corpus()
    return frozenset(word.casefold() for word in nltk_stopwords.words(name))


def language_stopwords(language: str | None) -> frozenset[str]:
    """Return the base stopword list for an ISO 639-1 language code."""

    if language is None:
        return frozenset()
    code = language.strip().lower()
    name = SNOWBALL_LANGUAGES.get(code)
    if name is None:
        raise ConfigurationError(f"No stopword list available for language '{language}'")
    return _snowball_words(name)


def build_stopword_set(
    language: str | None,
    domain_terms: Iterable[str] = (),
    *,
    protected: Iterable[str] = (),
) -> frozenset[str]:
    """Union of the language stopwords and domain-specific noise terms.

    Base stopwords containing any ``protected`` entry are left out, so a
    framing lexicon root can never be filtered by the generic list. Domain
    terms are kept as given.
    """

    base = language_stopwords(language)
    guarded = tuple(entry.casefold() for entry in protected if entry)
    if guarded:
        dropped = {word for word in base if any(entry in word for entry in guarded)}
        if dropped:
            logger.debug("Keeping lexicon-bearing words out of the stopword set: %s", sorted(dropped))
            base = base - dropped
    domain = {term.strip().casefold() for term in domain_terms if term and term.strip()}
    combined = base | domain
    logger.debug(
        "Built stopword set: %d language terms (%s), %d domain terms",
        len(base),
        language or "none",
        len(domain),
    )
    return frozenset(combined)
