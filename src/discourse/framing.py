"""Lexicon-based framing classification.

Each token is assigned to the first category, in configured priority
order, that has a lexicon entry occurring as a substring of the token.
Tokens matching no category are unclassified and left out of the counts.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from . import FrameCount, Token
from .errors import ConfigurationError

__all__ = [
    "FramingResult",
    "classify_term",
    "count_frames",
    "normalize_lexicons",
]


def normalize_lexicons(
    lexicons: Mapping[str, Iterable[str]],
    *,
    require_disjoint: bool = True,
) -> dict[str, tuple[str, ...]]:
    """Clean lexicon entries while keeping category priority order."""

    if not lexicons:
        raise ConfigurationError("At least one framing lexicon is required.")
    normalized: dict[str, tuple[str, ...]] = {}
    for label, entries in lexicons.items():
        name = str(label).strip()
        if not name:
            raise ConfigurationError("Framing category names must be non-empty.")
        if isinstance(entries, str):
            entries = [entries]
        terms: list[str] = []
        for entry in entries:
            term = str(entry).strip().casefold()
            if term:
                terms.append(term)
        if not terms:
            raise ConfigurationError(f"Framing lexicon '{name}' has no entries.")
        normalized[name] = tuple(dict.fromkeys(terms))

    if require_disjoint:
        _check_disjoint(normalized)
    return normalized


def _check_disjoint(lexicons: Mapping[str, Sequence[str]]) -> None:
    labels = list(lexicons)
    conflicts: list[str] = []
    for index, first in enumerate(labels):
        for second in labels[index + 1 :]:
            for entry in lexicons[first]:
                for other in lexicons[second]:
                    if entry in other or other in entry:
                        conflicts.append(f"'{entry}' ({first}) / '{other}' ({second})")
    if conflicts:
        raise ConfigurationError(f"Framing lexicons overlap: {'; '.join(conflicts)}")


def classify_term(term: str, lexicons: Mapping[str, Sequence[str]]) -> str | None:
    """Return the first category whose lexicon matches ``term``."""

    for category, entries in lexicons.items():
        for entry in entries:
            if entry in term:
                return category
    return None


@dataclass(frozen=True, slots=True)
class FramingResult:
    """Framing counts for a corpus, optionally broken down by document."""

    priority: Sequence[str]
    totals: Sequence[FrameCount]
    by_document: Sequence[FrameCount] = field(default_factory=tuple)
    unclassified: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "priority", tuple(self.priority))
        object.__setattr__(self, "totals", tuple(self.totals))
        object.__setattr__(self, "by_document", tuple(self.by_document))

    def as_dict(self) -> dict[str, int]:
        return {entry.category: entry.count for entry in self.totals}

    @property
    def classified(self) -> int:
        return sum(entry.count for entry in self.totals)

    def divergent(self, negative: Iterable[str] = ("control",)) -> dict[str, int]:
        """Signed totals for a divergent bar: ``negative`` categories flip sign."""

        flipped = set(negative)
        return {
            entry.category: -entry.count if entry.category in flipped else entry.count
            for entry in self.totals
        }


def count_frames(
    streams: Iterable[Iterable[Token]],
    lexicons: Mapping[str, Sequence[str]],
    *,
    per_document: bool = False,
) -> FramingResult:
    """Classify every token and aggregate category counts."""

    totals: Counter[str] = Counter()
    by_document: dict[str, Counter[str]] = {}
    document_order: list[str] = []
    unclassified = 0
    for stream in streams:
        for token in stream:
            category = classify_term(token.term, lexicons)
            if category is None:
                unclassified += 1
                continue
            totals[category] += 1
            if per_document:
                if token.document_id not in by_document:
                    by_document[token.document_id] = Counter()
                    document_order.append(token.document_id)
                by_document[token.document_id][category] += 1

    priority = tuple(lexicons)
    breakdown = [
        FrameCount(category=category, count=by_document[doc_id][category], document_id=doc_id)
        for doc_id in document_order
        for category in priority
        if by_document[doc_id][category]
    ]
    return FramingResult(
        priority=priority,
        totals=tuple(FrameCount(category=category, count=totals[category]) for category in priority),
        by_document=tuple(breakdown),
        unclassified=unclassified,
    )
