"""Core data models for the discourse analytics pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

__all__ = [
    "Document",
    "Token",
    "NGram",
    "TermCount",
    "TfIdfScore",
    "TopicTerm",
    "DocumentTopic",
    "FrameCount",
    "CooccurrenceEdge",
]


@dataclass(frozen=True, slots=True)
class Document:
    """A single corpus document as yielded by the ingestion layer."""

    document_id: str
    text: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.document_id:
            raise ValueError("document_id is required for Document")
        object.__setattr__(self, "metadata", dict(self.metadata))


@dataclass(frozen=True, slots=True)
class Token:
    """Normalized unigram with its provenance."""

    document_id: str
    position: int
    term: str


@dataclass(frozen=True, slots=True)
class NGram:
    """Ordered window of adjacent normalized words."""

    document_id: str
    position: int
    terms: Sequence[str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))

    @property
    def left(self) -> str:
        return self.terms[0]

    @property
    def right(self) -> str:
        return self.terms[-1]

    @property
    def text(self) -> str:
        return " ".join(self.terms)


@dataclass(frozen=True, slots=True)
class TermCount:
    """Occurrences of a term within one document after filtering."""

    document_id: str
    term: str
    count: int


@dataclass(frozen=True, slots=True)
class TfIdfScore:
    """Term relevance statistics for a (document, term) pair."""

    document_id: str
    term: str
    count: int
    term_frequency: float
    inverse_document_frequency: float

    @property
    def tf_idf(self) -> float:
        return self.term_frequency * self.inverse_document_frequency


@dataclass(frozen=True, slots=True)
class TopicTerm:
    """Probability of a term under a topic (the ``beta`` matrix)."""

    topic: int
    term: str
    beta: float


@dataclass(frozen=True, slots=True)
class DocumentTopic:
    """Share of a topic within a document (the ``gamma`` matrix)."""

    document_id: str
    topic: int
    gamma: float


@dataclass(frozen=True, slots=True)
class FrameCount:
    """Number of tokens assigned to a framing category.

    ``document_id`` is ``None`` for corpus-wide totals.
    """

    category: str
    count: int
    document_id: str | None = None


@dataclass(frozen=True, slots=True)
class CooccurrenceEdge:
    """Directed adjacency between two terms with its corpus-wide count."""

    term_a: str
    term_b: str
    count: int
