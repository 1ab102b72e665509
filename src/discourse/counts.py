"""Per-document term counting and the document-term matrix."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import AbstractSet, Mapping, Sequence

import numpy as np
from scipy import sparse

from . import TermCount
from .corpus import Corpus
from .tokenize import unigrams

__all__ = ["DocumentTermMatrix", "TermFrequencyIndex", "build_term_index"]


@dataclass(frozen=True, slots=True)
class DocumentTermMatrix:
    """Sparse (document, term) → count mapping used as topic model input.

    Rows follow corpus order; columns follow the sorted vocabulary. Absent
    pairs are implicitly zero.
    """

    document_ids: Sequence[str]
    vocabulary: Sequence[str]
    entries: Mapping[tuple[str, str], int]

    def __post_init__(self) -> None:
        object.__setattr__(self, "document_ids", tuple(self.document_ids))
        object.__setattr__(self, "vocabulary", tuple(self.vocabulary))
        object.__setattr__(self, "entries", dict(self.entries))

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.document_ids), len(self.vocabulary)

    def get(self, document_id: str, term: str) -> int:
        return self.entries.get((document_id, term), 0)

    def to_sparse(self) -> sparse.csr_matrix:
        row_index = {doc_id: row for row, doc_id in enumerate(self.document_ids)}
        column_index = {term: column for column, term in enumerate(self.vocabulary)}
        rows: list[int] = []
        columns: list[int] = []
        values: list[int] = []
        for (document_id, term), count in sorted(
            self.entries.items(), key=lambda item: (row_index[item[0][0]], column_index[item[0][1]])
        ):
            rows.append(row_index[document_id])
            columns.append(column_index[term])
            values.append(count)
        return sparse.csr_matrix(
            (
                np.asarray(values, dtype=np.int64),
                (np.asarray(rows, dtype=np.int64), np.asarray(columns, dtype=np.int64)),
            ),
            shape=self.shape,
        )


@dataclass(frozen=True, slots=True)
class TermFrequencyIndex:
    """Exact per-document term counts for a whole corpus."""

    document_ids: Sequence[str]
    counts: Sequence[TermCount]

    def __post_init__(self) -> None:
        object.__setattr__(self, "document_ids", tuple(self.document_ids))
        object.__setattr__(self, "counts", tuple(self.counts))

    @property
    def vocabulary(self) -> tuple[str, ...]:
        return tuple(sorted({entry.term for entry in self.counts}))

    def document_totals(self) -> dict[str, int]:
        """Number of surviving tokens per document (zero for empty ones)."""

        totals = {doc_id: 0 for doc_id in self.document_ids}
        for entry in self.counts:
            totals[entry.document_id] += entry.count
        return totals

    def document_frequencies(self) -> dict[str, int]:
        """Number of documents containing each term."""

        frequencies: Counter[str] = Counter()
        for entry in self.counts:
            frequencies[entry.term] += 1
        return dict(frequencies)

    def to_matrix(self) -> DocumentTermMatrix:
        return DocumentTermMatrix(
            document_ids=self.document_ids,
            vocabulary=self.vocabulary,
            entries={(entry.document_id, entry.term): entry.count for entry in self.counts},
        )


def build_term_index(
    corpus: Corpus,
    stopwords: AbstractSet[str] = frozenset(),
    *,
    min_length: int = 3,
) -> TermFrequencyIndex:
    """Count surviving unigrams per document.

    Entries are ordered by corpus order, then descending count, then term.
    """

    corpus.require_non_empty()
    counts: list[TermCount] = []
    for document in corpus:
        counter = Counter(unigrams(document, stopwords, min_length=min_length).terms())
        for term, count in sorted(counter.items(), key=lambda item: (-item[1], item[0])):
            counts.append(TermCount(document_id=document.document_id, term=term, count=count))
    return TermFrequencyIndex(document_ids=corpus.document_ids, counts=counts)
