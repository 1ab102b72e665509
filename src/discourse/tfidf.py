"""TF-IDF scoring over term-document counts."""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from . import TfIdfScore
from .counts import TermFrequencyIndex
from .errors import ConfigurationError, EmptyCorpusError

__all__ = ["TfIdfRanking", "rank_tfidf", "ranking_key", "score_tfidf", "top_terms"]


def ranking_key(score: TfIdfScore) -> tuple[float, int, str]:
    """Sort key: descending tf_idf, descending raw count, then term."""

    return (-score.tf_idf, -score.count, score.term)


def score_tfidf(index: TermFrequencyIndex) -> tuple[TfIdfScore, ...]:
    """Score every (document, term) pair of ``index``.

    ``tf = count / document_total`` and ``idf = ln(N / df)``; a term found
    in every document has ``idf == 0`` exactly. The returned table is ranked
    by :func:`ranking_key`, with corpus order breaking any remaining tie.
    """

    total_documents = len(index.document_ids)
    if total_documents == 0:
        raise EmptyCorpusError("Cannot score TF-IDF for an empty corpus")

    totals = index.document_totals()
    document_frequencies = index.document_frequencies()
    order = {doc_id: position for position, doc_id in enumerate(index.document_ids)}

    scores: list[TfIdfScore] = []
    for entry in index.counts:
        df = document_frequencies[entry.term]
        idf = 0.0 if df == total_documents else math.log(total_documents / df)
        scores.append(
            TfIdfScore(
                document_id=entry.document_id,
                term=entry.term,
                count=entry.count,
                term_frequency=entry.count / totals[entry.document_id],
                inverse_document_frequency=idf,
            )
        )
    scores.sort(key=lambda score: (*ranking_key(score), order[score.document_id]))
    return tuple(scores)


def top_terms(
    scores: Iterable[TfIdfScore],
    n: int = 5,
    *,
    document_ids: Sequence[str] | None = None,
) -> dict[str, tuple[TfIdfScore, ...]]:
    """Return the ``n`` highest ranked terms for each document.

    Documents are keyed in ``document_ids`` order when provided, otherwise in
    order of first appearance. Documents without scores map to an empty tuple.
    """

    if n < 1:
        raise ConfigurationError(f"top_n_terms_per_document must be positive, got {n}")

    grouped: dict[str, list[TfIdfScore]] = defaultdict(list)
    seen: list[str] = []
    for score in scores:
        if score.document_id not in grouped:
            seen.append(score.document_id)
        grouped[score.document_id].append(score)

    ordered_ids = list(document_ids) if document_ids is not None else seen
    return {
        doc_id: tuple(sorted(grouped.get(doc_id, ()), key=ranking_key)[:n])
        for doc_id in ordered_ids
    }


@dataclass(frozen=True, slots=True)
class TfIdfRanking:
    """Full ranked TF-IDF table plus the top terms of each document."""

    scores: Sequence[TfIdfScore]
    top: Mapping[str, tuple[TfIdfScore, ...]]
    n: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores", tuple(self.scores))
        object.__setattr__(self, "top", dict(self.top))

    def score(self, document_id: str, term: str) -> TfIdfScore | None:
        for entry in self.scores:
            if entry.document_id == document_id and entry.term == term:
                return entry
        return None


def rank_tfidf(index: TermFrequencyIndex, n: int = 5) -> TfIdfRanking:
    scores = score_tfidf(index)
    return TfIdfRanking(
        scores=scores,
        top=top_terms(scores, n, document_ids=index.document_ids),
        n=n,
    )
