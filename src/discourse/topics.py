"""Latent Dirichlet allocation over the document-term matrix.

The fitting routine is scikit-learn's batch variational Bayes implementation.
This module only owns the contract around it: input validation, a fixed
seed, normalized ``beta``/``gamma`` tables and reporting of numerical
trouble as warnings instead of failures.
"""
from __future__ import annotations

import logging
import warnings
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from sklearn.decomposition import LatentDirichletAllocation
from sklearn.exceptions import ConvergenceWarning

from . import DocumentTopic, TopicTerm
from .config import LdaSettings
from .counts import DocumentTermMatrix
from .errors import ConfigurationError, EmptyCorpusError, InsufficientDataError

__all__ = ["TopicModelResult", "fit_topics"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TopicModelResult:
    """Distributions produced by a fitted topic model."""

    topic_count: int
    seed: int
    vocabulary: Sequence[str]
    topic_terms: Sequence[TopicTerm]
    document_topics: Sequence[DocumentTopic]
    iterations: int = 0
    warnings: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "vocabulary", tuple(self.vocabulary))
        object.__setattr__(self, "topic_terms", tuple(self.topic_terms))
        object.__setattr__(self, "document_topics", tuple(self.document_topics))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def top_terms(self, n: int = 10) -> dict[int, tuple[TopicTerm, ...]]:
        """Highest-probability terms per topic, ties broken by term."""

        if n < 1:
            raise ConfigurationError(f"top_n_terms_per_topic must be positive, got {n}")
        grouped: dict[int, list[TopicTerm]] = defaultdict(list)
        for entry in self.topic_terms:
            grouped[entry.topic].append(entry)
        return {
            topic: tuple(sorted(grouped[topic], key=lambda entry: (-entry.beta, entry.term))[:n])
            for topic in range(self.topic_count)
        }


def fit_topics(
    matrix: DocumentTermMatrix,
    topic_count: int,
    *,
    seed: int,
    settings: LdaSettings | None = None,
) -> TopicModelResult:
    """Fit ``topic_count`` topics and return their term and document shares."""

    settings = settings or LdaSettings()
    if topic_count < 1:
        raise ConfigurationError(f"topic_count must be a positive integer, got {topic_count}")

    documents, vocabulary_size = matrix.shape
    if documents == 0:
        raise EmptyCorpusError("Cannot fit topics for an empty corpus")
    if vocabulary_size < topic_count:
        raise InsufficientDataError(
            f"Vocabulary has {vocabulary_size} distinct terms; at least {topic_count} are required "
            f"for {topic_count} topics"
        )
    dtm = matrix.to_sparse()
    non_empty_rows = int((np.asarray(dtm.sum(axis=1)).ravel() > 0).sum())
    if non_empty_rows == 0:
        raise InsufficientDataError("No document has any term left after filtering")
    if non_empty_rows < topic_count:
        raise InsufficientDataError(
            f"Only {non_empty_rows} document(s) have terms left after filtering; at least {topic_count} "
            f"are required for {topic_count} topics"
        )

    model = LatentDirichletAllocation(
        n_components=topic_count,
        learning_method="batch",
        max_iter=settings.max_iter,
        evaluate_every=settings.evaluate_every,
        doc_topic_prior=settings.doc_topic_prior,
        topic_word_prior=settings.topic_word_prior,
        random_state=seed,
    )

    notes: list[str] = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ConvergenceWarning)
        doc_topic = model.fit_transform(dtm)
    for warning in caught:
        if issubclass(warning.category, (ConvergenceWarning, RuntimeWarning)):
            notes.append(f"topic model: {warning.message}")
        else:
            warnings.warn_explicit(warning.message, warning.category, warning.filename, warning.lineno)

    iterations = int(getattr(model, "n_iter_", settings.max_iter))
    if settings.evaluate_every > 0 and iterations >= settings.max_iter:
        notes.append(
            f"topic model did not converge within max_iter={settings.max_iter}; topics are best-effort"
        )

    beta, beta_repaired = _normalize_rows(model.components_)
    gamma, gamma_repaired = _normalize_rows(doc_topic)
    if beta_repaired:
        notes.append(f"topic model produced degenerate term weights for {beta_repaired} topic(s)")
    if gamma_repaired:
        notes.append(f"topic model produced degenerate topic shares for {gamma_repaired} document(s)")

    for note in notes:
        logger.warning(note)

    vocabulary = matrix.vocabulary
    topic_terms = [
        TopicTerm(topic=topic, term=term, beta=float(beta[topic, column]))
        for topic in range(topic_count)
        for column, term in enumerate(vocabulary)
    ]
    document_topics = [
        DocumentTopic(document_id=doc_id, topic=topic, gamma=float(gamma[row, topic]))
        for row, doc_id in enumerate(matrix.document_ids)
        for topic in range(topic_count)
    ]
    logger.info(
        "Fitted %d topics over %d documents and %d terms in %d iterations",
        topic_count,
        documents,
        vocabulary_size,
        iterations,
    )
    return TopicModelResult(
        topic_count=topic_count,
        seed=seed,
        vocabulary=vocabulary,
        topic_terms=topic_terms,
        document_topics=document_topics,
        iterations=iterations,
        warnings=notes,
    )


def _normalize_rows(values: np.ndarray) -> tuple[np.ndarray, int]:
    """Scale rows to sum to one; non-finite or empty rows become uniform."""

    array = np.array(values, dtype=np.float64)
    invalid_rows = ~np.isfinite(array).all(axis=1)
    array[~np.isfinite(array)] = 0.0
    array[array < 0] = 0.0
    sums = array.sum(axis=1)
    degenerate = sums <= 0
    if degenerate.any():
        array[degenerate] = 1.0
        sums = array.sum(axis=1)
    repaired = int((invalid_rows | degenerate).sum())
    return array / sums[:, None], repaired
