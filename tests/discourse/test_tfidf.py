"""Tests for TF-IDF scoring and ranking."""
from __future__ import annotations

import math

import pytest

from src.discourse import TfIdfScore
from src.discourse.corpus import Corpus
from src.discourse.counts import TermFrequencyIndex, build_term_index
from src.discourse.errors import ConfigurationError, EmptyCorpusError
from src.discourse.tfidf import rank_tfidf, ranking_key, score_tfidf, top_terms


def _index() -> TermFrequencyIndex:
    corpus = Corpus.from_pairs([("a.txt", "apoio apoio fiscaliz"), ("b.txt", "apoio capacita capacita")])
    return build_term_index(corpus)


def test_scores_follow_tf_times_idf() -> None:
    ranking = rank_tfidf(_index())

    fiscaliz = ranking.score("a.txt", "fiscaliz")
    assert fiscaliz is not None
    assert fiscaliz.term_frequency == pytest.approx(1 / 3)
    assert fiscaliz.inverse_document_frequency == pytest.approx(math.log(2))
    assert fiscaliz.tf_idf > 0
    assert ranking.score("b.txt", "fiscaliz") is None


def test_term_in_every_document_scores_zero() -> None:
    ranking = rank_tfidf(_index())

    for document_id in ("a.txt", "b.txt"):
        score = ranking.score(document_id, "apoio")
        assert score is not None
        assert score.inverse_document_frequency == 0.0
        assert score.tf_idf == 0.0


def test_full_table_is_ranked() -> None:
    scores = score_tfidf(_index())

    assert [(score.document_id, score.term) for score in scores] == [
        ("b.txt", "capacita"),
        ("a.txt", "fiscaliz"),
        ("a.txt", "apoio"),
        ("b.txt", "apoio"),
    ]


def test_top_terms_per_document() -> None:
    ranking = rank_tfidf(_index(), n=1)

    assert list(ranking.top) == ["a.txt", "b.txt"]
    assert [score.term for score in ranking.top["a.txt"]] == ["fiscaliz"]
    assert [score.term for score in ranking.top["b.txt"]] == ["capacita"]


def test_ties_break_on_count_then_term() -> None:
    scores = [
        TfIdfScore("d", "zeta", 1, 0.5, 1.0),
        TfIdfScore("d", "alfa", 1, 0.5, 1.0),
        TfIdfScore("d", "beta", 3, 0.5, 1.0),
    ]

    ranked = sorted(scores, key=ranking_key)

    assert [score.term for score in ranked] == ["beta", "alfa", "zeta"]
    assert [score.term for score in top_terms(scores, 2)["d"]] == ["beta", "alfa"]


def test_documents_without_terms_get_empty_top_list() -> None:
    corpus = Corpus.from_pairs([("a.txt", "apoio fomento"), ("b.txt", "de 12")])
    ranking = rank_tfidf(build_term_index(corpus))

    assert ranking.top["b.txt"] == ()


def test_invalid_inputs() -> None:
    with pytest.raises(ConfigurationError):
        top_terms([], 0)
    with pytest.raises(EmptyCorpusError):
        score_tfidf(TermFrequencyIndex(document_ids=(), counts=()))
