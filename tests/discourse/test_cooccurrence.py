"""Tests for the bigram co-occurrence graph."""
from __future__ import annotations

import pytest

from src.discourse import CooccurrenceEdge
from src.discourse.cooccurrence import build_cooccurrence_graph
from src.discourse.corpus import Corpus
from src.discourse.errors import ConfigurationError
from src.discourse.tokenize import ngrams


def _streams(*pairs: tuple[str, str]):
    return [ngrams(document) for document in Corpus.from_pairs(pairs)]


def test_pair_above_threshold_becomes_edge() -> None:
    graph = build_cooccurrence_graph(_streams(("a.txt", "governo federal " * 11)), threshold=10)

    assert graph.edges == (CooccurrenceEdge("governo", "federal", 11),)
    assert graph.nodes == ("federal", "governo")
    assert graph.weight("governo", "federal") == 11
    assert graph.weight("federal", "governo") is None


def test_pair_at_threshold_is_dropped() -> None:
    graph = build_cooccurrence_graph(_streams(("a.txt", "governo federal " * 10)), threshold=10)

    assert graph.edges == ()
    assert graph.nodes == ()
    assert graph.candidate_pairs == 2


def test_stopwords_filter_pairs_but_digits_do_not() -> None:
    text = "a lei 8666 " * 3
    graph = build_cooccurrence_graph(_streams(("a.txt", text)), frozenset({"a"}), threshold=2)

    assert graph.edges == (CooccurrenceEdge("lei", "8666", 3),)


def test_counts_aggregate_across_documents_without_crossing_them() -> None:
    graph = build_cooccurrence_graph(
        _streams(("a.txt", "renda basica " * 2), ("b.txt", "renda basica")),
        threshold=2,
    )

    assert graph.edges == (CooccurrenceEdge("renda", "basica", 3),)


def test_edges_are_sorted_by_weight_then_terms() -> None:
    text = "alfa beta " * 4 + "gama delta " * 4
    graph = build_cooccurrence_graph(_streams(("a.txt", text)), threshold=2)

    assert [(edge.term_a, edge.term_b, edge.count) for edge in graph.edges] == [
        ("alfa", "beta", 4),
        ("gama", "delta", 4),
        ("beta", "alfa", 3),
        ("delta", "gama", 3),
    ]


def test_digraph_export() -> None:
    graph = build_cooccurrence_graph(_streams(("a.txt", "governo federal " * 11)), threshold=10)

    digraph = graph.to_digraph()

    assert digraph.is_directed()
    assert digraph["governo"]["federal"]["weight"] == 11
    assert not digraph.has_edge("federal", "governo")
    assert graph.manifest()["edges"] == [{"source": "governo", "target": "federal", "weight": 11}]


def test_threshold_must_be_positive() -> None:
    with pytest.raises(ConfigurationError):
        build_cooccurrence_graph([], threshold=0)
