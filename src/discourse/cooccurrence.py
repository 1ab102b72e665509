"""Bigram co-occurrence graph construction."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Sequence

import networkx as nx

from . import CooccurrenceEdge, NGram
from .errors import ConfigurationError

__all__ = ["CooccurrenceGraph", "build_cooccurrence_graph"]


@dataclass(frozen=True, slots=True)
class CooccurrenceGraph:
    """Directed weighted graph of adjacent term pairs above a threshold."""

    threshold: int
    nodes: Sequence[str]
    edges: Sequence[CooccurrenceEdge]
    candidate_pairs: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    def weight(self, term_a: str, term_b: str) -> int | None:
        for edge in self.edges:
            if edge.term_a == term_a and edge.term_b == term_b:
                return edge.count
        return None

    def to_digraph(self) -> nx.DiGraph:
        graph = nx.DiGraph(threshold=self.threshold)
        graph.add_nodes_from(self.nodes)
        graph.add_weighted_edges_from((edge.term_a, edge.term_b, edge.count) for edge in self.edges)
        return graph

    def manifest(self) -> dict[str, object]:
        return {
            "threshold": self.threshold,
            "nodes": list(self.nodes),
            "edges": [
                {"source": edge.term_a, "target": edge.term_b, "weight": edge.count}
                for edge in self.edges
            ],
        }


def build_cooccurrence_graph(
    streams: Iterable[Iterable[NGram]],
    stopwords: AbstractSet[str] = frozenset(),
    *,
    threshold: int = 10,
) -> CooccurrenceGraph:
    """Count stopword-free adjacent pairs and keep those above ``threshold``.

    Only stopword membership filters pairs here; digit and length filters of
    the unigram view do not apply.
    """

    if threshold < 1:
        raise ConfigurationError(f"bigram_count_threshold must be a positive integer, got {threshold}")

    counter: Counter[tuple[str, str]] = Counter()
    for stream in streams:
        for gram in stream:
            left, right = gram.left, gram.right
            if left in stopwords or right in stopwords:
                continue
            counter[(left, right)] += 1

    retained = [
        CooccurrenceEdge(term_a=left, term_b=right, count=count)
        for (left, right), count in counter.items()
        if count > threshold
    ]
    retained.sort(key=lambda edge: (-edge.count, edge.term_a, edge.term_b))
    nodes = sorted({term for edge in retained for term in (edge.term_a, edge.term_b)})
    return CooccurrenceGraph(
        threshold=threshold,
        nodes=nodes,
        edges=retained,
        candidate_pairs=len(counter),
    )
