"""Pipeline stage implementations for discourse analysis."""
from __future__ import annotations

from itertools import islice

from .context import AnalysisContext, AnalysisStage, PipelineStageError, StageResult
from .cooccurrence import build_cooccurrence_graph
from .counts import TermFrequencyIndex, build_term_index
from .framing import count_frames
from .tfidf import rank_tfidf
from .topics import fit_topics


class TermCountStage:
    """Counts surviving unigrams per document."""

    name = "term_counts"

    def run(self, context: AnalysisContext, previous: tuple[StageResult, ...]) -> StageResult:  # noqa: D401
        del previous
        index = build_term_index(
            context.corpus,
            context.stopwords,
            min_length=context.config.min_token_length,
        )
        totals = index.document_totals()
        empty = [doc_id for doc_id, total in totals.items() if total == 0]

        metrics = {
            "documents": float(len(index.document_ids)),
            "vocabulary": float(len(index.vocabulary)),
            "tokens": float(sum(totals.values())),
        }
        warnings = [f"document '{doc_id}' has no terms after filtering" for doc_id in empty]
        return StageResult(stage=self.name, data=index, metrics=metrics, warnings=tuple(warnings))


class TfIdfStage:
    """Ranks terms by document distinctiveness."""

    name = "tfidf"

    def run(self, context: AnalysisContext, previous: tuple[StageResult, ...]) -> StageResult:  # noqa: D401
        index = _require_index(previous, self.name)
        ranking = rank_tfidf(index, context.config.top_n_terms_per_document)

        metrics = {
            "scored_pairs": float(len(ranking.scores)),
            "zero_idf_pairs": float(sum(1 for score in ranking.scores if score.inverse_document_frequency == 0)),
        }
        notes = [
            f"top:{doc_id}:{entries[0].term}"
            for doc_id, entries in islice(ranking.top.items(), 3)
            if entries
        ]
        return StageResult(stage=self.name, data=ranking, metrics=metrics, notes=tuple(notes))


class TopicStage:
    """Fits the LDA topic model on the document-term matrix."""

    name = "topics"

    def run(self, context: AnalysisContext, previous: tuple[StageResult, ...]) -> StageResult:  # noqa: D401
        index = _require_index(previous, self.name)
        config = context.config
        result = fit_topics(
            index.to_matrix(),
            config.topic_count,
            seed=config.model_seed,
            settings=config.lda,
        )

        metrics = {
            "topics": float(result.topic_count),
            "iterations": float(result.iterations),
        }
        notes = [
            f"topic:{topic}:{','.join(entry.term for entry in entries[:3])}"
            for topic, entries in result.top_terms(config.top_n_terms_per_topic).items()
        ]
        return StageResult(
            stage=self.name,
            data=result,
            metrics=metrics,
            notes=tuple(notes),
            warnings=result.warnings,
        )


class FramingStage:
    """Aggregates lexicon framing categories over the corpus."""

    name = "framing"

    def run(self, context: AnalysisContext, previous: tuple[StageResult, ...]) -> StageResult:  # noqa: D401
        del previous
        result = count_frames(
            context.unigram_streams(),
            context.config.framing_lexicons,
            per_document=True,
        )
        metrics = {f"category.{entry.category}": float(entry.count) for entry in result.totals}
        metrics["unclassified"] = float(result.unclassified)
        return StageResult(stage=self.name, data=result, metrics=metrics)


class CooccurrenceStage:
    """Builds the bigram co-occurrence graph."""

    name = "cooccurrence"

    def run(self, context: AnalysisContext, previous: tuple[StageResult, ...]) -> StageResult:  # noqa: D401
        del previous
        graph = build_cooccurrence_graph(
            context.ngram_streams(),
            context.stopwords,
            threshold=context.config.bigram_count_threshold,
        )
        metrics = {
            "nodes": float(len(graph.nodes)),
            "edges": float(len(graph.edges)),
            "candidate_pairs": float(graph.candidate_pairs),
        }
        notes = [f"edge:{edge.term_a}->{edge.term_b}:{edge.count}" for edge in islice(graph.edges, 3)]
        return StageResult(stage=self.name, data=graph, metrics=metrics, notes=tuple(notes))


def default_stages() -> tuple[AnalysisStage, ...]:
    return (TermCountStage(), TfIdfStage(), TopicStage(), FramingStage(), CooccurrenceStage())


def _require_index(previous: tuple[StageResult, ...], stage_name: str) -> TermFrequencyIndex:
    for result in previous:
        if result.stage == TermCountStage.name and isinstance(result.data, TermFrequencyIndex):
            return result.data
    raise PipelineStageError(f"Stage '{stage_name}' requires the '{TermCountStage.name}' stage to run first")


__all__ = [
    "CooccurrenceStage",
    "FramingStage",
    "TermCountStage",
    "TfIdfStage",
    "TopicStage",
    "default_stages",
]
