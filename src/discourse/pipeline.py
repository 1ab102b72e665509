"""Pipeline orchestration for discourse analysis runs."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Sequence

from .config import AnalysisConfig
from .context import AnalysisContext, AnalysisStage, StageResult
from .cooccurrence import CooccurrenceGraph
from .corpus import Corpus
from .counts import TermFrequencyIndex
from .errors import AnalysisError
from .framing import FramingResult
from .stages import default_stages
from .tfidf import TfIdfRanking
from .topics import TopicModelResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Every artifact produced by one pipeline run."""

    document_ids: Sequence[str]
    config: AnalysisConfig
    stages: Sequence[StageResult] = field(default_factory=tuple)
    warnings: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "document_ids", tuple(self.document_ids))
        object.__setattr__(self, "stages", tuple(self.stages))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    def stage(self, name: str) -> StageResult:
        for result in self.stages:
            if result.stage == name:
                return result
        raise KeyError(f"Stage '{name}' did not run")

    def _data(self, name: str) -> Any:
        try:
            return self.stage(name).data
        except KeyError:
            return None

    @property
    def term_index(self) -> TermFrequencyIndex | None:
        return self._data("term_counts")

    @property
    def tfidf(self) -> TfIdfRanking | None:
        return self._data("tfidf")

    @property
    def topics(self) -> TopicModelResult | None:
        return self._data("topics")

    @property
    def framing(self) -> FramingResult | None:
        return self._data("framing")

    @property
    def cooccurrence(self) -> CooccurrenceGraph | None:
        return self._data("cooccurrence")

    def collect_metrics(self) -> dict[str, float]:
        """Return a flattened mapping of stage metrics."""

        aggregated: dict[str, float] = {}
        for stage in self.stages:
            for key, value in stage.metrics.items():
                aggregated[f"{stage.stage}.{key}"] = value
        return aggregated


class AnalysisPipeline:
    """Runs the analysis stages over one immutable corpus."""

    def __init__(self, stages: Sequence[AnalysisStage] | None = None, *, name: str = "discourse-pipeline") -> None:
        selected = tuple(stages) if stages is not None else default_stages()
        if not selected:
            raise ValueError("AnalysisPipeline requires at least one stage")
        self._stages: tuple[AnalysisStage, ...] = selected
        self.name = name

    @property
    def stages(self) -> tuple[AnalysisStage, ...]:
        """Registered pipeline stages in execution order."""

        return self._stages

    def run(self, corpus: Corpus, config: AnalysisConfig | None = None) -> AnalysisReport:
        """Analyse ``corpus`` and return the report.

        Stage failures are logged and re-raised; no partial report is returned.
        """

        corpus.require_non_empty()
        context = AnalysisContext.build(corpus, config or AnalysisConfig())
        return self.run_with_context(context)

    def run_with_context(self, context: AnalysisContext) -> AnalysisReport:
        context.corpus.require_non_empty()
        logger.info(
            "Running %s over %d documents (%d stopwords)",
            self.name,
            len(context.corpus),
            len(context.stopwords),
        )

        results: list[StageResult] = []
        warnings: list[str] = []
        for stage in self._stages:
            started = perf_counter()
            try:
                stage_result = stage.run(context, tuple(results))
            except AnalysisError as exc:
                logger.warning("Analysis stage '%s' failed: %s", stage.name, exc)
                raise
            duration = perf_counter() - started
            stage_result = self._attach_duration(stage_result, duration)
            logger.debug("Stage '%s' finished in %.3fs", stage.name, duration)

            results.append(stage_result)
            warnings.extend(stage_result.warnings)

        return AnalysisReport(
            document_ids=context.corpus.document_ids,
            config=context.config,
            stages=tuple(results),
            warnings=tuple(warnings),
        )

    @staticmethod
    def _attach_duration(result: StageResult, duration: float) -> StageResult:
        metrics = dict(result.metrics)
        metrics.setdefault("duration_seconds", round(duration, 6))
        return StageResult(result.stage, result.data, metrics, result.notes, result.warnings)


def run_analysis(corpus: Corpus, config: AnalysisConfig | None = None) -> AnalysisReport:
    """Run the default stages over ``corpus``."""

    return AnalysisPipeline().run(corpus, config)


__all__ = ["AnalysisPipeline", "AnalysisReport", "run_analysis"]
