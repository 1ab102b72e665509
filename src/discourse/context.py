"""Execution context and stage contracts for analysis pipelines."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence, Tuple, runtime_checkable

from .config import AnalysisConfig
from .corpus import Corpus
from .errors import AnalysisError
from .stopwords import build_stopword_set
from .tokenize import NGramStream, UnigramStream, ngrams, unigrams


@dataclass(frozen=True, slots=True)
class AnalysisContext:
    """Immutable inputs shared by every stage of one run."""

    corpus: Corpus
    config: AnalysisConfig
    stopwords: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(cls, corpus: Corpus, config: AnalysisConfig) -> "AnalysisContext":
        """Apply the document cap and resolve the stopword set."""

        bounded = corpus.limit(config.max_documents)
        stopwords = build_stopword_set(
            config.language_stopwords,
            config.domain_stopwords,
            protected=config.lexicon_entries,
        )
        return cls(corpus=bounded, config=config, stopwords=stopwords)

    def unigram_streams(self) -> tuple[UnigramStream, ...]:
        return tuple(
            unigrams(document, self.stopwords, min_length=self.config.min_token_length)
            for document in self.corpus
        )

    def ngram_streams(self) -> tuple[NGramStream, ...]:
        return tuple(ngrams(document, self.config.ngram_size) for document in self.corpus)


@dataclass(frozen=True, slots=True)
class StageResult:
    """Outcome produced by a single pipeline stage."""

    stage: str
    data: Any = None
    metrics: Mapping[str, float] = field(default_factory=dict)
    notes: Sequence[str] = field(default_factory=tuple)
    warnings: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics", dict(self.metrics))
        object.__setattr__(self, "notes", tuple(self.notes))
        object.__setattr__(self, "warnings", tuple(self.warnings))


class PipelineStageError(AnalysisError):
    """Raised when a stage cannot find the inputs it depends on."""


@runtime_checkable
class AnalysisStage(Protocol):
    """Protocol for stages that derive one artifact from the context."""

    name: str

    def run(
        self,
        context: AnalysisContext,
        previous: Tuple[StageResult, ...],
    ) -> StageResult:
        """Execute the stage and return its result."""
        raise NotImplementedError


__all__ = [
    "AnalysisContext",
    "AnalysisStage",
    "PipelineStageError",
    "StageResult",
]
