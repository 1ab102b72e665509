"""Exception hierarchy for the discourse analytics pipeline."""
from __future__ import annotations

__all__ = [
    "AnalysisError",
    "EmptyCorpusError",
    "InsufficientDataError",
    "ConfigurationError",
]


class AnalysisError(RuntimeError):
    """Base class for failures raised by analysis stages."""


class EmptyCorpusError(AnalysisError):
    """Raised when a stage receives a corpus without documents."""


class InsufficientDataError(AnalysisError):
    """Raised when the corpus is too small for the requested topic model."""


class ConfigurationError(AnalysisError, ValueError):
    """Raised when analysis settings are invalid or contradictory."""
