"""Core ingestion interfaces and data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Protocol


class ParserError(RuntimeError):
    """Raised when a parser fails to extract text from a document."""


@dataclass(frozen=True)
class ParseTarget:
    """Describes a local document that a parser should read."""

    source: str
    document_id: str | None = None
    media_type: str | None = None

    def to_path(self) -> Path:
        return Path(self.source)

    @property
    def identifier(self) -> str:
        """Stable document id, defaulting to the file name."""
        return self.document_id or self.to_path().name


@dataclass(slots=True)
class ParsedDocument:
    """Raw text pulled out of a single source document.

    Multi-page sources are stored one segment per page and flattened with
    :attr:`text`.
    """

    target: ParseTarget
    checksum: str
    parser_name: str
    segments: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def document_id(self) -> str:
        return self.target.identifier

    @property
    def text(self) -> str:
        return " ".join(self.segments)

    def add_segment(self, segment: str) -> None:
        self.segments.append(segment)

    def extend_segments(self, items: Iterable[str]) -> None:
        self.segments.extend(items)

    def is_empty(self) -> bool:
        return not any(segment.strip() for segment in self.segments)


class DocumentParser(Protocol):
    """Contract shared by all concrete parsers."""

    @property
    def name(self) -> str:
        ...

    def detect(self, target: ParseTarget) -> bool:
        ...

    def extract(self, target: ParseTarget) -> ParsedDocument:
        ...
