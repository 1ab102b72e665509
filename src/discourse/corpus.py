"""Immutable corpus value and the bridge to the ingestion layer."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from src.parsing.config import ScanConfig
from src.parsing.registry import ParserRegistry
from src.parsing.runner import read_documents

from . import Document
from .errors import ConfigurationError, EmptyCorpusError

__all__ = ["Corpus", "load_corpus"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Corpus:
    """Ordered, read-only collection of documents analysed in one run."""

    documents: Sequence[Document]

    def __post_init__(self) -> None:
        documents = tuple(self.documents)
        seen: set[str] = set()
        duplicates: list[str] = []
        for document in documents:
            if document.document_id in seen:
                duplicates.append(document.document_id)
            seen.add(document.document_id)
        if duplicates:
            raise ConfigurationError(f"Duplicate document ids in corpus: {', '.join(sorted(set(duplicates)))}")
        object.__setattr__(self, "documents", documents)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "Corpus":
        """Build a corpus from ``(document_id, raw_text)`` pairs."""

        return cls(tuple(Document(document_id=doc_id, text=text) for doc_id, text in pairs))

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    @property
    def document_ids(self) -> tuple[str, ...]:
        return tuple(document.document_id for document in self.documents)

    def require_non_empty(self) -> "Corpus":
        if not self.documents:
            raise EmptyCorpusError("Corpus contains no documents")
        return self

    def limit(self, max_documents: int | None) -> "Corpus":
        """Return the first ``max_documents`` documents (all when ``None``)."""

        if max_documents is None or max_documents >= len(self.documents):
            return self
        return Corpus(self.documents[:max_documents])


def load_corpus(
    root: str | Path,
    *,
    scan: ScanConfig | None = None,
    limit: int | None = None,
    registry_override: ParserRegistry | None = None,
) -> Corpus:
    """Read every matching document under ``root`` into a corpus.

    Ingestion errors propagate: a corpus is never built from a partial read.
    """

    documents = tuple(
        Document(document_id=parsed.document_id, text=parsed.text, metadata=parsed.metadata)
        for parsed in read_documents(
            root,
            scan=scan,
            limit=limit,
            registry_override=registry_override,
        )
    )
    logger.info("Loaded %d documents from %s", len(documents), root)
    return Corpus(documents)
