"""Corpus scanning: turn a directory of documents into raw text records."""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Iterator

from . import pdf as _pdf  # noqa: F401  registers the PDF parser
from . import text as _text  # noqa: F401  registers the text parser
from .base import ParsedDocument, ParserError, ParseTarget
from .config import ScanConfig
from .registry import ParserRegistry, registry

logger = logging.getLogger(__name__)


def collect_candidates(root: str | Path, scan: ScanConfig | None = None) -> list[Path]:
    """Return matching files under ``root`` in sorted order."""

    scan = scan or ScanConfig()
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Corpus root '{root_path}' does not exist")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Corpus root '{root_path}' is not a directory")

    iterator: Iterable[Path] = root_path.rglob("*") if scan.recursive else root_path.iterdir()
    candidates: list[Path] = []
    for path in iterator:
        if not path.is_file() or path.suffix.lower() not in scan.suffixes:
            continue
        rel_posix = path.relative_to(root_path).as_posix()
        if scan.include and not any(fnmatch(rel_posix, pattern) for pattern in scan.include):
            continue
        if scan.exclude and any(fnmatch(rel_posix, pattern) for pattern in scan.exclude):
            continue
        candidates.append(path)

    candidates.sort()
    return candidates


def parse_document(
    path: Path,
    *,
    document_id: str | None = None,
    registry_override: ParserRegistry | None = None,
) -> ParsedDocument:
    active_registry = registry_override or registry
    target = ParseTarget(source=str(path), document_id=document_id)
    parser = active_registry.require_parser(target)
    document = parser.extract(target)
    for warning in document.warnings:
        logger.debug("%s: %s", document.document_id, warning)
    return document


def read_documents(
    root: str | Path,
    *,
    scan: ScanConfig | None = None,
    limit: int | None = None,
    registry_override: ParserRegistry | None = None,
) -> Iterator[ParsedDocument]:
    """Yield one parsed document per matching file under ``root``.

    Document ids are POSIX paths relative to ``root``. A file that cannot be
    parsed raises :class:`ParserError` and stops the scan.
    """

    root_path = Path(root).expanduser().resolve()
    candidates = collect_candidates(root_path, scan)
    if limit is not None and limit >= 0:
        candidates = candidates[:limit]

    for path in candidates:
        document_id = path.relative_to(root_path).as_posix()
        try:
            document = parse_document(path, document_id=document_id, registry_override=registry_override)
        except ParserError:
            logger.error("Failed to ingest %s", path)
            raise
        if document.is_empty():
            logger.warning("Document '%s' contains no extractable text", document_id)
        yield document


__all__ = ["collect_candidates", "parse_document", "read_documents"]
