"""PDF text extraction using the pypdf library."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from . import utils
from .base import ParsedDocument, ParseTarget, ParserError
from .registry import registry

logger = logging.getLogger(__name__)

_INTRALINE_WHITESPACE_PATTERN = re.compile(r"[^\S\n]+")


@dataclass(slots=True)
class PdfParser:
    """Concrete :class:`DocumentParser` for PDF reports and decrees."""

    name: str = "pdf"

    def detect(self, target: ParseTarget) -> bool:
        path = target.to_path()
        if not path.is_file():
            return False
        if path.suffix.lower() == ".pdf":
            return True
        media_type = target.media_type or utils.guess_media_type(path)
        return bool(media_type and media_type.lower() == "application/pdf")

    def extract(self, target: ParseTarget) -> ParsedDocument:
        path = _require_local_file(target)
        document = ParsedDocument(target=target, checksum=utils.sha256_path(path), parser_name=self.name)

        try:
            reader = PdfReader(str(path))
        except (PdfReadError, ValueError, OSError) as exc:
            raise ParserError(f"Failed to read PDF '{path}': {exc}") from exc

        if reader.is_encrypted and not _try_decrypt(reader):
            raise ParserError(f"PDF '{path}' is encrypted and could not be decrypted")

        document.metadata.update(
            {
                "source_path": str(path),
                "page_count": len(reader.pages),
                "file_size": path.stat().st_size,
            }
        )
        for index, page in enumerate(reader.pages, start=1):
            try:
                text = _extract_page_text(page)
            except PdfReadError as exc:
                raise ParserError(f"Failed to extract page {index} of '{path}': {exc}") from exc
            if text:
                document.add_segment(text)
            else:
                document.warnings.append(f"Page {index} yielded no extractable text")
                logger.debug("Page %d of %s yielded no extractable text", index, path)
        return document


def _require_local_file(target: ParseTarget) -> Path:
    path = target.to_path()
    if not path.exists():
        raise ParserError(f"PDF file '{path}' does not exist")
    if not path.is_file():
        raise ParserError(f"PDF target '{path}' is not a file")
    return path


def _try_decrypt(reader: PdfReader) -> bool:
    try:
        result = reader.decrypt("")
    except (PdfReadError, ValueError):  # pragma: no cover - depends on encrypted fixture availability
        return False
    return bool(result)


def _extract_page_text(page: Any) -> str:
    try:
        text = page.extract_text(extraction_mode="layout", layout_mode_space_vertically=False)
    except TypeError:
        text = page.extract_text()
    if not text:
        return ""
    return _collapse_whitespace(text.replace("\u00a0", " "))


def _collapse_whitespace(text: str) -> str:
    """Collapse layout padding while keeping line breaks."""

    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    collapsed = (_INTRALINE_WHITESPACE_PATTERN.sub(" ", line).strip() for line in lines)
    return "\n".join(line for line in collapsed if line)


pdf_parser = PdfParser()
registry.register_parser(pdf_parser, suffixes=(".pdf",), priority=10, replace=True)

__all__ = ["PdfParser", "pdf_parser"]
