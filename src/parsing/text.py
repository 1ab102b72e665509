"""Plain-text document reader."""

from __future__ import annotations

from dataclasses import dataclass

from . import utils
from .base import ParsedDocument, ParseTarget, ParserError
from .registry import registry

_TEXT_SUFFIXES = (".txt", ".md")


@dataclass(slots=True)
class TextParser:
    """Reads UTF-8 text files, e.g. decrees already exported from the gazette."""

    name: str = "text"
    encoding: str = "utf-8"

    def detect(self, target: ParseTarget) -> bool:
        path = target.to_path()
        return path.is_file() and path.suffix.lower() in _TEXT_SUFFIXES

    def extract(self, target: ParseTarget) -> ParsedDocument:
        path = target.to_path()
        try:
            content = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ParserError(f"Failed to read text file '{path}': {exc}") from exc

        document = ParsedDocument(target=target, checksum=utils.sha256_path(path), parser_name=self.name)
        document.metadata.update({"source_path": str(path), "file_size": path.stat().st_size})
        if content.strip():
            document.add_segment(content)
        return document


text_parser = TextParser()
registry.register_parser(text_parser, suffixes=_TEXT_SUFFIXES, priority=5, replace=True)

__all__ = ["TextParser", "text_parser"]
