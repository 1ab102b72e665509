"""Parser registry: picks the reader for each corpus file by suffix."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Iterator, Sequence

from . import utils
from .base import DocumentParser, ParseTarget, ParserError

_sequence = count()


@dataclass(frozen=True, slots=True)
class _Registration:
    parser: DocumentParser
    suffixes: tuple[str, ...]
    priority: int
    order: int

    @property
    def sort_key(self) -> tuple[int, int]:
        return (-self.priority, self.order)

    def accepts(self, suffix: str) -> bool:
        # Parsers registered without suffixes act as catch-all readers.
        return not self.suffixes or suffix in self.suffixes


class ParserRegistry:
    """Known document readers, consulted highest priority first."""

    def __init__(self) -> None:
        self._registrations: dict[str, _Registration] = {}

    def register_parser(
        self,
        parser: DocumentParser,
        *,
        suffixes: Sequence[str] | None = None,
        priority: int = 0,
        replace: bool = False,
    ) -> None:
        name = parser.name
        if not name:
            raise ValueError("Parser must define a non-empty name")
        if name in self._registrations and not replace:
            raise ValueError(f"Parser '{name}' already registered")
        self._registrations[name] = _Registration(
            parser=parser,
            suffixes=utils.normalize_suffixes(suffixes),
            priority=priority,
            order=next(_sequence),
        )

    def _ordered(self) -> list[_Registration]:
        return sorted(self._registrations.values(), key=lambda item: item.sort_key)

    def get_registered_names(self) -> list[str]:
        return [item.parser.name for item in self._ordered()]

    def supported_suffixes(self) -> tuple[str, ...]:
        """Suffixes claimed by at least one parser, in priority order."""

        claimed: list[str] = []
        for item in self._ordered():
            claimed.extend(item.suffixes)
        return tuple(dict.fromkeys(claimed))

    def has_catch_all(self) -> bool:
        return any(not item.suffixes for item in self._registrations.values())

    def find_parser(self, target: ParseTarget) -> DocumentParser | None:
        suffix = target.to_path().suffix.lower()
        for item in self._ordered():
            if item.accepts(suffix) and item.parser.detect(target):
                return item.parser
        return None

    def require_parser(self, target: ParseTarget) -> DocumentParser:
        parser = self.find_parser(target)
        if parser is None:
            raise ParserError(f"No parser can read '{target.source}'")
        return parser

    def __iter__(self) -> Iterator[DocumentParser]:
        for item in self._ordered():
            yield item.parser


registry = ParserRegistry()
"""Process-wide registry populated by the bundled PDF and text parsers."""
