"""Document ingestion: raw text extraction for analysis corpora."""

from .base import ParsedDocument, ParseTarget, DocumentParser, ParserError
from .config import ScanConfig, load_scan_config
from .pdf import PdfParser, pdf_parser
from .text import TextParser, text_parser
from .registry import ParserRegistry, registry
from .runner import collect_candidates, parse_document, read_documents

__all__ = [
    "ParsedDocument",
    "ParseTarget",
    "DocumentParser",
    "ParserError",
    "ParserRegistry",
    "registry",
    "ScanConfig",
    "load_scan_config",
    "collect_candidates",
    "parse_document",
    "read_documents",
    "PdfParser",
    "pdf_parser",
    "TextParser",
    "text_parser",
]
