"""Tests for the PDF parser implementation."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.parsing import registry
from src.parsing.base import ParseTarget, ParserError
from src.parsing.pdf import PdfParser, _collapse_whitespace, pdf_parser


def _write_pdf(path: Path, *pages: str) -> None:
    path.write_bytes(_build_pdf_bytes(pages))


def _build_pdf_bytes(pages: tuple[str, ...]) -> bytes:
    page_count = len(pages)
    font_id = 3 + 2 * page_count
    page_ids = [3 + 2 * index for index in range(page_count)]
    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)

    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode("ascii"),
    ]
    for page_id, text in zip(page_ids, pages):
        escaped = text.replace("\\", "\\\\").replace("(", r"\(").replace(")", r"\)")
        stream = f"BT\n/F1 24 Tf\n72 720 Td\n({escaped}) Tj\nET\n".encode("latin-1")
        objects.append(
            (
                f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Contents {page_id + 1} 0 R /Resources << /Font << /F1 {font_id} 0 R >> >> >>"
            ).encode("ascii")
        )
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode("ascii") + stream + b"endstream"
        )
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    content = bytearray(b"%PDF-1.4\n")
    offsets = [0]
    for number, body in enumerate(objects, start=1):
        offsets.append(len(content))
        content.extend(f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n")

    xref_pos = len(content)
    content.extend(f"xref\n0 {len(offsets)}\n".encode("ascii"))
    content.extend(b"0000000000 65535 f \n")
    for offset in offsets[1:]:
        content.extend(f"{offset:010} 00000 n \n".encode("ascii"))
    content.extend(
        f"trailer\n<< /Root 1 0 R /Size {len(offsets)} >>\n".encode("ascii")
        + f"startxref\n{xref_pos}\n%%EOF\n".encode("ascii")
    )
    return bytes(content)


def test_pdf_parser_extracts_text_and_metadata(tmp_path) -> None:
    pdf_path = tmp_path / "decreto.pdf"
    _write_pdf(pdf_path, "Apoio ao extrativismo")

    parser = PdfParser()
    target = ParseTarget(source=str(pdf_path))

    assert parser.detect(target)

    document = parser.extract(target)

    assert document.segments
    assert "Apoio ao extrativismo" in document.text
    assert document.document_id == "decreto.pdf"
    assert document.metadata["page_count"] == 1
    assert document.metadata["file_size"] == pdf_path.stat().st_size


def test_pdf_pages_are_joined_with_a_single_space(tmp_path) -> None:
    pdf_path = tmp_path / "relatorio.pdf"
    _write_pdf(pdf_path, "primeira pagina", "segunda pagina")

    document = PdfParser().extract(ParseTarget(source=str(pdf_path), document_id="relatorio.pdf"))

    assert document.metadata["page_count"] == 2
    assert len(document.segments) == 2
    assert document.text == f"{document.segments[0]} {document.segments[1]}"
    assert "primeira pagina" in document.text
    assert "segunda pagina" in document.text


def test_pdf_parser_handles_missing_file(tmp_path) -> None:
    parser = PdfParser()
    target = ParseTarget(source=str(tmp_path / "missing.pdf"))

    with pytest.raises(ParserError):
        parser.extract(target)


def test_pdf_parser_rejects_corrupt_file(tmp_path) -> None:
    pdf_path = tmp_path / "broken.pdf"
    pdf_path.write_bytes(b"not a pdf at all")

    with pytest.raises(ParserError, match="broken.pdf"):
        PdfParser().extract(ParseTarget(source=str(pdf_path)))


def test_pdf_parser_registration(tmp_path) -> None:
    pdf_path = tmp_path / "with-registry.pdf"
    _write_pdf(pdf_path, "Registry Lookup")
    target = ParseTarget(source=str(pdf_path))

    parser = registry.require_parser(target)

    assert parser.name == pdf_parser.name
    assert parser.extract(target).segments


def test_pdf_parser_warns_when_page_is_empty(tmp_path) -> None:
    pdf_path = tmp_path / "empty.pdf"
    _write_pdf(pdf_path, "   ")

    document = PdfParser().extract(ParseTarget(source=str(pdf_path)))

    assert document.is_empty()
    assert document.text == ""
    assert any("no extractable text" in warning for warning in document.warnings)


def test_collapse_whitespace_keeps_line_breaks() -> None:
    messy = "  Line    one   with   gaps\r\n\n   Second\tline \n Third   line   "

    assert _collapse_whitespace(messy) == "Line one with gaps\nSecond line\nThird line"
