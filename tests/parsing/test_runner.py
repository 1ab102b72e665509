"""Tests for corpus scanning and scan configuration."""

from __future__ import annotations

import textwrap

import pytest

from src.parsing.base import ParserError
from src.parsing.config import DEFAULT_SCAN_SUFFIXES, ScanConfig, load_scan_config
from src.parsing.runner import collect_candidates, read_documents


def _populate(root) -> None:
    (root / "b.txt").write_text("segundo documento", encoding="utf-8")
    (root / "a.txt").write_text("primeiro documento", encoding="utf-8")
    (root / "notes.csv").write_text("ignored", encoding="utf-8")
    nested = root / "anexos"
    nested.mkdir()
    (nested / "c.txt").write_text("anexo", encoding="utf-8")


def test_collect_candidates_is_sorted_and_flat_by_default(tmp_path) -> None:
    _populate(tmp_path)

    candidates = collect_candidates(tmp_path)

    assert [path.name for path in candidates] == ["a.txt", "b.txt"]


def test_recursive_scan_uses_relative_document_ids(tmp_path) -> None:
    _populate(tmp_path)

    documents = list(read_documents(tmp_path, scan=ScanConfig(recursive=True)))

    assert [doc.document_id for doc in documents] == ["a.txt", "anexos/c.txt", "b.txt"]
    assert documents[0].text == "primeiro documento"


def test_include_exclude_and_limit(tmp_path) -> None:
    _populate(tmp_path)
    scan = ScanConfig(recursive=True, exclude=("anexos/*",))

    documents = list(read_documents(tmp_path, scan=scan, limit=1))

    assert [doc.document_id for doc in documents] == ["a.txt"]

    included = collect_candidates(tmp_path, ScanConfig(recursive=True, include=("anexos/*",)))
    assert [path.name for path in included] == ["c.txt"]


def test_missing_root_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        list(read_documents(tmp_path / "missing"))


def test_unreadable_document_aborts_scan(tmp_path) -> None:
    (tmp_path / "a.txt").write_text("ok", encoding="utf-8")
    (tmp_path / "b.pdf").write_bytes(b"corrupted")

    with pytest.raises(ParserError):
        list(read_documents(tmp_path))


def test_load_scan_config_reads_scan_section(tmp_path) -> None:
    config_path = tmp_path / "analysis.yaml"
    config_path.write_text(
        textwrap.dedent(
            """
            analysis:
              topic_count: 2
            scan:
              suffixes: [txt, .MD]
              recursive: true
              exclude: ["drafts/*"]
            """
        ),
        encoding="utf-8",
    )

    scan = load_scan_config(config_path)

    assert scan.suffixes == (".txt", ".md")
    assert scan.recursive is True
    assert scan.exclude == ("drafts/*",)


def test_load_scan_config_defaults_without_section(tmp_path) -> None:
    config_path = tmp_path / "analysis.yaml"
    config_path.write_text("analysis: {}\n", encoding="utf-8")

    scan = load_scan_config(config_path)

    assert scan.suffixes == DEFAULT_SCAN_SUFFIXES
    assert scan.recursive is False


def test_load_scan_config_missing_explicit_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_scan_config(tmp_path / "missing.yaml")
