"""Tests for report tables and file export."""
from __future__ import annotations

import csv
import json

from src.discourse.config import AnalysisConfig
from src.discourse.corpus import Corpus
from src.discourse.export import report_tables, summarize_report, write_report
from src.discourse.pipeline import AnalysisPipeline, run_analysis
from src.discourse.stages import FramingStage, TermCountStage

_EXPECTED_FILES = {
    "term_counts.csv",
    "tfidf.csv",
    "tfidf_top_terms.csv",
    "topic_terms.csv",
    "topic_top_terms.csv",
    "document_topics.csv",
    "framing.csv",
    "framing_by_document.csv",
    "cooccurrence_edges.csv",
    "summary.json",
}


def _report():
    corpus = Corpus.from_pairs(
        [
            ("a.txt", "apoio apoio fiscaliz governo federal governo federal"),
            ("b.txt", "apoio capacita capacita governo federal"),
        ]
    )
    config = AnalysisConfig(
        language_stopwords=None,
        domain_stopwords=(),
        topic_count=2,
        bigram_count_threshold=2,
    )
    return run_analysis(corpus, config)


def test_write_report_creates_every_table(tmp_path) -> None:
    written = write_report(_report(), tmp_path / "out")

    assert {path.name for path in written} == _EXPECTED_FILES
    assert all(path.exists() for path in written)

    with (tmp_path / "out" / "framing.csv").open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert rows == [
        {"category": "control", "count": "1", "signed_count": "-1"},
        {"category": "support", "count": "5", "signed_count": "5"},
    ]

    with (tmp_path / "out" / "cooccurrence_edges.csv").open(encoding="utf-8", newline="") as handle:
        edges = list(csv.DictReader(handle))
    assert edges == [{"term_a": "governo", "term_b": "federal", "count": "3"}]


def test_summary_is_json_serialisable(tmp_path) -> None:
    write_report(_report(), tmp_path)

    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))

    assert summary["documents"] == ["a.txt", "b.txt"]
    assert summary["framing"]["totals"] == {"control": 1, "support": 5}
    assert summary["framing"]["divergent"]["control"] == -1
    assert summary["cooccurrence"]["nodes"] == ["federal", "governo"]
    assert summary["config"]["topic_count"] == 2
    assert set(summary["topics"]) == {"0", "1"}


def test_top_tfidf_table_carries_rank() -> None:
    columns, rows = report_tables(_report())["tfidf_top_terms"]

    assert columns[-1] == "rank"
    first_a = next(row for row in rows if row["document_id"] == "a.txt")
    assert first_a["rank"] == 1
    assert first_a["term"] == "fiscaliz"


def test_partial_reports_only_export_available_tables(tmp_path) -> None:
    corpus = Corpus.from_pairs([("a.txt", "apoio fiscaliz")])
    config = AnalysisConfig(language_stopwords=None, domain_stopwords=())
    report = AnalysisPipeline([TermCountStage(), FramingStage()]).run(corpus, config)

    written = write_report(report, tmp_path)

    assert {path.name for path in written} == {
        "term_counts.csv",
        "framing.csv",
        "framing_by_document.csv",
        "summary.json",
    }
    assert "topics" not in summarize_report(report)
