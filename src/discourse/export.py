"""Persistence of analysis reports as CSV tables and a JSON summary."""
from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from .pipeline import AnalysisReport

__all__ = ["report_tables", "summarize_report", "write_report"]

logger = logging.getLogger(__name__)

_SUMMARY_FILENAME = "summary.json"


def report_tables(report: AnalysisReport) -> dict[str, tuple[Sequence[str], list[dict[str, Any]]]]:
    """Flatten a report into ``{table_name: (columns, rows)}``."""

    tables: dict[str, tuple[Sequence[str], list[dict[str, Any]]]] = {}

    index = report.term_index
    if index is not None:
        tables["term_counts"] = (
            ("document_id", "term", "count"),
            [{"document_id": e.document_id, "term": e.term, "count": e.count} for e in index.counts],
        )

    ranking = report.tfidf
    if ranking is not None:
        columns = ("document_id", "term", "count", "tf", "idf", "tf_idf")
        tables["tfidf"] = (columns, [_score_row(score) for score in ranking.scores])
        top_rows: list[dict[str, Any]] = []
        for entries in ranking.top.values():
            for rank, score in enumerate(entries, start=1):
                top_rows.append({**_score_row(score), "rank": rank})
        tables["tfidf_top_terms"] = ((*columns, "rank"), top_rows)

    topics = report.topics
    if topics is not None:
        tables["topic_terms"] = (
            ("topic", "term", "beta"),
            [{"topic": e.topic, "term": e.term, "beta": e.beta} for e in topics.topic_terms],
        )
        top_topic_rows = [
            {"topic": topic, "rank": rank, "term": entry.term, "beta": entry.beta}
            for topic, entries in topics.top_terms(report.config.top_n_terms_per_topic).items()
            for rank, entry in enumerate(entries, start=1)
        ]
        tables["topic_top_terms"] = (("topic", "rank", "term", "beta"), top_topic_rows)
        tables["document_topics"] = (
            ("document_id", "topic", "gamma"),
            [{"document_id": e.document_id, "topic": e.topic, "gamma": e.gamma} for e in topics.document_topics],
        )

    framing = report.framing
    if framing is not None:
        signed = framing.divergent(report.config.framing_negative_categories)
        tables["framing"] = (
            ("category", "count", "signed_count"),
            [
                {"category": e.category, "count": e.count, "signed_count": signed[e.category]}
                for e in framing.totals
            ],
        )
        tables["framing_by_document"] = (
            ("document_id", "category", "count"),
            [{"document_id": e.document_id, "category": e.category, "count": e.count} for e in framing.by_document],
        )

    graph = report.cooccurrence
    if graph is not None:
        tables["cooccurrence_edges"] = (
            ("term_a", "term_b", "count"),
            [{"term_a": e.term_a, "term_b": e.term_b, "count": e.count} for e in graph.edges],
        )

    return tables


def summarize_report(report: AnalysisReport) -> dict[str, Any]:
    """Return a JSON-serialisable overview of a report."""

    summary: dict[str, Any] = {
        "documents": list(report.document_ids),
        "config": report.config.to_dict(),
        "metrics": report.collect_metrics(),
        "warnings": list(report.warnings),
        "notes": {stage.stage: list(stage.notes) for stage in report.stages},
    }
    if report.framing is not None:
        summary["framing"] = {
            "priority": list(report.framing.priority),
            "totals": report.framing.as_dict(),
            "divergent": report.framing.divergent(report.config.framing_negative_categories),
            "unclassified": report.framing.unclassified,
        }
    if report.cooccurrence is not None:
        summary["cooccurrence"] = report.cooccurrence.manifest()
    if report.tfidf is not None:
        summary["top_terms"] = {
            doc_id: [score.term for score in entries] for doc_id, entries in report.tfidf.top.items()
        }
    if report.topics is not None:
        summary["topics"] = {
            str(topic): [entry.term for entry in entries]
            for topic, entries in report.topics.top_terms(report.config.top_n_terms_per_topic).items()
        }
    return summary


def write_report(report: AnalysisReport, output_dir: Path) -> list[Path]:
    """Write every table plus ``summary.json`` into ``output_dir``."""

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, (columns, rows) in report_tables(report).items():
        path = output_dir / f"{name}.csv"
        _write_csv(path, columns, rows)
        written.append(path)

    summary_path = output_dir / _SUMMARY_FILENAME
    summary_path.write_text(
        json.dumps(summarize_report(report), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    written.append(summary_path)
    logger.info("Wrote %d report files to %s", len(written), output_dir)
    return written


def _score_row(score: Any) -> dict[str, Any]:
    return {
        "document_id": score.document_id,
        "term": score.term,
        "count": score.count,
        "tf": score.term_frequency,
        "idf": score.inverse_document_frequency,
        "tf_idf": score.tf_idf,
    }


def _write_csv(path: Path, columns: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(columns))
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
