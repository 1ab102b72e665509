"""Analysis CLI commands for running the discourse pipeline over a corpus."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from src.discourse import Document
from src.discourse.config import load_analysis_config
from src.discourse.corpus import load_corpus
from src.discourse.errors import AnalysisError, ConfigurationError
from src.discourse.export import summarize_report, write_report
from src.discourse.pipeline import run_analysis
from src.discourse.stopwords import build_stopword_set
from src.discourse.tokenize import tokenize
from src.parsing.base import ParserError
from src.parsing.config import ScanConfig, load_scan_config
from src.parsing.registry import registry as parser_registry
from src.parsing.runner import parse_document
from src.parsing import utils as parsing_utils

__all__ = ["register_commands", "build_parser", "analyze_cli", "tokens_cli"]

OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def register_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add analysis-related commands to the main CLI parser."""
    analyze_parser = subparsers.add_parser(
        "analyze",
        description="Run term, topic, framing and co-occurrence analysis over a document folder.",
        help="Analyze a corpus of official documents.",
    )
    _configure_analyze_parser(analyze_parser)

    tokens_parser = subparsers.add_parser(
        "tokens",
        description="Print the normalized token stream of one document.",
        help="Show the tokens extracted from a single document.",
    )
    _configure_tokens_parser(tokens_parser)


def build_parser(*, prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Discourse analytics over public-policy documents.",
        prog=prog,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    register_commands(subparsers)
    return parser


def _configure_analyze_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Directory containing the documents to analyze.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to an analysis YAML config (default: config/analysis.yaml when present).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for CSV tables and summary.json. Nothing is written when omitted.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of documents to analyze.",
    )
    parser.add_argument("--topics", type=int, default=None, help="Number of LDA topics (overrides configuration).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the topic model.")
    parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Keep bigrams occurring strictly more often than this count.",
    )
    parser.add_argument(
        "--recursive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Recursively scan subdirectories (default controlled by configuration).",
    )
    parser.add_argument(
        "--suffix",
        action="append",
        default=[],
        help="File suffix to include (e.g. .pdf). Repeat to supply multiple values.",
    )
    parser.add_argument(
        "--include",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern relative to the input directory to include.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern relative to the input directory to exclude.",
    )
    parser.add_argument(
        "--output-format",
        choices=(OUTPUT_TEXT, OUTPUT_JSON),
        default=OUTPUT_TEXT,
        help="Format of the report printed to stdout.",
    )
    _add_log_level(parser)
    parser.set_defaults(func=analyze_cli)


def _configure_tokens_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", type=Path, required=True, help="Document to tokenize.")
    parser.add_argument(
        "--mode",
        choices=("unigram", "bigram"),
        default="unigram",
        help="Filtered unigrams or raw n-grams (size from configuration).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to an analysis YAML config (default: config/analysis.yaml when present).",
    )
    _add_log_level(parser)
    parser.set_defaults(func=tokens_cli)


def _add_log_level(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        type=str.upper,
        help="Logging verbosity written to stderr.",
    )


def setup_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=_LOG_FORMAT, force=True)


def analyze_cli(args: argparse.Namespace) -> int:
    setup_logging(args.log_level)

    try:
        config = load_analysis_config(args.config).with_overrides(
            topic_count=args.topics,
            model_seed=args.seed,
            bigram_count_threshold=args.threshold,
            max_documents=args.limit,
        )
        scan = _resolve_scan_config(args)
    except (ConfigurationError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger.info("Analyzing %s with %d topics (seed %d)", args.input, config.topic_count, config.model_seed)
    try:
        corpus = load_corpus(args.input, scan=scan, limit=config.max_documents)
        report = run_analysis(corpus, config)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except (AnalysisError, ParserError, FileNotFoundError, NotADirectoryError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    summary = summarize_report(report)
    if args.output is not None:
        written = write_report(report, args.output.expanduser())
        summary["outputs"] = [str(path) for path in written]

    if args.output_format == OUTPUT_JSON:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    else:
        _emit_text_summary(summary)
    return EXIT_OK


def tokens_cli(args: argparse.Namespace) -> int:
    setup_logging(args.log_level)

    try:
        config = load_analysis_config(args.config)
    except (ConfigurationError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    path = args.input.expanduser()
    if not path.is_file():
        print(f"error: Document '{path}' does not exist", file=sys.stderr)
        return EXIT_FAILURE

    try:
        parsed = parse_document(path, document_id=path.name)
        stopwords = build_stopword_set(
            config.language_stopwords,
            config.domain_stopwords,
            protected=config.lexicon_entries,
        )
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except ParserError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    document = Document(document_id=parsed.document_id, text=parsed.text)
    stream = tokenize(
        document,
        stopwords,
        mode=args.mode,
        n=config.ngram_size,
        min_length=config.min_token_length,
    )
    for item in stream:
        print(item.term if args.mode == "unigram" else item.text)
    return EXIT_OK


def _resolve_scan_config(args: argparse.Namespace) -> ScanConfig:
    base = load_scan_config(args.config)
    suffixes = parsing_utils.normalize_suffixes(args.suffix, default=base.suffixes)
    unsupported = [suffix for suffix in suffixes if suffix not in parser_registry.supported_suffixes()]
    if unsupported and not parser_registry.has_catch_all():
        raise ConfigurationError(f"No parser available for suffixes: {', '.join(unsupported)}")
    recursive = base.recursive if args.recursive is None else bool(args.recursive)
    return ScanConfig(
        suffixes=suffixes,
        recursive=recursive,
        include=_merge_patterns(base.include, args.include),
        exclude=_merge_patterns(base.exclude, args.exclude),
    )


def _merge_patterns(config_values: Iterable[str], cli_values: Iterable[str] | None) -> tuple[str, ...]:
    merged = [str(value).strip() for value in (*config_values, *(cli_values or ()))]
    return tuple(dict.fromkeys(value for value in merged if value))


def _emit_text_summary(summary: dict[str, Any]) -> None:
    documents = summary["documents"]
    print(f"Analyzed {len(documents)} document(s)")

    top_terms = summary.get("top_terms") or {}
    if top_terms:
        print("\nTop TF-IDF terms:")
        for doc_id, terms in top_terms.items():
            print(f"  {doc_id}: {', '.join(terms) or '-'}")

    topics = summary.get("topics") or {}
    if topics:
        print("\nTopics:")
        for topic, terms in topics.items():
            print(f"  topic {topic}: {', '.join(terms)}")

    framing = summary.get("framing")
    if framing:
        print("\nFraming:")
        for category in framing["priority"]:
            print(f"  {category}: {framing['totals'][category]} (signed {framing['divergent'][category]})")
        print(f"  unclassified tokens: {framing['unclassified']}")

    graph = summary.get("cooccurrence")
    if graph:
        print(
            f"\nCo-occurrence graph: {len(graph['nodes'])} nodes, {len(graph['edges'])} edges "
            f"(threshold > {graph['threshold']})"
        )

    for warning in summary.get("warnings", []):
        print(f"warning: {warning}")
    for path in summary.get("outputs", []):
        print(f"wrote {path}")
