"""Configuration helpers for discourse analysis runs."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from .errors import ConfigurationError
from .framing import normalize_lexicons

_DEFAULT_CONFIG_PATH = Path("config/analysis.yaml")

# Upper bound accepted by numpy RandomState seeding.
MAX_MODEL_SEED = 2**32 - 1

DEFAULT_LANGUAGE = "pt"

# Institutional noise and layout vocabulary found in Bolsa Verde decrees and reports.
DEFAULT_DOMAIN_STOPWORDS: tuple[str, ...] = (
    "programa",
    "bolsa",
    "verde",
    "pbv",
    "floresta",
    "brasil",
    "federal",
    "nacional",
    "governo",
    "ministério",
    "art",
    "nº",
    "decreto",
    "lei",
    "inc",
    "caput",
    "parágrafo",
    "http",
    "https",
    "www",
    "gov",
    "br",
    "pdf",
    "figura",
    "tabela",
    "quadro",
    "gráfico",
    "fonte",
    "elaboração",
    "própria",
    "ser",
    "estar",
    "ter",
    "haver",
    "fazer",
    "ir",
    "poder",
    "dever",
)

DEFAULT_FRAMING_LEXICONS: dict[str, tuple[str, ...]] = {
    "control": (
        "fiscaliz",
        "infracao",
        "crime",
        "monitora",
        "exclusao",
        "cancel",
        "autuac",
        "ibama",
        "policia",
    ),
    "support": (
        "apoio",
        "assisten",
        "fomento",
        "educa",
        "capacita",
        "garantia",
        "direito",
        "cidadania",
        "inclusao",
    ),
}

_KNOWN_KEYS = frozenset(
    {
        "language_stopwords",
        "domain_stopwords",
        "topic_count",
        "model_seed",
        "bigram_count_threshold",
        "framing_lexicons",
        "top_n_terms_per_document",
        "top_n_terms_per_topic",
        "ngram_size",
        "min_token_length",
        "framing_negative_categories",
        "require_disjoint_lexicons",
        "max_documents",
        "lda",
    }
)

# Sections owned by other components that may share the same YAML file.
_FOREIGN_SECTIONS = frozenset({"scan"})


@dataclass(frozen=True, slots=True)
class LdaSettings:
    """Tuning knobs forwarded to the topic model fitting routine."""

    max_iter: int = 50
    doc_topic_prior: float | None = None
    topic_word_prior: float | None = None
    evaluate_every: int = 0

    def __post_init__(self) -> None:
        if self.max_iter < 1:
            raise ConfigurationError("lda.max_iter must be a positive integer.")
        if self.evaluate_every < 0:
            raise ConfigurationError("lda.evaluate_every must not be negative.")
        for name in ("doc_topic_prior", "topic_word_prior"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ConfigurationError(f"lda.{name} must be positive when provided.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "LdaSettings":
        section = _ensure_mapping(payload, section="lda")
        unknown = sorted(set(section) - {"max_iter", "doc_topic_prior", "topic_word_prior", "evaluate_every"})
        if unknown:
            raise ConfigurationError(f"Unknown lda settings: {', '.join(unknown)}")
        return cls(
            max_iter=_coerce_int(section.get("max_iter"), 50, key="lda.max_iter"),
            doc_topic_prior=_coerce_optional_float(section.get("doc_topic_prior"), key="lda.doc_topic_prior"),
            topic_word_prior=_coerce_optional_float(section.get("topic_word_prior"), key="lda.topic_word_prior"),
            evaluate_every=_coerce_int(section.get("evaluate_every"), 0, key="lda.evaluate_every"),
        )


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Validated settings shared by every analysis stage."""

    language_stopwords: str | None = DEFAULT_LANGUAGE
    domain_stopwords: Sequence[str] = DEFAULT_DOMAIN_STOPWORDS
    topic_count: int = 3
    model_seed: int = 1234
    bigram_count_threshold: int = 10
    framing_lexicons: Mapping[str, Sequence[str]] = field(
        default_factory=lambda: dict(DEFAULT_FRAMING_LEXICONS)
    )
    top_n_terms_per_document: int = 5
    top_n_terms_per_topic: int = 10
    ngram_size: int = 2
    min_token_length: int = 3
    framing_negative_categories: Sequence[str] = ("control",)
    require_disjoint_lexicons: bool = True
    max_documents: int | None = None
    lda: LdaSettings = field(default_factory=LdaSettings)

    def __post_init__(self) -> None:
        for name in (
            "topic_count",
            "bigram_count_threshold",
            "top_n_terms_per_document",
            "top_n_terms_per_topic",
            "min_token_length",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}.")
        if self.ngram_size < 2:
            raise ConfigurationError(f"ngram_size must be at least 2, got {self.ngram_size!r}.")
        seed = self.model_seed
        if isinstance(seed, bool) or not isinstance(seed, int) or not 0 <= seed <= MAX_MODEL_SEED:
            raise ConfigurationError(
                f"model_seed must be an integer between 0 and {MAX_MODEL_SEED}, got {self.model_seed!r}."
            )
        if self.max_documents is not None and self.max_documents < 1:
            raise ConfigurationError("max_documents must be a positive integer when provided.")

        language = self.language_stopwords
        if language is not None:
            language = str(language).strip().lower()
            if language in {"", "none"}:
                language = None
        object.__setattr__(self, "language_stopwords", language)
        object.__setattr__(self, "domain_stopwords", _normalize_terms(self.domain_stopwords))
        lexicons = normalize_lexicons(
            self.framing_lexicons,
            require_disjoint=self.require_disjoint_lexicons,
        )
        object.__setattr__(self, "framing_lexicons", lexicons)
        negative = _normalize_terms(self.framing_negative_categories)
        missing = [category for category in negative if category not in lexicons]
        if missing:
            raise ConfigurationError(
                f"framing_negative_categories reference unknown categories: {', '.join(missing)}"
            )
        object.__setattr__(self, "framing_negative_categories", negative)

    @property
    def framing_priority(self) -> tuple[str, ...]:
        """Category names in the order the classifier checks them."""

        return tuple(self.framing_lexicons)

    @property
    def lexicon_entries(self) -> tuple[str, ...]:
        return tuple(entry for entries in self.framing_lexicons.values() for entry in entries)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "AnalysisConfig":
        if not isinstance(payload, Mapping):
            raise ConfigurationError("Analysis configuration must be a mapping.")
        section = payload.get("analysis", payload)
        section = _ensure_mapping(section, section="analysis")
        unknown = sorted(str(key) for key in section if key not in _KNOWN_KEYS | _FOREIGN_SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown analysis settings: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        if "language_stopwords" in section:
            kwargs["language_stopwords"] = section["language_stopwords"]
        if "domain_stopwords" in section:
            kwargs["domain_stopwords"] = _coerce_sequence(section["domain_stopwords"], key="domain_stopwords")
        if "framing_lexicons" in section:
            kwargs["framing_lexicons"] = _ensure_mapping(section["framing_lexicons"], section="framing_lexicons")
        if "framing_negative_categories" in section:
            kwargs["framing_negative_categories"] = _coerce_sequence(
                section["framing_negative_categories"], key="framing_negative_categories"
            )
        for key, default in (
            ("topic_count", 3),
            ("model_seed", 1234),
            ("bigram_count_threshold", 10),
            ("top_n_terms_per_document", 5),
            ("top_n_terms_per_topic", 10),
            ("ngram_size", 2),
            ("min_token_length", 3),
        ):
            if key in section:
                kwargs[key] = _coerce_int(section[key], default, key=key)
        if "require_disjoint_lexicons" in section:
            kwargs["require_disjoint_lexicons"] = _coerce_bool(
                section["require_disjoint_lexicons"], key="require_disjoint_lexicons"
            )
        if section.get("max_documents") is not None:
            kwargs["max_documents"] = _coerce_int(section["max_documents"], 0, key="max_documents")
        if "lda" in section:
            kwargs["lda"] = LdaSettings.from_mapping(section["lda"])
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        """Return a validated copy with selected fields replaced."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        unknown = sorted(set(applied) - _KNOWN_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown analysis settings: {', '.join(unknown)}")
        return dataclasses.replace(self, **applied)

    def to_dict(self) -> dict[str, Any]:
        return {
            "language_stopwords": self.language_stopwords,
            "domain_stopwords": list(self.domain_stopwords),
            "topic_count": self.topic_count,
            "model_seed": self.model_seed,
            "bigram_count_threshold": self.bigram_count_threshold,
            "framing_lexicons": {name: list(terms) for name, terms in self.framing_lexicons.items()},
            "top_n_terms_per_document": self.top_n_terms_per_document,
            "top_n_terms_per_topic": self.top_n_terms_per_topic,
            "ngram_size": self.ngram_size,
            "min_token_length": self.min_token_length,
            "framing_negative_categories": list(self.framing_negative_categories),
            "require_disjoint_lexicons": self.require_disjoint_lexicons,
            "max_documents": self.max_documents,
            "lda": dataclasses.asdict(self.lda),
        }


def load_analysis_config(path: Path | None = None) -> AnalysisConfig:
    """Load analysis configuration from YAML, defaulting to built-in settings."""

    if path is not None:
        resolved = Path(path).expanduser()
        if not resolved.exists():
            raise FileNotFoundError(f"Analysis config '{resolved}' does not exist")
        return AnalysisConfig.from_mapping(_load_yaml(resolved))

    if _DEFAULT_CONFIG_PATH.exists():
        return AnalysisConfig.from_mapping(_load_yaml(_DEFAULT_CONFIG_PATH))

    return AnalysisConfig()


def _load_yaml(path: Path) -> Mapping[str, Any]:
    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Analysis config '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError("Analysis config must be a mapping at the top level.")
    return data


def _ensure_mapping(payload: Any, *, section: str) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Configuration section '{section}' must be a mapping.")
    return payload


def _normalize_terms(values: Sequence[str]) -> tuple[str, ...]:
    terms: list[str] = []
    for raw in values:
        term = str(raw).strip().casefold()
        if term:
            terms.append(term)
    return tuple(dict.fromkeys(terms))


def _coerce_sequence(value: Any, *, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Mapping) or not isinstance(value, Sequence):
        raise ConfigurationError(f"{key} must be a list of strings.")
    return tuple(str(item) for item in value)


def _coerce_int(value: object, default: int, *, key: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}.")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}.") from exc


def _coerce_optional_float(value: object, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a number, got {value!r}.") from exc


def _coerce_bool(value: object, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y"}:
            return True
        if lowered in {"false", "0", "no", "n"}:
            return False
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}.")


__all__ = [
    "AnalysisConfig",
    "LdaSettings",
    "DEFAULT_DOMAIN_STOPWORDS",
    "DEFAULT_FRAMING_LEXICONS",
    "DEFAULT_LANGUAGE",
    "MAX_MODEL_SEED",
    "load_analysis_config",
]
