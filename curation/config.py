"""Thresholds and rule tables for the curation pipeline.

Everything here is validated when constructed, so a pipeline never starts with
an out-of-range threshold or a pattern that does not compile.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple

import yaml

from curation import tables as defaults

_DEFAULT_SIMILAR_THRESHOLD = 0.85
_DEFAULT_MAX_RELATED = 10


class ConfigError(ValueError):
    """Raised when thresholds or rule tables are unusable."""


def _check_unit(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if not 0.0 <= number <= 1.0:
        raise ConfigError(f"{name} must be within [0, 1], got {number}")
    return number


def _compile(name: str, pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except (re.error, TypeError) as exc:
        raise ConfigError(f"{name}: cannot compile pattern {pattern!r}: {exc}") from exc


@dataclass
class QualityTiers:
    """Four-level quality scale used for filtering and repartitioning."""

    poor: float = 0.2
    acceptable: float = 0.4
    good: float = 0.6
    excellent: float = 0.8

    def __post_init__(self) -> None:
        for name in ("poor", "acceptable", "good", "excellent"):
            setattr(self, name, _check_unit(f"tiers.{name}", getattr(self, name)))
        if not self.poor <= self.acceptable <= self.good <= self.excellent:
            raise ConfigError(
                "tiers must be ordered poor <= acceptable <= good <= excellent, got "
                f"{self.poor}/{self.acceptable}/{self.good}/{self.excellent}"
            )


@dataclass
class RuleTables:
    """Ordered pattern tables consumed by the scorer and the recategorizer."""

    technical_terms: List[str] = field(default_factory=lambda: list(defaults.TECHNICAL_TERMS))
    technical_patterns: List[str] = field(default_factory=lambda: list(defaults.TECHNICAL_PATTERNS))
    noise_patterns: List[str] = field(default_factory=lambda: list(defaults.NOISE_PATTERNS))
    category_rules: List[Tuple[str, str]] = field(default_factory=lambda: list(defaults.CATEGORY_RULES))
    symbol_pattern: str = defaults.SYMBOL_PATTERN
    low_info_pattern: str = defaults.LOW_INFO_PATTERN
    low_info_max_length: int = defaults.LOW_INFO_MAX_LENGTH
    mixed_script_pairs: List[Tuple[str, str]] = field(default_factory=lambda: list(defaults.MIXED_SCRIPT_PAIRS))
    camel_or_acronym_pattern: str = defaults.CAMEL_OR_ACRONYM_PATTERN
    compound_pattern: str = defaults.COMPOUND_PATTERN

    technical_regexes: List[Pattern[str]] = field(init=False, repr=False)
    noise_regexes: List[Pattern[str]] = field(init=False, repr=False)
    category_regexes: List[Tuple[str, Pattern[str]]] = field(init=False, repr=False)
    symbol_regex: Pattern[str] = field(init=False, repr=False)
    low_info_regex: Pattern[str] = field(init=False, repr=False)
    mixed_script_regexes: List[Tuple[Pattern[str], Pattern[str]]] = field(init=False, repr=False)
    camel_or_acronym_regex: Pattern[str] = field(init=False, repr=False)
    compound_regex: Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.technical_terms = [str(term) for term in self.technical_terms]
        self.technical_regexes = [_compile("technical_patterns", p) for p in self.technical_patterns]
        self.noise_regexes = [_compile("noise_patterns", p) for p in self.noise_patterns]

        rules: List[Tuple[str, Pattern[str]]] = []
        for rule in self.category_rules:
            if len(rule) != 2:
                raise ConfigError(f"category_rules: expected (category, pattern), got {rule!r}")
            category, pattern = rule
            if not category:
                raise ConfigError("category_rules: category label must not be empty")
            rules.append((str(category), _compile(f"category_rules[{category}]", pattern)))
        self.category_regexes = rules

        self.symbol_regex = _compile("symbol_pattern", self.symbol_pattern)
        self.low_info_regex = _compile("low_info_pattern", self.low_info_pattern)
        self.mixed_script_regexes = [
            (_compile("mixed_script_pairs", a), _compile("mixed_script_pairs", b))
            for a, b in self.mixed_script_pairs
        ]
        self.camel_or_acronym_regex = _compile("camel_or_acronym_pattern", self.camel_or_acronym_pattern)
        self.compound_regex = _compile("compound_pattern", self.compound_pattern)


@dataclass
class QualityConfig:
    similar_threshold: float = _DEFAULT_SIMILAR_THRESHOLD
    tiers: QualityTiers = field(default_factory=QualityTiers)
    tables: RuleTables = field(default_factory=RuleTables)
    max_related_concepts: int = _DEFAULT_MAX_RELATED
    surface_categories: Tuple[str, ...] = defaults.SURFACE_CATEGORIES

    def __post_init__(self) -> None:
        self.similar_threshold = _check_unit("similar_threshold", self.similar_threshold)
        try:
            max_related = int(self.max_related_concepts)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"max_related_concepts must be an integer, got {self.max_related_concepts!r}") from exc
        if max_related < 0:
            raise ConfigError(f"max_related_concepts must be >= 0, got {max_related}")
        self.max_related_concepts = max_related
        self.surface_categories = tuple(self.surface_categories)

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "QualityConfig":
        """Build a config from the YAML layout (see ``configs/default.yaml``).

        The mapping is schema-checked first; anything malformed surfaces as
        :class:`ConfigError`.
        """
        from curation.utils import validate_config

        raw = raw or {}
        validate_config(raw)
        thresholds = raw.get("thresholds") or {}
        kwargs: Dict[str, Any] = {}

        if thresholds.get("similar") is not None:
            kwargs["similar_threshold"] = thresholds["similar"]
        try:
            kwargs["tiers"] = QualityTiers(**(thresholds.get("tiers") or {}))
        except TypeError as exc:
            raise ConfigError(f"thresholds.tiers: {exc}") from exc

        table_cfg = raw.get("tables") or {}
        table_kwargs: Dict[str, Any] = {}
        for key in ("technical_terms", "technical_patterns", "noise_patterns"):
            if table_cfg.get(key) is not None:
                table_kwargs[key] = list(table_cfg[key])
        if table_cfg.get("category_rules") is not None:
            try:
                table_kwargs["category_rules"] = [
                    (rule["category"], rule["pattern"]) for rule in table_cfg["category_rules"]
                ]
            except (KeyError, TypeError) as exc:
                raise ConfigError(f"category_rules: each rule needs category and pattern ({exc})") from exc
        kwargs["tables"] = RuleTables(**table_kwargs)

        if raw.get("max_related_concepts") is not None:
            kwargs["max_related_concepts"] = raw["max_related_concepts"]
        if raw.get("surface_categories") is not None:
            kwargs["surface_categories"] = tuple(raw["surface_categories"])
        return cls(**kwargs)


DEFAULT_TABLES = RuleTables()


def read_config_file(path: str | Path) -> Dict[str, Any]:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: str | Path) -> QualityConfig:
    """Load, schema-validate and build a :class:`QualityConfig` from YAML."""
    return QualityConfig.from_dict(read_config_file(path))


def config_to_dict(config: QualityConfig) -> Dict[str, Any]:
    """Inverse of :meth:`QualityConfig.from_dict` (used when dumping effective settings)."""
    return {
        "thresholds": {
            "similar": config.similar_threshold,
            "tiers": {
                "poor": config.tiers.poor,
                "acceptable": config.tiers.acceptable,
                "good": config.tiers.good,
                "excellent": config.tiers.excellent,
            },
        },
        "max_related_concepts": config.max_related_concepts,
        "surface_categories": list(config.surface_categories),
        "tables": {
            "technical_terms": list(config.tables.technical_terms),
            "technical_patterns": list(config.tables.technical_patterns),
            "noise_patterns": list(config.tables.noise_patterns),
            "category_rules": [
                {"category": category, "pattern": pattern}
                for category, pattern in config.tables.category_rules
            ],
        },
    }
