"""Tolerant accessors for concept records.

Records are plain dicts produced by an upstream extractor. Missing or malformed
fields are defaulted here instead of being rejected.
"""

from __future__ import annotations

from typing import Any, List, Mapping

DEFAULT_CATEGORY = "general"


def concept_name(concept: Mapping[str, Any]) -> str:
    name = concept.get("name") or concept.get("term") or ""
    return str(name)


def concept_frequency(concept: Mapping[str, Any]) -> int:
    raw = concept.get("frequency")
    try:
        value = int(raw) if raw is not None else 1
    except (TypeError, ValueError):
        return 1
    return max(value, 1)


def concept_relevance(concept: Mapping[str, Any]) -> float:
    for key in ("relevance", "relevanceScore", "confidence"):
        raw = concept.get(key)
        if raw:
            try:
                return float(raw)
            except (TypeError, ValueError):
                continue
    return 0.0


def concept_category(concept: Mapping[str, Any]) -> str:
    return str(concept.get("category") or DEFAULT_CATEGORY)


def related_concepts(concept: Mapping[str, Any]) -> List[str]:
    raw = concept.get("relatedConcepts") or []
    if isinstance(raw, str):
        raw = [raw]
    # sets have no stable order; sort them so merges stay deterministic
    if isinstance(raw, (set, frozenset)):
        raw = sorted(str(x) for x in raw)
    return list(dict.fromkeys(str(x) for x in raw))


def database_partitions(db: Mapping[str, Any]) -> Mapping[str, Any]:
    """The mapping holding ``surface``/``deep``; stored databases nest it under ``concepts``."""
    nested = db.get("concepts")
    if isinstance(nested, Mapping):
        return nested
    return db
