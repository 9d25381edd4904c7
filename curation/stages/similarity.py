from __future__ import annotations

import re
from typing import Any, Mapping

from rapidfuzz.distance import Levenshtein

from curation.concept import concept_name

_SEPARATORS = re.compile(r"[\s\-_]")

# (suffix regex, replacement) applied to both sides at once
_VARIANT_SUFFIXES = [
    (re.compile(r"s$"), ""),
    (re.compile(r"ing$"), ""),
    (re.compile(r"ed$"), ""),
    (re.compile(r"er$"), ""),
    (re.compile(r"ly$"), ""),
]


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost, case-sensitive edit distance."""
    return Levenshtein.distance(a, b)


def are_variants(a: str, b: str) -> bool:
    for pattern, repl in _VARIANT_SUFFIXES:
        base_a = pattern.sub(repl, a)
        base_b = pattern.sub(repl, b)
        if base_a == base_b and len(base_a) > 2:
            return True
    return False


def name_similarity(a: str, b: str) -> float:
    """Similarity of two concept names in [0, 1].

    Rules, first match wins: case-folded equality (1.0), equality ignoring
    whitespace/hyphen/underscore (0.95), shared stem after stripping a
    common English suffix (0.9), else normalized Levenshtein similarity on
    the original strings.
    """
    a = a or ""
    b = b or ""
    folded_a = a.strip().casefold()
    folded_b = b.strip().casefold()
    if folded_a == folded_b:
        return 1.0

    norm_a = _SEPARATORS.sub("", folded_a)
    norm_b = _SEPARATORS.sub("", folded_b)
    if norm_a == norm_b:
        return 0.95

    if are_variants(norm_a, norm_b):
        return 0.9

    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def concept_similarity(c1: Mapping[str, Any], c2: Mapping[str, Any]) -> float:
    return name_similarity(concept_name(c1), concept_name(c2))
