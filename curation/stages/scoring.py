from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from curation.concept import concept_frequency, concept_name, concept_relevance
from curation.config import DEFAULT_TABLES, RuleTables

# ---------- Component scores ----------

def length_score(name: str) -> float:
    n = len(name)
    if 3 <= n <= 20:
        return 1.0
    if n == 2 or 20 < n <= 30:
        return 0.7
    if n == 1 or n > 30:
        return 0.2
    return 0.5


def technical_score(name: str, tables: RuleTables = DEFAULT_TABLES) -> float:
    terms = tables.technical_terms
    if name in terms:
        return 1.0
    # an empty name is contained in every term
    if any(name in term or term in name for term in terms):
        return 0.8
    if any(rx.search(name) for rx in tables.technical_regexes):
        return 0.6
    return 0.0


def frequency_score(frequency: int) -> float:
    # bands overlap on purpose; first match wins
    if 3 <= frequency <= 50:
        return 1.0
    if 2 <= frequency <= 100:
        return 0.8
    if frequency == 1:
        return 0.5
    return 0.3


def noise_score(name: str, tables: RuleTables = DEFAULT_TABLES) -> float:
    score = 0.0
    for rx in tables.noise_regexes:
        if rx.search(name):
            score += 0.5

    if name:
        symbols = len(tables.symbol_regex.findall(name))
        if symbols / len(name) > 0.3:
            score += 0.3

    if tables.low_info_regex.search(name) and len(name) <= tables.low_info_max_length:
        score += 0.4

    return min(1.0, score)


def structure_score(name: str, tables: RuleTables = DEFAULT_TABLES) -> float:
    score = 0.0
    if any(a.search(name) and b.search(name) for a, b in tables.mixed_script_regexes):
        score += 0.4
    if tables.camel_or_acronym_regex.search(name):
        score += 0.3
    if tables.compound_regex.search(name):
        score += 0.2
    score += min(0.1, len(name) / 50)
    return min(1.0, score)

# ---------- Composite ----------

def quality_score(concept: Mapping[str, Any], *, tables: Optional[RuleTables] = None) -> float:
    """Weighted multi-factor quality of a concept, clamped to [0, 1].

    Pure: depends only on the record's name, frequency and relevance, so it can
    be recomputed at any time with identical results.
    """
    tables = tables or DEFAULT_TABLES
    name = concept_name(concept)

    score = 0.5
    score += 0.2 * length_score(name)
    score += 0.3 * technical_score(name, tables)
    score += 0.2 * concept_relevance(concept)
    score -= 0.3 * noise_score(name, tables)
    score += 0.15 * frequency_score(concept_frequency(concept))
    score += 0.15 * structure_score(name, tables)

    return max(0.0, min(1.0, score))


def score_concepts(concepts: Iterable[Mapping[str, Any]], *, tables: Optional[RuleTables] = None) -> List[dict]:
    """Return copies of ``concepts`` with ``qualityScore`` set."""
    return [{**c, "qualityScore": quality_score(c, tables=tables)} for c in concepts]
