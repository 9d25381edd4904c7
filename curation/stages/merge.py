from __future__ import annotations

import datetime as dt
from typing import Any, List, Mapping, Optional, Sequence

from curation.concept import concept_frequency, concept_name, related_concepts
from curation.config import RuleTables
from curation.stages.scoring import quality_score
from curation.utils import iso_utc


def _select_base(scores: List[float]) -> int:
    # strictly greater only, so ties keep the earliest member
    best = 0
    for idx, score in enumerate(scores):
        if score > scores[best]:
            best = idx
    return best


def merge_duplicate_group(
    group: Sequence[Mapping[str, Any]],
    *,
    tables: Optional[RuleTables] = None,
    max_related: int = 10,
    now: Optional[dt.datetime] = None,
) -> Optional[dict]:
    """Collapse a duplicate cluster into one representative record.

    The highest-scoring member is the base; frequencies are summed, related
    concepts unioned (first occurrence order, capped at ``max_related``) and
    member names recorded in ``mergedFrom``.
    """
    if not group:
        return None
    if len(group) == 1:
        return group[0]

    scores = [quality_score(c, tables=tables) for c in group]
    base_idx = _select_base(scores)
    base = group[base_idx]

    related: List[str] = []
    seen = set()
    for member in group:
        for rel in related_concepts(member):
            if rel not in seen:
                seen.add(rel)
                related.append(rel)

    merged = dict(base)
    merged["frequency"] = sum(concept_frequency(c) for c in group)
    merged["relatedConcepts"] = related[:max_related]
    merged["mergedFrom"] = [concept_name(c) for c in group]
    merged["qualityScore"] = scores[base_idx]
    merged["lastMerged"] = iso_utc(now)
    return merged
