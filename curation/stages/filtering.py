from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from curation.config import RuleTables
from curation.stages.scoring import quality_score
from curation.utils import get_logger

logger = get_logger(__name__)


def _score_of(concept: Mapping[str, Any], tables: Optional[RuleTables]) -> float:
    score = concept.get("qualityScore")
    if score is None:
        return quality_score(concept, tables=tables)
    return float(score)


def filter_by_quality(
    concepts: Iterable[Mapping[str, Any]],
    *,
    threshold: float = 0.4,
    tables: Optional[RuleTables] = None,
) -> List[Mapping[str, Any]]:
    """Keep concepts whose ``qualityScore`` reaches ``threshold``.

    Records without a stored score are scored on the fly.
    """
    items = list(concepts)
    kept = [c for c in items if _score_of(c, tables) >= threshold]
    logger.info("filter: kept=%d from=%d (thr=%.2f)", len(kept), len(items), threshold)
    return kept
