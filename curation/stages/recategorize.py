from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple

from curation.concept import concept_category, concept_name
from curation.config import DEFAULT_TABLES
from curation.utils import get_logger

logger = get_logger(__name__)


def categorize(name: str, current: str, rules: Sequence[Tuple[str, Pattern[str]]]) -> str:
    for category, rx in rules:
        if rx.search(name):
            return category
    return current


def recategorize_concepts(
    concepts: Iterable[Mapping[str, Any]],
    *,
    rules: Optional[Sequence[Tuple[str, Pattern[str]]]] = None,
) -> List[dict]:
    """Return copies of ``concepts`` with ``category`` set by the first matching rule.

    ``rules`` is an ordered list of ``(category, compiled pattern)``; concepts
    matching no rule keep their category.
    """
    if rules is None:
        rules = DEFAULT_TABLES.category_regexes
    out: List[dict] = []
    changed = 0
    for concept in concepts:
        before = concept_category(concept)
        after = categorize(concept_name(concept), before, rules)
        if after != before:
            changed += 1
        out.append({**concept, "category": after})
    logger.info("recategorize: changed=%d of=%d", changed, len(out))
    return out
