from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from curation.concept import concept_name
from curation.stages.similarity import name_similarity
from curation.utils import get_logger

logger = get_logger(__name__)


def duplicate_group_indices(
    concepts: Sequence[Mapping[str, Any]],
    *,
    threshold: float = 0.85,
) -> List[List[int]]:
    """Leader-based duplicate clusters as lists of input indices.

    Every unconsumed index opens a cluster and absorbs each later unconsumed
    index whose name is at least ``threshold`` similar to the leader's. Members
    are never compared with each other, so A~B and B~C does not imply that A,
    B and C end up together. Only clusters with two or more members are
    returned, ordered by leader position.
    """
    names = [concept_name(c) for c in concepts]
    n = len(names)
    consumed = set()
    groups: List[List[int]] = []

    for i in range(n):
        if i in consumed:
            continue
        group = [i]
        consumed.add(i)
        for j in range(i + 1, n):
            if j in consumed:
                continue
            if name_similarity(names[i], names[j]) >= threshold:
                group.append(j)
                consumed.add(j)
        if len(group) > 1:
            groups.append(group)

    logger.info("grouping: groups=%d from=%d (thr=%.2f)", len(groups), n, threshold)
    return groups


def find_duplicate_groups(
    concepts: Sequence[Mapping[str, Any]],
    *,
    threshold: float = 0.85,
) -> List[List[Mapping[str, Any]]]:
    return [[concepts[i] for i in idxs] for idxs in duplicate_group_indices(concepts, threshold=threshold)]
