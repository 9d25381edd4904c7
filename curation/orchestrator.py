"""Concept database improvement: score, group, merge, filter, recategorize."""

from __future__ import annotations

import copy
import datetime as dt
import time
import uuid
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from curation.concept import concept_category, database_partitions
from curation.config import QualityConfig, read_config_file
from curation.report import build_quality_report, render_report_md
from curation.stages.filtering import filter_by_quality
from curation.stages.grouping import duplicate_group_indices
from curation.stages.merge import merge_duplicate_group
from curation.stages.recategorize import recategorize_concepts
from curation.stages.scoring import score_concepts
from curation.store import load_concept_db, save_concept_db
from curation.utils import get_logger

logger = get_logger(__name__)

PARTITIONS = ("surface", "deep")
# rebuilt by every pass, never copied through
_REBUILT_KEYS = PARTITIONS + ("concepts", "qualityStats")


@dataclass
class QualityStats:
    original_count: int = 0
    merged_groups: int = 0
    removed_concepts: int = 0
    final_count: int = 0
    improvement_ratio: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalCount": self.original_count,
            "mergedGroups": self.merged_groups,
            "removedConcepts": self.removed_concepts,
            "finalCount": self.final_count,
            "improvementRatio": self.improvement_ratio,
        }


def _flatten(db: Mapping[str, Any]) -> List[dict]:
    parts = database_partitions(db)
    items: List[dict] = []
    for key in PARTITIONS:
        items.extend(copy.deepcopy(dict(c)) for c in (parts.get(key) or []))
    return items


def improve_concept_db(
    db: Mapping[str, Any],
    config: Optional[QualityConfig] = None,
    *,
    now: Optional[dt.datetime] = None,
) -> Tuple[Dict[str, Any], QualityStats]:
    """Run one consolidation pass over ``db`` and return ``(improved_db, stats)``.

    ``db`` is left untouched. Merged representatives come first (in cluster
    order) followed by every record that was never clustered (in input order).
    """
    config = config or QualityConfig()
    tables = config.tables

    t0 = time.monotonic()
    concepts = _flatten(db)
    original_count = len(concepts)
    logger.info("improve: start concepts=%d", original_count)

    scored = score_concepts(concepts, tables=tables)

    groups = duplicate_group_indices(scored, threshold=config.similar_threshold)

    working: List[Mapping[str, Any]] = []
    clustered = set()
    for idxs in groups:
        merged = merge_duplicate_group(
            [scored[i] for i in idxs],
            tables=tables,
            max_related=config.max_related_concepts,
            now=now,
        )
        working.append(merged)
        clustered.update(idxs)
    working.extend(c for i, c in enumerate(scored) if i not in clustered)
    logger.info("merge: groups=%d absorbed=%d", len(groups), len(clustered))

    survivors = filter_by_quality(working, threshold=config.tiers.acceptable, tables=tables)
    removed = len(working) - len(survivors)

    recategorized = recategorize_concepts(survivors, rules=tables.category_regexes)

    surface: List[dict] = []
    deep: List[dict] = []
    for c in recategorized:
        if concept_category(c) in config.surface_categories or c["qualityScore"] >= config.tiers.good:
            surface.append(c)
        else:
            deep.append(c)

    ratio = (removed + len(groups)) / original_count * 100 if original_count else 0.0
    stats = QualityStats(
        original_count=original_count,
        merged_groups=len(groups),
        removed_concepts=removed,
        final_count=len(recategorized),
        improvement_ratio=ratio,
    )

    improved = {k: copy.deepcopy(v) for k, v in db.items() if k not in _REBUILT_KEYS}
    improved["surface"] = surface
    improved["deep"] = deep

    logger.info(
        "improve: %d -> %d concepts (surface=%d deep=%d ratio=%.1f%%) took_ms=%d",
        original_count,
        stats.final_count,
        len(surface),
        len(deep),
        ratio,
        int((time.monotonic() - t0) * 1000),
    )
    return improved, stats


class ConceptQualityPipeline:
    """A validated config bound to the improvement pass and its report."""

    def __init__(self, config: Optional[QualityConfig] = None) -> None:
        self.config = config or QualityConfig()

    def improve(self, db: Mapping[str, Any]) -> Tuple[Dict[str, Any], QualityStats]:
        return improve_concept_db(db, self.config)

    def report(
        self,
        original_db: Mapping[str, Any],
        improved_db: Mapping[str, Any],
        stats: QualityStats,
    ) -> Dict[str, Any]:
        return build_quality_report(original_db, improved_db, stats.to_dict())


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    thresholds = cfg.setdefault("thresholds", {})
    if overrides.get("similar_threshold") is not None:
        thresholds["similar"] = float(overrides["similar_threshold"])

    if (
        overrides.get("acceptable_threshold") is not None
        or overrides.get("good_threshold") is not None
    ):
        tiers = thresholds.setdefault("tiers", {})
        if overrides.get("acceptable_threshold") is not None:
            tiers["acceptable"] = float(overrides["acceptable_threshold"])
        if overrides.get("good_threshold") is not None:
            tiers["good"] = float(overrides["good_threshold"])

    if overrides.get("max_related") is not None:
        cfg["max_related_concepts"] = int(overrides["max_related"])


def build_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> QualityConfig:
    """Read an optional YAML config, apply CLI overrides, validate."""
    cfg: Dict[str, Any] = {}
    if config_path:
        cfg = read_config_file(config_path)
    _apply_overrides(cfg, overrides)
    return QualityConfig.from_dict(cfg)


def run_once(
    input_path: str,
    output_path: str,
    *,
    config_path: Optional[str] = None,
    report_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> QualityStats:
    """Load a stored database, improve it once and write the result (and report)."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        pipeline = ConceptQualityPipeline(build_config(config_path, overrides))
        original = load_concept_db(input_path)
        improved, stats = pipeline.improve(original)
        save_concept_db(improved, output_path, stats=stats.to_dict())
        logger.info("output written path=%s", output_path)

        if report_path:
            report = pipeline.report(original, improved, stats)
            out = Path(report_path)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(render_report_md(report), encoding="utf-8")
            logger.info("report written path=%s", out)
        return stats

    except Exception as e:
        logger.error("Pipeline execution failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
