from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Mapping, Optional

from curation.concept import database_partitions
from curation.utils import iso_utc


def _sizes(db: Mapping[str, Any]) -> Dict[str, int]:
    parts = database_partitions(db)
    surface = len(parts.get("surface") or [])
    deep = len(parts.get("deep") or [])
    return {"totalConcepts": surface + deep, "surfaceConcepts": surface, "deepConcepts": deep}


def recommendations(stats: Mapping[str, Any]) -> List[str]:
    """Plain-language follow-ups derived from the run counters alone."""
    out: List[str] = []
    if stats.get("mergedGroups", 0) > 0:
        out.append(f"Merged {stats['mergedGroups']} duplicate groups into single concepts.")
    if stats.get("removedConcepts", 0) > 0:
        out.append(f"Removed {stats['removedConcepts']} low-quality concepts.")
    if stats.get("improvementRatio", 0) > 5:
        out.append(f"Improved the concept database by {stats['improvementRatio']:.1f}%.")
    out.append("Re-run the improvement pass regularly to keep the database consistent.")
    out.append("Tighten quality filtering at extraction time for newly learned concepts.")
    return out


def build_quality_report(
    original_db: Mapping[str, Any],
    improved_db: Mapping[str, Any],
    stats: Mapping[str, Any],
    *,
    now: Optional[dt.datetime] = None,
) -> Dict[str, Any]:
    return {
        "timestamp": iso_utc(now),
        "original": _sizes(original_db),
        "improved": _sizes(improved_db),
        "improvements": dict(stats),
        "recommendations": recommendations(stats),
    }


def render_report_md(report: Mapping[str, Any]) -> str:
    orig = report["original"]
    impr = report["improved"]
    stats = report["improvements"]
    lines = [
        "# Concept Quality Report",
        "",
        f"_Generated {report['timestamp']}_",
        "",
        "| | Total | Surface | Deep |",
        "|---|---|---|---|",
        f"| Before | {orig['totalConcepts']} | {orig['surfaceConcepts']} | {orig['deepConcepts']} |",
        f"| After | {impr['totalConcepts']} | {impr['surfaceConcepts']} | {impr['deepConcepts']} |",
        "",
        "## Changes",
        "",
        f"- Original concepts: {stats.get('originalCount', 0)}",
        f"- Merged duplicate groups: {stats.get('mergedGroups', 0)}",
        f"- Removed concepts: {stats.get('removedConcepts', 0)}",
        f"- Final concepts: {stats.get('finalCount', 0)}",
        f"- Improvement ratio: {float(stats.get('improvementRatio', 0)):.1f}%",
        "",
        "## Recommendations",
        "",
    ]
    lines.extend(f"- {r}" for r in report.get("recommendations", []))
    return "\n".join(lines) + "\n"
