"""JSON persistence for concept databases.

The pipeline itself never touches the filesystem; callers load a database
here, improve it, and save the result back.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from curation.concept import database_partitions
from curation.utils import get_logger

logger = get_logger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def load_concept_db(path: str | Path) -> Dict[str, Any]:
    """Read a database and return it with ``surface``/``deep`` at the top level."""
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Concept database {p} must be a JSON object")

    parts = database_partitions(data)
    db = {k: v for k, v in data.items() if k not in ("concepts", "surface", "deep")}
    db["surface"] = list(parts.get("surface") or [])
    db["deep"] = list(parts.get("deep") or [])
    logger.info("store.load: %s surface=%d deep=%d", p, len(db["surface"]), len(db["deep"]))
    return db


def save_concept_db(
    db: Mapping[str, Any],
    path: str | Path,
    *,
    stats: Optional[Mapping[str, Any]] = None,
) -> Path:
    parts = database_partitions(db)
    payload = {k: v for k, v in db.items() if k not in ("concepts", "surface", "deep")}
    payload["concepts"] = {
        "surface": list(parts.get("surface") or []),
        "deep": list(parts.get("deep") or []),
    }
    if stats is not None:
        payload["qualityStats"] = dict(stats)

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default), encoding="utf-8")
    logger.info("store.save: %s", p)
    return p
