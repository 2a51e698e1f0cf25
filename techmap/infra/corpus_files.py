import json
from pathlib import Path
from typing import Any

from techmap.domain.enums import NodeType
from techmap.domain.models import Criterion
from techmap.features.techniques.registry import TechniqueRegistry


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def criterion_from_row(criterion_id: str, row: dict[str, Any]) -> Criterion:
    versions = row.get("versions") or ()
    if not isinstance(versions, (list, tuple)):
        raise ValueError(f"{criterion_id}: versions must be a list, got {type(versions).__name__}")
    return Criterion(
        id=criterion_id,
        name=str(row.get("name") or criterion_id),
        num=str(row.get("num") or ""),
        type=NodeType(str(row.get("type") or NodeType.success_criterion.value)),
        versions=tuple(str(v) for v in versions),
    )


def load_criteria(path: Path, version: str | None = None) -> dict[str, Criterion]:
    """Load criterion metadata, keeping only entries that apply to `version`.

    Accepts a JSON list of objects carrying `id`, or a mapping of id -> object.
    """
    raw = _read_json(path)
    rows = raw.items() if isinstance(raw, dict) else ((str(r["id"]), r) for r in raw)

    criteria: dict[str, Criterion] = {}
    for criterion_id, row in rows:
        criterion = criterion_from_row(criterion_id, row)
        if criterion.applies_to(version):
            criteria[criterion_id] = criterion
    return criteria


def load_associations(path: Path) -> dict[str, Any]:
    """Raw criterion id -> specification mapping; validation happens in the resolver."""
    raw = _read_json(path)
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected an object keyed by criterion id")
    return raw


def load_techniques(path: Path, sc_numbers: list[str] | None = None) -> TechniqueRegistry:
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of techniques")
    return TechniqueRegistry.from_records(raw, sc_numbers=sc_numbers)
