from typing import Any

from fastapi import APIRouter, HTTPException, Request

from techmap.features.associations.errors import SchemaError
from techmap.features.associations.resolver import resolve_technique_associations
from techmap.features.techniques.registry import prune_phantom_techniques
from techmap.infra.corpus_files import criterion_from_row

router = APIRouter(prefix="/associations", tags=["associations"])


@router.post("/resolve")
def resolve(request: Request, body: dict[str, Any]) -> dict[str, Any]:
    """Resolve an ad hoc corpus without touching the loaded index.

    Body: `{"criteria": [{id, name, num, type?, versions?}], "associations": {...},
    "version": optional, "registered_only": optional}`; `version` defaults to the
    configured WCAG version. With `registered_only`, keys that are not in the
    loaded technique registry are dropped from the result.
    """
    rows = body.get("criteria")
    specs = body.get("associations")
    if not isinstance(rows, list) or not isinstance(specs, dict):
        raise HTTPException(status_code=400, detail="criteria_and_associations_required")
    registered_only = body.get("registered_only", False)
    if not isinstance(registered_only, bool):
        raise HTTPException(status_code=400, detail="registered_only_must_be_bool")

    version = body.get("version") or request.app.state.cfg.wcag_version
    try:
        criteria = {str(r["id"]): criterion_from_row(str(r["id"]), r) for r in rows}
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"invalid_criteria:{type(e).__name__}")
    criteria = {cid: c for cid, c in criteria.items() if c.applies_to(str(version))}

    try:
        index = resolve_technique_associations(specs, criteria)
    except SchemaError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())
    if registered_only:
        index = prune_phantom_techniques(index, request.app.state.registry)

    return {
        "version": str(version),
        "techniques": {tid: [r.to_dict() for r in records] for tid, records in index.items()},
    }
