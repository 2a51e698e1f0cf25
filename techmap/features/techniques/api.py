from typing import Any

from fastapi import APIRouter, HTTPException, Request

from techmap.features.techniques.registry import TECHNOLOGY_TITLES

router = APIRouter(prefix="/techniques", tags=["techniques"])


@router.get("")
def list_techniques(request: Request) -> dict[str, Any]:
    registry = request.app.state.registry
    index = request.app.state.index
    return {
        "technologies": [
            {
                "technology": technology,
                "title": TECHNOLOGY_TITLES[technology],
                "items": [
                    {
                        "id": t.id,
                        "title": t.truncated_title,
                        "association_count": len(index.get(t.id, [])),
                    }
                    for t in techniques
                ],
            }
            for technology, techniques in registry.by_technology().items()
            if techniques
        ]
    }


@router.get("/{technique_id}")
def get_technique(request: Request, technique_id: str) -> dict[str, Any]:
    registry = request.app.state.registry
    index = request.app.state.index
    technique = registry.get(technique_id)
    # An absent index key means "no associations", same as an empty list.
    records = index.get(technique_id, [])
    if technique is None and not records:
        raise HTTPException(status_code=404, detail="technique_not_found")
    return {
        "technique_id": technique_id,
        "technique": None if technique is None else technique.to_dict(),
        "associations": [r.to_dict() for r in records],
    }
