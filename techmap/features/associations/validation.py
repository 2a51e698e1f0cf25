from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from techmap.features.associations.errors import SchemaError, SchemaIssue
from techmap.features.associations.schemas import CriterionAssociations


def _to_issues(e: ValidationError) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []
    for err in e.errors():
        loc = err.get("loc") or []
        path = ".".join(str(p) for p in loc)
        issues.append(
            SchemaIssue(
                code=str(err.get("type") or "validation_error"),
                path=path,
                message=str(err.get("msg") or "invalid"),
            )
        )
    return issues


def _offending_entry(raw: Any, loc: tuple[Any, ...]) -> Any:
    """Walk `loc` through `raw`, returning the innermost mapping on the way.

    Union tags and model names in `loc` do not exist in the raw data and are
    skipped.
    """
    found = raw
    node = raw
    for part in loc:
        if isinstance(node, Mapping) and part in node:
            node = node[part]
        elif isinstance(node, list) and isinstance(part, int) and 0 <= part < len(node):
            node = node[part]
        else:
            continue
        if isinstance(node, Mapping):
            found = node
    return found


def validate_criterion_associations(criterion_id: str, raw: Any) -> CriterionAssociations:
    if isinstance(raw, CriterionAssociations):
        return raw
    try:
        return CriterionAssociations.model_validate(raw)
    except ValidationError as e:
        errors = e.errors()
        entry = _offending_entry(raw, tuple(errors[0].get("loc") or ())) if errors else raw
        raise SchemaError(criterion_id, _to_issues(e), entry=entry) from e
