from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SchemaIssue:
    code: str
    path: str
    message: str


class SchemaError(Exception):
    """A criterion's association specification does not match the grammar.

    Carries the criterion id, the pydantic-derived issues and the offending
    raw entry so the author can locate the source document.
    """

    def __init__(self, criterion_id: str, issues: list[SchemaIssue], entry: Any = None):
        first = issues[0] if issues else None
        where = f" at {first.path}" if first and first.path else ""
        what = f": {first.message}" if first else ""
        super().__init__(f"invalid associations for {criterion_id!r}{where}{what}")
        self.criterion_id = criterion_id
        self.issues = issues
        self.entry = entry

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "schema_error",
            "criterion": self.criterion_id,
            "issues": [i.__dict__ for i in self.issues],
            "entry": self.entry,
        }
