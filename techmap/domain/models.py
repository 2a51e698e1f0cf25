from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from techmap.domain.enums import AssociationType, NodeType


@dataclass(frozen=True)
class Criterion:
    id: str
    name: str
    num: str  # hierarchical number, e.g. "1.2.2"; only used for ordering
    type: NodeType = NodeType.success_criterion
    versions: tuple[str, ...] = ()  # empty = applies to every version

    @property
    def is_success_criterion(self) -> bool:
        return self.type is NodeType.success_criterion

    def applies_to(self, version: str | None) -> bool:
        return not version or not self.versions or version in self.versions


@dataclass(frozen=True)
class AssociationRecord:
    criterion: Criterion
    type: AssociationType
    has_usage_children: bool = False
    usage_parent_ids: tuple[str, ...] = ()
    usage_parent_description: str = ""
    with_ids: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "criterion": self.criterion.id,
            "type": self.type.label,
            "hasUsageChildren": self.has_usage_children,
            "usageParentIds": list(self.usage_parent_ids),
            "usageParentDescription": self.usage_parent_description,
            "with": list(self.with_ids),
        }


Index = dict[str, list[AssociationRecord]]
