from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

from techmap.domain.enums import ASSOCIATION_TYPES, AssociationType
from techmap.domain.models import AssociationRecord, Criterion, Index
from techmap.features.associations.describe import describe_parent
from techmap.features.associations.normalize import expand_technique
from techmap.features.associations.ordering import finalize
from techmap.features.associations.schemas import (
    CriterionAssociations,
    TechniqueConjunction,
    TechniqueEntry,
)
from techmap.features.associations.validation import validate_criterion_associations

logger = logging.getLogger(__name__)

UsageParent = Union[TechniqueEntry, TechniqueConjunction]


def _conjunction_ids(conjunction: TechniqueConjunction) -> list[str]:
    ids: list[str] = []
    for member in conjunction.and_:
        ref = expand_technique(member)
        if ref.id:
            ids.append(ref.id)
    return ids


def _usage_parent_ids(parent: UsageParent | None) -> tuple[str, ...]:
    if parent is None:
        return ()
    if isinstance(parent, TechniqueConjunction):
        return tuple(_conjunction_ids(parent))
    return (parent.id,) if parent.id else ()


class TechniqueAssociationResolver:
    """Inverts per-criterion technique specifications into a per-technique index.

    `criteria` must already be filtered to one guideline version. Criteria
    missing from it, or not success criteria, are skipped without error.
    """

    def __init__(self, *, criteria: Mapping[str, Criterion]) -> None:
        self._criteria = criteria
        self._index: dict[str, list[AssociationRecord]] = {}

    def resolve(self, specs: Mapping[str, Any]) -> Index:
        self._index = {}
        processed = 0
        for criterion_id, raw in specs.items():
            criterion = self._criteria.get(criterion_id)
            if criterion is None:
                logger.debug("skipping %s: not in the active criteria", criterion_id)
                continue
            if not criterion.is_success_criterion:
                logger.debug("skipping %s: node type %s", criterion_id, criterion.type.value)
                continue
            spec = validate_criterion_associations(criterion_id, raw)
            self._add_criterion(criterion, spec)
            processed += 1

        index = finalize(self._index)
        logger.info("resolved %d criteria into %d techniques", processed, len(index))
        return index

    def _add_criterion(self, criterion: Criterion, spec: CriterionAssociations) -> None:
        for kind in ASSOCIATION_TYPES:
            entries = spec.entries_for(kind)
            if not entries:
                continue
            if spec.is_sectioned(kind):
                # Section and group titles are presentation-only and dropped here.
                for section in entries:
                    self._traverse(section.techniques, criterion, kind)
                    for group in section.groups or []:
                        self._traverse(group.techniques, criterion, kind)
            else:
                self._traverse(entries, criterion, kind)

    def _add(self, technique_id: str, record: AssociationRecord) -> None:
        self._index.setdefault(technique_id, []).append(record)

    def _traverse(
        self,
        techniques: Sequence[Any],
        criterion: Criterion,
        kind: AssociationType,
        parent: UsageParent | None = None,
    ) -> None:
        parent_ids = _usage_parent_ids(parent)
        parent_description = "" if parent_ids else describe_parent(parent)

        for item in techniques:
            technique = expand_technique(item)
            if isinstance(technique, TechniqueConjunction):
                member_ids = _conjunction_ids(technique)
                for technique_id in member_ids:
                    self._add(
                        technique_id,
                        AssociationRecord(
                            criterion=criterion,
                            type=kind,
                            has_usage_children=technique.declares_using,
                            usage_parent_ids=parent_ids,
                            usage_parent_description=parent_description,
                            with_ids=tuple(i for i in member_ids if i != technique_id),
                        ),
                    )
            elif technique.id:
                self._add(
                    technique.id,
                    AssociationRecord(
                        criterion=criterion,
                        type=kind,
                        has_usage_children=isinstance(technique, TechniqueEntry)
                        and technique.declares_using,
                        usage_parent_ids=parent_ids,
                        usage_parent_description=parent_description,
                    ),
                )

            # Title-only entries emit nothing but their children may carry ids.
            if isinstance(technique, (TechniqueEntry, TechniqueConjunction)) and technique.using:
                self._traverse(technique.using, criterion, kind, technique)


def resolve_technique_associations(
    specs: Mapping[str, Any],
    criteria: Mapping[str, Criterion],
) -> Index:
    """Build the technique -> associations index for one guideline version.

    `specs` values may be raw mappings or validated `CriterionAssociations`.
    Raises `SchemaError` when an active criterion's specification is malformed.
    """
    return TechniqueAssociationResolver(criteria=criteria).resolve(specs)
