import json
from collections.abc import Mapping

from techmap.domain.models import AssociationRecord, Index


def criterion_sort_key(num: str) -> tuple[tuple[int, int | str], ...]:
    """Segment-wise numeric key: "1.10.1" sorts after "1.9.1".

    Non-numeric segments sort after numeric ones at the same depth.
    """
    key: list[tuple[int, int | str]] = []
    for part in num.strip().split("."):
        if part.isascii() and part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part))
    return tuple(key)


def record_fingerprint(record: AssociationRecord) -> str:
    """Deterministic JSON of a record; equal strings mean structurally equal records."""

    return json.dumps(record.to_dict(), ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def finalize(index: Mapping[str, list[AssociationRecord]]) -> Index:
    """Drop duplicate records per technique and order them by criterion number.

    Techniques left without records are omitted. The input is not mutated.
    """
    out: Index = {}
    for technique_id, records in index.items():
        seen: set[str] = set()
        unique: list[AssociationRecord] = []
        for record in records:
            fp = record_fingerprint(record)
            if fp in seen:
                continue
            seen.add(fp)
            unique.append(record)
        if not unique:
            continue
        out[technique_id] = sorted(unique, key=lambda r: criterion_sort_key(r.criterion.num))
    return out
