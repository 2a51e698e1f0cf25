from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from techmap.domain.models import AssociationRecord, Index

# Technology slug -> heading used on the techniques index page.
TECHNOLOGY_TITLES: dict[str, str] = {
    "aria": "ARIA Techniques",
    "client-side-script": "Client-Side Script Techniques",
    "css": "CSS Techniques",
    "failures": "Common Failures",
    "flash": "Flash Techniques",  # deprecated in 2020
    "general": "General Techniques",
    "html": "HTML Techniques",
    "pdf": "PDF Techniques",
    "server-side-script": "Server-Side Script Techniques",
    "smil": "SMIL Techniques",
    "silverlight": "Silverlight Techniques",  # deprecated in 2020
    "text": "Plain-Text Techniques",
}

_MULTI_SC_RE = re.compile(r"(?:\d\.\d+\.\d+(,?) )+and \d\.\d+\.\d+")
_SC_RE = re.compile(r"\d\.\d+\.\d+")
_INNER_LINES_RE = re.compile(r"\s*\n[\s\S]*\n\s*")
_NON_DIGIT_RE = re.compile(r"\D")


class UnknownTechnologyError(ValueError):
    pass


def technique_number(technique_id: str) -> int:
    digits = _NON_DIGIT_RE.sub("", technique_id)
    return int(digits) if digits else 0


def filter_title_criteria(title: str, sc_numbers: Iterable[str]) -> str:
    """Drop SC numbers that are not part of the active version from a title.

    Only titles listing several criteria ("1.3.1, 2.4.6 and 4.1.2") are
    rewritten. If none of the listed criteria remain the title is unchanged.
    """
    match = _MULTI_SC_RE.search(title)
    if not match:
        return title

    active = set(sc_numbers)
    kept = [sc for sc in _SC_RE.findall(match.group(0)) if sc in active]
    if not kept:
        return title

    if len(kept) == 1:
        replacement = kept[0]
    else:
        serial_comma = "," if len(kept) > 2 and match.group(1) else ""
        replacement = f"{', '.join(kept[:-1])}{serial_comma} and {kept[-1]}"
    return title[: match.start()] + replacement + title[match.end() :]


@dataclass(frozen=True)
class Technique:
    id: str
    technology: str
    title: str
    obsolete_since: str | None = None
    obsolete_message: str | None = None

    @property
    def truncated_title(self) -> str:
        # Long headings keep only their first and last lines.
        return _INNER_LINES_RE.sub(" … ", self.title, count=1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "technology": self.technology,
            "title": self.title,
            "truncated_title": self.truncated_title,
            "obsolete_since": self.obsolete_since,
            "obsolete_message": self.obsolete_message,
        }


class TechniqueRegistry:
    def __init__(self, techniques: Iterable[Technique] = ()) -> None:
        self._by_id: dict[str, Technique] = {}
        for t in techniques:
            if t.technology not in TECHNOLOGY_TITLES:
                raise UnknownTechnologyError(f"Invalid technology name: {t.technology}")
            self._by_id[t.id] = t

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        *,
        sc_numbers: Iterable[str] | None = None,
    ) -> "TechniqueRegistry":
        """Build from already-extracted technique metadata.

        When `sc_numbers` is given, titles naming several criteria are
        narrowed to those numbers.
        """
        numbers = list(sc_numbers) if sc_numbers is not None else None
        techniques = []
        for r in records:
            title = str(r["title"])
            if numbers is not None:
                title = filter_title_criteria(title, numbers)
            obsolete_since = r.get("obsoleteSince")
            techniques.append(
                Technique(
                    id=str(r["id"]),
                    technology=str(r["technology"]),
                    title=title,
                    obsolete_since=None if obsolete_since is None else str(obsolete_since),
                    obsolete_message=r.get("obsoleteMessage"),
                )
            )
        return cls(techniques)

    def __contains__(self, technique_id: object) -> bool:
        return technique_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, technique_id: str) -> Technique | None:
        return self._by_id.get(technique_id)

    def by_technology(self) -> dict[str, list[Technique]]:
        grouped: dict[str, list[Technique]] = {tech: [] for tech in TECHNOLOGY_TITLES}
        for t in self._by_id.values():
            grouped[t.technology].append(t)
        for techniques in grouped.values():
            techniques.sort(key=lambda t: technique_number(t.id))
        return grouped


def prune_phantom_techniques(index: Index, registry: TechniqueRegistry) -> Index:
    """Keep only index keys that name a registered technique."""
    pruned: dict[str, list[AssociationRecord]] = {}
    for technique_id, records in index.items():
        if technique_id in registry:
            pruned[technique_id] = list(records)
    return pruned
