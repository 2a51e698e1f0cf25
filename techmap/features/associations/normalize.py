import re
from typing import TypeVar

from techmap.features.associations.schemas import TechniqueRef

# Letters-then-digits is a technique id; anything else is a free-text title.
_TECHNIQUE_ID_RE = re.compile(r"[A-Z]+[0-9]+")

T = TypeVar("T")


def is_technique_id(text: str) -> bool:
    return _TECHNIQUE_ID_RE.fullmatch(text) is not None


def expand_technique(entry: str | T) -> TechniqueRef | T:
    """Expand shorthand strings to a `TechniqueRef`; other entries pass through."""
    if not isinstance(entry, str):
        return entry
    if is_technique_id(entry):
        return TechniqueRef(id=entry)
    return TechniqueRef(title=entry)
