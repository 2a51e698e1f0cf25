from techmap.features.associations.normalize import expand_technique
from techmap.features.associations.schemas import TechniqueConjunction, TechniqueEntry

SINGLE_QUANTITY_KEYWORDS = ("one", "any")
COMBINED_FALLBACK = "when combined with other techniques"


def lower_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def describe_parent(parent: TechniqueEntry | TechniqueConjunction | None) -> str:
    """Describe a `using` parent that cannot be cited by technique id.

    Examples:
    - `{title: "Providing keyboard control", using: [...]}`
      -> "when used for providing keyboard control"
    - `{and: ["G146", "Using relative measurements"], using: [...]}`
      -> "when used for using relative measurements"
    - `usingQuantity: "two or more"` -> "when combined with other techniques"
    """
    if parent is None or not parent.declares_using:
        return ""

    quantity = parent.using_quantity
    is_singular = not quantity or quantity in SINGLE_QUANTITY_KEYWORDS

    if is_singular:
        if isinstance(parent, TechniqueEntry) and parent.title:
            return f"when used for {lower_first(parent.title.strip())}"
        if isinstance(parent, TechniqueConjunction):
            titles = [
                lower_first(ref.title.strip())
                for ref in map(expand_technique, parent.and_)
                if ref.title
            ]
            if titles:
                return f"when used for {' and '.join(titles)}"

    return COMBINED_FALLBACK
