from typing import Annotated, Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictBool,
    StrictStr,
    Tag,
    model_validator,
)

from techmap.domain.enums import AssociationType


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _reject_explicit_null(cls, data: Any) -> Any:
        # Optional keys are omitted, never null.
        if isinstance(data, dict):
            nulls = sorted(str(k) for k, v in data.items() if v is None)
            if nulls:
                raise ValueError(f"null is not allowed for: {', '.join(nulls)}")
        return data


class TechniqueRef(_StrictModel):
    """Plain reference: a technique id, a display title, or both."""

    id: StrictStr | None = None
    title: StrictStr | None = None


class _UsingOptions(_StrictModel):
    using: list["AssociatedTechnique"] | None = None
    skip_using_text: StrictBool | None = Field(default=None, alias="skipUsingText")
    using_conjunction: StrictStr | None = Field(default=None, alias="usingConjunction")
    using_prefix: StrictStr | None = Field(default=None, alias="usingPrefix")
    using_quantity: StrictStr | None = Field(default=None, alias="usingQuantity")

    @property
    def declares_using(self) -> bool:
        return self.using is not None


class TechniqueEntry(TechniqueRef, _UsingOptions):
    """Reference that may be completed by one of its `using` children."""


class TechniqueConjunction(_UsingOptions):
    """Techniques that must be applied together."""

    and_: list[Union[StrictStr, TechniqueRef]] = Field(alias="and")
    and_conjunction: StrictStr | None = Field(default=None, alias="andConjunction")


def _technique_kind(value: Any) -> str:
    if isinstance(value, str):
        return "shorthand"
    if isinstance(value, dict):
        return "conjunction" if "and" in value else "entry"
    if isinstance(value, TechniqueConjunction):
        return "conjunction"
    return "entry"


AssociatedTechnique = Annotated[
    Union[
        Annotated[StrictStr, Tag("shorthand")],
        Annotated[TechniqueConjunction, Tag("conjunction")],
        Annotated[TechniqueEntry, Tag("entry")],
    ],
    Discriminator(_technique_kind),
]

TechniqueEntry.model_rebuild()
TechniqueConjunction.model_rebuild()


class TechniqueGroup(TechniqueRef):
    techniques: list[AssociatedTechnique]


class TechniqueSection(TechniqueRef):
    """Presentation-only grouping of the sufficient list (e.g. "Situation A")."""

    techniques: list[AssociatedTechnique]
    groups: list[TechniqueGroup] | None = None
    note: StrictStr | None = None


def _sufficient_kind(value: Any) -> str:
    if isinstance(value, list) and value:
        first = value[0]
        if isinstance(first, TechniqueSection):
            return "sections"
        if isinstance(first, dict) and "techniques" in first:
            return "sections"
    return "techniques"


SufficientList = Annotated[
    Union[
        Annotated[list[TechniqueSection], Tag("sections")],
        Annotated[list[AssociatedTechnique], Tag("techniques")],
    ],
    Discriminator(_sufficient_kind),
]


class CriterionAssociations(_StrictModel):
    sufficient_intro: StrictStr | None = Field(default=None, alias="sufficientIntro")
    sufficient_note: StrictStr | None = Field(default=None, alias="sufficientNote")
    sufficient: SufficientList | None = None
    advisory: list[AssociatedTechnique] | None = None
    failure: list[AssociatedTechnique] | None = None

    def entries_for(self, kind: AssociationType) -> list[Any]:
        return list(getattr(self, kind.value) or [])

    def is_sectioned(self, kind: AssociationType) -> bool:
        entries = self.entries_for(kind)
        return bool(entries) and isinstance(entries[0], TechniqueSection)
