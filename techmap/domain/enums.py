from enum import Enum


class AssociationType(str, Enum):
    sufficient = "sufficient"
    advisory = "advisory"
    failure = "failure"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Traversal order within one criterion.
ASSOCIATION_TYPES: tuple[AssociationType, ...] = (
    AssociationType.sufficient,
    AssociationType.advisory,
    AssociationType.failure,
)


class NodeType(str, Enum):
    principle = "principle"
    guideline = "guideline"
    success_criterion = "SC"
