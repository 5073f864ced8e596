from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RelationKind(str, Enum):
    """Kinds of structural relationship the detector knows about."""
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"
    HIERARCHICAL = "hierarchical"


class OneToManyRelation(BaseModel):
    """A parent holding several same-named direct children."""

    model_config = ConfigDict(frozen=True)

    parent: str = Field(description="Name of the parent element")
    child: str = Field(description="Name of the repeated child element")
    cardinality: int = Field(description="Number of sibling occurrences under one parent")
    confidence: float = Field(description="Heuristic confidence, capped below 1.0")

    def __str__(self) -> str:
        return f"{self.parent} 1..{self.cardinality} {self.child} ({self.confidence:.2f})"


class ManyToManyRelation(BaseModel):
    """Two distinct parents sharing the same child element name."""

    model_config = ConfigDict(frozen=True)

    first_element: str = Field(description="First parent element name")
    second_element: str = Field(description="Second parent element name")
    linking_element: str = Field(description="Child element name both parents contain")
    confidence: float = Field(description="Heuristic confidence")

    def __str__(self) -> str:
        return (
            f"{self.first_element} <-{self.linking_element}-> "
            f"{self.second_element} ({self.confidence:.2f})"
        )


class ParentChildRelation(BaseModel):
    """A direct containment edge between two element names."""

    model_config = ConfigDict(frozen=True)

    parent: str = Field(description="Parent element name")
    child: str = Field(description="Child element name")
    depth: int = Field(description="Hops from the parent up to the root (approximate)")
    is_direct_child: bool = Field(default=True)

    def __str__(self) -> str:
        return f"{self.parent} > {self.child} (depth {self.depth})"
