"""Schema model produced by a single structural scan of an XML document.

Two value types describe children: ``ElementRecord`` is the full
description of one element occurrence and lives in the flat
``SchemaModel.elements`` list, while ``ChildDescriptor`` is the lightweight
stub nested under a parent record. The stub never carries its own children
or attributes.

The models are frozen and their mapping fields are read-only views. They
compare by value but are not hashable.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


def _freeze_mapping(instance: Any, name: str) -> None:
    """Replace a mapping field with a read-only copy on a frozen instance."""
    object.__setattr__(instance, name, MappingProxyType(dict(getattr(instance, name))))


class ElementType(str, Enum):
    """Inferred type of an element."""
    STRING = "String"
    INTEGER = "Integer"
    DOUBLE = "Double"
    BOOLEAN = "Boolean"
    COMPOSITE = "Composite"  # Has at least one child element


@dataclass(frozen=True)
class ChildDescriptor:
    """Lightweight stub for a direct child, scoped to its parent record."""
    name: str
    inferred_type: ElementType
    parent_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple["ChildDescriptor", ...] = ()
    occurrence_count: int = 1

    def __post_init__(self):
        _freeze_mapping(self, "attributes")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.inferred_type.value,
            "parent": self.parent_name,
        }


@dataclass(frozen=True)
class ElementRecord:
    """One element occurrence, as seen during the scan.

    ``occurrence_count`` is read from the document-wide frequency table when
    the record is built, so earlier occurrences of a repeated name carry a
    lower count than later ones.
    """
    name: str
    inferred_type: ElementType
    parent_name: Optional[str] = None  # None for the root element
    children: tuple[ChildDescriptor, ...] = ()
    attributes: Mapping[str, str] = field(default_factory=dict)
    occurrence_count: int = 1

    def __post_init__(self):
        _freeze_mapping(self, "attributes")

    @property
    def is_root(self) -> bool:
        return self.parent_name is None

    @property
    def is_collection(self) -> bool:
        """Whether the name was seen more than once anywhere in the document."""
        return self.occurrence_count > 1

    @property
    def is_complex(self) -> bool:
        """Whether an emitter should generate a type for this element."""
        return bool(self.children) or bool(self.attributes) or self.is_root

    @property
    def child_names(self) -> list[str]:
        return [c.name for c in self.children]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.inferred_type.value,
            "parent": self.parent_name,
            "attributes": dict(self.attributes),
            "children": [c.to_dict() for c in self.children],
            "occurrence_count": self.occurrence_count,
            "is_collection": self.is_collection,
        }


@dataclass(frozen=True)
class ElementPattern:
    """Repetition pattern for an element name seen more than once."""
    pattern_name: str
    element_names: tuple[str, ...]
    similarity_score: float
    parent_context: Optional[str]
    is_repeating: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern_name": self.pattern_name,
            "element_names": list(self.element_names),
            "similarity_score": self.similarity_score,
            "parent_context": self.parent_context,
            "is_repeating": self.is_repeating,
        }


@dataclass(frozen=True)
class SchemaModel:
    """Everything one scan learned about a document."""
    root_element_name: str
    elements: tuple[ElementRecord, ...]
    element_frequency: Mapping[str, int]
    patterns: tuple[ElementPattern, ...] = ()

    def __post_init__(self):
        _freeze_mapping(self, "element_frequency")

    @property
    def element_names(self) -> list[str]:
        """Distinct element names in first-encounter order."""
        return list(self.element_frequency)

    def records_named(self, name: str) -> list[ElementRecord]:
        """All records for a name, in flat-list order."""
        return [e for e in self.elements if e.name == name]

    def first_record(self, name: str, parent_name: Optional[str] = None) -> Optional[ElementRecord]:
        """First record with this name, optionally under a specific parent."""
        for element in self.elements:
            if element.name != name:
                continue
            if parent_name is not None and element.parent_name != parent_name:
                continue
            return element
        return None

    @property
    def root(self) -> ElementRecord:
        """The root record, which is always the last one scanned."""
        return self.elements[-1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_element": self.root_element_name,
            "elements": [e.to_dict() for e in self.elements],
            "element_frequency": dict(self.element_frequency),
            "patterns": [p.to_dict() for p in self.patterns],
        }


@dataclass(frozen=True)
class FieldShape:
    """How a child name is represented as a field of its parent.

    For container fields ``item_name`` is the inner (singular) element and
    ``type`` is that inner element's type.
    """
    type: ElementType
    is_list: bool
    item_name: str
    is_container: bool = False

    def to_dict(self) -> dict[str, Any]:
        result = {
            "type": self.type.value,
            "is_list": self.is_list,
            "item_name": self.item_name,
        }
        if self.is_container:
            result["is_container"] = True
        return result
