from dataclasses import dataclass, field
from typing import Any, Optional, Union

from xml2schema.models.relations import (
    ManyToManyRelation,
    OneToManyRelation,
    ParentChildRelation,
)
from xml2schema.models.schema import ElementType, FieldShape, SchemaModel

Relation = Union[OneToManyRelation, ManyToManyRelation, ParentChildRelation]


@dataclass
class AnalysisResult:
    """Everything inferred from one document.

    ``schema`` and ``field_shapes`` are what a code or object emitter
    consumes; the relation lists are informational.
    """
    source: str
    schema: SchemaModel
    one_to_many: list[OneToManyRelation] = field(default_factory=list)
    many_to_many: list[ManyToManyRelation] = field(default_factory=list)
    parent_child: list[ParentChildRelation] = field(default_factory=list)
    field_shapes: dict[str, dict[str, FieldShape]] = field(default_factory=dict)

    @property
    def relationships(self) -> list[Relation]:
        """All relations in one list: one-to-many, many-to-many, then parent-child."""
        return [*self.one_to_many, *self.many_to_many, *self.parent_child]

    @property
    def complex_elements(self) -> list[str]:
        """Distinct names an emitter should generate a type for."""
        names: dict[str, None] = {}
        for element in self.schema.elements:
            if element.is_complex:
                names[element.name] = None
        return list(names)

    def to_output_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSONL output."""
        return {
            "_source_file": self.source,
            "root_element": self.schema.root_element_name,
            "schema": self.schema.to_dict(),
            "relationships": {
                "one_to_many": [r.model_dump() for r in self.one_to_many],
                "many_to_many": [r.model_dump() for r in self.many_to_many],
                "hierarchical": [r.model_dump() for r in self.parent_child],
            },
            "field_shapes": {
                element: {name: shape.to_dict() for name, shape in shapes.items()}
                for element, shapes in self.field_shapes.items()
            },
        }

    def format_summary(self) -> str:
        """Format the analysis as a human-readable summary."""
        schema = self.schema
        lines = [
            f"Document: {self.source}",
            f"  Root element: {schema.root_element_name}",
            f"  Elements: {len(schema.elements)} ({len(schema.element_frequency)} distinct names)",
        ]

        if schema.patterns:
            details = ", ".join(
                f"{p.element_names[0]} x{schema.element_frequency[p.element_names[0]]}"
                for p in schema.patterns
            )
            lines.append(f"  Repeated: {details}")

        lines.append(
            f"  Relationships: {len(self.one_to_many)} one-to-many, "
            f"{len(self.many_to_many)} many-to-many, "
            f"{len(self.parent_child)} parent-child"
        )

        lines.extend(self.format_fields(indent="  "))
        return "\n".join(lines)

    def format_fields(self, indent: str = "") -> list[str]:
        """One line per composite element, then one per field beneath it."""
        lines = []
        for element, shapes in self.field_shapes.items():
            lines.append(f"{indent}{element}:")
            for name, shape in shapes.items():
                lines.append(f"{indent}  {name}: {_format_shape(shape)}")
        return lines


def _format_shape(shape: FieldShape) -> str:
    item = shape.type.value
    if shape.type == ElementType.COMPOSITE:
        item = shape.item_name
    if shape.is_list:
        return f"list[{item}]"
    return item


@dataclass
class FailedAnalysis:
    """A document that could not be analysed."""
    source: str
    error: str
    cause: Optional[str] = None

    def to_output_dict(self) -> dict[str, Any]:
        result = {"_source_file": self.source, "_error": self.error}
        if self.cause:
            result["_cause"] = self.cause
        return result
