"""Type classification and field-shape resolution.

``classify_type`` decides what a single element holds. The field-shape
resolver then looks at a parent's direct children and decides, per distinct
child name, whether the parent should expose a single value or a list, and
whether a composite child is really just a container around repeated inner
elements (``<books><book/><book/></books>`` becomes a list of ``book``).
"""

import logging
import re
from collections import Counter
from typing import Iterable, Optional, Sequence

from lxml import etree

from xml2schema.core.naming import PluralToSingular, english_singular
from xml2schema.core.nodes import has_child_elements, text_content
from xml2schema.models.schema import (
    ChildDescriptor,
    ElementRecord,
    ElementType,
    FieldShape,
    SchemaModel,
)

logger = logging.getLogger(__name__)

# Integers are 32-bit; anything wider falls through to Double
INTEGER_MIN = -(2 ** 31)
INTEGER_MAX = 2 ** 31 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DOUBLE_RE = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)"
)
_BOOLEAN_VALUES = {"true", "false"}


def _is_integer(text: str) -> bool:
    if not _INTEGER_RE.fullmatch(text):
        return False
    return INTEGER_MIN <= int(text) <= INTEGER_MAX


def _is_double(text: str) -> bool:
    return _DOUBLE_RE.fullmatch(text) is not None


def classify_text(text: Optional[str], detect_booleans: bool = False) -> ElementType:
    """Classify the text content of a leaf element."""
    value = (text or "").strip()
    if not value:
        return ElementType.STRING
    if _is_integer(value):
        return ElementType.INTEGER
    if _is_double(value):
        return ElementType.DOUBLE
    if detect_booleans and value.lower() in _BOOLEAN_VALUES:
        return ElementType.BOOLEAN
    return ElementType.STRING


def classify_type(node: etree._Element, detect_booleans: bool = False) -> ElementType:
    """Infer the type of an element.

    Any child element makes the node Composite, whatever text it also holds.
    Leaf text is tried as an integer, then as a floating-point number, and is
    a String otherwise.

    Args:
        node: Parsed lxml element
        detect_booleans: Classify ``true``/``false`` text as Boolean

    Returns:
        The inferred ElementType
    """
    if has_child_elements(node):
        return ElementType.COMPOSITE
    return classify_text(text_content(node), detect_booleans=detect_booleans)


def widen_types(types: Iterable[ElementType]) -> ElementType:
    """Pick one type that can hold every type in the group."""
    distinct = set(types)
    if not distinct:
        return ElementType.STRING
    if len(distinct) == 1:
        return distinct.pop()
    if distinct == {ElementType.INTEGER, ElementType.DOUBLE}:
        return ElementType.DOUBLE
    if ElementType.COMPOSITE in distinct:
        return ElementType.COMPOSITE
    return ElementType.STRING


class FieldShapeResolver:
    """Resolve the field shape of every direct child of a parent.

    Container recognition needs the container's own children, which the
    lightweight child descriptors do not carry, so it only happens when a
    schema model is available to look the container's record up.
    """

    def __init__(
        self,
        model: Optional[SchemaModel] = None,
        plural_to_singular: Optional[PluralToSingular] = english_singular,
    ):
        self.model = model
        self.plural_to_singular = plural_to_singular

    def resolve(
        self,
        children: Sequence[ChildDescriptor],
        parent_name: Optional[str] = None,
    ) -> dict[str, FieldShape]:
        """Map each distinct child name to its field shape.

        Args:
            children: The parent's direct children, in document order
            parent_name: Name of the parent; defaults to the children's own
                ``parent_name``

        Returns:
            Child name -> FieldShape, in first-seen order
        """
        if parent_name is None and children:
            parent_name = children[0].parent_name

        groups: dict[str, list[ChildDescriptor]] = {}
        for child in children:
            groups.setdefault(child.name, []).append(child)

        shapes: dict[str, FieldShape] = {}
        for name, group in groups.items():
            child_type = widen_types(c.inferred_type for c in group)

            if len(group) > 1:
                shapes[name] = FieldShape(type=child_type, is_list=True, item_name=name)
                continue

            if child_type == ElementType.COMPOSITE:
                container_shape = self._resolve_container(name, parent_name)
                if container_shape is not None:
                    shapes[name] = container_shape
                    continue

            shapes[name] = FieldShape(type=child_type, is_list=False, item_name=name)

        return shapes

    def resolve_record(self, record: ElementRecord) -> dict[str, FieldShape]:
        """Field shapes for one record's direct children."""
        return self.resolve(record.children, parent_name=record.name)

    def _resolve_container(self, name: str, parent_name: Optional[str]) -> Optional[FieldShape]:
        """Return a list shape if ``name`` wraps repeated inner elements."""
        if self.model is None or self.plural_to_singular is None:
            return None

        singular = self.plural_to_singular(name)
        if not singular or singular == name:
            return None

        record = self.model.first_record(name, parent_name=parent_name)
        if record is None or not record.children:
            return None

        # Resolve the container's own children before deciding its shape
        inner_shapes = self.resolve(record.children, parent_name=name)
        inner = inner_shapes.get(singular)
        if inner is None:
            return None

        counts = Counter(record.child_names)
        if counts[singular] * 2 <= len(record.children):
            # The singular is present but does not dominate the container
            return None

        logger.debug(f"<{name}> under <{parent_name}> is a container of <{singular}>")
        return FieldShape(type=inner.type, is_list=True, item_name=singular, is_container=True)


def resolve_field_shape(
    children: Sequence[ChildDescriptor],
    model: Optional[SchemaModel] = None,
    plural_to_singular: Optional[PluralToSingular] = english_singular,
) -> dict[str, FieldShape]:
    """Resolve field shapes for a parent's direct children."""
    return FieldShapeResolver(model, plural_to_singular).resolve(children)


def _merge_shapes(name: str, current: FieldShape, other: FieldShape) -> FieldShape:
    """Combine two shapes of the same field seen under different records."""
    if current.is_container and other.is_container and current.item_name == other.item_name:
        return FieldShape(
            type=widen_types([current.type, other.type]),
            is_list=True,
            item_name=current.item_name,
            is_container=True,
        )

    # Not a container everywhere: items are the field's own elements, and a
    # container element is always Composite
    types = [ElementType.COMPOSITE if s.is_container else s.type for s in (current, other)]
    return FieldShape(
        type=widen_types(types),
        is_list=current.is_list or other.is_list,
        item_name=name,
    )


def resolve_model(
    model: SchemaModel,
    plural_to_singular: Optional[PluralToSingular] = english_singular,
) -> dict[str, dict[str, FieldShape]]:
    """Field shapes for every composite element name in the model.

    Records sharing a name are merged: a field is a list if any occurrence
    makes it one, and its type is widened across occurrences. A field stays a
    container only if every occurrence is a container of the same item.
    """
    resolver = FieldShapeResolver(model, plural_to_singular)
    result: dict[str, dict[str, FieldShape]] = {}

    for record in model.elements:
        if record.inferred_type != ElementType.COMPOSITE:
            continue

        shapes = resolver.resolve_record(record)
        merged = result.setdefault(record.name, {})
        for child_name, shape in shapes.items():
            if child_name in merged:
                merged[child_name] = _merge_shapes(child_name, merged[child_name], shape)
            else:
                merged[child_name] = shape

    return result
