"""Structural scanner: one depth-first walk over a parsed document.

The scan produces one ``ElementRecord`` per element node (repeated names give
repeated records) and a document-wide name -> count table. Children are
scanned before their parent's record is built, so in the flat list every
descendant comes before its ancestors and the root record is last.

Counting is document-wide, not per parent: every record of a repeated name
reads the running total for that name when the record is built.
"""

import logging
from typing import Optional, Union

from lxml import etree

from xml2schema.core.exceptions import InputError
from xml2schema.core.nodes import attribute_map, child_elements, element_name
from xml2schema.core.patterns import detect_patterns
from xml2schema.core.resolver import classify_type
from xml2schema.models.schema import ChildDescriptor, ElementRecord, SchemaModel

logger = logging.getLogger(__name__)


class StructureScanner:
    """Builds a SchemaModel from an lxml element tree."""

    def __init__(self, detect_booleans: bool = False):
        """Initialize the scanner.

        Args:
            detect_booleans: Classify ``true``/``false`` leaf text as Boolean
        """
        self.detect_booleans = detect_booleans

    def scan(self, root: Union[etree._Element, etree._ElementTree, None]) -> SchemaModel:
        """Scan a parsed document.

        Args:
            root: Root element, or an element tree wrapping one

        Returns:
            The complete SchemaModel

        Raises:
            InputError: If there is no root element
        """
        if isinstance(root, etree._ElementTree):
            root = root.getroot()
        if root is None:
            raise InputError("Document has no root element")

        frequency: dict[str, int] = {}
        elements: list[ElementRecord] = []

        self._visit(root, None, elements, frequency)
        patterns = detect_patterns(elements, frequency)

        root_name = element_name(root)
        logger.debug(
            f"Scanned <{root_name}>: {len(elements)} elements, "
            f"{len(frequency)} distinct names, {len(patterns)} patterns"
        )

        return SchemaModel(
            root_element_name=root_name,
            elements=tuple(elements),
            element_frequency=frequency,
            patterns=tuple(patterns),
        )

    def _visit(
        self,
        node: etree._Element,
        parent_name: Optional[str],
        elements: list[ElementRecord],
        frequency: dict[str, int],
    ) -> None:
        name = element_name(node)
        frequency[name] = frequency.get(name, 0) + 1

        attributes = attribute_map(node)

        children: list[ChildDescriptor] = []
        for child in child_elements(node):
            children.append(ChildDescriptor(
                name=element_name(child),
                inferred_type=classify_type(child, self.detect_booleans),
                parent_name=name,
            ))
            self._visit(child, name, elements, frequency)

        # Count is read after the subtree, so a self-nested name sees its inner occurrences
        elements.append(ElementRecord(
            name=name,
            inferred_type=classify_type(node, self.detect_booleans),
            parent_name=parent_name,
            children=tuple(children),
            attributes=attributes,
            occurrence_count=frequency[name],
        ))


def scan(root: Union[etree._Element, etree._ElementTree, None], detect_booleans: bool = False) -> SchemaModel:
    """Scan a parsed document with a default scanner."""
    return StructureScanner(detect_booleans=detect_booleans).scan(root)
