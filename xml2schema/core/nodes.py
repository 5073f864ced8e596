"""Helpers for reading names, attributes and text off lxml elements."""

from typing import Iterator

from lxml import etree

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def child_elements(node: etree._Element) -> Iterator[etree._Element]:
    """Direct child elements, skipping comments, PIs and entity references."""
    return node.iterchildren(tag=etree.Element)


def has_child_elements(node: etree._Element) -> bool:
    return next(child_elements(node), None) is not None


def element_name(node: etree._Element) -> str:
    """Name as written in the document, e.g. ``book`` or ``dc:title``."""
    local_name = etree.QName(node).localname
    if node.prefix:
        return f"{node.prefix}:{local_name}"
    return local_name


def _attribute_name(key: str, nsmap: dict) -> str:
    if not key.startswith("{"):
        return key

    qname = etree.QName(key)
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"

    for prefix, uri in nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def attribute_map(node: etree._Element) -> dict[str, str]:
    """Attributes keyed by qualified name; namespace declarations excluded."""
    return {_attribute_name(key, node.nsmap): value for key, value in node.attrib.items()}


def text_content(node: etree._Element) -> str:
    """All descendant text, comments and processing instructions excluded."""
    return str(node.xpath("string()"))
