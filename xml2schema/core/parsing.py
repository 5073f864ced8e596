"""Turn raw XML text into an lxml element tree.

Parsing is strict: there is no recovery mode, and any failure reported by
lxml surfaces as an ``InputError`` with the original exception attached.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from lxml import etree

from xml2schema.core.exceptions import EmptyDocumentError, InputError

logger = logging.getLogger(__name__)


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    """Parser that never fetches external resources or expands entities.

    ``encoding`` overrides whatever the document declares.
    """
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        remove_comments=False,
    )


def parse_document(content: Union[str, bytes], source: Optional[str] = None) -> etree._Element:
    """Parse XML content and return its root element.

    Args:
        content: Raw XML as text or bytes. Text is already decoded, so any
            encoding declaration it carries is ignored.
        source: Optional name used in error messages (usually a file name)

    Returns:
        The root element

    Raises:
        EmptyDocumentError: If the content is empty or whitespace only
        InputError: If the content is not well-formed XML
    """
    label = source or "<string>"

    if content is None or not content.strip():
        raise EmptyDocumentError(f"Document is empty: {label}", source=source)

    encoding = None
    if isinstance(content, str):
        content = content.encode("utf-8")
        encoding = "utf-8"
    parser = _make_parser(encoding)

    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as e:
        raise InputError(f"Malformed XML in {label}: {e}", source=source, original_error=e) from e
    except ValueError as e:
        raise InputError(f"Unreadable XML in {label}: {e}", source=source, original_error=e) from e

    if root is None:
        raise InputError(f"Document has no root element: {label}", source=source)

    logger.debug(f"Parsed {label}: root <{root.tag}>")
    return root


def parse_file(path: Union[str, Path]) -> etree._Element:
    """Read and parse an XML file.

    The file is read as bytes so the document's own encoding declaration is
    honoured.
    """
    path = Path(path)
    with open(path, "rb") as f:
        content = f.read()
    return parse_document(content, source=str(path))
