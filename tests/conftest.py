"""Shared pytest fixtures for xml2schema tests."""

import pytest
import tempfile
from pathlib import Path


BOOK_XML = """<book>
  <title>X</title>
  <author>Y</author>
</book>
"""

LIBRARY_XML = """<library>
  <book><title>A</title></book>
  <book><title>B</title></book>
</library>
"""

CATALOG_XML = """<?xml version="1.0" encoding="UTF-8"?>
<catalog name="main">
  <books>
    <book id="1">
      <title>Dune</title>
      <price>9.99</price>
      <pages>412</pages>
      <authors>
        <author>Frank Herbert</author>
      </authors>
    </book>
    <book id="2">
      <title>Emma</title>
      <price>5</price>
      <pages>320</pages>
      <authors>
        <author>Jane Austen</author>
      </authors>
    </book>
  </books>
  <categories>
    <category>fiction</category>
    <category>classics</category>
  </categories>
</catalog>
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def book_xml():
    """Single book with two leaf children."""
    return BOOK_XML


@pytest.fixture
def library_xml():
    """Library holding two books."""
    return LIBRARY_XML


@pytest.fixture
def catalog_xml():
    """Catalog with plural container elements and attributes."""
    return CATALOG_XML


@pytest.fixture
def sources_dir(temp_dir):
    """Sources directory with two valid documents and one malformed one."""
    sources = temp_dir / "sources"
    sources.mkdir()
    (sources / "book.xml").write_text(BOOK_XML)
    (sources / "library.xml").write_text(LIBRARY_XML)
    (sources / "broken.xml").write_text("<root><unclosed></root>")
    (sources / "notes.txt").write_text("not xml")
    return sources


@pytest.fixture
def sample_config_yaml():
    """Return valid config YAML for testing."""
    return """source:
  type: local
  path: sources/

destination:
  type: jsonl
  path: outputs/schema.jsonl
  timestamp: false

naming:
  strategy: english
  aliases:
    people: person

analysis:
  relationships:
    - one_to_many
    - hierarchical
  workers: 2
"""


@pytest.fixture
def sample_config_file(temp_dir, sample_config_yaml):
    """Create a temporary config file."""
    config_file = temp_dir / "xml2schema.yml"
    config_file.write_text(sample_config_yaml)
    return config_file
