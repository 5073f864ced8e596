"""Tests for parsing and the structural scanner."""

import pytest
from lxml import etree

from xml2schema.core.exceptions import EmptyDocumentError, InputError
from xml2schema.core.parsing import parse_document, parse_file
from xml2schema.core.scanner import StructureScanner, scan
from xml2schema.models.schema import ElementType


def scan_text(content: str, **kwargs):
    return scan(parse_document(content), **kwargs)


class TestParseDocument:
    """Tests for parse_document and parse_file."""

    @pytest.mark.parametrize("content", ["", "   \n\t ", b"", b"  "])
    def test_empty_input_rejected(self, content):
        """Test that empty or whitespace-only content raises EmptyDocumentError."""
        with pytest.raises(EmptyDocumentError):
            parse_document(content)

    def test_empty_error_is_input_error(self):
        """Test that EmptyDocumentError is an InputError."""
        with pytest.raises(InputError):
            parse_document("")

    def test_malformed_input_rejected(self):
        """Test that unclosed tags raise InputError with the lxml error attached."""
        with pytest.raises(InputError) as exc_info:
            parse_document("<root><unclosed></root>", source="broken.xml")

        assert "broken.xml" in str(exc_info.value)
        assert exc_info.value.source == "broken.xml"
        assert isinstance(exc_info.value.original_error, etree.XMLSyntaxError)
        assert exc_info.value.__cause__ is exc_info.value.original_error

    def test_text_only_rejected(self):
        """Test that content with no element at all is rejected."""
        with pytest.raises(InputError):
            parse_document("just some text")

    def test_encoding_declaration_in_text(self):
        """Test that a str carrying an encoding declaration still parses."""
        root = parse_document('<?xml version="1.0" encoding="UTF-8"?><a>é</a>')
        assert root.tag == "a"
        assert root.text == "é"

    def test_foreign_encoding_declaration_in_text(self):
        """Test that a str declaring a non-UTF-8 encoding keeps its characters."""
        content = '<?xml version="1.0" encoding="ISO-8859-1"?><a x="é">é</a>'
        root = parse_document(content)

        assert root.text == "é"
        assert root.get("x") == "é"
        assert scan(root).root.attributes == {"x": "é"}

    def test_encoding_declaration_in_bytes(self):
        """Test that bytes are decoded with the encoding they declare."""
        content = '<?xml version="1.0" encoding="ISO-8859-1"?><a>é</a>'.encode("iso-8859-1")
        assert parse_document(content).text == "é"

    def test_entities_not_expanded(self):
        """Test that internal entities are left unresolved."""
        content = '<!DOCTYPE r [<!ENTITY e "expanded">]><r>&e;</r>'
        root = parse_document(content)
        assert "expanded" not in (root.text or "")

    def test_parse_file(self, temp_dir, book_xml):
        """Test parsing a file from disk."""
        path = temp_dir / "book.xml"
        path.write_text(book_xml)

        root = parse_file(path)
        assert root.tag == "book"

    def test_parse_empty_file(self, temp_dir):
        """Test that an empty file carries its path in the error."""
        path = temp_dir / "empty.xml"
        path.write_text("")

        with pytest.raises(EmptyDocumentError) as exc_info:
            parse_file(path)
        assert exc_info.value.source == str(path)


class TestScanBook:
    """Tests for scanning a simple single-level document."""

    def test_element_order(self, book_xml):
        """Test that children come before their parent in the flat list."""
        model = scan_text(book_xml)

        assert [e.name for e in model.elements] == ["title", "author", "book"]
        assert model.root_element_name == "book"
        assert model.root.name == "book"

    def test_frequency(self, book_xml):
        """Test that every name is counted once."""
        model = scan_text(book_xml)
        assert model.element_frequency == {"book": 1, "title": 1, "author": 1}
        assert model.patterns == ()

    def test_types_and_parents(self, book_xml):
        """Test inferred types and parent names."""
        model = scan_text(book_xml)
        title, author, book = model.elements

        assert title.inferred_type == ElementType.STRING
        assert title.parent_name == "book"
        assert author.parent_name == "book"
        assert book.inferred_type == ElementType.COMPOSITE
        assert book.parent_name is None
        assert book.is_root

    def test_children_are_descriptors(self, book_xml):
        """Test that the root record carries stubs for its direct children."""
        model = scan_text(book_xml)
        book = model.root

        assert book.child_names == ["title", "author"]
        for child in book.children:
            assert child.parent_name == "book"
            assert child.occurrence_count == 1
            assert child.children == ()
            assert child.attributes == {}

    def test_deterministic(self, book_xml):
        """Test that scanning the same document twice gives equal models."""
        assert scan_text(book_xml) == scan_text(book_xml)

    def test_accepts_element_tree(self, book_xml):
        """Test that an ElementTree wrapper is unwrapped."""
        tree = etree.ElementTree(parse_document(book_xml))
        assert scan(tree).root_element_name == "book"

    def test_none_root_rejected(self):
        """Test that a missing root raises InputError."""
        with pytest.raises(InputError):
            StructureScanner().scan(None)


class TestScanRepeated:
    """Tests for documents with repeated element names."""

    def test_global_frequency(self, library_xml):
        """Test that counts are document-wide."""
        model = scan_text(library_xml)
        assert model.element_frequency == {"library": 1, "book": 2, "title": 2}
        assert model.element_names == ["library", "book", "title"]

    def test_occurrence_count_read_at_build_time(self, library_xml):
        """Test that earlier occurrences carry the count seen so far."""
        model = scan_text(library_xml)

        assert [(e.name, e.occurrence_count) for e in model.elements] == [
            ("title", 1),
            ("book", 1),
            ("title", 2),
            ("book", 2),
            ("library", 1),
        ]
        assert not model.elements[1].is_collection
        assert model.elements[3].is_collection

    def test_self_nested_counts(self):
        """Test that a self-nested name sees all its inner occurrences."""
        model = scan_text("<node><node><node/></node></node>")

        assert model.element_frequency == {"node": 3}
        assert [e.occurrence_count for e in model.elements] == [3, 3, 3]
        assert [e.parent_name for e in model.elements] == ["node", "node", None]

    def test_patterns(self, library_xml):
        """Test that a pattern is built for each repeated name."""
        model = scan_text(library_xml)

        assert [p.pattern_name for p in model.patterns] == ["book_pattern", "title_pattern"]
        book_pattern = model.patterns[0]
        assert book_pattern.element_names == ("book",)
        assert book_pattern.similarity_score == 1.0
        assert book_pattern.parent_context == "library"
        assert book_pattern.is_repeating


class TestScanDetails:
    """Tests for attributes, namespaces, comments and mixed content."""

    def test_attributes(self, catalog_xml):
        """Test that attributes are recorded per element."""
        model = scan_text(catalog_xml)

        assert model.root.attributes == {"name": "main"}
        books = model.records_named("book")
        assert [b.attributes for b in books] == [{"id": "1"}, {"id": "2"}]

    def test_namespaced_names(self):
        """Test prefixed element and attribute names."""
        content = (
            '<r xmlns:dc="http://purl.org/dc/elements/1.1/">'
            '<dc:title xml:lang="en">T</dc:title>'
            '</r>'
        )
        model = scan_text(content)
        title, root = model.elements

        assert title.name == "dc:title"
        assert title.attributes == {"xml:lang": "en"}
        assert root.attributes == {}
        assert root.child_names == ["dc:title"]

    def test_comments_ignored(self):
        """Test that comments neither count as children nor break typing."""
        model = scan_text("<a><!-- note --><b>12<!-- x -->3</b></a>")

        assert model.root.child_names == ["b"]
        assert model.elements[0].inferred_type == ElementType.INTEGER

    def test_mixed_content_is_composite(self):
        """Test that text alongside child elements is still Composite."""
        model = scan_text("<p>Some <b>bold</b> text</p>")
        assert model.root.inferred_type == ElementType.COMPOSITE

    def test_leaf_root(self):
        """Test a document that is a single leaf element."""
        model = scan_text("<value>42</value>")

        assert len(model.elements) == 1
        assert model.root.inferred_type == ElementType.INTEGER
        assert model.root.is_complex

    def test_detect_booleans(self):
        """Test that boolean detection is opt-in."""
        content = "<flags><on>true</on></flags>"

        assert scan_text(content).elements[0].inferred_type == ElementType.STRING
        assert scan_text(content, detect_booleans=True).elements[0].inferred_type == ElementType.BOOLEAN
