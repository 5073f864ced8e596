"""Tests for the StructureAnalyzer pipeline."""

import json
import logging

import pytest

from xml2schema.config.loader import (
    AnalysisConfig,
    Config,
    DestinationConfig,
    NamingConfig,
    ScannerConfig,
    SourceConfig,
)
from xml2schema.core.engine import StructureAnalyzer
from xml2schema.core.exceptions import EmptyDocumentError, InputError
from xml2schema.core.naming import no_containers
from xml2schema.models.relations import RelationKind
from xml2schema.models.schema import ElementType, FieldShape


def pipeline_config(sources_dir, output_path, workers=1):
    return Config(
        analysis=AnalysisConfig(workers=workers),
        source=SourceConfig(type="local", config={"path": str(sources_dir)}),
        destination=DestinationConfig(type="jsonl", config={"path": str(output_path), "timestamp": False}),
    )


class TestAnalyze:
    """Tests for single-document analysis."""

    def test_book(self, book_xml):
        result = StructureAnalyzer().analyze(book_xml)

        assert result.source == "<string>"
        assert [e.name for e in result.schema.elements] == ["title", "author", "book"]
        assert result.one_to_many == []
        assert result.many_to_many == []
        assert len(result.parent_child) == 2
        assert result.field_shapes == {
            "book": {
                "title": FieldShape(ElementType.STRING, False, "title"),
                "author": FieldShape(ElementType.STRING, False, "author"),
            }
        }

    def test_book_with_id(self):
        """Test a one-line book record with an id attribute, end to end."""
        content = '<book id="1"><title>Java Programming</title><author>John Doe</author></book>'
        result = StructureAnalyzer().analyze(content)
        schema = result.schema

        assert schema.root_element_name == "book"
        assert [e.name for e in schema.elements] == ["title", "author", "book"]
        assert schema.element_frequency == {"book": 1, "title": 1, "author": 1}
        assert schema.patterns == ()

        title, author, book = schema.elements
        assert title.inferred_type == ElementType.STRING
        assert author.inferred_type == ElementType.STRING
        assert book.inferred_type == ElementType.COMPOSITE
        assert book.attributes == {"id": "1"}
        assert book.child_names == ["title", "author"]
        assert book.is_root and book.is_complex
        assert result.complex_elements == ["book"]

        assert result.one_to_many == []
        assert result.many_to_many == []
        assert [(r.parent, r.child, r.depth) for r in result.parent_child] == [
            ("book", "title", 0),
            ("book", "author", 0),
        ]
        assert result.field_shapes == {
            "book": {
                "title": FieldShape(ElementType.STRING, False, "title"),
                "author": FieldShape(ElementType.STRING, False, "author"),
            }
        }

    def test_library(self, library_xml):
        result = StructureAnalyzer().analyze(library_xml)

        assert result.one_to_many[0].confidence == 0.7
        assert result.field_shapes["library"]["book"].is_list

    @pytest.mark.parametrize("content", ["", "  "])
    def test_empty(self, content):
        with pytest.raises(EmptyDocumentError):
            StructureAnalyzer().analyze(content)

    def test_malformed(self):
        with pytest.raises(InputError):
            StructureAnalyzer().analyze("<a><b></a>")

    def test_naming_strategy(self, catalog_xml):
        shapes = StructureAnalyzer(plural_to_singular=no_containers).analyze(catalog_xml).field_shapes
        assert shapes["catalog"]["books"].is_list is False

    def test_analyze_file(self, temp_dir, catalog_xml):
        path = temp_dir / "catalog.xml"
        path.write_bytes(catalog_xml.encode("utf-8"))

        result = StructureAnalyzer().analyze_file(path)
        assert result.source == str(path)
        assert result.schema.root_element_name == "catalog"


class TestFromConfig:
    """Tests for building an analyzer from configuration."""

    def test_settings_applied(self, library_xml):
        config = Config(
            scanner=ScannerConfig(detect_booleans=True),
            naming=NamingConfig(strategy="none"),
            analysis=AnalysisConfig(relationships=[RelationKind.HIERARCHICAL]),
        )
        analyzer = StructureAnalyzer.from_config(config)

        assert analyzer.scanner.detect_booleans is True
        assert analyzer.naming_strategy == "none"

        result = analyzer.analyze(library_xml)
        assert result.one_to_many == []
        assert len(result.parent_child) == 4

    def test_aliases(self):
        config = Config(naming=NamingConfig(aliases={"people": "person"}))
        result = StructureAnalyzer.from_config(config).analyze(
            "<team><people><person>a</person></people></team>"
        )
        assert result.field_shapes["team"]["people"].item_name == "person"


class TestAnalyzeMany:
    """Tests for analysing several files."""

    def test_order_preserved(self, sources_dir):
        paths = [sources_dir / "library.xml", sources_dir / "book.xml"]

        sequential = StructureAnalyzer().analyze_many(paths)
        threaded = StructureAnalyzer().analyze_many(paths, workers=2)

        assert [r.schema.root_element_name for r in sequential] == ["library", "book"]
        assert [r.schema.root_element_name for r in threaded] == ["library", "book"]
        assert [r.to_output_dict() for r in sequential] == [r.to_output_dict() for r in threaded]

    def test_error_propagates(self, sources_dir):
        with pytest.raises(InputError):
            StructureAnalyzer().analyze_many([sources_dir / "broken.xml"])


class TestRun:
    """Tests for the configured pipeline run."""

    @pytest.mark.parametrize("workers", [1, 2])
    def test_run(self, temp_dir, sources_dir, workers):
        """Test that valid documents are written and broken ones recorded."""
        output = temp_dir / "outputs" / "schema.jsonl"
        config = pipeline_config(sources_dir, output, workers=workers)

        run_meta = StructureAnalyzer.from_config(config).run(config)

        assert run_meta.files_processed == 3
        assert run_meta.files_succeeded == 2
        assert run_meta.files_failed == 1
        assert run_meta.total_elements == 8

        records = [json.loads(line) for line in output.read_text().splitlines()]
        assert [r.get("root_element") for r in records] == ["book", None, "library"]
        assert "Malformed XML" in records[1]["_error"]

        meta_path = output.with_name("schema.meta.jsonl")
        metadata = [json.loads(line) for line in meta_path.read_text().splitlines()]
        assert metadata[0]["_type"] == "run_summary"
        assert metadata[0]["files_failed"] == 1
        assert [m["analysis_id"] for m in metadata[1:]] == [r["_analysis_id"] for r in records]
        assert [m["success"] for m in metadata[1:]] == [True, False, True]
        assert metadata[1]["size_bytes"] == (sources_dir / "book.xml").stat().st_size

    def test_missing_sources(self, temp_dir):
        config = pipeline_config(temp_dir / "missing", temp_dir / "out.jsonl")
        with pytest.raises(FileNotFoundError):
            StructureAnalyzer().run(config)

    def test_failures_logged(self, temp_dir, sources_dir, caplog):
        """Test that a skipped document is logged under the engine's logger."""
        config = pipeline_config(sources_dir, temp_dir / "out.jsonl")

        with caplog.at_level(logging.INFO, logger="xml2schema.core.engine"):
            StructureAnalyzer().run(config)

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].name == "xml2schema.core.engine"
        assert "broken.xml" in errors[0].getMessage()
        assert any("Found 3 document(s)" in r.getMessage() for r in caplog.records)
