import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from lxml import etree

from xml2schema.config.loader import Config
from xml2schema.core.exceptions import InputError
from xml2schema.core.naming import PluralToSingular, build_strategy, english_singular
from xml2schema.core.parsing import parse_document, parse_file
from xml2schema.core.relationships import RelationshipDetector
from xml2schema.core.resolver import resolve_model
from xml2schema.core.scanner import StructureScanner
from xml2schema.models.metadata import AnalysisMetadata, RunMetadata
from xml2schema.models.relations import RelationKind
from xml2schema.models.result import AnalysisResult, FailedAnalysis

# Import connectors to register them
import xml2schema.connectors.sources  # noqa: F401
import xml2schema.connectors.destinations  # noqa: F401
from xml2schema.connectors import get_source, get_destination


class StructureAnalyzer:
    """Runs the whole inference pipeline: parse -> scan -> relate -> resolve.

    Every call is independent; the analyzer holds configuration only, so one
    instance can serve several threads at once.
    """

    def __init__(
        self,
        scanner: Optional[StructureScanner] = None,
        detector: Optional[RelationshipDetector] = None,
        plural_to_singular: Optional[PluralToSingular] = english_singular,
        naming_strategy: str = "english",
    ):
        self.scanner = scanner or StructureScanner()
        self.detector = detector or RelationshipDetector()
        self.plural_to_singular = plural_to_singular
        self.naming_strategy = naming_strategy
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: Config) -> "StructureAnalyzer":
        """Build an analyzer from loaded configuration."""
        return cls(
            scanner=StructureScanner(detect_booleans=config.scanner.detect_booleans),
            detector=RelationshipDetector(config.analysis.relationships),
            plural_to_singular=build_strategy(config.naming.strategy, config.naming.aliases),
            naming_strategy=config.naming.strategy,
        )

    def analyze(self, content: Union[str, bytes], source: str = "<string>") -> AnalysisResult:
        """Analyse raw XML content.

        Raises:
            InputError: If the content is empty or not well-formed
        """
        root = parse_document(content, source=source)
        return self.analyze_tree(root, source=source)

    def analyze_file(self, path: Union[str, Path]) -> AnalysisResult:
        """Analyse an XML file on disk."""
        root = parse_file(path)
        return self.analyze_tree(root, source=str(path))

    def analyze_tree(
        self,
        root: Union[etree._Element, etree._ElementTree],
        source: str = "<tree>",
    ) -> AnalysisResult:
        """Analyse an already-parsed document."""
        schema = self.scanner.scan(root)
        relations = self.detector.detect(schema)
        field_shapes = resolve_model(schema, self.plural_to_singular)

        result = AnalysisResult(
            source=source,
            schema=schema,
            one_to_many=relations[RelationKind.ONE_TO_MANY],
            many_to_many=relations[RelationKind.MANY_TO_MANY],
            parent_child=relations[RelationKind.HIERARCHICAL],
            field_shapes=field_shapes,
        )
        self.logger.debug(
            f"Analysed {source}: root <{schema.root_element_name}>, "
            f"{len(schema.elements)} elements, {len(result.relationships)} relations"
        )
        return result

    def analyze_many(
        self,
        paths: list[Union[str, Path]],
        workers: int = 1,
    ) -> list[AnalysisResult]:
        """Analyse several files, optionally in parallel threads.

        Results come back in input order. The first InputError propagates.
        """
        if workers <= 1 or len(paths) <= 1:
            return [self.analyze_file(path) for path in paths]

        self.logger.info(f"Analysing {len(paths)} documents with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.analyze_file, paths))

    def run(self, config: Config) -> RunMetadata:
        """Main execution flow: read documents -> analyse -> write JSONL.

        Documents that fail to parse are logged, written as error records and
        skipped; the run carries on with the next one.
        """
        source_config = config.get_source_config()
        dest_config = config.get_destination_config()

        source = get_source(source_config.type, source_config.config)
        destination = get_destination(dest_config.type, dest_config.config)

        self.logger.info(f"Source: {source_config.type}")
        self.logger.info(f"Destination: {dest_config.type}")

        run_meta = RunMetadata(
            started_at=datetime.now(),
            naming_strategy=self.naming_strategy,
            relationships=[kind.value for kind in self.detector.kinds],
        )

        with source, destination:
            doc_refs = list(source.iter_documents())
            self.logger.info(f"Found {len(doc_refs)} document(s)")

            paths = [source.get_document_path(ref) for ref in doc_refs]
            workers = config.analysis.workers

            if workers > 1 and len(paths) > 1:
                with ThreadPoolExecutor(max_workers=workers) as executor:
                    outcomes = list(executor.map(self._analyze_safely, paths))
            else:
                outcomes = [self._analyze_safely(path) for path in paths]

            for doc_ref, (outcome, file_meta) in zip(doc_refs, outcomes):
                file_meta.size_bytes = doc_ref.size_bytes
                destination.write_record(outcome.to_output_dict())
                run_meta.analyses.append(file_meta)
                run_meta.files_processed += 1
                if file_meta.success:
                    run_meta.files_succeeded += 1
                else:
                    run_meta.files_failed += 1

            run_meta.completed_at = datetime.now()

            destination.write_metadata(run_meta.to_summary_dict())
            for analysis in run_meta.analyses:
                destination.write_metadata({"_type": "analysis", **analysis.to_dict()})

            self.logger.info(
                f"Analysed {run_meta.files_succeeded} document(s), "
                f"{run_meta.files_failed} failed"
            )

        return run_meta

    def _analyze_safely(self, path: Path) -> tuple[Union[AnalysisResult, FailedAnalysis], AnalysisMetadata]:
        """Analyse one file, turning an InputError into a failure record."""
        started = datetime.now()
        self.logger.info(f"Processing: {path}")

        try:
            result = self.analyze_file(path)
        except InputError as e:
            self.logger.error(f"Failed to analyse {path}: {e}")
            cause = str(e.original_error) if e.original_error else None
            meta = AnalysisMetadata(
                source_file=str(path),
                started_at=started,
                completed_at=datetime.now(),
                success=False,
                error=str(e),
            )
            return FailedAnalysis(source=str(path), error=str(e), cause=cause), meta

        meta = AnalysisMetadata(
            source_file=str(path),
            started_at=started,
            completed_at=datetime.now(),
            success=True,
            element_count=len(result.schema.elements),
            distinct_names=len(result.schema.element_frequency),
            relation_count=len(result.relationships),
        )
        return result, meta
