"""Metadata models for pipeline observability."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Any


@dataclass
class AnalysisMetadata:
    """Metadata for a single document analysis."""
    source_file: str
    started_at: datetime
    completed_at: datetime
    success: bool

    # Document shape
    size_bytes: Optional[int] = None
    element_count: int = 0
    distinct_names: int = 0
    relation_count: int = 0

    # Error info
    error: Optional[str] = None

    @property
    def duration_ms(self) -> int:
        """Duration in milliseconds."""
        delta = self.completed_at - self.started_at
        return int(delta.total_seconds() * 1000)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSONL output."""
        result = {
            "source_file": self.source_file,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_ms": self.duration_ms,
            "success": self.success,
            "element_count": self.element_count,
            "distinct_names": self.distinct_names,
            "relation_count": self.relation_count,
        }

        if self.size_bytes is not None:
            result["size_bytes"] = self.size_bytes

        if self.error:
            result["error"] = self.error

        return result


@dataclass
class RunMetadata:
    """Metadata for a complete pipeline run."""
    started_at: datetime
    completed_at: Optional[datetime] = None

    # Analysis settings (for traceability)
    naming_strategy: str = ""
    relationships: list[str] = field(default_factory=list)

    # Aggregates
    files_processed: int = 0
    files_succeeded: int = 0
    files_failed: int = 0

    # Per-file metadata
    analyses: list[AnalysisMetadata] = field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        """Duration in milliseconds."""
        if not self.completed_at:
            return 0
        delta = self.completed_at - self.started_at
        return int(delta.total_seconds() * 1000)

    @property
    def total_elements(self) -> int:
        """Element records produced across all successful analyses."""
        return sum(a.element_count for a in self.analyses)

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary for the run header."""
        result = {
            "_type": "run_summary",
            "naming_strategy": self.naming_strategy,
            "relationships": list(self.relationships),
            "started_at": self.started_at.isoformat(),
            "files_processed": self.files_processed,
            "files_succeeded": self.files_succeeded,
            "files_failed": self.files_failed,
            "total_elements": self.total_elements,
        }

        if self.completed_at:
            result["completed_at"] = self.completed_at.isoformat()
            result["duration_ms"] = self.duration_ms

        return result
