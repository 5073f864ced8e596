"""JSONL file destination connector."""

import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO


class JSONLDestination:
    """Destination connector for local JSONL files.

    Writes one line per analysed document and a sibling ``.meta.jsonl`` file
    with the run summary and per-document metadata.
    """

    def __init__(self, config: dict[str, Any]):
        """Initialize JSONL destination.

        Config:
            path: Output file path (required)
            timestamp: Whether to add timestamp suffix to filename (default: True)
        """
        path = config.get("path")
        if not path:
            raise ValueError("JSONLDestination requires 'path' in config")
        base_path = Path(path)

        # Add timestamp suffix to avoid overwriting previous runs
        if config.get("timestamp", True):
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.path = base_path.with_name(f"{base_path.stem}_{timestamp}{base_path.suffix}")
        else:
            self.path = base_path

        self._file: Optional[TextIO] = None
        self._meta_file: Optional[TextIO] = None
        # Map source_file -> analysis_id (UUID) for linking metadata
        self._analysis_ids: dict[str, str] = {}

    def connect(self) -> None:
        """Open the output files for writing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", encoding="utf-8")
        self._meta_file = open(self.metadata_path, "w", encoding="utf-8")

    def write_record(self, record: dict[str, Any]) -> None:
        """Write a single analysis result as a JSON line."""
        if self._file is None:
            raise RuntimeError("Destination not connected. Call connect() first.")

        analysis_id = str(uuid.uuid4())
        self._analysis_ids[record.get("_source_file")] = analysis_id

        output = {"_analysis_id": analysis_id, **record}
        self._file.write(json.dumps(output) + "\n")

    def write_metadata(self, metadata: dict[str, Any]) -> None:
        """Write metadata to the metadata file."""
        if self._meta_file is None:
            raise RuntimeError("Destination not connected. Call connect() first.")

        if metadata.get("_type") == "analysis":
            analysis_id = self._analysis_ids.pop(metadata.get("source_file"), None)
            if analysis_id:
                metadata = {"analysis_id": analysis_id, **metadata}

        self._meta_file.write(json.dumps(metadata) + "\n")

    def flush(self) -> None:
        """Force write of buffered data."""
        if self._file:
            self._file.flush()
        if self._meta_file:
            self._meta_file.flush()

    def close(self) -> None:
        """Close the output files."""
        if self._file:
            self._file.close()
            self._file = None
        if self._meta_file:
            self._meta_file.close()
            self._meta_file = None
        self._analysis_ids = {}

    def __enter__(self) -> "JSONLDestination":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def output_path(self) -> Path:
        """Return the output path for logging."""
        return self.path

    @property
    def metadata_path(self) -> Path:
        """Return the metadata path for logging."""
        return self.path.with_name(f"{self.path.stem}.meta{self.path.suffix}")
