"""Connector framework for document sources and result destinations."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Any, Iterator, Optional, runtime_checkable


@dataclass
class DocumentRef:
    """Reference to a document in a source."""

    id: str  # Unique ID in source system
    name: str  # Display name / filename
    size_bytes: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)  # Source-specific metadata


@runtime_checkable
class SourceConnector(Protocol):
    """Protocol for document source connectors."""

    def connect(self) -> None:
        """Verify or open the source."""
        ...

    def iter_documents(self) -> Iterator[DocumentRef]:
        """Yield available documents one by one."""
        ...

    def get_document_path(self, doc_ref: DocumentRef) -> Path:
        """Get local path for a document."""
        ...

    def close(self) -> None:
        """Clean up resources."""
        ...

    def __enter__(self) -> "SourceConnector":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@runtime_checkable
class DestinationConnector(Protocol):
    """Protocol for result destination connectors."""

    def connect(self) -> None:
        """Open the destination."""
        ...

    def write_record(self, record: dict[str, Any]) -> None:
        """Write a single analysis result."""
        ...

    def write_metadata(self, metadata: dict[str, Any]) -> None:
        """Write run metadata."""
        ...

    def flush(self) -> None:
        """Force write of buffered data."""
        ...

    def close(self) -> None:
        """Clean up."""
        ...

    def __enter__(self) -> "DestinationConnector":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class ConnectorRegistry:
    """Registry mapping connector type names to classes."""

    def __init__(self, kind: str):
        self.kind = kind
        self._connectors: dict[str, type] = {}

    def register(self, type_name: str, connector_class: type) -> None:
        """Register a connector class."""
        self._connectors[type_name] = connector_class

    def get(self, type_name: str) -> type:
        """Get a connector class by type name."""
        if type_name not in self._connectors:
            available = ", ".join(self._connectors.keys()) or "none"
            raise ValueError(
                f"Unknown {self.kind} type: '{type_name}'. Available: {available}"
            )
        return self._connectors[type_name]

    def create(self, type_name: str, config: dict[str, Any]) -> Any:
        """Create and return a connector instance."""
        connector_class = self.get(type_name)
        return connector_class(config)

    @property
    def types(self) -> list[str]:
        return list(self._connectors)


# Global registries
_source_registry = ConnectorRegistry("source")
_destination_registry = ConnectorRegistry("destination")


def register_source(type_name: str, connector_class: type) -> None:
    """Register a source connector with the global registry."""
    _source_registry.register(type_name, connector_class)


def register_destination(type_name: str, connector_class: type) -> None:
    """Register a destination connector with the global registry."""
    _destination_registry.register(type_name, connector_class)


def get_source(type_name: str, config: dict[str, Any]) -> SourceConnector:
    """Get a source connector instance from the global registry."""
    return _source_registry.create(type_name, config)


def get_destination(type_name: str, config: dict[str, Any]) -> DestinationConnector:
    """Get a destination connector instance from the global registry."""
    return _destination_registry.create(type_name, config)
