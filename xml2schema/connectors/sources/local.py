"""Local file system source connector."""

from pathlib import Path
from typing import Any, Iterator

from xml2schema.connectors import DocumentRef

# Files to skip (not actual documents)
SKIP_FILES = {".gitkeep", ".gitignore", ".DS_Store"}

DEFAULT_EXTENSIONS = (".xml",)


class LocalSource:
    """Source connector for XML files in a local directory."""

    def __init__(self, config: dict[str, Any]):
        """Initialize local source.

        Config:
            path: Directory path to read from (required)
            extensions: File extensions to include (default: [".xml"])
        """
        path = config.get("path")
        if not path:
            raise ValueError("LocalSource requires 'path' in config")
        self.path = Path(path)

        extensions = config.get("extensions") or DEFAULT_EXTENSIONS
        if isinstance(extensions, str):
            extensions = [extensions]
        self.extensions = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in extensions
        }

    def connect(self) -> None:
        """Verify the source directory exists."""
        if not self.path.exists():
            raise FileNotFoundError(
                f"Source directory not found: {self.path}\n"
                f"Create the directory and add XML documents to analyse."
            )
        if not self.path.is_dir():
            raise ValueError(f"Source path is not a directory: {self.path}")

    def iter_documents(self) -> Iterator[DocumentRef]:
        """Yield matching documents recursively, sorted by path."""
        yield from self._iter_directory(self.path)

    def _iter_directory(self, directory: Path) -> Iterator[DocumentRef]:
        for item in sorted(directory.iterdir()):
            if item.is_dir():
                yield from self._iter_directory(item)
            elif item.is_file() and self._accepts(item):
                yield DocumentRef(
                    id=str(item),  # Full path as ID
                    name=item.name,
                    size_bytes=item.stat().st_size,
                    metadata={"relative_path": str(item.relative_to(self.path))},
                )

    def _accepts(self, item: Path) -> bool:
        if item.name in SKIP_FILES:
            return False
        return item.suffix.lower() in self.extensions

    def get_document_path(self, doc_ref: DocumentRef) -> Path:
        """Return the local path (already local, no download needed)."""
        return Path(doc_ref.id)

    def close(self) -> None:
        """No cleanup needed for local files."""
        pass

    def __enter__(self) -> "LocalSource":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
