"""Content sources the index reads posts from."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path, PurePath

from mdblog.core.errors import SourceEnumerationError, SourceReadError


class ContentSource(ABC):
    """Abstract base class for post sources."""

    @abstractmethod
    def list_names(self) -> list[str]:
        """List entry names in the collection.

        Raises SourceEnumerationError if the collection cannot be listed.
        """
        ...

    @abstractmethod
    def read(self, name: str) -> bytes:
        """Read the raw bytes of one entry.

        Raises SourceReadError if the entry cannot be read.
        """
        ...


class DirectorySource(ContentSource):
    """Posts stored as files in a single directory.

    Only entries matching ``pattern`` are listed, sorted by name.
    """

    def __init__(self, base_path: Path, pattern: str = "*.md"):
        self.base_path = Path(base_path)
        self.pattern = pattern

    def list_names(self) -> list[str]:
        """List matching entry names."""
        if not self.base_path.is_dir():
            raise SourceEnumerationError(
                str(self.base_path), "directory does not exist"
            )
        # iterdir raises on unreadable directories where glob returns nothing
        try:
            names = [
                path.name
                for path in self.base_path.iterdir()
                if PurePath(path.name).match(self.pattern)
            ]
        except OSError as e:
            raise SourceEnumerationError(str(self.base_path), str(e)) from e
        return sorted(names)

    def read(self, name: str) -> bytes:
        """Read a file from the directory."""
        try:
            return (self.base_path / name).read_bytes()
        except OSError as e:
            raise SourceReadError(name, e.strerror or str(e)) from e


class MappingSource(ContentSource):
    """Posts held in memory, keyed by entry name."""

    def __init__(self, entries: Mapping[str, bytes | str]):
        self.entries = dict(entries)

    def list_names(self) -> list[str]:
        """List entry names in insertion order."""
        return list(self.entries)

    def read(self, name: str) -> bytes:
        """Return an entry's content as bytes."""
        try:
            content = self.entries[name]
        except KeyError:
            raise SourceReadError(name, "no such entry") from None
        if isinstance(content, str):
            return content.encode("utf-8")
        return content
