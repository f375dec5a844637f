"""File access used by the collection walker.

The walker only needs to list a directory and read a file. Both are
behind FileSource so a collection can also be served from memory
(tests, bundled collections).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool


class FileSource(ABC):
    """Read-only view of a directory tree."""

    @abstractmethod
    def exists(self, path: PurePath) -> bool:
        """True if path is an existing directory."""

    @abstractmethod
    def list_dir(self, path: PurePath) -> list[DirEntry]: ...

    @abstractmethod
    def read_text(self, path: PurePath) -> str: ...


class LocalFileSource(FileSource):
    """Reads collections from the local filesystem."""

    def exists(self, path: PurePath) -> bool:
        return Path(path).is_dir()

    def list_dir(self, path: PurePath) -> list[DirEntry]:
        # Symlinked folders are not followed, so a link to an ancestor cannot loop
        return [
            DirEntry(name=child.name, is_dir=child.is_dir() and not child.is_symlink())
            for child in sorted(Path(path).iterdir(), key=lambda p: p.name)
        ]

    def read_text(self, path: PurePath) -> str:
        return Path(path).read_text(encoding="utf-8")


class MemoryFileSource(FileSource):
    """In-memory directory tree built from ``{"a/b.bru": "text"}`` mappings.

    Directories are implied by file paths. A value that is an exception
    instance is raised when the file is read, to simulate unreadable files.
    """

    def __init__(self, files: dict[str, str | Exception], root: str = "/"):
        self.root = PurePosixPath(root)
        self._files: dict[PurePosixPath, str | Exception] = {}
        self._dirs: set[PurePosixPath] = {self.root}
        for rel, content in files.items():
            path = self.root / rel
            self._files[path] = content
            self._dirs.update(path.parents)

    def exists(self, path: PurePath) -> bool:
        return PurePosixPath(path) in self._dirs

    def list_dir(self, path: PurePath) -> list[DirEntry]:
        path = PurePosixPath(path)
        if path not in self._dirs:
            raise FileNotFoundError(str(path))
        entries = {p.name: DirEntry(p.name, True) for p in self._dirs if p.parent == path and p != path}
        entries.update({p.name: DirEntry(p.name, False) for p in self._files if p.parent == path})
        return [entries[name] for name in sorted(entries)]

    def read_text(self, path: PurePath) -> str:
        content = self._files.get(PurePosixPath(path))
        if content is None:
            raise FileNotFoundError(str(path))
        if isinstance(content, Exception):
            raise content
        return content
