"""Read-only directory access used to resolve linked files.

The resolver never touches :mod:`pathlib` directly; it goes through a
:class:`DirectoryAccessor` so documents can be rendered against the real file
system or against an in-memory tree in tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import os
from pathlib import Path, PurePath, PurePosixPath
import posixpath
from typing import Protocol, runtime_checkable


@runtime_checkable
class DirectoryAccessor(Protocol):
    """Capability interface exposing the file operations the resolver needs."""

    @property
    def root(self) -> PurePath: ...

    def resolve_path(
        self, path: str, current_directory: str | PurePath | None = None
    ) -> PurePath: ...

    def exists(self, path: PurePath) -> bool: ...

    def read_text(self, path: PurePath) -> str: ...

    def list_files(self, directory: PurePath) -> list[PurePath]: ...


class FileSystemDirectoryAccessor:
    """Accessor backed by the local file system."""

    def __init__(self, root: str | os.PathLike[str], *, encoding: str = "utf-8") -> None:
        self._root = Path(os.path.abspath(root))
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    def resolve_path(
        self, path: str, current_directory: str | PurePath | None = None
    ) -> Path:
        """Resolve ``path`` lexically against ``current_directory`` (itself relative to root)."""
        base = self._root
        if current_directory is not None:
            base = base / Path(current_directory)
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = base / candidate
        return Path(os.path.normpath(candidate))

    def exists(self, path: PurePath) -> bool:
        return Path(path).is_file()

    def read_text(self, path: PurePath) -> str:
        """Return the file contents with their line endings untouched."""
        with open(path, encoding=self._encoding, newline="") as handle:
            return handle.read()

    def list_files(self, directory: PurePath) -> list[PurePath]:
        try:
            entries = sorted(Path(directory).iterdir())
        except OSError:
            return []
        return [entry for entry in entries if entry.is_file()]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r})"


class InMemoryDirectoryAccessor:
    """Accessor serving a fixed set of files held in memory.

    Paths are POSIX style whatever the host platform. Files may be given as a
    mapping or as ``(relative_path, content)`` pairs::

        accessor = InMemoryDirectoryAccessor(
            "/sample",
            [("Program.cs", "..."), ("sample.csproj", "")],
        )
    """

    def __init__(
        self,
        root: str | PurePath = "/",
        files: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._root = PurePosixPath(posixpath.normpath(PurePosixPath("/") / PurePosixPath(root)))
        self._files: dict[PurePosixPath, str] = {}
        items = files.items() if isinstance(files, Mapping) else (files or ())
        for relative, content in items:
            self.add(relative, content)

    @property
    def root(self) -> PurePosixPath:
        return self._root

    def add(self, path: str, content: str) -> PurePosixPath:
        """Register ``content`` under ``path`` (relative to the root) and return its full path."""
        full_path = self.resolve_path(path)
        self._files[full_path] = content
        return full_path

    def resolve_path(
        self, path: str, current_directory: str | PurePath | None = None
    ) -> PurePosixPath:
        base = self._root
        if current_directory is not None:
            base = base / PurePosixPath(current_directory)
        candidate = PurePosixPath(path)
        if not candidate.is_absolute():
            candidate = base / candidate
        return PurePosixPath(posixpath.normpath(candidate))

    def exists(self, path: PurePath) -> bool:
        return PurePosixPath(path) in self._files

    def read_text(self, path: PurePath) -> str:
        try:
            return self._files[PurePosixPath(path)]
        except KeyError as exc:
            raise FileNotFoundError(str(path)) from exc

    def list_files(self, directory: PurePath) -> list[PurePath]:
        target = PurePosixPath(directory)
        return sorted(path for path in self._files if path.parent == target)

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._root)!r}, files={len(self._files)})"


__all__ = ["DirectoryAccessor", "FileSystemDirectoryAccessor", "InMemoryDirectoryAccessor"]
