"""Filesystem access used while assembling a package."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Tuple

PathSegments = Tuple[str, ...]


class FileSystem(ABC):
    """Read-only view of a package directory.

    Every path handed to these methods is relative to the package root.
    """

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        """Return True when ``path`` is an existing directory."""

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Return True when ``path`` is an existing regular file."""

    @abstractmethod
    def list_files_recursive(self, path: str) -> Iterator[PathSegments]:
        """Yield every file under ``path`` as segments relative to ``path``."""

    @abstractmethod
    def current_directory_name(self) -> str:
        """Return the base name of the package root."""


def _raise_walk_error(error: OSError) -> None:
    raise error


def walk_files(root: Path) -> Iterator[PathSegments]:
    """Yield files under ``root`` recursively as relative segment tuples.

    A directory's own files come first, sorted, followed by its subdirectories
    in sorted order. A missing ``root`` raises ``FileNotFoundError``.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        current_dir = Path(dirpath)
        prefix = current_dir.relative_to(root).parts if current_dir != root else ()
        for filename in sorted(filenames):
            yield prefix + (filename,)


class LocalFileSystem(FileSystem):
    """FileSystem backed by the real disk, rooted at a package directory."""

    def __init__(self, root: Path | str = ".") -> None:
        self.root = Path(root).expanduser().resolve()

    def directory_exists(self, path: str) -> bool:
        return (self.root / path).is_dir()

    def file_exists(self, path: str) -> bool:
        return (self.root / path).is_file()

    def list_files_recursive(self, path: str) -> Iterator[PathSegments]:
        return walk_files(self.root / path)

    def current_directory_name(self) -> str:
        return self.root.name


__all__ = ["FileSystem", "LocalFileSystem", "PathSegments", "walk_files"]
