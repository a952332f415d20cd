"""Module discovery: source files to module names, and exposed/other partitioning."""

from __future__ import annotations

from pathlib import PurePath
from typing import Iterable, List, Optional, Sequence, Tuple

from .filesystem import FileSystem
from .logging import get_logger

logger = get_logger("modules")

_SOURCE_SUFFIXES = (".hs", ".lhs")


def _is_module_component(segment: str) -> bool:
    return bool(segment) and "." not in segment and "/" not in segment and "\\" not in segment


def to_module(segments: Sequence[str]) -> Optional[str]:
    """Return the dotted module name for a relative source path, or None.

    ``["Foo", "Bar.hs"]`` becomes ``"Foo.Bar"``. Files without a Haskell source
    suffix, hidden files and files inside hidden directories yield None.
    """
    if not segments:
        return None
    *directories, filename = segments
    for suffix in _SOURCE_SUFFIXES:
        if filename.endswith(suffix):
            stem = filename[: -len(suffix)]
            break
    else:
        return None

    name = [*directories, stem]
    if not all(_is_module_component(part) for part in name):
        return None
    return ".".join(name)


def split_path(path: str) -> Tuple[str, ...]:
    """Split a manifest path into segments, dropping ``.`` components."""
    return tuple(part for part in PurePath(path).parts if part not in (".", ""))


def get_modules(filesystem: FileSystem, source_dirs: Iterable[str]) -> List[str]:
    """Discover module names under every source directory.

    Missing directories contribute nothing. The result keeps first-seen order
    and holds each module once, even when a directory is listed twice.
    """
    modules: List[str] = []
    seen = set()
    for source_dir in source_dirs:
        if not filesystem.directory_exists(source_dir):
            logger.debug("Skipping missing source directory %s", source_dir)
            continue
        found = 0
        for segments in filesystem.list_files_recursive(source_dir):
            module = to_module(segments)
            if module is None:
                continue
            found += 1
            if module not in seen:
                seen.add(module)
                modules.append(module)
        logger.debug("Found %d module(s) in %s", found, source_dir)
    return modules


def _difference(modules: Sequence[str], removed: Sequence[str]) -> List[str]:
    excluded = set(removed)
    return [module for module in modules if module not in excluded]


def determine_modules(
    modules: Sequence[str],
    exposed_modules: Optional[Sequence[str]],
    other_modules: Optional[Sequence[str]],
) -> Tuple[List[str], List[str]]:
    """Partition discovered modules into (exposed, other).

    Without overrides everything is exposed. Otherwise a missing list is the
    complement of the given one within ``modules``. Both sides are derived from
    ``modules`` independently; when the user supplies both lists they are
    returned as written, even if they overlap or leave modules out.
    """
    if exposed_modules is None and other_modules is None:
        return list(modules), []

    if other_modules is not None:
        other = list(other_modules)
    else:
        other = _difference(modules, exposed_modules or [])

    if exposed_modules is not None:
        exposed = list(exposed_modules)
    else:
        exposed = _difference(modules, other_modules or [])

    if exposed_modules is not None and other_modules is not None:
        overlap = sorted(set(exposed) & set(other))
        if overlap:
            logger.warning(
                "Modules listed as both exposed and other: %s", ", ".join(overlap)
            )

    return exposed, other


__all__ = ["determine_modules", "get_modules", "split_path", "to_module"]
