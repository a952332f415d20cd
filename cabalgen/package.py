"""Assemble a resolved Package from a parsed manifest."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import ConfigFile, ExecutableSection, LibrarySection, load_config
from .filesystem import FileSystem, LocalFileSystem
from .logging import get_logger
from .models import Dependency, Executable, GhcOption, Library, Package
from .modules import determine_modules, get_modules, split_path, to_module

logger = get_logger("package")

DEFAULT_VERSION = "0.0.0"
LICENSE_FILE = "LICENSE"
_GITHUB_URL = "https://github.com/"


def read_config(config_path: Path | str, filesystem: Optional[FileSystem] = None) -> Package:
    """Load a manifest and resolve it against the package directory.

    Unless a filesystem is injected, source directories are looked up relative
    to the directory holding the manifest. Raises ``ConfigError`` for manifest
    problems; filesystem errors while walking sources propagate unchanged.
    """
    config = load_config(config_path)
    if filesystem is None:
        filesystem = LocalFileSystem(config.path.parent)
    return make_package(config, filesystem)


def make_package(config: ConfigFile, filesystem: FileSystem) -> Package:
    """Build the Package record for ``config``."""
    source_dirs = _or_empty(config.source_dirs)
    dependencies = _or_empty(config.dependencies)
    ghc_options = _or_empty(config.ghc_options)

    library = None
    if config.library is not None:
        library = make_library(filesystem, source_dirs, dependencies, ghc_options, config.library)
    executables = make_executables(
        filesystem, source_dirs, dependencies, ghc_options, config.executables
    )
    tests = make_executables(filesystem, source_dirs, dependencies, ghc_options, config.tests)

    name = config.name if config.name is not None else filesystem.current_directory_name()
    license_file = LICENSE_FILE if filesystem.file_exists(LICENSE_FILE) else None
    source_repository = _GITHUB_URL + config.github if config.github is not None else None

    package = Package(
        name=name,
        version=config.version if config.version is not None else DEFAULT_VERSION,
        synopsis=config.synopsis,
        description=config.description,
        bug_reports=_bug_reports(config.bug_reports, source_repository),
        category=config.category,
        stability=config.stability,
        author=config.author,
        maintainer=config.maintainer,
        copyright=_or_empty(config.copyright),
        license=config.license,
        license_file=license_file,
        source_repository=source_repository,
        library=library,
        executables=executables,
        tests=tests,
    )
    logger.info(
        "Resolved package %s %s (%s library, %d executable(s), %d test(s))",
        package.name,
        package.version,
        "with" if library is not None else "no",
        len(executables),
        len(tests),
    )
    return package


def _bug_reports(declared: Optional[str], source_repository: Optional[str]) -> Optional[str]:
    # An explicit empty string switches bug reports off, github included.
    if declared == "":
        return None
    if declared is not None:
        return declared
    if source_repository is not None:
        return f"{source_repository}/issues"
    return None


def make_library(
    filesystem: FileSystem,
    global_source_dirs: Sequence[str],
    global_dependencies: Sequence[Dependency],
    global_ghc_options: Sequence[GhcOption],
    section: LibrarySection,
) -> Library:
    """Merge package-wide settings into the library and partition its modules."""
    source_dirs = [*global_source_dirs, *_or_empty(section.source_dirs)]
    modules = get_modules(filesystem, source_dirs)
    exposed_modules, other_modules = determine_modules(
        modules, section.exposed_modules, section.other_modules
    )
    return Library(
        source_dirs=source_dirs,
        exposed_modules=exposed_modules,
        other_modules=other_modules,
        dependencies=merge_dependencies(global_dependencies, section.dependencies),
        ghc_options=[*global_ghc_options, *_or_empty(section.ghc_options)],
    )


def make_executables(
    filesystem: FileSystem,
    global_source_dirs: Sequence[str],
    global_dependencies: Sequence[Dependency],
    global_ghc_options: Sequence[GhcOption],
    sections: Optional[Dict[str, ExecutableSection]],
) -> List[Executable]:
    """Build one Executable per entry, in declaration order."""
    executables: List[Executable] = []
    for name, section in (sections or {}).items():
        source_dirs = [*global_source_dirs, *_or_empty(section.source_dirs)]
        if section.other_modules is not None:
            other_modules = list(section.other_modules)
        else:
            other_modules = _filter_main(
                get_modules(filesystem, source_dirs), section.main, source_dirs
            )
        executables.append(
            Executable(
                name=name,
                main=section.main,
                source_dirs=source_dirs,
                other_modules=other_modules,
                dependencies=merge_dependencies(global_dependencies, section.dependencies),
                ghc_options=[*global_ghc_options, *_or_empty(section.ghc_options)],
            )
        )
    return executables


def merge_dependencies(
    global_dependencies: Sequence[Dependency], local_dependencies: Optional[Sequence[Dependency]]
) -> List[List[Dependency]]:
    """Return ``[package, target]`` dependency groups without the empty ones."""
    groups = [list(global_dependencies), _or_empty(local_dependencies)]
    return [group for group in groups if group]


def main_modules(main: str, source_dirs: Sequence[str]) -> List[str]:
    """Return the module names ``main`` may denote.

    The path is translated as written and, when it lies inside one of the
    source directories, relative to that directory as well.
    """
    main_path = split_path(main)
    candidates = [main_path]
    for source_dir in source_dirs:
        prefix = split_path(source_dir)
        if prefix and main_path[: len(prefix)] == prefix:
            candidates.append(main_path[len(prefix):])

    names: List[str] = []
    for candidate in candidates:
        module = to_module(candidate)
        if module is not None and module not in names:
            names.append(module)
    return names


def _filter_main(modules: Sequence[str], main: str, source_dirs: Sequence[str]) -> List[str]:
    excluded = main_modules(main, source_dirs)
    return [module for module in modules if module not in excluded]


def _or_empty(values: Optional[Sequence[str]]) -> List[str]:
    return list(values) if values is not None else []


__all__ = [
    "DEFAULT_VERSION",
    "LICENSE_FILE",
    "main_modules",
    "make_executables",
    "make_library",
    "make_package",
    "merge_dependencies",
    "read_config",
]
