"""Configuration loading for cabalgen (package.yaml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .logging import get_logger

logger = get_logger("config")

MANIFEST_NAME = "package.yaml"


class ConfigError(RuntimeError):
    """Raised when the manifest cannot be read, parsed or validated."""


_NUMERIC_TAGS = {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that leaves numeric-looking scalars as strings, so `1.10` stays `1.10`."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class LibrarySection:
    """The ``library`` section. ``None`` means the key was absent."""

    source_dirs: Optional[List[str]] = None
    exposed_modules: Optional[List[str]] = None
    other_modules: Optional[List[str]] = None
    dependencies: Optional[List[str]] = None
    ghc_options: Optional[List[str]] = None


@dataclass
class ExecutableSection:
    """One entry of ``executables`` or ``tests``."""

    main: str
    source_dirs: Optional[List[str]] = None
    other_modules: Optional[List[str]] = None
    dependencies: Optional[List[str]] = None
    ghc_options: Optional[List[str]] = None


@dataclass
class ConfigFile:
    """Represents package.yaml with absent keys kept as ``None``."""

    path: Path
    name: Optional[str] = None
    version: Optional[str] = None
    synopsis: Optional[str] = None
    description: Optional[str] = None
    bug_reports: Optional[str] = None
    category: Optional[str] = None
    stability: Optional[str] = None
    author: Optional[str] = None
    maintainer: Optional[str] = None
    copyright: Optional[List[str]] = None
    license: Optional[str] = None
    github: Optional[str] = None
    source_dirs: Optional[List[str]] = None
    dependencies: Optional[List[str]] = None
    ghc_options: Optional[List[str]] = None
    library: Optional[LibrarySection] = None
    executables: Optional[Dict[str, ExecutableSection]] = None
    tests: Optional[Dict[str, ExecutableSection]] = None


_SCALAR_KEYS = (
    "name",
    "version",
    "synopsis",
    "description",
    "bug-reports",
    "category",
    "stability",
    "author",
    "maintainer",
    "license",
    "github",
)
_PACKAGE_LIST_KEYS = ("copyright", "source-dirs", "dependencies", "ghc-options")
_LIBRARY_KEYS = ("source-dirs", "exposed-modules", "other-modules", "dependencies", "ghc-options")
_EXECUTABLE_KEYS = ("main", "source-dirs", "other-modules", "dependencies", "ghc-options")
_TOP_LEVEL_KEYS = _SCALAR_KEYS + _PACKAGE_LIST_KEYS + ("library", "executables", "tests")


def load_config(config_path: Path | str) -> ConfigFile:
    """Load and validate a manifest from disk."""
    config_file = resolve_config_path(Path(config_path))
    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file}: {MANIFEST_NAME} must contain a mapping at the root")

    _report_unknown_keys(data, _TOP_LEVEL_KEYS, "top level")
    context = str(config_file)

    def scalar(key: str) -> Optional[str]:
        return _as_str(data.get(key), f"{context}: {key}")

    def string_list(key: str) -> Optional[List[str]]:
        return _as_str_list(data.get(key), f"{context}: {key}")

    library = None
    if data.get("library") is not None:
        library = _parse_library(data["library"], f"{context}: library")

    return ConfigFile(
        path=config_file,
        name=scalar("name"),
        version=scalar("version"),
        synopsis=scalar("synopsis"),
        description=scalar("description"),
        bug_reports=scalar("bug-reports"),
        category=scalar("category"),
        stability=scalar("stability"),
        author=scalar("author"),
        maintainer=scalar("maintainer"),
        copyright=string_list("copyright"),
        license=scalar("license"),
        github=scalar("github"),
        source_dirs=string_list("source-dirs"),
        dependencies=string_list("dependencies"),
        ghc_options=string_list("ghc-options"),
        library=library,
        executables=_parse_executables(data.get("executables"), f"{context}: executables"),
        tests=_parse_executables(data.get("tests"), f"{context}: tests"),
    )


def resolve_config_path(config_path: Path) -> Path:
    """Return the manifest path for a file or a directory holding package.yaml."""
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / MANIFEST_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"{path}: file not found") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: {exc.strerror or exc}") from exc

    try:
        loaded = yaml.load(text, Loader=_ManifestLoader)
    except yaml.MarkedYAMLError as exc:
        raise ConfigError(_format_yaml_error(path, exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    return {} if loaded is None else loaded


def _format_yaml_error(path: Path, exc: yaml.MarkedYAMLError) -> str:
    mark = exc.problem_mark or exc.context_mark
    location = f"{path}:{mark.line + 1}:{mark.column + 1}" if mark is not None else str(path)
    details = " ".join(part for part in (exc.problem, exc.context) if part)
    return f"{location}: {details or 'invalid YAML'}"


def _parse_library(value: Any, context: str) -> LibrarySection:
    section = _as_section(value, context)
    _report_unknown_keys(section, _LIBRARY_KEYS, "library")
    return LibrarySection(
        source_dirs=_as_str_list(section.get("source-dirs"), f"{context}.source-dirs"),
        exposed_modules=_as_str_list(section.get("exposed-modules"), f"{context}.exposed-modules"),
        other_modules=_as_str_list(section.get("other-modules"), f"{context}.other-modules"),
        dependencies=_as_str_list(section.get("dependencies"), f"{context}.dependencies"),
        ghc_options=_as_str_list(section.get("ghc-options"), f"{context}.ghc-options"),
    )


def _parse_executables(value: Any, context: str) -> Optional[Dict[str, ExecutableSection]]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"{context} must be a mapping from names to sections")

    executables: Dict[str, ExecutableSection] = {}
    for raw_name, raw_section in value.items():
        name = str(raw_name)
        section_context = f"{context}.{name}"
        section = _as_section(raw_section, section_context)
        _report_unknown_keys(section, _EXECUTABLE_KEYS, section_context)
        main = _as_str(section.get("main"), f"{section_context}.main")
        if main is None:
            raise ConfigError(f"{section_context}: missing required key 'main'")
        executables[name] = ExecutableSection(
            main=main,
            source_dirs=_as_str_list(section.get("source-dirs"), f"{section_context}.source-dirs"),
            other_modules=_as_str_list(section.get("other-modules"), f"{section_context}.other-modules"),
            dependencies=_as_str_list(section.get("dependencies"), f"{section_context}.dependencies"),
            ghc_options=_as_str_list(section.get("ghc-options"), f"{section_context}.ghc-options"),
        )
    return executables


def _as_section(value: Any, context: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{context} must be a mapping")
    return value


def _report_unknown_keys(data: Dict[str, Any], known: tuple[str, ...], where: str) -> None:
    for key in data:
        if key not in known:
            logger.debug("Ignoring unknown key %r in %s", key, where)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, str)


def _as_str(value: Any, context: str) -> Optional[str]:
    if value is None:
        return None
    if not _is_scalar(value):
        raise ConfigError(f"{context} must be a string")
    return str(value)


def _as_str_list(value: Any, context: str) -> Optional[List[str]]:
    if value is None:
        return None
    if _is_scalar(value):
        return [str(value)]
    if isinstance(value, list):
        result = []
        for item in value:
            if not _is_scalar(item):
                raise ConfigError(f"{context} must be a string or a list of strings")
            result.append(str(item))
        return result
    raise ConfigError(f"{context} must be a string or a list of strings")


__all__ = [
    "ConfigError",
    "ConfigFile",
    "ExecutableSection",
    "LibrarySection",
    "MANIFEST_NAME",
    "load_config",
    "resolve_config_path",
]
