"""Resolved package records handed to renderers."""

from dataclasses import dataclass, field
from typing import List, Optional

Dependency = str
GhcOption = str


@dataclass(frozen=True)
class Library:
    """Library target with its module partition and merged settings."""

    source_dirs: List[str]
    exposed_modules: List[str]
    other_modules: List[str]
    dependencies: List[List[Dependency]]
    ghc_options: List[GhcOption]


@dataclass(frozen=True)
class Executable:
    """Executable or test-suite target.

    ``other_modules`` never contains the module built from ``main``.
    """

    name: str
    main: str
    source_dirs: List[str]
    other_modules: List[str]
    dependencies: List[List[Dependency]]
    ghc_options: List[GhcOption]


@dataclass(frozen=True)
class Package:
    """Fully materialized package description."""

    name: str
    version: str
    synopsis: Optional[str] = None
    description: Optional[str] = None
    bug_reports: Optional[str] = None
    category: Optional[str] = None
    stability: Optional[str] = None
    author: Optional[str] = None
    maintainer: Optional[str] = None
    copyright: List[str] = field(default_factory=list)
    license: Optional[str] = None
    license_file: Optional[str] = None
    source_repository: Optional[str] = None
    library: Optional[Library] = None
    executables: List[Executable] = field(default_factory=list)
    tests: List[Executable] = field(default_factory=list)
