"""Resolve package.yaml manifests into targets and their source modules."""

from .config import ConfigError, ConfigFile, load_config
from .filesystem import FileSystem, LocalFileSystem
from .models import Executable, Library, Package
from .package import make_package, read_config

__all__ = [
    "ConfigError",
    "ConfigFile",
    "Executable",
    "FileSystem",
    "Library",
    "LocalFileSystem",
    "Package",
    "load_config",
    "make_package",
    "read_config",
]
