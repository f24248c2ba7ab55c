"""Configuration parsing modules for yabs."""

from .build_file import BuildFileConfig, BuildFileError
from .project import (
    BinaryOutput,
    BuildDescription,
    LibraryOutput,
    ProjectSettings,
    Target,
)
from .source_scanner import SourceDiscoveryError, SourceScanner

__all__ = [
    "BuildFileConfig",
    "BuildFileError",
    "BuildDescription",
    "ProjectSettings",
    "Target",
    "BinaryOutput",
    "LibraryOutput",
    "SourceScanner",
    "SourceDiscoveryError",
]
