"""
Project model for yabs build files.

This module holds the parsed, immutable view of a project:
- Targets (one source file and the object file it compiles to)
- Declared binaries and libraries
- Project-wide compiler and linker settings
- The source modification map used for staleness checks
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .source_scanner import SourceScanner


@dataclass(frozen=True, order=True)
class Target:
    """A single compilation unit, identified by its source path."""

    source: Path

    @property
    def object(self) -> Path:
        """Object file produced from this source."""
        return self.source.with_suffix(".o")


@dataclass(frozen=True)
class BinaryOutput:
    """An executable declared in the build file.

    ``source`` is the entry-point source (the file holding ``main``). Its
    object belongs to this binary only and is left out when linking the
    other binaries of the project.
    """

    name: str
    root: Path
    source: Optional[Path] = None

    @property
    def path(self) -> Path:
        return self.root / self.name


@dataclass(frozen=True)
class LibraryOutput:
    """A library declared in the build file."""

    name: str
    root: Path
    static: bool = True
    dynamic: bool = False

    @property
    def static_file_name(self) -> Path:
        if sys.platform == "win32":
            return self.root / f"{self.name}.lib"
        return self.root / f"lib{self.name}.a"

    @property
    def dynamic_file_name(self) -> Path:
        if sys.platform == "win32":
            return self.root / f"{self.name}.dll"
        if sys.platform == "darwin":
            return self.root / f"lib{self.name}.dylib"
        return self.root / f"lib{self.name}.so"

    @property
    def path(self) -> Path:
        """Primary artifact used for staleness checks."""
        if self.static:
            return self.static_file_name
        return self.dynamic_file_name


@dataclass
class ProjectSettings:
    """Project-wide settings from the ``[project]`` section."""

    name: Optional[str] = None
    version: Optional[str] = None
    compiler: str = "gcc"
    lang: List[str] = field(default_factory=lambda: ["c"])
    src: List[str] = field(default_factory=list)
    ignore: List[str] = field(default_factory=list)
    include: List[str] = field(default_factory=list)
    compiler_flags: List[str] = field(default_factory=list)
    lflags: List[str] = field(default_factory=list)
    lib_dir: List[str] = field(default_factory=list)
    libs: List[str] = field(default_factory=list)
    ar: str = "ar"
    arflags: str = "rcs"
    before_script: Optional[str] = None
    after_script: Optional[str] = None


@dataclass
class BuildDescription:
    """
    Parsed build file plus the sources discovered for it.

    The description is created once per invocation and is read-only
    afterwards. ``root`` is the resolved project root; every path in the
    description is absolute and anchored there.

    Example usage:
        description = BuildDescription.create(root, settings, binaries, libraries)
        for target, mtime in description.file_mod_map.items():
            print(target.source, mtime)
    """

    root: Path
    settings: ProjectSettings
    file_mod_map: Dict[Target, int]
    binaries: List[BinaryOutput] = field(default_factory=list)
    libraries: List[LibraryOutput] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        root: Path,
        settings: ProjectSettings,
        binaries: Optional[List[BinaryOutput]] = None,
        libraries: Optional[List[LibraryOutput]] = None
    ) -> "BuildDescription":
        """
        Build a description, discovering sources under ``root``.

        Raises:
            SourceDiscoveryError: If the project tree cannot be walked
        """
        root = Path(root)
        scanner = SourceScanner(root)
        sources = scanner.scan(
            extensions=settings.lang,
            src_dirs=settings.src,
            ignore=settings.ignore
        )
        file_mod_map = {
            Target(source): mtime for source, mtime in sources.items()
        }
        return cls(
            root=root,
            settings=settings,
            file_mod_map=file_mod_map,
            binaries=list(binaries or []),
            libraries=list(libraries or [])
        )

    @property
    def targets(self) -> List[Target]:
        return sorted(self.file_mod_map)

    def object_list(
        self,
        exclude: Optional[Iterable[BinaryOutput]] = None
    ) -> List[Path]:
        """
        Object files to hand to the linker or archiver.

        Args:
            exclude: Binaries whose entry-point objects must be left out

        Returns:
            Sorted list of object paths
        """
        excluded_sources = {
            binary.source for binary in (exclude or []) if binary.source is not None
        }
        return [
            target.object
            for target in self.targets
            if target.source not in excluded_sources
        ]

    def object_list_as_string(
        self,
        exclude: Optional[Iterable[BinaryOutput]] = None
    ) -> str:
        return " ".join(str(obj) for obj in self.object_list(exclude))

    def lib_flags(self) -> List[str]:
        """Linker flags for the explicit libraries (``-lfoo``)."""
        return [f"-l{lib}" for lib in self.settings.libs]

    def libs_as_string(self) -> str:
        return " ".join(self.lib_flags())

    def find_binary(self, name: str) -> Optional[BinaryOutput]:
        for binary in self.binaries:
            if binary.name == name:
                return binary
        return None

    def find_library(self, name: str) -> Optional[LibraryOutput]:
        for library in self.libraries:
            if library.name == name:
                return library
        return None
