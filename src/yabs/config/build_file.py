"""
Build file parser.

This module parses yabs build files (INI format) and turns them into a
BuildDescription ready for the orchestrator.
"""

import configparser
import re
from pathlib import Path
from typing import Dict, List, Optional

from .project import (
    BinaryOutput,
    BuildDescription,
    LibraryOutput,
    ProjectSettings,
    Target,
)


class BuildFileError(Exception):
    """Exception raised for build file configuration errors."""

    pass


class BuildFileConfig:
    """
    Parser for yabs build files.

    Example yabs.ini:
        [project]
        name = hello
        compiler = gcc
        compiler_flags = -Wall -O2
        libs = m

        [bin:hello]
        source = main.c

        [lib:util]
        static = true
        dynamic = true

    Usage:
        config = BuildFileConfig(Path("yabs.ini"))
        description = config.to_description()
    """

    PROJECT_SECTION = "project"
    BINARY_PREFIX = "bin:"
    LIBRARY_PREFIX = "lib:"

    LIST_KEYS = {"lang", "src", "ignore", "include", "compiler_flags", "lflags", "lib_dir", "libs"}
    FLAG_KEYS = {"compiler_flags", "lflags"}
    STRING_KEYS = {"name", "version", "compiler", "ar", "arflags", "before_script", "after_script"}

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a build file.

        Args:
            ini_path: Path to the build file

        Raises:
            BuildFileError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = Path(ini_path).resolve()

        if not self.ini_path.exists():
            raise BuildFileError(f"Build file not found: {self.ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(self.ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise BuildFileError(f"Failed to parse {self.ini_path}: {e}") from e

        if self.PROJECT_SECTION not in self.config:
            raise BuildFileError(f"{self.ini_path} has no [{self.PROJECT_SECTION}] section")

    @property
    def root(self) -> Path:
        return self.ini_path.parent

    def get_settings(self) -> ProjectSettings:
        """
        Read the [project] section.

        Returns:
            ProjectSettings with defaults filled in for missing keys

        Raises:
            BuildFileError: On unknown keys or interpolation errors
        """
        section = self._section_items(self.PROJECT_SECTION)
        unknown = set(section) - self.LIST_KEYS - self.STRING_KEYS
        if unknown:
            raise BuildFileError(
                f"Unknown keys in [{self.PROJECT_SECTION}]: {', '.join(sorted(unknown))}"
            )

        kwargs: Dict[str, object] = {}
        for key, value in section.items():
            if value is None or not value.strip():
                continue
            if key in self.FLAG_KEYS:
                # Flags may carry commas (-Wl,-O1)
                kwargs[key] = value.split()
            elif key in self.LIST_KEYS:
                kwargs[key] = split_list(value)
            else:
                kwargs[key] = value.strip()
        return ProjectSettings(**kwargs)  # type: ignore[arg-type]

    def get_binaries(self) -> List[BinaryOutput]:
        """
        Read the [bin:NAME] sections, in declaration order.

        Example:
            For [bin:hello] with source = main.c, returns
            [BinaryOutput(name='hello', root=..., source=<root>/main.c)]
        """
        binaries = []
        for section in self.config.sections():
            if not section.startswith(self.BINARY_PREFIX):
                continue
            name = self._output_name(section, self.BINARY_PREFIX)
            items = self._section_items(section)
            source_value = (items.get("source") or "").strip()
            source: Optional[Path] = self.root / source_value if source_value else None
            binaries.append(BinaryOutput(name=name, root=self.root, source=source))
        return binaries

    def get_libraries(self) -> List[LibraryOutput]:
        """Read the [lib:NAME] sections, in declaration order."""
        libraries = []
        for section in self.config.sections():
            if not section.startswith(self.LIBRARY_PREFIX):
                continue
            name = self._output_name(section, self.LIBRARY_PREFIX)
            try:
                static_value = self.config.getboolean(section, "static", fallback=None)
                dynamic_value = self.config.getboolean(section, "dynamic", fallback=None)
            except (ValueError, AttributeError) as e:
                raise BuildFileError(f"Invalid boolean in [{section}]: {e}") from e

            # Neither form requested means a plain static archive
            if static_value is None and dynamic_value is None:
                static, dynamic = True, False
            else:
                static, dynamic = bool(static_value), bool(dynamic_value)
            libraries.append(
                LibraryOutput(name=name, root=self.root, static=static, dynamic=dynamic)
            )
        return libraries

    def to_description(self) -> BuildDescription:
        """
        Build the full description, discovering sources under the root.

        Raises:
            BuildFileError: If the build file content is invalid, or a binary's
                source is not among the discovered sources
            SourceDiscoveryError: If sources cannot be discovered
        """
        description = BuildDescription.create(
            root=self.root,
            settings=self.get_settings(),
            binaries=self.get_binaries(),
            libraries=self.get_libraries()
        )
        for binary in description.binaries:
            if binary.source is not None and Target(binary.source) not in description.file_mod_map:
                raise BuildFileError(
                    f"Binary '{binary.name}' source not found among project sources: {binary.source}"
                )
        return description

    def _section_items(self, section: str) -> Dict[str, Optional[str]]:
        try:
            return {key: self.config[section][key] for key in self.config[section]}
        except configparser.Error as e:
            raise BuildFileError(f"Failed to read [{section}] in {self.ini_path}: {e}") from e

    def _output_name(self, section: str, prefix: str) -> str:
        name = section[len(prefix):].strip()
        if not name:
            raise BuildFileError(f"Section [{section}] in {self.ini_path} has no name")
        return name


def split_list(value: str) -> List[str]:
    """
    Split a list value on whitespace, commas and newlines.

    Example:
        For "m, pthread\\nz" returns ['m', 'pthread', 'z']
    """
    return [item for item in re.split(r"[\s,]+", value) if item]
