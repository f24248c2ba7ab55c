"""
Compiler, linker and archiver command composition.

This module builds the command lines for every step of a yabs build and runs
the link and archive steps:
- Compiling one target to its object file
- Linking a binary from the project's objects
- Archiving a static library with ``ar``
- Linking a shared library with ``-shared``
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..config.project import BinaryOutput, BuildDescription, LibraryOutput, Target
from .process_job import ProcessJob, run_cmd, spawn_cmd

logger = logging.getLogger(__name__)


class Linker:
    """
    Composes and runs build commands for one project.

    Every command runs with the project root as its working directory.

    Example usage:
        linker = Linker(description)
        job = linker.spawn_compile(target)
        job.wait()
        linker.link_binary(binary)
    """

    def __init__(self, description: BuildDescription):
        """
        Initialize linker.

        Args:
            description: Parsed project description
        """
        self.description = description
        self.settings = description.settings
        self.root = description.root

    def _include_flags(self) -> List[str]:
        return [f"-I{inc}" for inc in self.settings.include]

    def _lib_dir_flags(self) -> List[str]:
        return [f"-L{lib_dir}" for lib_dir in self.settings.lib_dir]

    def compile_command(self, target: Target) -> List[str]:
        """Build the compiler command for one target."""
        cmd = [self.settings.compiler, "-c"]
        cmd.extend(self.settings.compiler_flags)
        cmd.extend(self._include_flags())
        cmd.extend(["-o", str(target.object), str(target.source)])
        return cmd

    def spawn_compile(self, target: Target) -> ProcessJob:
        """Start compiling one target without waiting for it."""
        return spawn_cmd(self.compile_command(target), cwd=self.root)

    def link_command(
        self,
        binary: BinaryOutput,
        exclude: Optional[Sequence[BinaryOutput]] = None
    ) -> List[str]:
        """
        Build the link command for a binary.

        Args:
            binary: Binary to link
            exclude: Other binaries whose entry-point objects must be left out
        """
        cmd = [self.settings.compiler]
        cmd.extend(self.settings.compiler_flags)
        cmd.extend(self.settings.lflags)
        cmd.extend(self._include_flags())
        cmd.extend(["-o", str(binary.path)])
        cmd.extend(str(obj) for obj in self.description.object_list(exclude))
        cmd.extend(self._lib_dir_flags())
        cmd.extend(self.description.lib_flags())
        return cmd

    def link_binary(self, binary: BinaryOutput) -> None:
        """
        Link a binary.

        With several binaries declared, the entry-point objects of the other
        binaries are excluded so each binary gets exactly one ``main``.

        Raises:
            ProcessError: If the linker fails
        """
        binaries = self.description.binaries
        exclude: Optional[List[BinaryOutput]] = None
        if len(binaries) > 1:
            exclude = [other for other in binaries if other.path != binary.path]
        logger.debug(f"Linking {binary.name}: {self.description.object_list_as_string(exclude)}")
        logger.debug(f"Libraries for {binary.name}: {self.description.libs_as_string() or '(none)'}")
        run_cmd(self.link_command(binary, exclude), cwd=self.root)

    def _library_objects(self) -> List[Path]:
        # Entry points of declared binaries never go into a library
        return self.description.object_list(self.description.binaries)

    def static_library_command(self, library: LibraryOutput) -> List[str]:
        cmd = [self.settings.ar]
        cmd.extend(self.settings.arflags.split())
        cmd.append(str(library.static_file_name))
        cmd.extend(str(obj) for obj in self._library_objects())
        return cmd

    def dynamic_library_command(self, library: LibraryOutput) -> List[str]:
        cmd = [self.settings.compiler, "-shared", "-o", str(library.dynamic_file_name)]
        cmd.extend(str(obj) for obj in self._library_objects())
        cmd.extend(self._lib_dir_flags())
        cmd.extend(self.description.lib_flags())
        return cmd

    def build_static_library(self, library: LibraryOutput) -> None:
        run_cmd(self.static_library_command(library), cwd=self.root)

    def build_dynamic_library(self, library: LibraryOutput) -> None:
        run_cmd(self.dynamic_library_command(library), cwd=self.root)

    def build_library(self, library: LibraryOutput) -> None:
        """
        Produce every artifact form the library requests.

        Raises:
            ProcessError: If the archiver or linker fails
        """
        if library.static:
            self.build_static_library(library)
        if library.dynamic:
            self.build_dynamic_library(library)
