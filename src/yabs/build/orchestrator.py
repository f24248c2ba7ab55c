"""
Build orchestration for yabs projects.

This module coordinates the build of every output declared in a build file:
- Pre-build script
- Per-binary staleness check, parallel compile and link
- Per-library staleness check, parallel compile and archive/shared link
- Post-build script

It also implements ``clean`` and source listing.
"""

import logging
from pathlib import Path
from typing import Optional

import psutil

from ..config.project import BinaryOutput, BuildDescription, LibraryOutput
from .linker import Linker
from .process_job import run_cmd
from .scheduler import run_job_queue
from .staleness import build_object_queue

logger = logging.getLogger(__name__)


class BuildOrchestratorError(Exception):
    """Exception raised for build orchestration errors."""
    pass


class TargetNotFoundError(BuildOrchestratorError):
    """Raised when a named binary or library is not declared."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"No {kind} named '{name}' in build file")


def default_jobs() -> int:
    """Number of compile jobs to run when none is given."""
    return psutil.cpu_count(logical=True) or 1


class BuildOrchestrator:
    """
    Orchestrates the complete build process for one project.

    Phases of a full build:
    1. Run the pre-build script
    2. For each binary: compute stale targets, compile them, link
    3. For each library: compute stale targets, compile them, archive/link
    4. Run the post-build script

    Any failure stops the build immediately.

    Example usage:
        description = find_build_file(Path.cwd())
        orchestrator = BuildOrchestrator(description, jobs=4)
        orchestrator.build()
    """

    def __init__(self, description: BuildDescription, jobs: Optional[int] = None):
        """
        Initialize build orchestrator.

        Args:
            description: Parsed project description
            jobs: Maximum concurrent compile processes (defaults to CPU count)
        """
        self.description = description
        self.jobs = jobs if jobs is not None else default_jobs()
        if self.jobs < 1:
            raise BuildOrchestratorError(f"Job count must be at least 1, got {self.jobs}")
        self.linker = Linker(description)

    @property
    def root(self) -> Path:
        return self.description.root

    def run_script(self, script: Optional[str]) -> None:
        """Run a shell script in the project root; no-op when unset."""
        if not script:
            return
        run_cmd(script, cwd=self.root)

    def compile_for(self, output_path: Path) -> None:
        """Compile every target that is stale with respect to ``output_path``."""
        queue = build_object_queue(output_path, self.description.file_mod_map)
        if not queue:
            logger.debug(f"{output_path.name}: all objects up to date")
            return
        run_job_queue(queue, self.jobs, self.linker.spawn_compile)

    def build_binary(self, binary: BinaryOutput) -> None:
        self.compile_for(binary.path)
        self.linker.link_binary(binary)

    def build_library(self, library: LibraryOutput) -> None:
        self.compile_for(library.path)
        self.linker.build_library(library)

    def build_all_binaries(self) -> None:
        for binary in self.description.binaries:
            self.build_binary(binary)

    def build_all_libraries(self) -> None:
        for library in self.description.libraries:
            self.build_library(library)

    def build(self) -> None:
        """
        Execute the complete build.

        Raises:
            ProcessError: If a script, compile, link or archive step fails
            OSError: If file metadata cannot be read
        """
        settings = self.description.settings
        self.run_script(settings.before_script)
        self.build_all_binaries()
        self.build_all_libraries()
        self.run_script(settings.after_script)

    def build_binary_with_name(self, name: str) -> None:
        """
        Build a single declared binary.

        Raises:
            TargetNotFoundError: If no binary has this name
        """
        binary = self.description.find_binary(name)
        if binary is None:
            raise TargetNotFoundError("binary", name)
        self.build_binary(binary)

    def build_library_with_name(self, name: str) -> None:
        """
        Build a single declared library.

        Raises:
            TargetNotFoundError: If no library has this name
        """
        library = self.description.find_library(name)
        if library is None:
            raise TargetNotFoundError("library", name)
        self.build_library(library)

    def clean(self) -> None:
        """
        Remove objects, binaries and library artifacts.

        Files that are missing or cannot be removed are skipped.
        """
        for target in self.description.targets:
            self._remove(target.object, "object")
        for binary in self.description.binaries:
            self._remove(binary.path, "binary")
        for library in self.description.libraries:
            self._remove(library.dynamic_file_name, "library")
            self._remove(library.static_file_name, "library")

    def print_sources(self) -> None:
        for target in self.description.targets:
            logger.info(str(target.source))

    @staticmethod
    def _remove(path: Path, kind: str) -> None:
        if not path.exists():
            return
        try:
            path.unlink()
        except OSError as e:
            logger.debug(f"Could not remove {kind} '{path}': {e}")
            return
        logger.info(f"removed {kind} '{path}'")
