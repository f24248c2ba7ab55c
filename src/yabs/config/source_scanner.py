"""
Source file discovery.

This module handles:
- Scanning the project tree for source files by extension
- Honoring configured source directories and ignore paths
- Recording each source's modification time for staleness checks
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class SourceDiscoveryError(Exception):
    """Raised when source scanning fails."""
    pass


class SourceScanner:
    """
    Scans a project root for compilable sources.

    The scanner:
    1. Walks each source directory (the project root by default)
    2. Collects files whose extension matches the project language
    3. Skips ignored paths and tool/VCS directories
    4. Returns a sorted mapping of source path to mtime in nanoseconds
    """

    # Directories to exclude from scanning
    EXCLUDED_DIRS = {'.git', '.hg', '.svn', '__pycache__', 'node_modules'}

    def __init__(self, project_dir: Path):
        """
        Initialize source scanner.

        Args:
            project_dir: Root project directory
        """
        self.project_dir = Path(project_dir)

    def scan(
        self,
        extensions: Iterable[str],
        src_dirs: Optional[Iterable[str]] = None,
        ignore: Optional[Iterable[str]] = None
    ) -> Dict[Path, int]:
        """
        Scan for source files.

        Args:
            extensions: File extensions to collect, without the dot
            src_dirs: Source directories relative to the project root
                (defaults to the root itself)
            ignore: Files or directories, relative to the root, to skip

        Returns:
            Mapping of absolute source path to modification time

        Raises:
            SourceDiscoveryError: If a directory or file cannot be read
        """
        roots = [self.project_dir / d for d in (src_dirs or [])] or [self.project_dir]
        ignored = [(self.project_dir / p).resolve() for p in (ignore or [])]

        sources: Dict[Path, int] = {}
        for src_dir in roots:
            if not src_dir.is_dir():
                raise SourceDiscoveryError(f"Source directory not found: {src_dir}")
            for path in self._find_sources(src_dir, extensions):
                if self._is_ignored(path, ignored):
                    logger.debug(f"Ignoring {path}")
                    continue
                try:
                    sources[path] = path.stat().st_mtime_ns
                except OSError as e:
                    raise SourceDiscoveryError(f"Failed to stat {path}: {e}") from e

        logger.debug(f"Discovered {len(sources)} source files under {self.project_dir}")
        return dict(sorted(sources.items()))

    def _find_sources(self, src_dir: Path, extensions: Iterable[str]) -> List[Path]:
        found = []
        try:
            for ext in extensions:
                for path in src_dir.rglob(f"*.{ext.lstrip('.')}"):
                    relative_parts = path.relative_to(src_dir).parts[:-1]
                    if any(part in self.EXCLUDED_DIRS for part in relative_parts):
                        continue
                    if path.is_file():
                        found.append(path)
        except OSError as e:
            raise SourceDiscoveryError(f"Failed to scan {src_dir}: {e}") from e
        return sorted(found)

    @staticmethod
    def _is_ignored(path: Path, ignored: List[Path]) -> bool:
        resolved = path.resolve()
        for ignored_path in ignored:
            if resolved == ignored_path or ignored_path in resolved.parents:
                return True
        return False
