"""
Build file discovery.

Finds the build file for a project by walking up from a starting directory,
the way version control tools find their repository root.
"""

import logging
from pathlib import Path
from typing import Optional

from ..config.build_file import BuildFileConfig
from ..config.project import BuildDescription

logger = logging.getLogger(__name__)

DEFAULT_BUILD_FILE = "yabs.ini"


class NoBuildFileError(Exception):
    """Raised when no build file exists in a directory or any of its parents."""

    def __init__(self, start_dir: Path):
        self.start_dir = start_dir
        super().__init__(f"No build file found in {start_dir} or any parent directory")


def check_dir(directory: Path) -> Optional[Path]:
    """
    Return the build file in ``directory``, if there is one.

    ``yabs.ini`` is preferred; otherwise a file named after the directory
    (``myproject/myproject.ini``) is accepted.
    """
    candidates = [directory / DEFAULT_BUILD_FILE]
    if directory.name:
        candidates.append(directory / f"{directory.name}.ini")
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def find_build_file(start_dir: Path) -> BuildDescription:
    """
    Locate and parse the nearest build file.

    Args:
        start_dir: Directory to start searching from

    Returns:
        BuildDescription rooted at the directory holding the build file

    Raises:
        NoBuildFileError: If the filesystem root is reached without a match
        BuildFileError: If the build file is malformed
    """
    start = Path(start_dir)
    directory = start.resolve()
    while True:
        build_file = check_dir(directory)
        if build_file is not None:
            logger.debug(f"Using build file {build_file}")
            return BuildFileConfig(build_file).to_description()
        if directory.parent == directory:
            break
        directory = directory.parent
    raise NoBuildFileError(start)
