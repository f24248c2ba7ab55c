"""
Staleness detection for declared outputs.

Decides which targets must be (re)compiled before an output can be linked,
using only filesystem timestamps.
"""

from pathlib import Path
from typing import Mapping, List, Set

from ..config.project import Target


def build_object_queue(output_path: Path, file_mod_map: Mapping[Target, int]) -> List[Target]:
    """
    Compute the targets that need compiling for one output.

    When the output exists, a target is queued if its source is newer than
    the output or its object file is missing. When the output does not
    exist, only targets without an object file are queued; existing objects
    are reused as they are.

    Args:
        output_path: Binary or library artifact being built
        file_mod_map: Source modification times (ns) keyed by target

    Returns:
        Sorted, duplicate-free list of targets

    Raises:
        OSError: If the output's metadata cannot be read
    """
    queue: Set[Target] = set()
    if output_path.exists():
        output_mtime = output_path.stat().st_mtime_ns
        for target, source_mtime in file_mod_map.items():
            if source_mtime > output_mtime or not target.object.exists():
                queue.add(target)
    else:
        for target in file_mod_map:
            if not target.object.exists():
                queue.add(target)
    return sorted(queue)
