"""
Build system components for yabs.

This module provides the build system implementation including:
- Process spawning (compiler, linker, archiver, scripts)
- Staleness detection from file timestamps
- Bounded-concurrency compile scheduling
- Link/archive orchestration and clean
- Build file discovery
"""

from .discovery import NoBuildFileError, find_build_file
from .linker import Linker
from .orchestrator import BuildOrchestrator, BuildOrchestratorError, TargetNotFoundError
from .process_job import ProcessError, ProcessJob, run_cmd, spawn_cmd
from .scheduler import run_job_queue
from .staleness import build_object_queue

__all__ = [
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'TargetNotFoundError',
    'Linker',
    'ProcessJob',
    'ProcessError',
    'spawn_cmd',
    'run_cmd',
    'run_job_queue',
    'build_object_queue',
    'find_build_file',
    'NoBuildFileError',
]
