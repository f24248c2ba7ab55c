"""
Bounded-concurrency compile scheduler.

Compiles a staleness queue with at most ``jobs`` compiler processes alive at
once. Scheduling is batch-synchronous: jobs are spawned until the batch is
full, then the whole batch is waited out before spawning more.

Failure handling:
    - A spawn failure or nonzero exit stops any new batch from starting
    - Jobs already running in the current batch are still waited on
    - The first failure (in spawn order) is raised; later failures in the
      same batch are logged
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..config.project import Target
from .process_job import ProcessError, ProcessJob

logger = logging.getLogger(__name__)

SpawnJob = Callable[[Target], ProcessJob]


def run_job_queue(queue: Sequence[Target], jobs: int, spawn_job: SpawnJob) -> None:
    """
    Compile every queued target.

    Targets are taken from the tail of ``queue``, so spawn order is the
    reverse of the queue's ascending order.

    Args:
        queue: Targets to compile
        jobs: Maximum number of concurrent processes (>= 1)
        spawn_job: Starts the compile process for one target

    Raises:
        ValueError: If jobs is less than 1
        ProcessError: If any compile job fails to spawn or exits nonzero
    """
    if jobs < 1:
        raise ValueError(f"jobs must be at least 1, got {jobs}")

    pending = list(queue)
    in_flight: List[ProcessJob] = []

    while pending:
        if len(in_flight) < jobs:
            target = pending.pop()
            try:
                job = spawn_job(target)
            except ProcessError:
                sibling_error = _drain(in_flight)
                if sibling_error is not None:
                    logger.error(str(sibling_error))
                raise
            in_flight.append(job)
        else:
            _raise_if_failed(_drain(in_flight))

    _raise_if_failed(_drain(in_flight))


def _drain(in_flight: List[ProcessJob]) -> Optional[ProcessError]:
    """Wait out every in-flight job and return the first failure."""
    first_error: Optional[ProcessError] = None
    for job in in_flight:
        try:
            job.wait()
        except ProcessError as e:
            if first_error is None:
                first_error = e
            else:
                logger.error(str(e))
    in_flight.clear()
    return first_error


def _raise_if_failed(error: Optional[ProcessError]) -> None:
    if error is not None:
        raise error
