"""Process Job.

This module spawns compiler, linker and archiver processes and waits for
them with proper error handling.

Design:
    - Wraps psutil.Popen (a subprocess.Popen subclass)
    - Commands are argv lists; shell strings are used only for user scripts
    - A job keeps its command text for logging and error messages
    - Nonzero exit and spawn failures raise ProcessError
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Union

import psutil

logger = logging.getLogger(__name__)

Command = Union[List[str], str]


class ProcessError(Exception):
    """Raised when a process cannot be spawned or exits with an error."""

    def __init__(self, command: str, returncode: Optional[int] = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Failed to spawn: {command}"
        else:
            message = f"Command exited with status {returncode}: {command}"
        if stderr:
            message += f"\n{stderr.rstrip()}"
        super().__init__(message)


def command_text(cmd: Command) -> str:
    """Render a command as a single shell-quoted line."""
    if isinstance(cmd, str):
        return cmd
    return shlex.join(cmd)


class ProcessJob:
    """A spawned process together with the command that started it.

    Example usage:
        job = ProcessJob(["gcc", "-c", "-o", "main.o", "main.c"], cwd=root)
        job.wait()
    """

    def __init__(self, cmd: Command, cwd: Optional[Path] = None):
        """Spawn the process.

        Args:
            cmd: argv list, or a shell string (run through the shell)
            cwd: Working directory for the child

        Raises:
            ProcessError: If the process cannot be started
        """
        self._command = command_text(cmd)
        try:
            self._process = psutil.Popen(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                shell=isinstance(cmd, str),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True
            )
        except OSError as e:
            raise ProcessError(self._command, stderr=str(e)) from e

    @property
    def command(self) -> str:
        return self._command

    @property
    def pid(self) -> int:
        return self._process.pid

    def wait(self) -> None:
        """Block until the process exits.

        Compiler diagnostics on a successful run are logged as warnings.

        Raises:
            ProcessError: If the process exits with a nonzero status
        """
        stdout, stderr = self._process.communicate()
        if self._process.returncode != 0:
            raise ProcessError(self._command, self._process.returncode, stderr or stdout)
        if stdout and stdout.strip():
            logger.info(stdout.rstrip())
        if stderr and stderr.strip():
            logger.warning(stderr.rstrip())


def spawn_cmd(cmd: Command, cwd: Optional[Path] = None) -> ProcessJob:
    """Log a command, then start it without waiting for it."""
    logger.info(command_text(cmd))
    return ProcessJob(cmd, cwd=cwd)


def run_cmd(cmd: Command, cwd: Optional[Path] = None) -> None:
    """Start a command, log it and wait for it to finish.

    Raises:
        ProcessError: On spawn failure or nonzero exit
    """
    logger.info(command_text(cmd))
    ProcessJob(cmd, cwd=cwd).wait()
