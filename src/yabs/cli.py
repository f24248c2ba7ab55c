"""
Command-line interface for yabs.

This module provides the `yabs` CLI tool for building C/C++ projects.
"""

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from yabs import __version__
from yabs.build import (
    BuildOrchestrator,
    BuildOrchestratorError,
    NoBuildFileError,
    ProcessError,
    find_build_file,
)
from yabs.cli_utils import ErrorFormatter, PathValidator, setup_logging
from yabs.config import BuildFileError, SourceDiscoveryError


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    jobs: Optional[int] = None
    binary: Optional[str] = None
    library: Optional[str] = None
    clean: bool = False
    verbose: bool = False


@dataclass
class CleanArgs:
    """Arguments for the clean command."""

    project_dir: Path
    verbose: bool = False


@dataclass
class SourcesArgs:
    """Arguments for the sources command."""

    project_dir: Path
    verbose: bool = False


def _load_orchestrator(project_dir: Path, jobs: Optional[int] = None) -> BuildOrchestrator:
    description = find_build_file(project_dir)
    return BuildOrchestrator(description, jobs=jobs)


def _handle_errors(error: Exception, verbose: bool) -> None:
    if isinstance(error, NoBuildFileError):
        ErrorFormatter.print_error("Error: No build file", str(error))
        print("Make sure you're in a yabs project directory with a yabs.ini file.")
        sys.exit(1)
    elif isinstance(error, (BuildFileError, SourceDiscoveryError)):
        ErrorFormatter.handle_error("Invalid project", error)
    elif isinstance(error, (ProcessError, BuildOrchestratorError)):
        ErrorFormatter.handle_error("Build failed!", error)
    elif isinstance(error, OSError):
        ErrorFormatter.handle_error("I/O error", error)
    else:
        ErrorFormatter.handle_unexpected_error(error, verbose)


def build_command(args: BuildArgs) -> None:
    """Build the project's binaries and libraries.

    Examples:
        yabs build                    # Build everything
        yabs build -j 8               # Use 8 compile jobs
        yabs build --bin hello        # Build only the 'hello' binary
        yabs build --lib util         # Build only the 'util' library
        yabs build --clean            # Clean, then build
    """
    setup_logging(args.verbose)
    try:
        orchestrator = _load_orchestrator(args.project_dir, args.jobs)

        if args.clean:
            orchestrator.clean()

        start_time = time.time()
        if args.binary:
            orchestrator.build_binary_with_name(args.binary)
        elif args.library:
            orchestrator.build_library_with_name(args.library)
        else:
            orchestrator.build()
        build_time = time.time() - start_time

        ErrorFormatter.print_success("Build successful!")
        if args.verbose:
            print(f"Build time: {build_time:.2f}s")
        sys.exit(0)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        _handle_errors(e, args.verbose)


def clean_command(args: CleanArgs) -> None:
    """Remove objects, binaries and libraries."""
    setup_logging(args.verbose)
    try:
        _load_orchestrator(args.project_dir).clean()
        sys.exit(0)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        _handle_errors(e, args.verbose)


def sources_command(args: SourcesArgs) -> None:
    """Print every discovered source file."""
    setup_logging(args.verbose)
    try:
        _load_orchestrator(args.project_dir).print_sources()
        sys.exit(0)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        _handle_errors(e, args.verbose)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Directory to search upward from for yabs.ini (default: current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """yabs - Yet another build system for C/C++ projects."""
    parser = argparse.ArgumentParser(
        prog="yabs",
        description="yabs - Yet another build system for C/C++ projects",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"yabs {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Build binaries and libraries",
    )
    _add_common_arguments(build_parser)
    build_parser.add_argument(
        "-j",
        "--jobs",
        default=None,
        type=int,
        help="Number of parallel compile jobs (default: CPU count)",
    )
    scope = build_parser.add_mutually_exclusive_group()
    scope.add_argument(
        "--bin",
        dest="binary",
        default=None,
        help="Build only the named binary",
    )
    scope.add_argument(
        "--lib",
        dest="library",
        default=None,
        help="Build only the named library",
    )
    build_parser.add_argument(
        "-c",
        "--clean",
        action="store_true",
        help="Clean build artifacts before building",
    )

    # Clean command
    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove objects, binaries and libraries",
    )
    _add_common_arguments(clean_parser)

    # Sources command
    sources_parser = subparsers.add_parser(
        "sources",
        help="Print discovered source files",
    )
    _add_common_arguments(sources_parser)

    # Parse arguments
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    # Validate project directory exists
    PathValidator.validate_project_dir(parsed_args.project_dir)

    if parsed_args.command == "build":
        if parsed_args.jobs is not None and parsed_args.jobs < 1:
            parser.error("--jobs must be at least 1")
        build_command(
            BuildArgs(
                project_dir=parsed_args.project_dir,
                jobs=parsed_args.jobs,
                binary=parsed_args.binary,
                library=parsed_args.library,
                clean=parsed_args.clean,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "clean":
        clean_command(CleanArgs(project_dir=parsed_args.project_dir, verbose=parsed_args.verbose))
    elif parsed_args.command == "sources":
        sources_command(SourcesArgs(project_dir=parsed_args.project_dir, verbose=parsed_args.verbose))


if __name__ == "__main__":
    main()
