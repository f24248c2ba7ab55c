"""
Unit tests for Linker command composition.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from yabs.build.linker import Linker
from yabs.config.project import (
    BinaryOutput,
    BuildDescription,
    LibraryOutput,
    ProjectSettings,
    Target,
)

ROOT = Path("/work/proj")


@pytest.fixture
def description():
    settings = ProjectSettings(
        compiler="clang",
        compiler_flags=["-O2", "-g"],
        include=["include", "vendor"],
        lflags=["-Wl,--gc-sections"],
        lib_dir=["/opt/lib"],
        libs=["m"],
        ar="llvm-ar",
        arflags="rcs",
    )
    return BuildDescription(
        root=ROOT,
        settings=settings,
        file_mod_map={Target(ROOT / "main.c"): 1, Target(ROOT / "lib.c"): 1},
        binaries=[BinaryOutput("app", ROOT, source=ROOT / "main.c")],
        libraries=[LibraryOutput("core", ROOT, static=True, dynamic=True)],
    )


class TestLinker:
    """Test suite for Linker."""

    def test_compile_command(self, description):
        linker = Linker(description)

        assert linker.compile_command(Target(ROOT / "main.c")) == [
            "clang", "-c", "-O2", "-g", "-Iinclude", "-Ivendor",
            "-o", str(ROOT / "main.o"), str(ROOT / "main.c"),
        ]

    def test_spawn_compile_runs_in_root(self, description):
        linker = Linker(description)
        with patch("yabs.build.linker.spawn_cmd") as mock_spawn:
            linker.spawn_compile(Target(ROOT / "lib.c"))

        assert mock_spawn.call_args.kwargs["cwd"] == ROOT

    def test_link_command_single_binary_uses_all_objects(self, description):
        linker = Linker(description)

        with patch("yabs.build.linker.run_cmd") as mock_run:
            linker.link_binary(description.binaries[0])

        cmd = mock_run.call_args.args[0]
        assert cmd == [
            "clang", "-O2", "-g", "-Wl,--gc-sections", "-Iinclude", "-Ivendor",
            "-o", str(ROOT / "app"),
            str(ROOT / "lib.o"), str(ROOT / "main.o"),
            "-L/opt/lib", "-lm",
        ]

    def test_link_binary_logs_objects_and_libs(self, description, caplog):
        caplog.set_level("DEBUG", logger="yabs")
        linker = Linker(description)

        with patch("yabs.build.linker.run_cmd"):
            linker.link_binary(description.binaries[0])

        assert f"Linking app: {ROOT / 'lib.o'} {ROOT / 'main.o'}" in caplog.text
        assert "Libraries for app: -lm" in caplog.text

    def test_static_library_command(self, description):
        linker = Linker(description)

        cmd = linker.static_library_command(description.libraries[0])

        assert cmd[:3] == ["llvm-ar", "rcs", str(description.libraries[0].static_file_name)]
        assert cmd[3:] == [str(ROOT / "lib.o")]

    def test_dynamic_library_command(self, description):
        linker = Linker(description)

        cmd = linker.dynamic_library_command(description.libraries[0])

        assert cmd == [
            "clang", "-shared", "-o", str(description.libraries[0].dynamic_file_name),
            str(ROOT / "lib.o"), "-L/opt/lib", "-lm",
        ]

    def test_build_library_both_forms(self, description):
        linker = Linker(description)
        with patch("yabs.build.linker.run_cmd") as mock_run:
            linker.build_library(description.libraries[0])

        tools = [call.args[0][0] for call in mock_run.call_args_list]
        assert tools == ["llvm-ar", "clang"]

    def test_build_library_dynamic_only(self, description):
        linker = Linker(description)
        library = LibraryOutput("core", ROOT, static=False, dynamic=True)
        with patch("yabs.build.linker.run_cmd") as mock_run:
            linker.build_library(library)

        assert mock_run.call_count == 1
        assert "-shared" in mock_run.call_args.args[0]
