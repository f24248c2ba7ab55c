"""
Unit tests for the project model.
"""

import sys
from pathlib import Path

import pytest

from yabs.config.project import (
    BinaryOutput,
    BuildDescription,
    LibraryOutput,
    ProjectSettings,
    Target,
)

ROOT = Path("/project")


def make_description(sources, binaries=None, libs=None):
    """Build a description without touching the filesystem."""
    file_mod_map = {Target(ROOT / s): 1_000 for s in sources}
    return BuildDescription(
        root=ROOT,
        settings=ProjectSettings(libs=libs or []),
        file_mod_map=file_mod_map,
        binaries=binaries or [],
    )


class TestTarget:
    """Test suite for Target."""

    def test_object_path(self):
        assert Target(ROOT / "src" / "main.c").object == ROOT / "src" / "main.o"

    def test_cpp_object_path(self):
        assert Target(ROOT / "engine.cpp").object == ROOT / "engine.o"

    def test_equality_and_hash_by_source(self):
        a = Target(ROOT / "a.c")
        assert a == Target(ROOT / "a.c")
        assert len({a, Target(ROOT / "a.c")}) == 1

    def test_ordering_by_source(self):
        targets = [Target(ROOT / "c.c"), Target(ROOT / "a.c"), Target(ROOT / "b.c")]
        assert [t.source.name for t in sorted(targets)] == ["a.c", "b.c", "c.c"]


class TestOutputs:
    """Test suite for BinaryOutput and LibraryOutput."""

    def test_binary_path(self):
        assert BinaryOutput("hello", ROOT).path == ROOT / "hello"

    @pytest.mark.skipif(sys.platform != "linux", reason="Linux naming convention")
    def test_library_file_names_linux(self):
        lib = LibraryOutput("util", ROOT)
        assert lib.static_file_name == ROOT / "libutil.a"
        assert lib.dynamic_file_name == ROOT / "libutil.so"

    def test_library_primary_artifact(self):
        static = LibraryOutput("util", ROOT, static=True, dynamic=True)
        dynamic = LibraryOutput("util", ROOT, static=False, dynamic=True)
        assert static.path == static.static_file_name
        assert dynamic.path == dynamic.dynamic_file_name


class TestBuildDescription:
    """Test suite for BuildDescription composition helpers."""

    def test_object_list_unfiltered(self):
        description = make_description(["b.c", "a.c"])
        assert description.object_list() == [ROOT / "a.o", ROOT / "b.o"]

    def test_object_list_excludes_other_entry_points(self):
        alpha = BinaryOutput("alpha", ROOT, source=ROOT / "a.c")
        beta = BinaryOutput("beta", ROOT, source=ROOT / "b.c")
        description = make_description(["a.c", "b.c", "shared.c"], binaries=[alpha, beta])

        assert description.object_list([beta]) == [ROOT / "a.o", ROOT / "shared.o"]
        assert description.object_list([alpha]) == [ROOT / "b.o", ROOT / "shared.o"]

    def test_object_list_binary_without_source_excludes_nothing(self):
        description = make_description(["a.c", "b.c"])
        assert description.object_list([BinaryOutput("x", ROOT)]) == [ROOT / "a.o", ROOT / "b.o"]

    def test_object_list_as_string(self):
        description = make_description(["a.c", "b.c"])
        assert description.object_list_as_string() == f"{ROOT / 'a.o'} {ROOT / 'b.o'}"

    def test_lib_flags(self):
        description = make_description([], libs=["m", "pthread"])
        assert description.lib_flags() == ["-lm", "-lpthread"]
        assert description.libs_as_string() == "-lm -lpthread"

    def test_find_outputs(self):
        alpha = BinaryOutput("alpha", ROOT)
        description = make_description([], binaries=[alpha])
        description.libraries.append(LibraryOutput("util", ROOT))

        assert description.find_binary("alpha") is alpha
        assert description.find_binary("missing") is None
        assert description.find_library("util").name == "util"
        assert description.find_library("alpha") is None
