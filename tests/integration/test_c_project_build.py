"""
Integration tests building a real C project with the system compiler.

Run with: pytest --full
"""

import os
import shutil
import subprocess
import sys

import pytest

from yabs.build import BuildOrchestrator, ProcessError, find_build_file

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("gcc") is None, reason="gcc not installed"),
    pytest.mark.skipif(sys.platform == "win32", reason="POSIX toolchain required"),
]

BUILD_FILE = """
[project]
name = greet
compiler_flags = -Wall -fPIC
include = include

[bin:hello]
source = src/hello.c

[bin:goodbye]
source = src/goodbye.c

[lib:greet]
static = true
dynamic = true
"""


@pytest.fixture
def project(tmp_path):
    """Create a small C project with two binaries sharing one source."""
    (tmp_path / "include").mkdir()
    (tmp_path / "src").mkdir()
    (tmp_path / "yabs.ini").write_text(BUILD_FILE)
    (tmp_path / "include" / "greet.h").write_text("const char *greeting(void);\n")
    (tmp_path / "src" / "greet.c").write_text(
        '#include "greet.h"\nconst char *greeting(void) { return "hi"; }\n'
    )
    (tmp_path / "src" / "hello.c").write_text(
        '#include <stdio.h>\n#include "greet.h"\n'
        'int main(void) { printf("hello %s\\n", greeting()); return 0; }\n'
    )
    (tmp_path / "src" / "goodbye.c").write_text(
        '#include <stdio.h>\n#include "greet.h"\n'
        'int main(void) { printf("goodbye %s\\n", greeting()); return 0; }\n'
    )
    return tmp_path


def run_binary(path):
    return subprocess.run([str(path)], capture_output=True, text=True, check=True).stdout


class TestCProjectBuild:
    """End-to-end builds with gcc and ar."""

    def test_full_build(self, project):
        orchestrator = BuildOrchestrator(find_build_file(project), jobs=2)

        orchestrator.build()

        assert run_binary(project / "hello") == "hello hi\n"
        assert run_binary(project / "goodbye") == "goodbye hi\n"
        library = orchestrator.description.libraries[0]
        assert library.static_file_name.exists()
        assert library.dynamic_file_name.exists()

    def test_rebuild_only_touches_changed_sources(self, project):
        BuildOrchestrator(find_build_file(project), jobs=2).build()
        untouched = project / "src" / "goodbye.o"
        before = untouched.stat().st_mtime_ns

        hello = project / "src" / "hello.c"
        hello.write_text(hello.read_text().replace("hello %s", "hey %s"))
        future = (project / "hello").stat().st_mtime_ns + 10**9
        os.utime(hello, ns=(future, future))

        BuildOrchestrator(find_build_file(project), jobs=2).build()

        assert run_binary(project / "hello") == "hey hi\n"
        assert untouched.stat().st_mtime_ns == before

    def test_compile_error_fails_build(self, project):
        (project / "src" / "broken.c").write_text("int broken(void) { return }\n")

        with pytest.raises(ProcessError) as excinfo:
            BuildOrchestrator(find_build_file(project), jobs=4).build()

        assert "broken.c" in excinfo.value.command

    def test_clean_after_build(self, project):
        description = find_build_file(project)
        orchestrator = BuildOrchestrator(description, jobs=2)
        orchestrator.build()

        orchestrator.clean()
        orchestrator.clean()

        assert not (project / "hello").exists()
        assert not list((project / "src").glob("*.o"))
