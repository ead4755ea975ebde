# SPDX-License-Identifier: MIT
"""Shared fixtures for simbuild tests."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from simbuild.configure.platform import Platform
from simbuild.configure.project import ProjectConfig
from simbuild.configure.variables import BuildVariables
from simbuild.toolchains import resolve_profile


class FakeToolchain:
    """Stand-in for subprocess.run that pretends to be a compiler.

    Commands naming an output (``-o``, ``/OUT:`` or ``/Fo``) are
    compile/link steps and create that file; any other command "runs"
    the program. Either kind can be made to fail.
    """

    def __init__(
        self,
        *,
        compile_rc: int = 0,
        run_rc: int = 0,
        stderr: str = "",
        extra_outputs: tuple[str, ...] = (),
    ) -> None:
        self.compile_rc = compile_rc
        self.run_rc = run_rc
        self.stderr = stderr
        self.extra_outputs = extra_outputs
        self.calls: list[list[str]] = []

    def _outputs(self, cmd: list[str]) -> list[Path]:
        outputs = []
        for i, arg in enumerate(cmd):
            if arg == "-o" and i + 1 < len(cmd):
                outputs.append(Path(cmd[i + 1]))
            elif arg.startswith("/OUT:"):
                outputs.append(Path(arg[len("/OUT:") :]))
            elif arg.startswith("/Fo"):
                outputs.append(Path(arg[len("/Fo") :]))
        return outputs

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        outputs = self._outputs(cmd)
        if outputs:
            if self.compile_rc == 0:
                for out in outputs:
                    out.parent.mkdir(parents=True, exist_ok=True)
                    out.write_bytes(b"\x7fELF fake program")
                    for suffix in self.extra_outputs:
                        out.with_suffix(suffix).write_bytes(b"")
            return subprocess.CompletedProcess(cmd, self.compile_rc, "", self.stderr)
        return subprocess.CompletedProcess(cmd, self.run_rc, "8\n", "")


@pytest.fixture
def fake_toolchain():
    """The FakeToolchain class, for patching subprocess.run."""
    return FakeToolchain


@pytest.fixture
def linux():
    return Platform(os="linux", arch="x86_64")


@pytest.fixture
def windows():
    return Platform(os="windows", arch="x86_64")


@pytest.fixture
def no_env():
    """Build variables with nothing set."""
    return BuildVariables(environ={})


@pytest.fixture
def linux_profile(linux, no_env):
    return resolve_profile(linux, no_env)


@pytest.fixture
def msvc_profile(windows, no_env):
    return resolve_profile(windows, no_env)


@pytest.fixture
def project(tmp_path: Path) -> ProjectConfig:
    """A project with a source file and four auxiliary scripts."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.c").write_text("int main(void) { return 0; }\n")
    scripts_dir = tmp_path / "scripts"
    scripts_dir.mkdir()
    scripts = []
    for name in ("plot_a.py", "plot_b.py", "plot_c.py", "plot_d.py"):
        (scripts_dir / name).write_text("#!/usr/bin/env python3\nprint('plot')\n")
        scripts.append(f"scripts/{name}")
    return ProjectConfig(root=tmp_path, name="sim", scripts=scripts)
