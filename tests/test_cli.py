# SPDX-License-Identifier: MIT
"""Tests for the simbuild command-line interface."""

import json
import os
import subprocess
import sys
import tempfile
from unittest.mock import patch

import pytest

from simbuild.cli import build_parser, main, parse_variables
from simbuild.configure.probe import PROBE_PREFIX
from simbuild.configure.project import PROJECT_FILE
from simbuild.configure.variables import KNOWN_VARIABLES

RUN = "simbuild.core.executor.subprocess.run"


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep probe files and build variables out of the real environment."""
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_dir))
    for name in KNOWN_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return temp_dir


@pytest.fixture
def project_dir(project):
    (project.root / PROJECT_FILE).write_text(
        json.dumps({"name": project.name, "scripts": project.scripts})
    )
    return project.root


def posix_only():
    return pytest.mark.skipif(sys.platform == "win32", reason="POSIX toolchain names")


class TestParseVariables:
    def test_splits_variables(self):
        variables, remaining = parse_variables(["DEBUG=yes", "extra", "CC=gcc-13"])
        assert variables == {"DEBUG": "yes", "CC": "gcc-13"}
        assert remaining == ["extra"]

    def test_value_may_contain_equals(self):
        variables, _ = parse_variables(["DEFS=A=1"])
        assert variables == {"DEFS": "A=1"}

    def test_options_and_empty_key(self):
        _, remaining = parse_variables(["--opt=1", "=value"])
        assert remaining == ["--opt=1", "=value"]


class TestParser:
    def test_default_command_is_build(self):
        args = build_parser().parse_args([])
        assert args.func.__name__ == "cmd_build"
        assert args.directory == "."

    def test_build_variables(self):
        args = build_parser().parse_args(["build", "-y", "DEBUG=yes"])
        assert args.yes
        assert args.extra == ["DEBUG=yes"]

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "simbuild" in capsys.readouterr().out


@posix_only()
class TestBuildCommand:
    def test_forced_openmp(self, project_dir, fake_toolchain, capsys):
        fake = fake_toolchain()
        with patch(RUN, fake):
            code = main(["build", "-C", str(project_dir), "USE_OPENMP=1"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Built sim (release, with OpenMP)" in out
        assert f"installed {project_dir / 'bin' / 'sim'}" in out
        assert "-fopenmp" in fake.calls[0]

    def test_probe_and_build(self, project_dir, fake_toolchain, isolated):
        with patch(RUN, fake_toolchain()):
            assert main(["build", "-C", str(project_dir)]) == 0
        assert (project_dir / "sim").exists()
        assert list(isolated.iterdir()) == []

    def test_decline_exits_2(self, project_dir, fake_toolchain):
        with (
            patch(RUN, fake_toolchain(compile_rc=1)),
            patch("simbuild.cli.terminal_confirm", return_value=False) as confirm,
        ):
            code = main(["build", "-C", str(project_dir)])
        assert code == 2
        confirm.assert_called_once()
        assert not (project_dir / "sim").exists()

    def test_yes_accepts_serial_fallback(self, project_dir, fake_toolchain, capsys):
        # Probe fails (run step), the build itself succeeds
        with patch(RUN, fake_toolchain(run_rc=1)):
            code = main(["build", "-y", "-C", str(project_dir)])
        assert code == 0
        assert "without OpenMP" in capsys.readouterr().out

    def test_compile_error_exits_1_with_diagnostics(
        self, project_dir, fake_toolchain, capsys
    ):
        fake = fake_toolchain(compile_rc=1, stderr="main.c:1: error: expected ';'\n")
        with patch(RUN, fake):
            code = main(["build", "-C", str(project_dir), "USE_OPENMP=1"])
        assert code == 1
        assert "main.c:1: error: expected ';'\n" in capsys.readouterr().err

    def test_serial(self, project_dir, fake_toolchain, capsys):
        fake = fake_toolchain()
        with patch(RUN, fake):
            code = main(["serial", "--yes", "-C", str(project_dir)])
        assert code == 0
        assert "without OpenMP" in capsys.readouterr().out
        assert "-fopenmp" not in fake.calls[0]

    def test_debug(self, project_dir, fake_toolchain, capsys):
        with patch(RUN, fake_toolchain()):
            code = main(["build", "-C", str(project_dir), "USE_OPENMP=0", "DEBUG=1"])
        assert code == 0
        assert "Built sim (debug, without OpenMP)" in capsys.readouterr().out

    def test_interrupt_exits_130(self, project_dir):
        with patch(RUN, side_effect=KeyboardInterrupt):
            code = main(["build", "-C", str(project_dir), "USE_OPENMP=1"])
        assert code == 130

    def test_unwritable_build_directory_exits_1(self, project_dir, capsys):
        (project_dir / "build").write_text("")
        with patch(RUN) as run:
            code = main(["build", "-C", str(project_dir), "USE_OPENMP=1"])
        assert code == 1
        assert str(project_dir / "build") in capsys.readouterr().err
        run.assert_not_called()

    def test_unexpected_argument(self, project_dir):
        assert main(["build", "-C", str(project_dir), "extra"]) == 1


class TestCleanCommand:
    def test_empty_directory(self, tmp_path, capsys):
        assert main(["clean", "-C", str(tmp_path)]) == 0
        assert "Nothing to clean" in capsys.readouterr().out

    @posix_only()
    def test_after_build(self, project_dir, fake_toolchain, capsys):
        with patch(RUN, fake_toolchain()):
            main(["build", "-C", str(project_dir), "USE_OPENMP=1"])
        capsys.readouterr()

        assert main(["clean", "-C", str(project_dir)]) == 0
        out = capsys.readouterr().out
        assert f"removed {project_dir / 'sim'}" in out
        assert not (project_dir / "bin").exists()
        assert (project_dir / "scripts" / "plot_a.py").exists()

    def test_stale_probe_files(self, tmp_path, isolated, capsys):
        (isolated / f"{PROBE_PREFIX}dead.c").write_text("")
        assert main(["clean", "-C", str(tmp_path)]) == 0
        assert "Removed 1 item(s)" in capsys.readouterr().out

    def test_unremovable_artifact_exits_1(self, project_dir, capsys):
        (project_dir / "sim").write_bytes(b"program")
        with patch(
            "simbuild.builders.clean.remove",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            assert main(["clean", "-C", str(project_dir)]) == 1
        assert "Permission denied" in capsys.readouterr().err

    @pytest.mark.skipif(
        sys.platform == "win32" or os.geteuid() == 0,
        reason="needs POSIX permissions as non-root",
    )
    def test_read_only_directory_exits_1(self, project_dir):
        (project_dir / "sim").write_bytes(b"program")
        project_dir.chmod(0o555)
        try:
            assert main(["clean", "-C", str(project_dir)]) == 1
        finally:
            project_dir.chmod(0o755)
        assert (project_dir / "sim").exists()

    def test_invalid_project_file(self, tmp_path):
        (tmp_path / PROJECT_FILE).write_text("{")
        assert main(["clean", "-C", str(tmp_path)]) == 1


class TestInfoCommand:
    def test_shows_toolchain_and_variables(self, project_dir, capsys):
        assert main(["info", "-C", str(project_dir), "DEBUG=yes"]) == 0
        out = capsys.readouterr().out
        assert "Toolchain:" in out
        assert "Build (debug, OpenMP on):" in out
        assert "missing" in out
        assert "DEBUG" in out
        assert "[yes]" in out

    @posix_only()
    def test_probe(self, project_dir, fake_toolchain, capsys):
        with patch(RUN, fake_toolchain(compile_rc=1)):
            assert main(["info", "--probe", "-C", str(project_dir)]) == 0
        out = capsys.readouterr().out
        assert "not available" in out
        assert "OpenMP off" in out


class TestInstallScriptsCommand:
    def test_installs(self, project_dir, capsys):
        assert main(["install-scripts", "-C", str(project_dir)]) == 0
        assert "Installed 4 script(s)" in capsys.readouterr().out
        assert (project_dir / "plot_b.py").exists()
        assert (project_dir / "bin" / "plot_b.py").exists()


class TestBootstrapCommand:
    def test_uses_project_defaults(self, project_dir, capsys):
        with patch("simbuild.cli.bootstrap", return_value=project_dir / "py") as boot:
            assert main(["bootstrap", "-C", str(project_dir)]) == 0
        boot.assert_called_once_with(
            project_dir / ".venv", project_dir / "requirements.txt"
        )
        assert "Virtual environment ready" in capsys.readouterr().out

    def test_failure(self, project_dir):
        with patch(
            "simbuild.util.bootstrap.venv.create",
            side_effect=subprocess.CalledProcessError(1, "ensurepip"),
        ):
            assert main(["bootstrap", "-C", str(project_dir)]) == 1
