# SPDX-License-Identifier: MIT
"""Tests for simbuild.builders.install."""

import os
import shutil
from unittest.mock import patch

import pytest

from simbuild.builders.install import ArtifactInstaller
from simbuild.core.errors import InstallationError
from simbuild.util.commands import is_executable


@pytest.fixture
def artifact(tmp_path):
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    path = build_dir / "sim"
    path.write_bytes(b"\x7fELF simulation")
    path.chmod(0o644)
    return path


class TestArtifactInstaller:
    def test_installs_into_every_destination(self, tmp_path, artifact):
        dests = [tmp_path, tmp_path / "bin"]
        record = ArtifactInstaller(dests).install(artifact)

        assert record.source == artifact
        assert record.installed == (tmp_path / "sim", tmp_path / "bin" / "sim")
        for path in record.installed:
            assert path.read_bytes() == artifact.read_bytes()
            assert is_executable(path)

    def test_creates_missing_destination(self, tmp_path, artifact):
        dest = tmp_path / "out" / "nested"
        ArtifactInstaller([dest]).install(artifact)
        assert (dest / "sim").exists()

    def test_overwrites_previous_install(self, tmp_path, artifact):
        (tmp_path / "sim").write_bytes(b"old build")
        ArtifactInstaller([tmp_path]).install(artifact)
        assert (tmp_path / "sim").read_bytes() == b"\x7fELF simulation"

    def test_source_already_in_destination(self, tmp_path, artifact):
        record = ArtifactInstaller([artifact.parent, tmp_path]).install(artifact)
        assert record.installed[0] == artifact
        assert artifact.read_bytes() == b"\x7fELF simulation"

    def test_missing_source(self, tmp_path):
        with pytest.raises(InstallationError, match="file not found"):
            ArtifactInstaller([tmp_path]).install(tmp_path / "build" / "sim")

    def test_stops_at_first_failing_destination(self, tmp_path, artifact):
        first = tmp_path / "first"
        second = tmp_path / "second"
        third = tmp_path / "third"
        real_copy2 = shutil.copy2

        def copy2(src, dst):
            if str(dst).startswith(str(second)):
                raise PermissionError(13, "Permission denied")
            return real_copy2(src, dst)

        installer = ArtifactInstaller([first, second, third])
        with (
            patch("simbuild.util.commands.shutil.copy2", copy2),
            pytest.raises(InstallationError) as exc_info,
        ):
            installer.install(artifact)

        assert exc_info.value.destination == str(second)
        # Earlier copies stay, later destinations are not attempted
        assert (first / "sim").exists()
        assert not (third / "sim").exists()

    def test_uncreatable_destination_fails_before_copying(self, tmp_path, artifact):
        first = tmp_path / "first"
        # A file in the way of the second destination
        (tmp_path / "blocker").write_text("")
        second = tmp_path / "blocker" / "bin"

        with pytest.raises(InstallationError) as exc_info:
            ArtifactInstaller([first, second]).install(artifact)

        assert exc_info.value.destination == str(second)
        assert not (first / "sim").exists()

    def test_install_all(self, tmp_path, artifact):
        script = tmp_path / "plot.py"
        script.write_text("print('plot')\n")
        records = ArtifactInstaller([tmp_path / "bin"]).install_all([artifact, script])
        assert [r.installed[0].name for r in records] == ["sim", "plot.py"]

    def test_install_all_stops_on_missing(self, tmp_path, artifact):
        installer = ArtifactInstaller([tmp_path / "bin"])
        with pytest.raises(InstallationError):
            installer.install_all([tmp_path / "missing.py", artifact])
        assert not (tmp_path / "bin" / "sim").exists()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_execute_bits_follow_read_bits(self, tmp_path, artifact):
        artifact.chmod(0o640)
        (installed,) = ArtifactInstaller([tmp_path / "bin"]).install(artifact).installed
        assert installed.stat().st_mode & 0o777 == 0o750
