# SPDX-License-Identifier: MIT
"""Install build artifacts into their runtime locations.

Every destination directory is created before anything is copied.
Each artifact is then copied into the destinations in order, and the
copy is made executable. Installation stops at the first failure:
later destinations are not attempted and earlier copies are left in
place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from simbuild.core.errors import InstallationError
from simbuild.util.commands import copy, make_executable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactRecord:
    """An installed artifact.

    Attributes:
        source: The file that was installed.
        installed: The copies, one per destination directory.
    """

    source: Path
    installed: tuple[Path, ...]


class ArtifactInstaller:
    """Copy artifacts into a fixed list of destination directories.

    Example:
        installer = ArtifactInstaller([project_root, project_root / "bin"])
        installer.install(Path("build/simulation"))

    Args:
        destinations: Directories each artifact is copied into.
    """

    def __init__(self, destinations: Sequence[Path | str]) -> None:
        self.destinations = [Path(d) for d in destinations]

    def install(self, source: Path | str) -> ArtifactRecord:
        """Install one file into every destination.

        Raises:
            InstallationError: If the source is missing or a destination
                cannot be created or written.
        """
        source = Path(source)
        if not source.is_file():
            raise InstallationError(str(source), str(source.parent), "file not found")

        for dest_dir in self.destinations:
            try:
                dest_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise InstallationError(str(source), str(dest_dir), str(e)) from e

        installed: list[Path] = []
        for dest_dir in self.destinations:
            installed.append(self._install_one(source, dest_dir))
        return ArtifactRecord(source=source, installed=tuple(installed))

    def install_all(self, sources: Iterable[Path | str]) -> list[ArtifactRecord]:
        """Install several files; stops at the first failure."""
        return [self.install(source) for source in sources]

    def _install_one(self, source: Path, dest_dir: Path) -> Path:
        dest = dest_dir / source.name
        try:
            if dest.exists() and dest.samefile(source):
                logger.debug("%s is already in place", dest)
            else:
                dest = copy(source, dest_dir)
            make_executable(dest)
        except OSError as e:
            raise InstallationError(str(source), str(dest_dir), str(e)) from e
        logger.info("Installed %s", dest)
        return dest
