# SPDX-License-Identifier: MIT
"""Remove installed artifacts, intermediates and stale probe files.

The cleaner never looks at what a previous build did. It always tries
to remove the full set of names a build can produce, so running it
twice, or on a fresh checkout, is harmless.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from simbuild.configure.probe import PROBE_PREFIX
from simbuild.core.errors import CleanError
from simbuild.util.commands import remove, remove_tree

if TYPE_CHECKING:
    from simbuild.core.target import BuildTarget

logger = logging.getLogger(__name__)

# Side files any supported toolchain may leave next to the built program
INTERMEDIATE_SUFFIXES: tuple[str, ...] = (".o", ".obj", ".pdb", ".ilk", ".exp", ".lib")


@dataclass
class CleanReport:
    """Paths removed by one clean run."""

    removed: list[Path] = field(default_factory=list)

    @property
    def nothing_removed(self) -> bool:
        return not self.removed


class Cleaner:
    """Remove everything a build of *target* can leave behind.

    Args:
        target: The build target (names and destinations).
        temp_dir: Directory holding probe files (default: system temp dir).
    """

    def __init__(self, target: BuildTarget, temp_dir: Path | str | None = None) -> None:
        self.target = target
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())

    def known_paths(self) -> list[Path]:
        """All artifact file paths, whether or not they exist."""
        target = self.target
        sources = {script.resolve() for script in target.scripts}
        paths: list[Path] = []

        for dest_dir in target.destinations:
            paths.append(dest_dir / target.name)
            for script in target.scripts:
                installed = dest_dir / script.name
                # Never delete a script that lives in a destination directory
                if installed.resolve() not in sources:
                    paths.append(installed)

        paths.append(target.build_output)
        paths.extend(target.build_output.with_suffix(s) for s in INTERMEDIATE_SUFFIXES)
        return paths

    @property
    def debug_bundle(self) -> Path:
        """The ``.dSYM`` directory Apple toolchains write for debug builds."""
        output = self.target.build_output
        return output.with_name(output.name + ".dSYM")

    def probe_leftovers(self) -> list[Path]:
        return sorted(self.temp_dir.glob(f"{PROBE_PREFIX}*"))

    def clean(self) -> CleanReport:
        """Remove all known artifacts.

        Only files are removed by name. A directory that happens to share
        an artifact's name is skipped.

        Raises:
            CleanError: If an existing artifact cannot be removed.
        """
        report = CleanReport()
        for path in self.known_paths():
            if self._remove(remove, path):
                report.removed.append(path)
        # Bundles are the only trees a build writes
        bundles = [self.debug_bundle]
        for path in self.probe_leftovers():
            if path.is_dir() and not path.is_symlink():
                bundles.append(path)
            elif self._remove(remove, path):
                report.removed.append(path)
        for path in bundles:
            if self._remove(remove_tree, path):
                report.removed.append(path)

        root = self.target.primary_output.parent
        for directory in (self.target.build_output.parent, self.target.auxiliary_output.parent):
            if directory == root:
                continue
            try:
                if not directory.is_dir() or any(directory.iterdir()):
                    continue
                directory.rmdir()
            except OSError as e:
                raise CleanError(f"cannot remove directory: {e}", str(directory)) from e
            logger.info("Removed empty directory %s", directory)
            report.removed.append(directory)
        return report

    @staticmethod
    def _remove(remover: Callable[[Path], bool], path: Path) -> bool:
        try:
            removed = remover(path)
        except OSError as e:
            raise CleanError(f"cannot remove: {e}", str(path)) from e
        if removed:
            logger.info("Removed %s", path)
        elif path.is_dir() and remover is remove:
            logger.warning("Skipping directory %s: not a build artifact", path)
        return removed
