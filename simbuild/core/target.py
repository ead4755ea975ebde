# SPDX-License-Identifier: MIT
"""The build target: what gets compiled and where it ends up."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simbuild.configure.project import ProjectConfig
    from simbuild.tools.toolchain import PlatformProfile


def program_filename(name: str, os_name: str) -> str:
    """Return the executable filename for *name* on *os_name*."""
    if os_name == "windows" and not name.lower().endswith(".exe"):
        return f"{name}.exe"
    return name


@dataclass(frozen=True)
class BuildTarget:
    """The simulation binary and its auxiliary scripts.

    Attributes:
        name: Executable filename (with .exe on Windows).
        source: Simulation source file.
        build_output: Where the compiler writes the program.
        primary_output: Installed copy at the project root.
        auxiliary_output: Installed copy in the install directory.
        libs: Libraries to link.
        defines: Extra preprocessor definitions.
        scripts: Auxiliary script executables to install.
    """

    name: str
    source: Path
    build_output: Path
    primary_output: Path
    auxiliary_output: Path
    libs: tuple[str, ...] = ()
    defines: tuple[str, ...] = ()
    scripts: tuple[Path, ...] = ()

    @property
    def destinations(self) -> tuple[Path, Path]:
        """The two install directories: project root, install dir."""
        return self.primary_output.parent, self.auxiliary_output.parent

    @classmethod
    def from_project(
        cls, project: ProjectConfig, profile: PlatformProfile
    ) -> BuildTarget:
        name = program_filename(project.name, profile.os)
        return cls(
            name=name,
            source=project.source_path,
            build_output=project.build_path / name,
            primary_output=project.root / name,
            auxiliary_output=project.install_path / name,
            libs=tuple(project.libs),
            defines=tuple(project.defines),
            scripts=tuple(project.script_paths),
        )
