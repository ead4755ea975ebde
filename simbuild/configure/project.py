# SPDX-License-Identifier: MIT
"""Project file handling.

A project is described by an optional ``simbuild.json`` at its root:

    {
        "name": "simulation",
        "source": "src/main.c",
        "install_dir": "bin",
        "scripts": ["scripts/plot_energy.py", "scripts/plot_field.py"],
        "libs": ["m"],
        "defines": ["USE_DOUBLE"]
    }

Every key is optional; missing keys take the defaults below.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from simbuild.core.errors import ProjectFileError

logger = logging.getLogger(__name__)

PROJECT_FILE = "simbuild.json"


@dataclass
class ProjectConfig:
    """Settings for one simulation project.

    Attributes:
        root: Project root directory (destination A for artifacts).
        name: Base name of the produced binary.
        source: Simulation source file, relative to root.
        install_dir: Secondary install directory (destination B).
        build_dir: Directory for intermediate objects.
        scripts: Auxiliary executables installed next to the binary.
        libs: Libraries linked into the binary (without prefix).
        defines: Extra preprocessor definitions.
        requirements: Requirements file for the bootstrap venv.
        venv: Directory of the bootstrap venv.
    """

    root: Path
    name: str = "simulation"
    source: str = "src/main.c"
    install_dir: str = "bin"
    build_dir: str = "build"
    scripts: list[str] = field(default_factory=list)
    libs: list[str] = field(default_factory=lambda: ["m"])
    defines: list[str] = field(default_factory=list)
    requirements: str = "requirements.txt"
    venv: str = ".venv"

    @property
    def source_path(self) -> Path:
        return self.root / self.source

    @property
    def install_path(self) -> Path:
        return self.root / self.install_dir

    @property
    def build_path(self) -> Path:
        return self.root / self.build_dir

    @property
    def script_paths(self) -> list[Path]:
        return [self.root / script for script in self.scripts]


_LIST_KEYS = ("scripts", "libs", "defines")


def _validate(data: Any, path: Path) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ProjectFileError("expected a JSON object", str(path))

    known = {f.name for f in fields(ProjectConfig)} - {"root"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ProjectFileError(f"unknown keys: {', '.join(unknown)}", str(path))

    for key, value in data.items():
        if key in _LIST_KEYS:
            if not isinstance(value, list) or not all(
                isinstance(item, str) for item in value
            ):
                raise ProjectFileError(f"'{key}' must be a list of strings", str(path))
        elif not isinstance(value, str):
            raise ProjectFileError(f"'{key}' must be a string", str(path))

    # The name becomes a file in the project root
    name = data.get("name")
    if name is not None and (
        name in ("", ".", "..") or any(sep in name for sep in ("/", "\\"))
    ):
        raise ProjectFileError(
            f"'name' must be a plain file name, got {name!r}", str(path)
        )
    return data


def load_project(root: Path | str = ".") -> ProjectConfig:
    """Load the project file from *root*, or return defaults if absent.

    Raises:
        ProjectFileError: If the file exists but cannot be parsed.
    """
    root = Path(root).absolute()
    path = root / PROJECT_FILE
    if not path.exists():
        logger.debug("No %s in %s, using defaults", PROJECT_FILE, root)
        return ProjectConfig(root=root)

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProjectFileError(f"invalid JSON: {e}", str(path)) from e
    except OSError as e:
        raise ProjectFileError(f"cannot read file: {e}", str(path)) from e

    logger.debug("Loaded project file %s", path)
    return ProjectConfig(root=root, **_validate(data, path))
