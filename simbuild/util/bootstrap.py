# SPDX-License-Identifier: MIT
"""Python environment bootstrap for the plotting scripts.

Creates a virtual environment (if it does not exist yet) and installs
the project's requirements file into it with the venv's own pip.
"""

from __future__ import annotations

import logging
import os
import subprocess
import venv
from pathlib import Path

from simbuild.core.errors import BootstrapError

logger = logging.getLogger(__name__)


def venv_python(venv_dir: Path | str) -> Path:
    """Return the interpreter path inside *venv_dir*."""
    venv_dir = Path(venv_dir)
    if os.name == "nt":
        return venv_dir / "Scripts" / "python.exe"
    return venv_dir / "bin" / "python"


def create_venv(venv_dir: Path | str) -> Path:
    """Create the venv unless it already exists.

    Returns:
        Path to the venv's Python interpreter.

    Raises:
        BootstrapError: If creation fails or leaves no interpreter.
    """
    venv_dir = Path(venv_dir)
    python = venv_python(venv_dir)
    if python.exists():
        logger.info("Virtual environment already exists: %s", venv_dir)
        return python

    logger.info("Creating virtual environment: %s", venv_dir)
    try:
        venv.create(venv_dir, with_pip=True, clear=False)
    except (OSError, subprocess.CalledProcessError) as e:
        raise BootstrapError(f"cannot create virtual environment: {e}", str(venv_dir)) from e

    if not python.exists():
        raise BootstrapError("virtual environment has no Python interpreter", str(venv_dir))
    return python


def install_requirements(python: Path, requirements: Path | str) -> bool:
    """pip-install *requirements* with *python*.

    Returns:
        False if the requirements file does not exist (nothing done).

    Raises:
        BootstrapError: If pip fails.
    """
    requirements = Path(requirements)
    if not requirements.is_file():
        logger.info("No requirements file at %s; skipping install", requirements)
        return False

    cmd = [str(python), "-m", "pip", "install", "-r", str(requirements)]
    logger.info("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd)
    except OSError as e:
        raise BootstrapError(f"cannot run pip: {e}", str(python)) from e
    if result.returncode != 0:
        raise BootstrapError(
            f"pip exited with status {result.returncode}", str(requirements)
        )
    return True


def bootstrap(venv_dir: Path | str, requirements: Path | str) -> Path:
    """Create the venv and install requirements. Returns the interpreter."""
    python = create_venv(venv_dir)
    install_requirements(python, requirements)
    return python
