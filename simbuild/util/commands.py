# SPDX-License-Identifier: MIT
"""Cross-platform file helpers used by install and clean."""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path


def copy(src: Path | str, dest_dir: Path | str) -> Path:
    """Copy a file into a directory, creating the directory as needed.

    Returns:
        Path of the copy.
    """
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / Path(src).name
    shutil.copy2(src, dest)
    return dest


def make_executable(path: Path | str) -> None:
    """Add execute permission where it can be read (no-op on Windows)."""
    if os.name == "nt":
        return
    path = Path(path)
    mode = path.stat().st_mode
    # Only grant execute to classes that can read the file
    read_bits = mode & (stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
    path.chmod(mode | (read_bits >> 2) | stat.S_IXUSR)


def is_executable(path: Path | str) -> bool:
    if os.name == "nt":
        return Path(path).is_file()
    return bool(Path(path).stat().st_mode & stat.S_IXUSR)


def remove(path: Path | str) -> bool:
    """Remove a file or symlink. Directories are left alone.

    Returns:
        True if something was removed, False if nothing was.
    """
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        return False
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def remove_tree(path: Path | str) -> bool:
    """Remove a directory tree such as a ``.dSYM`` bundle.

    Returns:
        True if the tree existed and was removed.
    """
    path = Path(path)
    if not path.is_dir() or path.is_symlink():
        return False
    shutil.rmtree(path)
    return True
