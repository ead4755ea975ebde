# SPDX-License-Identifier: MIT
"""Host platform detection."""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass
from functools import lru_cache

# Common aliases reported by platform.machine()
ARCH_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "arm64",
    "armv8": "arm64",
    "i386": "x86",
    "i686": "x86",
}

def normalize_arch(machine: str) -> str:
    """Map a machine string to a canonical architecture name.

    Examples:
        >>> normalize_arch("AMD64")
        'x86_64'
        >>> normalize_arch("aarch64")
        'arm64'
    """
    machine = machine.lower()
    return ARCH_ALIASES.get(machine, machine)

@dataclass(frozen=True)
class Platform:
    """Operating system and CPU architecture of the build host.

    Attributes:
        os: 'linux', 'darwin' or 'windows' (other values pass through).
        arch: Canonical architecture name, e.g. 'x86_64' or 'arm64'.
    """

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.is_windows else ""


@lru_cache(maxsize=1)
def get_platform() -> Platform:
    """Detect the host platform (cached)."""
    if sys.platform.startswith("win"):
        os_name = "windows"
    elif sys.platform == "darwin":
        os_name = "darwin"
    elif sys.platform.startswith("linux"):
        os_name = "linux"
    else:
        os_name = sys.platform
    return Platform(os=os_name, arch=normalize_arch(_platform.machine()))
