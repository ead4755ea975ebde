# SPDX-License-Identifier: MIT
"""Build variables from the command line and the environment.

Variables can be set when invoking simbuild:
    simbuild build DEBUG=yes USE_MINGW=1

or through the environment:
    DEBUG=yes simbuild

Precedence (highest to lowest):
    1. Command line: simbuild build VAR=value
    2. Environment variable: VAR=value simbuild
"""

from __future__ import annotations

import os
from collections.abc import Mapping

TRUE_VALUES = frozenset({"1", "yes", "true", "on"})
FALSE_VALUES = frozenset({"0", "no", "false", "off"})

# Variables simbuild understands, with a short description for `simbuild info`.
KNOWN_VARIABLES: dict[str, str] = {
    "DEBUG": "Debug build with AddressSanitizer: yes (default: release)",
    "USE_MSVC": "Windows: build with MSVC (default: 1)",
    "USE_MINGW": "Windows: build with MinGW-w64 GCC, overrides USE_MSVC",
    "USE_OPENMP": "Force OpenMP on (1) or off (0) without probing",
    "CC": "C compiler executable",
    "CXX": "C++ compiler executable",
    "OMP_PREFIX": "OpenMP install prefix (include/ and lib/ below it)",
    "INCLUDE_DIRS": "Include search path, replaces the platform default",
    "LIB_DIRS": "Library search path, replaces the platform default",
    "STRICT_TOOLCHAIN": "Treat conflicting toolchain overrides as an error",
}


class BuildVariables:
    """Read-only view over command-line variables with environment fallback.

    Args:
        cli_vars: Variables given as KEY=value on the command line.
        environ: Environment mapping (default: os.environ).
    """

    def __init__(
        self,
        cli_vars: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._cli_vars = dict(cli_vars or {})
        self._environ = os.environ if environ is None else environ

    def get(self, name: str, default: str | None = None) -> str | None:
        """Get a variable, or default if it is not set."""
        if name in self._cli_vars:
            return self._cli_vars[name]
        return self._environ.get(name, default)

    def is_set(self, name: str) -> bool:
        value = self.get(name)
        return value is not None and value.strip() != ""

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Interpret a variable as a yes/no switch.

        Unrecognised values fall back to *default*.
        """
        value = self.get(name)
        if value is None:
            return default
        value = value.strip().lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        return default

    def get_tristate(self, name: str) -> bool | None:
        """Like get_bool, but None when the variable is unset or unrecognised."""
        value = self.get(name)
        if value is None:
            return None
        value = value.strip().lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        return None

    def get_paths(self, name: str) -> list[str] | None:
        """Split an os.pathsep separated variable, or None if unset."""
        if not self.is_set(name):
            return None
        value = self.get(name) or ""
        return [part for part in value.split(os.pathsep) if part]

    def overrides(self) -> dict[str, str]:
        """Return the known variables that are currently set."""
        return {
            name: value
            for name in KNOWN_VARIABLES
            if (value := self.get(name)) is not None
        }

    def __repr__(self) -> str:
        return f"BuildVariables(cli={self._cli_vars!r})"
