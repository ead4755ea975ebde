# SPDX-License-Identifier: MIT
"""MinGW-w64 GCC toolchain (Windows).

Uses GCC flag conventions. Headers and libraries come from an MSYS2
environment whose prefix depends on the host architecture.
MinGW GCC ships no AddressSanitizer runtime, so debug builds only
disable optimisation and add debug info.
"""

from __future__ import annotations

from dataclasses import replace

from simbuild.toolchains.gcc import GCC_FLAGS

MINGW_FLAGS = replace(
    GCC_FLAGS,
    debug=("-O0", "-g"),
    debug_link=(),
    base_link=("-static",),
)

# MSYS2 environment prefix per architecture; unknown architectures use x86_64.
MSYS2_PREFIXES: dict[str, str] = {
    "x86_64": "C:/msys64/mingw64",
    "arm64": "C:/msys64/clangarm64",
}
MINGW_DEFAULT_ARCH = "x86_64"


def msys2_prefix(arch: str) -> str:
    """Return the MSYS2 prefix for *arch*."""
    return MSYS2_PREFIXES.get(arch, MSYS2_PREFIXES[MINGW_DEFAULT_ARCH])
