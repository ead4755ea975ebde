# SPDX-License-Identifier: MIT
"""Toolchain selection on Windows.

Windows has two toolchain variants:

- MSVC (cl.exe + link.exe), the default
- MinGW-w64 GCC, selected with USE_MINGW=1 or USE_MSVC=0

If both USE_MINGW=1 and USE_MSVC=1 are given, USE_MINGW wins and
USE_MSVC is treated as 0. A warning is logged; with STRICT_TOOLCHAIN=1
the conflict is an error instead.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from simbuild.core.errors import ResolutionError
from simbuild.toolchains.mingw import MINGW_FLAGS, msys2_prefix
from simbuild.toolchains.msvc import MSVC_FLAGS, MSVC_NATIVE_TUNING
from simbuild.tools.toolchain import PlatformProfile, ToolchainStrategy

if TYPE_CHECKING:
    from simbuild.configure.platform import Platform
    from simbuild.configure.variables import BuildVariables

logger = logging.getLogger(__name__)


def select_windows_variant(variables: BuildVariables) -> str:
    """Return 'msvc' or 'mingw' from the USE_MSVC/USE_MINGW overrides.

    Raises:
        ResolutionError: If the overrides conflict and STRICT_TOOLCHAIN is set.
    """
    use_mingw = variables.get_tristate("USE_MINGW")
    use_msvc = variables.get_tristate("USE_MSVC")

    if use_mingw:
        if use_msvc:
            if variables.get_bool("STRICT_TOOLCHAIN"):
                raise ResolutionError(["USE_MSVC=1", "USE_MINGW=1"])
            logger.warning("Both USE_MSVC and USE_MINGW are set; using MinGW")
        use_msvc = False
    elif use_msvc is None:
        use_msvc = True

    return "msvc" if use_msvc else "mingw"


class WindowsStrategy(ToolchainStrategy):
    """Resolve the MSVC or MinGW profile on Windows."""

    os_name = "windows"

    def _select(self, platform: Platform, variables: BuildVariables) -> PlatformProfile:
        variant = select_windows_variant(variables)
        logger.debug("Windows toolchain variant: %s", variant)

        if variant == "msvc":
            flags = replace(
                MSVC_FLAGS, native_tuning=MSVC_NATIVE_TUNING.get(platform.arch, ())
            )
            return PlatformProfile(
                os=platform.os,
                arch=platform.arch,
                toolchain="msvc",
                cc="cl.exe",
                cxx="cl.exe",
                flags=flags,
                linker="link.exe",
            )

        prefix = msys2_prefix(platform.arch)
        return PlatformProfile(
            os=platform.os,
            arch=platform.arch,
            toolchain="mingw",
            cc="gcc.exe",
            cxx="g++.exe",
            flags=MINGW_FLAGS,
            include_dirs=(f"{prefix}/include",),
            lib_dirs=(f"{prefix}/lib",),
        )
