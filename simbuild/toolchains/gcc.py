# SPDX-License-Identifier: MIT
"""GCC toolchain (Linux).

Linux has a single toolchain variant. The host architecture only
selects which multiarch library directory is searched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from simbuild.tools.toolchain import FlagTable, PlatformProfile, ToolchainStrategy

if TYPE_CHECKING:
    from simbuild.configure.platform import Platform
    from simbuild.configure.variables import BuildVariables

logger = logging.getLogger(__name__)

GCC_FLAGS = FlagTable(
    optimize=("-O3", "-ffast-math", "-funroll-loops"),
    native_tuning=("-march=native", "-mtune=native"),
    debug=("-O0", "-g", "-fsanitize=address", "-fno-omit-frame-pointer"),
    debug_link=("-fsanitize=address",),
    warnings=("-Wall", "-Wextra"),
    capability_compile=("-fopenmp",),
    capability_link=("-fopenmp",),
)

# Library search paths per architecture; unknown architectures use x86_64.
LINUX_LIB_DIRS: dict[str, tuple[str, ...]] = {
    "x86_64": ("/usr/local/lib", "/usr/lib/x86_64-linux-gnu"),
    "arm64": ("/usr/local/lib", "/usr/lib/aarch64-linux-gnu"),
}
LINUX_DEFAULT_ARCH = "x86_64"
LINUX_INCLUDE_DIRS: tuple[str, ...] = ("/usr/local/include",)


class GccStrategy(ToolchainStrategy):
    """Resolve the GCC profile on Linux."""

    os_name = "linux"

    def _select(self, platform: Platform, variables: BuildVariables) -> PlatformProfile:
        lib_dirs = LINUX_LIB_DIRS.get(platform.arch)
        if lib_dirs is None:
            logger.debug(
                "No library paths for architecture '%s', using %s defaults",
                platform.arch,
                LINUX_DEFAULT_ARCH,
            )
            lib_dirs = LINUX_LIB_DIRS[LINUX_DEFAULT_ARCH]

        return PlatformProfile(
            os=platform.os,
            arch=platform.arch,
            toolchain="gcc",
            cc="gcc",
            cxx="g++",
            flags=GCC_FLAGS,
            include_dirs=LINUX_INCLUDE_DIRS,
            lib_dirs=lib_dirs,
        )
