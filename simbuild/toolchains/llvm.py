# SPDX-License-Identifier: MIT
"""Apple Clang toolchain (macOS).

Apple's clang has no bundled OpenMP runtime. The driver is told to
pass -fopenmp to the preprocessor only, and libomp is linked from a
Homebrew prefix that depends on the host architecture:

- arm64 (Apple silicon): /opt/homebrew
- x86_64 (Intel): /usr/local
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from simbuild.tools.toolchain import FlagTable, PlatformProfile, ToolchainStrategy

if TYPE_CHECKING:
    from simbuild.configure.platform import Platform
    from simbuild.configure.variables import BuildVariables

logger = logging.getLogger(__name__)

CLANG_FLAGS = FlagTable(
    optimize=("-O3", "-ffast-math"),
    native_tuning=("-march=native",),
    debug=("-O0", "-g", "-fsanitize=address", "-fno-omit-frame-pointer"),
    debug_link=("-fsanitize=address",),
    warnings=("-Wall", "-Wextra"),
    capability_compile=("-Xpreprocessor", "-fopenmp"),
    capability_link=("-lomp",),
    separated_arg_flags=frozenset(["-Xpreprocessor"]),
)


# Homebrew prefix per architecture; unknown architectures use arm64.
HOMEBREW_PREFIXES: dict[str, str] = {
    "arm64": "/opt/homebrew",
    "x86_64": "/usr/local",
}
MACOS_DEFAULT_ARCH = "arm64"

# -march=native is rejected by older Apple clang on arm64
NATIVE_TUNING: dict[str, tuple[str, ...]] = {
    "arm64": ("-mcpu=native",),
    "x86_64": ("-march=native",),
}


class AppleClangStrategy(ToolchainStrategy):
    """Resolve the Apple clang profile on macOS."""

    os_name = "darwin"

    def _select(self, platform: Platform, variables: BuildVariables) -> PlatformProfile:
        arch = platform.arch
        if arch not in HOMEBREW_PREFIXES:
            logger.debug(
                "Unknown macOS architecture '%s', using %s defaults",
                arch,
                MACOS_DEFAULT_ARCH,
            )
            arch = MACOS_DEFAULT_ARCH

        brew = HOMEBREW_PREFIXES[arch]
        omp_prefix = f"{brew}/opt/libomp"
        flags = replace(CLANG_FLAGS, native_tuning=NATIVE_TUNING[arch])

        return PlatformProfile(
            os=platform.os,
            arch=platform.arch,
            toolchain="apple-clang",
            cc="clang",
            cxx="clang++",
            flags=flags,
            include_dirs=(f"{brew}/include", f"{omp_prefix}/include"),
            lib_dirs=(f"{brew}/lib", f"{omp_prefix}/lib"),
            omp_prefix=omp_prefix,
        )
