# SPDX-License-Identifier: MIT
"""Toolchain profiles (GCC, Apple clang, MSVC, MinGW) and their resolution."""

from __future__ import annotations

import logging

from simbuild.configure.platform import Platform, get_platform
from simbuild.configure.variables import BuildVariables
from simbuild.toolchains.gcc import GccStrategy
from simbuild.toolchains.llvm import AppleClangStrategy
from simbuild.toolchains.windows import WindowsStrategy
from simbuild.tools.toolchain import PlatformProfile, ToolchainStrategy

logger = logging.getLogger(__name__)

_STRATEGIES: dict[str, type[ToolchainStrategy]] = {
    strategy.os_name: strategy
    for strategy in (GccStrategy, AppleClangStrategy, WindowsStrategy)
}


def get_strategy(platform: Platform) -> ToolchainStrategy:
    """Return the strategy for *platform*.

    Unknown operating systems are treated like Linux.
    """
    strategy_class = _STRATEGIES.get(platform.os)
    if strategy_class is None:
        logger.debug("No toolchain strategy for '%s', using GCC", platform.os)
        strategy_class = GccStrategy
    return strategy_class()


def resolve_profile(
    platform: Platform | None = None,
    variables: BuildVariables | None = None,
) -> PlatformProfile:
    """Resolve the toolchain profile for this invocation.

    Args:
        platform: Host platform (default: detected).
        variables: Build variables (default: environment only).

    Returns:
        Exactly one PlatformProfile.

    Raises:
        ResolutionError: Conflicting Windows overrides with STRICT_TOOLCHAIN=1.
    """
    if platform is None:
        platform = get_platform()
    if variables is None:
        variables = BuildVariables()
    profile = get_strategy(platform).resolve(platform, variables)
    logger.info("Using %s toolchain (%s/%s)", profile.toolchain, profile.os, profile.arch)
    return profile


__all__ = [
    "AppleClangStrategy",
    "GccStrategy",
    "PlatformProfile",
    "WindowsStrategy",
    "get_strategy",
    "resolve_profile",
]
