# SPDX-License-Identifier: MIT
"""Compose compiler and linker flags for a build.

The planner is pure data assembly: given a profile, the capability
decision and the debug switch, it always produces the same flags in
the same order. Layers:

- optimization: release optimisation and native CPU tuning
- warnings: toolchain warning flags
- capability: OpenMP compile flags, only when enabled
- debug: no-optimisation, debug info and AddressSanitizer
- includes: include paths from the profile
- defines: build-mode and project definitions

Release and debug layers are mutually exclusive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from simbuild.core.flags import CompilerFlagSet, deduplicate_flags

if TYPE_CHECKING:
    from simbuild.core.target import BuildTarget
    from simbuild.tools.toolchain import PlatformProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildStep:
    """One process invocation of the build.

    Attributes:
        name: 'compile' or 'link'.
        argv: Full command line.
    """

    name: str
    argv: tuple[str, ...]

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass
class BuildPlan:
    """Everything needed to run the build.

    Attributes:
        target: The target being built.
        compile_flags: Layered compiler flags.
        link_flags: Linker flags.
        steps: Commands to run, in order.
        capability: True if OpenMP flags are included.
        debug: True for a debug build.
    """

    target: BuildTarget
    compile_flags: CompilerFlagSet
    link_flags: list[str]
    steps: list[BuildStep] = field(default_factory=list)
    capability: bool = False
    debug: bool = False

    @property
    def mode(self) -> str:
        return "debug" if self.debug else "release"


class BuildPlanner:
    """Build flag sets and commands for one PlatformProfile.

    Example:
        planner = BuildPlanner(profile)
        plan = planner.plan(target, capability=True, debug=False)
        for step in plan.steps:
            print(step)
    """

    def __init__(self, profile: PlatformProfile) -> None:
        self.profile = profile

    def compile_flags(
        self,
        *,
        capability: bool,
        debug: bool,
        defines: tuple[str, ...] | list[str] = (),
    ) -> CompilerFlagSet:
        table = self.profile.flags
        flags = CompilerFlagSet(table.separated_arg_flags)

        if debug:
            flags.add("debug", *table.debug)
        else:
            flags.add("optimization", *table.optimize, *table.native_tuning)
        flags.add("warnings", *table.warnings)
        if capability:
            flags.add("capability", *table.capability_compile)
        flags.add("includes", *table.include_flags(self.profile.include_dirs))

        mode_defines = table.debug_defines if debug else table.release_defines
        flags.add(
            "defines",
            *table.define_flags([*table.base_defines, *mode_defines, *defines]),
        )
        return flags

    def link_flags(
        self,
        *,
        capability: bool,
        debug: bool,
        libs: tuple[str, ...] | list[str] = (),
    ) -> list[str]:
        table = self.profile.flags
        flags = table.libdir_flags(self.profile.lib_dirs)
        if capability:
            flags.extend(table.capability_link)
        flags.extend(table.lib_flags(libs))
        if debug:
            flags.extend(table.debug_link)
        return deduplicate_flags(flags, table.separated_arg_flags)

    def plan(self, target: BuildTarget, *, capability: bool, debug: bool) -> BuildPlan:
        """Compose the full plan for *target*."""
        compile_flags = self.compile_flags(
            capability=capability, debug=debug, defines=target.defines
        )
        link_flags = self.link_flags(capability=capability, debug=debug, libs=target.libs)

        table = self.profile.flags
        commands = table.compile_and_link(
            self.profile.compiler_for(target.source),
            target.source,
            target.build_output,
            compile_flags.flags(),
            link_flags,
            linker=self.profile.linker,
        )
        names = ["compile", "link"] if table.separate_link else ["compile"]
        steps = [BuildStep(name, tuple(argv)) for name, argv in zip(names, commands)]

        logger.debug(
            "Planned %s build (OpenMP %s): %s",
            "debug" if debug else "release",
            "on" if capability else "off",
            compile_flags,
        )
        return BuildPlan(
            target=target,
            compile_flags=compile_flags,
            link_flags=link_flags,
            steps=steps,
            capability=capability,
            debug=debug,
        )
