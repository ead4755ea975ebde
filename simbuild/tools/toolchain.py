# SPDX-License-Identifier: MIT
"""Toolchain profile types and the strategy base class.

A PlatformProfile is the resolved combination of compiler executables,
flag conventions (a FlagTable) and library search paths for one
platform. Profiles are produced by a ToolchainStrategy, one per host
operating system, and are immutable once resolved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simbuild.configure.platform import Platform
    from simbuild.configure.variables import BuildVariables

CXX_SUFFIXES = frozenset({".cpp", ".cxx", ".cc", ".C"})


@dataclass(frozen=True)
class FlagTable:
    """Flag conventions of one toolchain.

    Attributes:
        optimize: Release-mode numeric optimisation flags.
        native_tuning: Release-mode CPU tuning flags.
        debug: Debug-mode compile flags (no optimisation, sanitizer).
        debug_link: Debug-mode link flags.
        warnings: Warning flags, used in both modes.
        capability_compile: Flags enabling OpenMP at compile time.
        capability_link: Flags/libraries enabling OpenMP at link time.
        base_compile: Flags always passed first to the compiler.
        base_link: Flags always passed to the linker.
        base_defines: Definitions always passed.
        release_defines: Definitions for release builds.
        debug_defines: Definitions for debug builds.
        separate_link: True if linking is a separate step.
        separated_arg_flags: Flags whose argument is a separate token.
        object_suffix: Suffix of intermediate object files.
        ignored_libs: Library names that need no explicit link flag.
    """

    optimize: tuple[str, ...]
    native_tuning: tuple[str, ...]
    debug: tuple[str, ...]
    debug_link: tuple[str, ...]
    warnings: tuple[str, ...]
    capability_compile: tuple[str, ...]
    capability_link: tuple[str, ...]
    base_compile: tuple[str, ...] = ()
    base_link: tuple[str, ...] = ()
    base_defines: tuple[str, ...] = ()
    release_defines: tuple[str, ...] = ("NDEBUG",)
    debug_defines: tuple[str, ...] = ("DEBUG",)
    separate_link: bool = False
    separated_arg_flags: frozenset[str] = frozenset()
    object_suffix: str = ".o"
    ignored_libs: frozenset[str] = frozenset()
    include_format: str = "-I{}"
    libdir_format: str = "-L{}"
    lib_format: str = "-l{}"
    define_format: str = "-D{}"

    def include_flags(self, dirs: tuple[str, ...] | list[str]) -> list[str]:
        return [self.include_format.format(d) for d in dirs]

    def libdir_flags(self, dirs: tuple[str, ...] | list[str]) -> list[str]:
        return [self.libdir_format.format(d) for d in dirs]

    def lib_flags(self, libs: tuple[str, ...] | list[str]) -> list[str]:
        return [self.lib_format.format(lib) for lib in libs if lib not in self.ignored_libs]

    def define_flags(self, defines: tuple[str, ...] | list[str]) -> list[str]:
        return [self.define_format.format(d) for d in defines]

    def compile_and_link(
        self,
        compiler: str,
        source: Path,
        output: Path,
        compile_flags: list[str],
        link_flags: list[str],
        linker: str | None = None,
    ) -> list[list[str]]:
        """Return the command(s) turning *source* into the program *output*.

        Single-step toolchains get one compile-and-link command and
        ignore *linker*; separate-link toolchains override this.
        """
        return [
            [
                compiler,
                *self.base_compile,
                *compile_flags,
                str(source),
                "-o",
                str(output),
                *self.base_link,
                *link_flags,
            ]
        ]

    def intermediate_files(self, output: Path) -> list[Path]:
        """Files a build of *output* leaves behind besides *output* itself."""
        return []


@dataclass(frozen=True)
class PlatformProfile:
    """The resolved toolchain profile for one invocation.

    Attributes:
        os: Operating system identifier.
        arch: CPU architecture.
        toolchain: 'gcc', 'apple-clang', 'msvc' or 'mingw'.
        cc: C compiler executable.
        cxx: C++ compiler executable.
        flags: Flag conventions of the toolchain.
        include_dirs: Include search paths.
        lib_dirs: Library search paths.
        omp_prefix: OpenMP install prefix, if the platform needs one.
        linker: Linker executable for separate-link toolchains.
    """

    os: str
    arch: str
    toolchain: str
    cc: str
    cxx: str
    flags: FlagTable
    include_dirs: tuple[str, ...] = ()
    lib_dirs: tuple[str, ...] = ()
    omp_prefix: str | None = None
    linker: str | None = None

    def compiler_for(self, source: Path | str) -> str:
        """Pick the C or C++ compiler by source suffix."""
        if Path(source).suffix in CXX_SUFFIXES:
            return self.cxx
        return self.cc

    def describe(self) -> dict[str, str]:
        """Flat description used by `simbuild info`."""
        info = {
            "platform": f"{self.os}/{self.arch}",
            "toolchain": self.toolchain,
            "cc": self.cc,
            "cxx": self.cxx,
            "include dirs": " ".join(self.include_dirs) or "(none)",
            "library dirs": " ".join(self.lib_dirs) or "(none)",
        }
        if self.linker:
            info["linker"] = self.linker
        if self.omp_prefix:
            info["openmp prefix"] = self.omp_prefix
        return info


class ToolchainStrategy(ABC):
    """Resolves the PlatformProfile for one host operating system.

    Subclasses hold the platform's fixed tables and implement
    `_select`; the shared override handling lives here.
    """

    #: Value of Platform.os this strategy handles.
    os_name: str = ""

    def resolve(self, platform: Platform, variables: BuildVariables) -> PlatformProfile:
        """Resolve the profile, then apply explicit path/compiler overrides."""
        profile = self._select(platform, variables)
        return self._apply_overrides(profile, variables)

    @abstractmethod
    def _select(self, platform: Platform, variables: BuildVariables) -> PlatformProfile:
        """Pick the toolchain and its default paths for *platform*."""
        ...

    def _apply_overrides(
        self, profile: PlatformProfile, variables: BuildVariables
    ) -> PlatformProfile:
        include_dirs = list(profile.include_dirs)
        lib_dirs = list(profile.lib_dirs)
        omp_prefix = profile.omp_prefix

        prefix = variables.get("OMP_PREFIX")
        if prefix:
            if omp_prefix:
                old = (f"{omp_prefix}/include", f"{omp_prefix}/lib")
                include_dirs = [d for d in include_dirs if d != old[0]]
                lib_dirs = [d for d in lib_dirs if d != old[1]]
            omp_prefix = prefix.rstrip("/\\")
            include_dirs.append(f"{omp_prefix}/include")
            lib_dirs.append(f"{omp_prefix}/lib")

        override_includes = variables.get_paths("INCLUDE_DIRS")
        if override_includes is not None:
            include_dirs = override_includes
        override_libs = variables.get_paths("LIB_DIRS")
        if override_libs is not None:
            lib_dirs = override_libs

        cc = variables.get("CC") or profile.cc
        cxx = variables.get("CXX") or profile.cxx

        return replace(
            profile,
            cc=cc,
            cxx=cxx,
            include_dirs=tuple(include_dirs),
            lib_dirs=tuple(lib_dirs),
            omp_prefix=omp_prefix,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(os={self.os_name!r})"
