# SPDX-License-Identifier: MIT
"""MSVC toolchain (Windows only).

cl.exe compiles with /c into an object file and link.exe produces the
program in a separate step. OpenMP support is part of the MSVC runtime
(vcomp), so only the /openmp compiler switch is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from simbuild.tools.toolchain import FlagTable


@dataclass(frozen=True)
class MsvcFlagTable(FlagTable):
    """FlagTable with MSVC's separate compile and link steps."""

    def compile_and_link(
        self,
        compiler: str,
        source: Path,
        output: Path,
        compile_flags: list[str],
        link_flags: list[str],
        linker: str | None = None,
    ) -> list[list[str]]:
        obj = output.with_suffix(self.object_suffix)
        compile_cmd = [
            compiler,
            *self.base_compile,
            *compile_flags,
            "/c",
            f"/Fo{obj}",
            str(source),
        ]
        link_cmd = [
            linker or "link.exe",
            *self.base_link,
            f"/OUT:{output}",
            str(obj),
            *link_flags,
        ]
        return [compile_cmd, link_cmd]

    def intermediate_files(self, output: Path) -> list[Path]:
        # Object, debug database, incremental-link state, export/import files
        return [
            output.with_suffix(suffix)
            for suffix in (self.object_suffix, ".pdb", ".ilk", ".exp", ".lib")
        ]


# Architecture to /arch: tuning switch; architectures not listed get none.
MSVC_NATIVE_TUNING: dict[str, tuple[str, ...]] = {
    "x86_64": ("/arch:AVX2",),
}

MSVC_FLAGS = MsvcFlagTable(
    optimize=("/O2", "/fp:fast"),
    native_tuning=MSVC_NATIVE_TUNING["x86_64"],
    debug=("/Od", "/Zi", "/fsanitize=address"),
    debug_link=("/DEBUG",),
    warnings=("/W3",),
    capability_compile=("/openmp",),
    capability_link=(),
    base_compile=("/nologo", "/EHsc"),
    base_link=("/nologo",),
    base_defines=("_CRT_SECURE_NO_WARNINGS",),
    debug_defines=("DEBUG", "_DEBUG"),
    separate_link=True,
    object_suffix=".obj",
    # The C runtime provides libm
    ignored_libs=frozenset(["m"]),
    include_format="/I{}",
    libdir_format="/LIBPATH:{}",
    lib_format="{}.lib",
    define_format="/D{}",
)
