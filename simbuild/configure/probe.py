# SPDX-License-Identifier: MIT
"""OpenMP capability probe.

The probe writes a tiny program that calls into the OpenMP runtime,
compiles and links it with the profile's capability flags, and runs
the result. OpenMP is available iff every step exits with status 0.

Probe files are named ``simbuild_omp_probe_<token>.*`` in the temporary
directory. The token comes from a caller-supplied generator; the
default is random. A timestamp-based generator (see `timestamp_token`)
can collide when two probes start within the same second.

All probe files are removed before `CapabilityProber.probe` returns,
whatever the outcome. An interrupt (Ctrl-C) still runs the cleanup,
but a killed process may leave files behind; `simbuild clean` removes
them.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simbuild.tools.toolchain import PlatformProfile

logger = logging.getLogger(__name__)

PROBE_PREFIX = "simbuild_omp_probe_"

PROBE_SOURCE = """\
#include <omp.h>
#include <stdio.h>

int main(void)
{
    int threads = 0;
#pragma omp parallel
    {
#pragma omp single
        threads = omp_get_num_threads();
    }
    printf("%d\\n", threads > 0 ? omp_get_max_threads() : 0);
    return threads > 0 ? 0 : 1;
}
"""


def random_token() -> str:
    """Random 12-hex-digit token."""
    return uuid.uuid4().hex[:12]


def timestamp_token() -> str:
    """Token derived from the current time, with one-second resolution."""
    return str(int(time.time()))


@dataclass(frozen=True)
class CapabilityProbeResult:
    """Outcome of one probe.

    Attributes:
        available: True if OpenMP programs compile, link and run.
        token: Unique token embedded in the probe file names.
        artifacts: Files that existed during the probe (all removed).
        output: Combined tool output, for diagnostics.
    """

    available: bool
    token: str
    artifacts: tuple[Path, ...] = ()
    output: str = ""


class CapabilityProber:
    """Detect whether the OpenMP extension is usable with a profile.

    Example:
        prober = CapabilityProber(profile)
        result = prober.probe()
        if not result.available:
            print("OpenMP not available")

    Args:
        profile: The resolved toolchain profile.
        compiler: Compiler executable (default: the profile's C compiler).
        temp_dir: Directory for probe files (default: system temp dir).
        unique_id: Callable returning the token for probe file names.
        timeout: Seconds allowed for each compile/link/run step.
    """

    def __init__(
        self,
        profile: PlatformProfile,
        *,
        compiler: str | None = None,
        temp_dir: Path | str | None = None,
        unique_id: Callable[[], str] = random_token,
        timeout: float = 60,
    ) -> None:
        self.profile = profile
        self.compiler = compiler or profile.cc
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.unique_id = unique_id
        self.timeout = timeout

    def probe_paths(self, token: str) -> tuple[Path, Path]:
        """Return (source, program) paths for *token*."""
        stem = f"{PROBE_PREFIX}{token}"
        exe_suffix = ".exe" if self.profile.os == "windows" else ""
        return self.temp_dir / f"{stem}.c", self.temp_dir / f"{stem}{exe_suffix}"

    def commands(self, source: Path, program: Path) -> list[list[str]]:
        """Return the compile/link commands for the probe program."""
        table = self.profile.flags
        compile_flags = [
            *table.capability_compile,
            *table.include_flags(self.profile.include_dirs),
        ]
        link_flags = [
            *table.libdir_flags(self.profile.lib_dirs),
            *table.capability_link,
        ]
        return table.compile_and_link(
            self.compiler,
            source,
            program,
            compile_flags,
            link_flags,
            linker=self.profile.linker,
        )

    def probe(self) -> CapabilityProbeResult:
        """Run the probe. Never raises for an unavailable capability."""
        token = self.unique_id()
        source, program = self.probe_paths(token)
        output: list[str] = []
        available = False
        created: list[Path] = []

        try:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            source.write_text(PROBE_SOURCE)
            steps = [*self.commands(source, program), [str(program)]]
            available = all(self._run(cmd, output) for cmd in steps)
        except OSError as e:
            logger.debug("OpenMP probe could not be written: %s", e)
            available = False
        finally:
            created = self._cleanup(token, program)

        if available:
            logger.info("OpenMP is available")
        else:
            logger.info("OpenMP is not available with %s", self.compiler)
        return CapabilityProbeResult(
            available=available,
            token=token,
            artifacts=tuple(created),
            output="".join(output),
        )

    def _run(self, cmd: list[str], output: list[str]) -> bool:
        logger.debug("Probe: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.temp_dir,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.debug("Probe step failed to run: %s", e)
            output.append(f"{e}\n")
            return False

        output.append(result.stdout)
        output.append(result.stderr)
        if result.returncode != 0:
            logger.debug(
                "Probe step exited with %d:\n%s%s",
                result.returncode,
                result.stdout,
                result.stderr,
            )
            return False
        return True

    def _cleanup(self, token: str, program: Path) -> list[Path]:
        """Remove every file the probe may have produced."""
        candidates = set(self.temp_dir.glob(f"{PROBE_PREFIX}{token}*"))
        candidates.update(self.profile.flags.intermediate_files(program))
        # Intermediate debug output, e.g. clang's program.dSYM bundle
        candidates.add(program.with_name(program.name + ".dSYM"))

        removed: list[Path] = []
        for path in sorted(candidates):
            if not path.exists():
                continue
            removed.append(path)
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except OSError as e:
                logger.warning("Could not remove probe file %s: %s", path, e)
        return removed
