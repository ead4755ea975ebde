# SPDX-License-Identifier: MIT
"""Run the compile and link steps of a BuildPlan."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import TYPE_CHECKING

from simbuild.core.errors import ToolchainError

if TYPE_CHECKING:
    from simbuild.core.planner import BuildPlan, BuildStep

logger = logging.getLogger(__name__)


class Executor:
    """Invoke each step of a plan exactly once.

    A step succeeds iff its exit status is 0. The first failure raises
    ToolchainError with the tool's output unmodified; nothing is
    retried and later steps do not run.

    Args:
        echo: Write the output of successful steps (compiler warnings)
            to stderr.
    """

    def __init__(self, echo: bool = True) -> None:
        self.echo = echo

    def run(self, plan: BuildPlan) -> None:
        """Run every step of *plan*.

        Raises:
            ToolchainError: If the build directory cannot be created, or a
                step cannot start or exits non-zero.
        """
        build_dir = plan.target.build_output.parent
        try:
            build_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ToolchainError("prepare", None, f"{build_dir}: {e}\n") from e
        for step in plan.steps:
            self.run_step(step)
        logger.info("Built %s", plan.target.build_output)

    def run_step(self, step: BuildStep) -> None:
        logger.info("Running %s: %s", step.name, step)
        try:
            result = subprocess.run(
                list(step.argv),
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ToolchainError(step.name, None, str(e)) from e

        diagnostics = result.stdout + result.stderr
        if result.returncode != 0:
            raise ToolchainError(step.name, result.returncode, diagnostics)
        if diagnostics and self.echo:
            sys.stderr.write(diagnostics)
            sys.stderr.flush()
