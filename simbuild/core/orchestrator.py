# SPDX-License-Identifier: MIT
"""Sequence one build: resolve, probe, confirm, plan, execute, install.

Everything runs in order on the calling thread. The only point where a
run can wait is the confirmation prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from simbuild.builders.install import ArtifactInstaller, ArtifactRecord
from simbuild.configure.probe import CapabilityProber, CapabilityProbeResult, random_token
from simbuild.core.errors import UserAbortError
from simbuild.core.executor import Executor
from simbuild.core.gate import (
    BuildDecision,
    ConfirmationPort,
    DecisionReason,
    InteractiveGate,
    terminal_confirm,
)
from simbuild.core.planner import BuildPlan, BuildPlanner
from simbuild.core.target import BuildTarget
from simbuild.toolchains import resolve_profile

if TYPE_CHECKING:
    from simbuild.configure.platform import Platform
    from simbuild.configure.project import ProjectConfig
    from simbuild.configure.variables import BuildVariables
    from simbuild.tools.toolchain import PlatformProfile

logger = logging.getLogger(__name__)


@dataclass
class OrchestrationResult:
    """What a completed build did."""

    profile: PlatformProfile
    decision: BuildDecision
    plan: BuildPlan
    probe: CapabilityProbeResult | None = None
    records: list[ArtifactRecord] = field(default_factory=list)


class BuildOrchestrator:
    """Drive a build of one project.

    Args:
        project: Project settings.
        variables: Build variables (overrides).
        platform: Host platform (default: detected).
        confirm: Confirmation port used by the gate.
        unique_id: Token generator for probe file names.
        temp_dir: Directory for probe files (default: system temp dir).
        executor: Runs the build steps (default: Executor()).
    """

    def __init__(
        self,
        project: ProjectConfig,
        variables: BuildVariables,
        *,
        platform: Platform | None = None,
        confirm: ConfirmationPort = terminal_confirm,
        unique_id: Callable[[], str] = random_token,
        temp_dir: Path | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.project = project
        self.variables = variables
        self.platform = platform
        self.gate = InteractiveGate(confirm)
        self.unique_id = unique_id
        self.temp_dir = temp_dir
        self.executor = executor or Executor()

    @property
    def debug(self) -> bool:
        return self.variables.get_bool("DEBUG")

    def resolve(self) -> PlatformProfile:
        return resolve_profile(self.platform, self.variables)

    def target(self, profile: PlatformProfile) -> BuildTarget:
        return BuildTarget.from_project(self.project, profile)

    def installer(self, target: BuildTarget) -> ArtifactInstaller:
        return ArtifactInstaller(target.destinations)

    def probe(self, profile: PlatformProfile, target: BuildTarget) -> CapabilityProbeResult:
        prober = CapabilityProber(
            profile,
            compiler=profile.compiler_for(target.source),
            temp_dir=self.temp_dir,
            unique_id=self.unique_id,
        )
        return prober.probe()

    def decide(
        self, profile: PlatformProfile, target: BuildTarget, *, degraded: bool
    ) -> tuple[BuildDecision, CapabilityProbeResult | None]:
        """Decide whether to build, and whether with OpenMP.

        Raises:
            UserAbortError: If the user declines.
        """
        forced = self.variables.get_tristate("USE_OPENMP")
        probe: CapabilityProbeResult | None = None

        if forced is False:
            decision = BuildDecision(True, DecisionReason.EXPLICIT_DEGRADED_REQUEST)
        elif degraded:
            decision = self.gate.for_degraded_build()
        elif forced:
            decision = BuildDecision(True, DecisionReason.FORCED_ON)
        else:
            probe = self.probe(profile, target)
            decision = self.gate.for_default_build(probe)

        logger.info("Build decision: %s", decision.reason.value)
        if not decision.proceed:
            raise UserAbortError("build aborted by user")
        return decision, probe

    def build(self, *, degraded: bool = False) -> OrchestrationResult:
        """Run the whole pipeline.

        Args:
            degraded: True for the explicit serial (no OpenMP) target.

        Raises:
            ResolutionError: Conflicting overrides in strict mode.
            UserAbortError: The user declined at the prompt.
            ToolchainError: A compile or link step failed.
            InstallationError: An artifact could not be installed.
        """
        profile = self.resolve()
        target = self.target(profile)
        decision, probe = self.decide(profile, target, degraded=degraded)

        plan = BuildPlanner(profile).plan(
            target, capability=decision.use_capability, debug=self.debug
        )
        self.executor.run(plan)

        installer = self.installer(target)
        records = installer.install_all([target.build_output, *target.scripts])
        return OrchestrationResult(
            profile=profile,
            decision=decision,
            plan=plan,
            probe=probe,
            records=records,
        )

    def install_scripts(self) -> list[ArtifactRecord]:
        """Install only the auxiliary scripts."""
        target = self.target(self.resolve())
        if not target.scripts:
            logger.info("No auxiliary scripts configured")
        return self.installer(target).install_all(target.scripts)
