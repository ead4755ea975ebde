# SPDX-License-Identifier: MIT
"""Interactive confirmation before degraded builds.

The gate asks a yes/no question through a confirmation port, a
callable ``(prompt, default) -> bool``. The production port,
`terminal_confirm`, talks to the controlling terminal directly so the
question is visible even when stdout/stdin are redirected. Tests pass
their own port.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from simbuild.configure.probe import CapabilityProbeResult

logger = logging.getLogger(__name__)

ConfirmationPort = Callable[[str, bool], bool]

YES_ANSWERS = frozenset({"y", "yes"})
NO_ANSWERS = frozenset({"n", "no"})


class DecisionReason(Enum):
    CAPABILITY_PRESENT = "capability-present"
    USER_OPTED_IN = "user-opted-in"
    USER_DECLINED = "user-declined"
    EXPLICIT_DEGRADED_REQUEST = "explicit-degraded-request"
    FORCED_ON = "forced-on"


@dataclass(frozen=True)
class BuildDecision:
    """Whether the build proceeds, and why.

    Attributes:
        proceed: False if the run must stop before compiling.
        reason: Why the decision was taken.
    """

    proceed: bool
    reason: DecisionReason

    @property
    def use_capability(self) -> bool:
        """True if the OpenMP flags belong in the build."""
        return self.reason in (
            DecisionReason.CAPABILITY_PRESENT,
            DecisionReason.FORCED_ON,
        )


def _open_terminal(stack: ExitStack) -> tuple[TextIO, TextIO]:
    if os.name == "nt":
        reader = stack.enter_context(open("CONIN$"))
        writer = stack.enter_context(open("CONOUT$", "w"))
    else:
        reader = stack.enter_context(open("/dev/tty"))
        writer = stack.enter_context(open("/dev/tty", "w"))
    return reader, writer


def terminal_confirm(prompt: str, default: bool) -> bool:
    """Ask *prompt* on the controlling terminal.

    An empty answer returns *default*. End of input, or no terminal at
    all, counts as "no". There is no timeout.
    """
    suffix = "[Y/n]" if default else "[y/N]"
    with ExitStack() as stack:
        try:
            reader, writer = _open_terminal(stack)
        except OSError as e:
            logger.warning("No terminal available to confirm (%s); assuming no", e)
            return False

        while True:
            writer.write(f"{prompt} {suffix} ")
            writer.flush()
            line = reader.readline()
            if not line:
                writer.write("\n")
                return False
            answer = line.strip().lower()
            if not answer:
                return default
            if answer in YES_ANSWERS:
                return True
            if answer in NO_ANSWERS:
                return False
            writer.write("Please answer y or n.\n")


def assume_yes(prompt: str, default: bool) -> bool:
    """Confirmation port for --yes: accept without asking."""
    logger.info("%s (assumed yes)", prompt)
    return True


class InteractiveGate:
    """Decide whether a build without OpenMP may go ahead.

    Args:
        confirm: Confirmation port (default: terminal_confirm).
    """

    DEFAULT_PROMPT = (
        "OpenMP is not available with this compiler. "
        "Continue with a serial (non-parallel) build?"
    )
    DEGRADED_PROMPT = "Build without OpenMP (serial build)?"

    def __init__(self, confirm: ConfirmationPort = terminal_confirm) -> None:
        self.confirm = confirm

    def for_default_build(self, probe: CapabilityProbeResult) -> BuildDecision:
        """Decision for the default target after probing.

        No question is asked when OpenMP is available. Otherwise the
        default answer is "no", which aborts the run.
        """
        if probe.available:
            return BuildDecision(True, DecisionReason.CAPABILITY_PRESENT)
        if self.confirm(self.DEFAULT_PROMPT, False):
            return BuildDecision(True, DecisionReason.USER_OPTED_IN)
        return BuildDecision(False, DecisionReason.USER_DECLINED)

    def for_degraded_build(self) -> BuildDecision:
        """Decision for the explicit serial target.

        Always asks; the default answer is "yes".
        """
        if self.confirm(self.DEGRADED_PROMPT, True):
            return BuildDecision(True, DecisionReason.EXPLICIT_DEGRADED_REQUEST)
        return BuildDecision(False, DecisionReason.USER_DECLINED)
