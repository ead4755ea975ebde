# SPDX-License-Identifier: MIT
"""Tests for simbuild.core.gate."""

import io
from unittest.mock import patch

import pytest

from simbuild.configure.probe import CapabilityProbeResult
from simbuild.core.gate import (
    BuildDecision,
    DecisionReason,
    InteractiveGate,
    assume_yes,
    terminal_confirm,
)


class RecordingPort:
    """Confirmation port that answers from a script and records prompts."""

    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    def __call__(self, prompt, default):
        self.prompts.append((prompt, default))
        return default if self.answer is None else self.answer


AVAILABLE = CapabilityProbeResult(available=True, token="a")
UNAVAILABLE = CapabilityProbeResult(available=False, token="b")


class TestDefaultBuild:
    def test_capability_present_never_asks(self):
        port = RecordingPort(False)
        decision = InteractiveGate(port).for_default_build(AVAILABLE)
        assert decision == BuildDecision(True, DecisionReason.CAPABILITY_PRESENT)
        assert decision.use_capability
        assert port.prompts == []

    def test_missing_capability_asks_with_default_no(self):
        port = RecordingPort(None)
        decision = InteractiveGate(port).for_default_build(UNAVAILABLE)
        assert port.prompts == [(InteractiveGate.DEFAULT_PROMPT, False)]
        assert decision == BuildDecision(False, DecisionReason.USER_DECLINED)

    def test_user_opts_in(self):
        decision = InteractiveGate(RecordingPort(True)).for_default_build(UNAVAILABLE)
        assert decision.proceed
        assert decision.reason is DecisionReason.USER_OPTED_IN
        assert not decision.use_capability


class TestDegradedBuild:
    def test_always_asks_with_default_yes(self):
        port = RecordingPort(None)
        decision = InteractiveGate(port).for_degraded_build()
        assert port.prompts == [(InteractiveGate.DEGRADED_PROMPT, True)]
        assert decision == BuildDecision(True, DecisionReason.EXPLICIT_DEGRADED_REQUEST)
        assert not decision.use_capability

    def test_user_declines(self):
        decision = InteractiveGate(RecordingPort(False)).for_degraded_build()
        assert not decision.proceed
        assert decision.reason is DecisionReason.USER_DECLINED


class TestBuildDecision:
    def test_forced_on_uses_capability(self):
        assert BuildDecision(True, DecisionReason.FORCED_ON).use_capability

    def test_reason_values(self):
        assert DecisionReason.USER_OPTED_IN.value == "user-opted-in"


class FakeTerminal:
    """Patch target for _open_terminal: scripted input, captured output."""

    def __init__(self, text):
        self.reader = io.StringIO(text)
        self.writer = io.StringIO()

    def __call__(self, stack):
        return self.reader, self.writer


OPEN = "simbuild.core.gate._open_terminal"


class TestTerminalConfirm:
    @pytest.mark.parametrize(
        "text,default,expected",
        [
            ("y\n", False, True),
            ("YES\n", False, True),
            ("n\n", True, False),
            ("no\n", True, False),
            ("\n", True, True),
            ("\n", False, False),
            ("", True, False),
        ],
    )
    def test_answers(self, text, default, expected):
        with patch(OPEN, FakeTerminal(text)):
            assert terminal_confirm("Continue?", default) is expected

    def test_shows_default_in_suffix(self):
        terminal = FakeTerminal("\n\n")
        with patch(OPEN, terminal):
            terminal_confirm("Continue?", True)
            terminal_confirm("Continue?", False)
        assert "Continue? [Y/n]" in terminal.writer.getvalue()
        assert "Continue? [y/N]" in terminal.writer.getvalue()

    def test_reprompts_on_invalid_answer(self):
        terminal = FakeTerminal("maybe\ny\n")
        with patch(OPEN, terminal):
            assert terminal_confirm("Continue?", False) is True
        assert "Please answer y or n." in terminal.writer.getvalue()

    def test_no_terminal_means_no(self):
        with patch(OPEN, side_effect=OSError("no tty")):
            assert terminal_confirm("Continue?", True) is False


class TestAssumeYes:
    def test_accepts(self):
        assert assume_yes("Continue?", False) is True
