# SPDX-License-Identifier: MIT
"""Custom exceptions for simbuild.

All simbuild exceptions inherit from SimbuildError, which includes
optional location information (usually a file path) for better
error messages.
"""

from __future__ import annotations


class SimbuildError(Exception):
    """Base class for all simbuild exceptions.

    Attributes:
        message: The error message.
        location: Optional location (file path, variable name) the error
            refers to.
    """

    def __init__(
        self,
        message: str,
        location: str | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class ConfigureError(SimbuildError):
    """Error while resolving the build configuration."""


class ResolutionError(ConfigureError):
    """Conflicting toolchain overrides in strict mode.

    Attributes:
        overrides: The conflicting override variables.
    """

    def __init__(self, overrides: list[str]) -> None:
        self.overrides = overrides
        names = ", ".join(overrides)
        super().__init__(f"conflicting toolchain overrides: {names}")


class ProjectFileError(ConfigureError):
    """The project file is unreadable or malformed."""


class UserAbortError(SimbuildError):
    """The user declined to continue the build."""


class ToolchainError(SimbuildError):
    """A compiler or linker step exited non-zero.

    Attributes:
        step: Name of the failed step (e.g. 'compile', 'link').
        returncode: Exit status of the tool, or None if it could not start.
        diagnostics: The tool's own output, unmodified.
    """

    def __init__(
        self,
        step: str,
        returncode: int | None,
        diagnostics: str = "",
    ) -> None:
        self.step = step
        self.returncode = returncode
        self.diagnostics = diagnostics
        if returncode is None:
            message = f"{step} step could not be started"
        else:
            message = f"{step} step failed with exit status {returncode}"
        super().__init__(message)


class InstallationError(SimbuildError):
    """An artifact could not be copied to its destination.

    Attributes:
        source: The file being installed.
        destination: The directory that could not be written.
    """

    def __init__(self, source: str, destination: str, reason: str) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"cannot install {source}: {reason}", destination)


class BootstrapError(SimbuildError):
    """Creating or populating the virtual environment failed."""


class CleanError(SimbuildError):
    """An artifact exists but could not be removed."""
