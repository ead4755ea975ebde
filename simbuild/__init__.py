# SPDX-License-Identifier: MIT
"""
Simbuild: platform-adaptive build orchestration for a native simulation.

Simbuild resolves the compiler toolchain for the host (GCC on Linux,
Apple clang on macOS, MSVC or MinGW on Windows), probes it for OpenMP,
asks before falling back to a serial build, compiles and links the
simulation, and installs it together with its plotting scripts.
"""

from __future__ import annotations

__version__ = "0.2.0"

# Re-export commonly used classes for convenient imports
from simbuild.configure.project import ProjectConfig, load_project  # noqa: E402
from simbuild.configure.variables import BuildVariables  # noqa: E402
from simbuild.core.orchestrator import BuildOrchestrator  # noqa: E402
from simbuild.toolchains import resolve_profile  # noqa: E402

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Configuration
    "BuildVariables",
    "ProjectConfig",
    "load_project",
    # Pipeline
    "BuildOrchestrator",
    "resolve_profile",
]
