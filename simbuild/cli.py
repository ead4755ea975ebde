# SPDX-License-Identifier: MIT
"""Command-line interface for simbuild."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from simbuild.builders.clean import Cleaner
from simbuild.configure.platform import get_platform
from simbuild.configure.probe import CapabilityProber
from simbuild.configure.project import PROJECT_FILE, load_project
from simbuild.configure.variables import KNOWN_VARIABLES, BuildVariables
from simbuild.core.errors import (
    ResolutionError,
    SimbuildError,
    ToolchainError,
    UserAbortError,
)
from simbuild.core.gate import ConfirmationPort, assume_yes, terminal_confirm
from simbuild.core.orchestrator import BuildOrchestrator
from simbuild.core.planner import BuildPlanner
from simbuild.core.target import BuildTarget
from simbuild.toolchains import resolve_profile
from simbuild.util.bootstrap import bootstrap

if TYPE_CHECKING:
    from simbuild.tools.toolchain import PlatformProfile

# Set up logging
logger = logging.getLogger("simbuild")

EXIT_FAILURE = 1
EXIT_ABORTED = 2
EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, force=True)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def get_variables(args: argparse.Namespace) -> BuildVariables:
    variables, remaining = parse_variables(getattr(args, "extra", []) or [])
    if remaining:
        raise SimbuildError(f"unexpected arguments: {' '.join(remaining)}")
    return BuildVariables(variables)


def get_confirm(args: argparse.Namespace) -> ConfirmationPort:
    return assume_yes if getattr(args, "yes", False) else terminal_confirm


def make_orchestrator(args: argparse.Namespace) -> BuildOrchestrator:
    project = load_project(args.directory)
    return BuildOrchestrator(project, get_variables(args), confirm=get_confirm(args))


def _build(args: argparse.Namespace, *, degraded: bool) -> int:
    orchestrator = make_orchestrator(args)
    result = orchestrator.build(degraded=degraded)

    openmp = "with OpenMP" if result.plan.capability else "without OpenMP"
    print(f"Built {result.plan.target.name} ({result.plan.mode}, {openmp})")
    for record in result.records:
        for path in record.installed:
            print(f"  installed {path}")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Build the simulation, with OpenMP when the compiler supports it.

    If the OpenMP probe fails, asks before building without it
    (default: abort).
    """
    return _build(args, degraded=False)


def cmd_serial(args: argparse.Namespace) -> int:
    """Build the simulation without OpenMP.

    Asks for confirmation first (default: continue).
    """
    return _build(args, degraded=True)


def cmd_install_scripts(args: argparse.Namespace) -> int:
    """Install the auxiliary scripts only."""
    records = make_orchestrator(args).install_scripts()
    for record in records:
        for path in record.installed:
            print(f"  installed {path}")
    print(f"Installed {len(records)} script(s)")
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    """Remove installed artifacts, intermediates and stale probe files."""
    project = load_project(args.directory)
    target = BuildTarget.from_project(project, _profile_for_clean(args))
    report = Cleaner(target).clean()

    if report.nothing_removed:
        print("Nothing to clean")
    else:
        for path in report.removed:
            print(f"  removed {path}")
        print(f"Removed {len(report.removed)} item(s)")
    return 0


def _profile_for_clean(args: argparse.Namespace) -> PlatformProfile:
    """Resolve the profile for clean without failing on strict conflicts."""
    variables = get_variables(args)
    try:
        return resolve_profile(get_platform(), variables)
    except ResolutionError as e:
        logger.warning("%s; cleaning with default toolchain", e)
        return resolve_profile(get_platform(), BuildVariables(environ={}))


def cmd_info(args: argparse.Namespace) -> int:
    """Show the resolved toolchain, flags and artifact status."""
    project = load_project(args.directory)
    variables = get_variables(args)
    profile = resolve_profile(get_platform(), variables)
    target = BuildTarget.from_project(project, profile)
    debug = variables.get_bool("DEBUG")

    print(f"Project: {project.root}")
    project_file = project.root / PROJECT_FILE
    print(f"Project file: {project_file if project_file.exists() else '(defaults)'}")
    print()
    print("Toolchain:")
    for key, value in profile.describe().items():
        print(f"  {key:14} {value}")

    capability = variables.get_tristate("USE_OPENMP")
    if args.probe:
        compiler = profile.compiler_for(target.source)
        result = CapabilityProber(profile, compiler=compiler).probe()
        capability = result.available
        print(f"  {'openmp':14} {'available' if result.available else 'not available'}")
    if capability is None:
        capability = True

    plan = BuildPlanner(profile).plan(target, capability=capability, debug=debug)
    openmp = "on" if capability else "off"
    print()
    print(f"Build ({plan.mode}, OpenMP {openmp}):")
    for step in plan.steps:
        print(f"  {step.name}: {step}")

    print()
    print("Artifacts:")
    for path in [target.primary_output, target.auxiliary_output]:
        print(f"  {'present' if path.exists() else 'missing':8} {path}")
    for script in target.scripts:
        for dest_dir in target.destinations:
            path = dest_dir / script.name
            print(f"  {'present' if path.exists() else 'missing':8} {path}")

    print()
    print("Variables:")
    overrides = variables.overrides()
    for name, description in KNOWN_VARIABLES.items():
        current = f" [{overrides[name]}]" if name in overrides else ""
        print(f"  {name:17} {description}{current}")
    return 0


def cmd_bootstrap(args: argparse.Namespace) -> int:
    """Create the plotting venv and install its requirements."""
    project = load_project(args.directory)
    venv_dir = Path(args.venv) if args.venv else project.root / project.venv
    requirements = (
        Path(args.requirements)
        if args.requirements
        else project.root / project.requirements
    )
    python = bootstrap(venv_dir, requirements)
    print(f"Virtual environment ready: {python}")
    return 0


def run_command(func: Callable[[argparse.Namespace], int], args: argparse.Namespace) -> int:
    """Run a command, mapping errors to exit codes."""
    try:
        return func(args)
    except ToolchainError as e:
        logger.error("%s", e)
        if e.diagnostics:
            sys.stderr.write(e.diagnostics)
            sys.stderr.flush()
        return EXIT_FAILURE
    except UserAbortError as e:
        logger.error("%s", e)
        return EXIT_ABORTED
    except SimbuildError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return EXIT_INTERRUPTED


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-C",
        "--directory",
        default=".",
        help="Project directory (default: current directory)",
    )


def add_variable_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "extra",
        nargs="*",
        metavar="KEY=value",
        help="Build variables, e.g. DEBUG=yes USE_MINGW=1",
    )


def add_build_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Answer yes to confirmation prompts",
    )
    add_variable_args(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simbuild",
        description="Build and install the simulation for this platform.",
        epilog="Run 'simbuild <command> --help' for command-specific help.",
    )
    from simbuild import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    # Default command args (for 'simbuild' with no subcommand). Build
    # variables need the explicit 'build' subcommand: a bare positional
    # here would be taken for a command name.
    add_common_args(parser)
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Answer yes to confirmation prompts",
    )
    parser.set_defaults(func=cmd_build)

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # simbuild build
    build = subparsers.add_parser(
        "build", help="Build with OpenMP when available (default)"
    )
    add_common_args(build)
    add_build_args(build)
    build.set_defaults(func=cmd_build)

    # simbuild serial
    serial = subparsers.add_parser("serial", help="Build without OpenMP")
    add_common_args(serial)
    add_build_args(serial)
    serial.set_defaults(func=cmd_serial)

    # simbuild clean
    clean = subparsers.add_parser("clean", help="Remove build artifacts")
    add_common_args(clean)
    add_variable_args(clean)
    clean.set_defaults(func=cmd_clean)

    # simbuild info
    info = subparsers.add_parser(
        "info", help="Show toolchain, flags and artifact status"
    )
    add_common_args(info)
    info.add_argument(
        "--probe", action="store_true", help="Run the OpenMP probe"
    )
    add_variable_args(info)
    info.set_defaults(func=cmd_info)

    # simbuild install-scripts
    scripts = subparsers.add_parser(
        "install-scripts", help="Install the auxiliary scripts only"
    )
    add_common_args(scripts)
    add_variable_args(scripts)
    scripts.set_defaults(func=cmd_install_scripts)

    # simbuild bootstrap
    boot = subparsers.add_parser(
        "bootstrap", help="Create the Python venv for the plotting scripts"
    )
    add_common_args(boot)
    boot.add_argument("--venv", help="Virtual environment directory")
    boot.add_argument("--requirements", help="Requirements file")
    boot.set_defaults(func=cmd_bootstrap)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the simbuild CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.debug)

    result: int = run_command(args.func, args)
    return result


if __name__ == "__main__":
    sys.exit(main())
