"""
Command-line interface for prebuild.

This module provides the `prebuild` CLI tool that Cargo runs as (or from) the
build script of the browser shell crate.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from prebuild import __version__
from prebuild.bindings.egl import generate_egl_bindings
from prebuild.build.directives import DirectiveEmitter
from prebuild.build.orchestrator import PrebuildOrchestrator
from prebuild.build.profile import classify_profile
from prebuild.cli_utils import ErrorFormatter
from prebuild.config import BuildContext, PrebuildSettings
from prebuild.errors import PrebuildError
from prebuild.logging_utils import setup_logging
from prebuild.packages.toolchain import find_python


@dataclass
class RunArgs:
    """Arguments for the run command."""

    skip_webidl: bool = False
    verbose: bool = False


@dataclass
class EglArgs:
    """Arguments for the egl command."""

    out_dir: Path
    verbose: bool = False


@dataclass
class ProfileArgs:
    """Arguments for the profile command."""

    out_dir: Path


def run_command(args: RunArgs) -> None:
    """Run the full pre-build from the build-script environment.

    Examples:
        prebuild run                  # As a Cargo build script
        prebuild run --skip-webidl    # WebIDL bindings provided prebuilt
        prebuild run -v               # Debug logging
    """
    setup_logging(args.verbose)
    try:
        context = BuildContext.from_environ()
        settings = PrebuildSettings.load(context.cwd)
        orchestrator = PrebuildOrchestrator(
            context, settings, DirectiveEmitter(), skip_webidl=args.skip_webidl
        )
        result = orchestrator.run()
        ErrorFormatter.print_success(
            f"Pre-build finished ({result.profile.value}, {result.platform.value}, "
            f"{result.git_sha}) in {result.build_time:.2f}s"
        )
        sys.exit(0)
    except PrebuildError as e:
        ErrorFormatter.handle_prebuild_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def egl_command(args: EglArgs) -> None:
    """Generate egl_bindings.rs into OUT_DIR.

    Examples:
        prebuild egl target/debug/build/servoshell-1234/out
    """
    setup_logging(args.verbose)
    try:
        args.out_dir.mkdir(parents=True, exist_ok=True)
        artifact = generate_egl_bindings(args.out_dir, DirectiveEmitter())
        ErrorFormatter.print_success(f"EGL bindings: {artifact.path}")
        sys.exit(0)
    except PrebuildError as e:
        ErrorFormatter.handle_prebuild_error(e)
    except OSError as e:
        ErrorFormatter.print_error("Error: Cannot create output directory", str(e))
        sys.exit(1)


def profile_command(args: ProfileArgs) -> None:
    """Print `production` or `non-production` for OUT_DIR.

    Examples:
        prebuild profile target/production/build/servoshell-1234/out
    """
    try:
        print(classify_profile(args.out_dir).value)
        sys.exit(0)
    except PrebuildError as e:
        ErrorFormatter.handle_prebuild_error(e)


def find_python_command() -> None:
    """Print the Python interpreter the WebIDL codegen would use."""
    try:
        print(find_python())
        sys.exit(0)
    except PrebuildError as e:
        ErrorFormatter.handle_prebuild_error(e)


def main(argv: Optional[List[str]] = None) -> None:
    """prebuild - pre-compilation orchestrator.

    Generates bindings and emits Cargo directives before the main build.
    """
    parser = argparse.ArgumentParser(
        prog="prebuild",
        description="prebuild - pre-compilation orchestrator for Cargo builds",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"prebuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run the full pre-build from the build-script environment",
    )
    run_parser.add_argument(
        "--skip-webidl",
        action="store_true",
        help="Do not run the WebIDL codegen",
    )
    run_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    # EGL command
    egl_parser = subparsers.add_parser(
        "egl",
        help="Generate EGL bindings only",
    )
    egl_parser.add_argument(
        "out_dir",
        type=Path,
        help="Directory to write egl_bindings.rs into",
    )
    egl_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    # Profile command
    profile_parser = subparsers.add_parser(
        "profile",
        help="Classify the build profile of a Cargo OUT_DIR",
    )
    profile_parser.add_argument(
        "out_dir",
        type=Path,
        help="Cargo OUT_DIR (target/<profile>/build/<crate>-<hash>/out)",
    )

    # Find-python command
    subparsers.add_parser(
        "find-python",
        help="Print the Python interpreter used for the WebIDL codegen",
    )

    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if parsed_args.command == "run":
        run_command(RunArgs(skip_webidl=parsed_args.skip_webidl, verbose=parsed_args.verbose))
    elif parsed_args.command == "egl":
        egl_command(EglArgs(out_dir=parsed_args.out_dir, verbose=parsed_args.verbose))
    elif parsed_args.command == "profile":
        profile_command(ProfileArgs(out_dir=parsed_args.out_dir))
    elif parsed_args.command == "find-python":
        find_python_command()


if __name__ == "__main__":
    main()
