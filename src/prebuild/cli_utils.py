"""CLI utility functions for prebuild.

Everything here writes to stderr: stdout carries the Cargo directives.
"""

import sys
import traceback

from prebuild.errors import PrebuildError


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def _use_color() -> bool:
        return sys.stderr.isatty()

    @staticmethod
    def _paint(color: str, text: str) -> str:
        if ErrorFormatter._use_color():
            return f"{color}{text}{ErrorFormatter.RESET}"
        return text

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Codegen failed")
            message: Error message details
        """
        print(file=sys.stderr)
        print(ErrorFormatter._paint(ErrorFormatter.RED, f"✗ {title}"), file=sys.stderr)
        print(file=sys.stderr)
        print(message, file=sys.stderr)
        print(file=sys.stderr)

    @staticmethod
    def print_success(message: str) -> None:
        print(ErrorFormatter._paint(ErrorFormatter.GREEN, f"✓ {message}"), file=sys.stderr)

    @staticmethod
    def print_warning(message: str) -> None:
        print(ErrorFormatter._paint(ErrorFormatter.YELLOW, f"✗ {message}"), file=sys.stderr)

    @staticmethod
    def handle_prebuild_error(error: PrebuildError) -> None:
        """Report a PrebuildError and exit with its exit code.

        Args:
            error: The error to report
        """
        ErrorFormatter.print_error(f"Pre-build failed ({type(error).__name__})", str(error))
        sys.exit(error.exit_code)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Pre-build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        ErrorFormatter.print_error("Unexpected error", f"{type(error).__name__}: {error}")
        if verbose:
            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)
        sys.exit(1)
