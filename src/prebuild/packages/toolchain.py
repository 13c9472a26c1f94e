"""Python interpreter discovery for the WebIDL codegen.

The WebIDL codegen is a Python program, so the orchestrator needs an
interpreter name it can hand to subprocess. PYTHON3 wins unconditionally;
otherwise a short host-specific list of names is checked with --version.
"""

import logging
import os
import subprocess
from typing import Mapping, Optional, Sequence, Tuple

from ..errors import PrebuildError
from .platform_utils import PlatformDetector

logger = logging.getLogger(__name__)

PYTHON_OVERRIDE_ENV = "PYTHON3"


class ToolchainError(PrebuildError):
    """Raised when no usable interpreter can be found."""

    pass


class PythonLocator:
    """Finds a working Python interpreter.

    Candidate order matters: the first name whose `--version` check exits
    with status 0 is returned.
    """

    WINDOWS_CANDIDATES: Tuple[str, ...] = ("python.exe", "python")
    POSIX_CANDIDATES: Tuple[str, ...] = ("python3", "python")

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        candidates: Optional[Sequence[str]] = None,
        host_os: Optional[str] = None,
    ):
        """Initialize the locator.

        Args:
            environ: Environment mapping (defaults to os.environ)
            candidates: Names to try, in order (defaults to the host's list)
            host_os: Host OS (defaults to the detected host)
        """
        self.environ = os.environ if environ is None else environ
        if candidates is None:
            host_os = host_os or PlatformDetector.detect_host_os()
            candidates = (
                self.WINDOWS_CANDIDATES if host_os == "windows" else self.POSIX_CANDIDATES
            )
        self.candidates = tuple(candidates)

    def find(self) -> str:
        """Return the interpreter to use.

        Returns:
            The PYTHON3 value when set, otherwise the first working candidate

        Raises:
            ToolchainError: If every candidate fails its --version check
        """
        override = self.environ.get(PYTHON_OVERRIDE_ENV)
        if override is not None:
            logger.debug(f"Using {PYTHON_OVERRIDE_ENV}={override!r} without a version check")
            return override

        for name in self.candidates:
            if self._runs(name):
                logger.info(f"Found python: {name}")
                return name

        raise ToolchainError(
            f"Can't find python (tried {', '.join(self.candidates)})!",
            f"Try fixing PATH or setting the {PYTHON_OVERRIDE_ENV} env var",
        )

    @staticmethod
    def _runs(name: str) -> bool:
        """Run `<name> --version` and report whether it exited successfully."""
        try:
            result = subprocess.run(
                [name, "--version"],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            logger.debug(f"{name} --version failed to start: {e}")
            return False

        if result.returncode != 0:
            logger.debug(f"{name} --version exited with {result.returncode}")
            return False
        return True


def find_python(
    environ: Optional[Mapping[str, str]] = None,
    candidates: Optional[Sequence[str]] = None,
    host_os: Optional[str] = None,
) -> str:
    """Convenience wrapper around PythonLocator.find()."""
    return PythonLocator(environ, candidates, host_os).find()
