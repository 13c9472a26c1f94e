"""
Build context derived from the build-script environment.

Cargo passes everything a build script needs through environment variables.
This module reads them once and freezes the result into a BuildContext that
every later stage uses read-only.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..errors import PrebuildError
from ..packages.platform_utils import PlatformDetector

OUT_DIR_ENV = "OUT_DIR"
TARGET_OS_ENV = "CARGO_CFG_TARGET_OS"
TARGET_ENV_ENV = "CARGO_CFG_TARGET_ENV"
SERVO_PATH_ENV = "SERVO_PATH"
PYTHON_OVERRIDE_ENV = "PYTHON3"
STYLE_MANIFEST_ENV = "STYLE_PROPERTIES_JSON"

# Variables whose change should make Cargo rerun this step. Cargo already
# tracks OUT_DIR and CARGO_CFG_* itself.
TRACKED_ENV_VARS = (
    SERVO_PATH_ENV,
    PYTHON_OVERRIDE_ENV,
    STYLE_MANIFEST_ENV,
    "CC",
    "AR",
    "RC",
    "WINDRES",
)


class BuildContextError(PrebuildError):
    """Raised when the build environment is incomplete."""

    pass


@dataclass(frozen=True)
class BuildContext:
    """
    Everything known about the current build, derived once per run.

    Attributes:
        out_dir: Scratch directory for generated artifacts (OUT_DIR)
        target_os: Cargo target OS, e.g. 'android', 'macos', 'windows'
        target_env: Cargo target environment/ABI, e.g. 'gnu', 'msvc', 'ohos'
        cwd: Working directory of the build script (the crate root)
        host_os: OS the orchestrator itself runs on
        servo_path: Root of the checkout holding the WebIDL codegen
        python_override: Interpreter forced through PYTHON3
        style_manifest: Explicit css-properties.json location
    """

    out_dir: Path
    target_os: str
    target_env: str
    cwd: Path
    host_os: str
    servo_path: Optional[Path] = None
    python_override: Optional[str] = None
    style_manifest: Optional[Path] = None

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        host_os: Optional[str] = None,
    ) -> "BuildContext":
        """
        Read the build environment.

        Args:
            environ: Environment mapping (defaults to os.environ)
            cwd: Working directory (defaults to the process cwd)
            host_os: Host OS override (defaults to the detected host)

        Returns:
            A frozen BuildContext

        Raises:
            BuildContextError: If a required variable is missing
        """
        if environ is None:
            environ = os.environ

        out_dir = _require(environ, OUT_DIR_ENV, "the build output directory")
        target_os = _require(environ, TARGET_OS_ENV, "the target operating system")
        target_env = _require(environ, TARGET_ENV_ENV, "the target environment/ABI")

        servo_path = environ.get(SERVO_PATH_ENV)
        style_manifest = environ.get(STYLE_MANIFEST_ENV)

        return cls(
            out_dir=Path(out_dir),
            target_os=target_os,
            target_env=target_env,
            cwd=Path(cwd) if cwd is not None else Path.cwd(),
            host_os=host_os or PlatformDetector.detect_host_os(),
            servo_path=Path(servo_path) if servo_path is not None else None,
            python_override=environ.get(PYTHON_OVERRIDE_ENV),
            style_manifest=Path(style_manifest) if style_manifest is not None else None,
        )


def _require(environ: Mapping[str, str], name: str, meaning: str) -> str:
    value = environ.get(name)
    if value is None:
        raise BuildContextError(
            f"Environment variable {name} ({meaning}) is not set",
            "prebuild must run as a Cargo build script, or with "
            f"{OUT_DIR_ENV}, {TARGET_OS_ENV} and {TARGET_ENV_ENV} exported.",
        )
    return value
