"""WebIDL binding generation.

The DOM bindings are produced by the codegen that lives in the engine
checkout (SERVO_PATH). It takes three positional arguments:

    run.py <css-properties.json> <webidl dir> <output dir>

css-properties.json is written by the style crate's own build script, in a
sibling build directory whose name carries a Cargo hash. Its location is
resolved in this order:
    1. STYLE_PROPERTIES_JSON
    2. style_manifest in prebuild.ini
    3. the newest match of style_manifest_glob under the working directory
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from ..build.directives import DirectiveEmitter
from ..config.build_context import (
    PYTHON_OVERRIDE_ENV,
    SERVO_PATH_ENV,
    STYLE_MANIFEST_ENV,
    BuildContext,
)
from ..config.settings import SETTINGS_FILE, PrebuildSettings
from ..packages.toolchain import find_python
from .base import BindingGenerationError, GeneratedArtifact

logger = logging.getLogger(__name__)


class CodegenProcessError(BindingGenerationError):
    """Raised when the external codegen exits unsuccessfully.

    The CLI exits with the codegen's own exit status.
    """

    def __init__(self, returncode: int, command: list):
        super().__init__(
            f"WebIDL codegen failed with exit status {returncode}",
            f"Command: {' '.join(str(part) for part in command)}",
        )
        self.returncode = returncode
        self.exit_code = returncode if returncode > 0 else 1


def resolve_style_manifest(context: BuildContext, settings: PrebuildSettings) -> Path:
    """Find css-properties.json produced by the style crate.

    Args:
        context: Build context
        settings: Project settings

    Returns:
        Path to the manifest

    Raises:
        BindingGenerationError: If no manifest can be found
    """
    if context.style_manifest is not None:
        return context.style_manifest

    if settings.style_manifest:
        return context.cwd / settings.style_manifest

    matches = [p for p in context.cwd.glob(settings.style_manifest_glob) if p.is_file()]
    if matches:
        newest = max(matches, key=lambda p: (p.stat().st_mtime, str(p)))
        if len(matches) > 1:
            logger.debug(f"{len(matches)} style manifests found, using newest: {newest}")
        return newest

    raise BindingGenerationError(
        f"Could not find css-properties.json (searched {context.cwd / settings.style_manifest_glob})",
        f"Build the style crate first, or set {STYLE_MANIFEST_ENV} "
        f"(or style_manifest in {SETTINGS_FILE}) to the file's location.",
    )


def generate_webidl_bindings(
    context: BuildContext,
    settings: PrebuildSettings,
    python: Optional[str] = None,
    emitter: Optional[DirectiveEmitter] = None,
) -> GeneratedArtifact:
    """Run the WebIDL codegen into the build output directory.

    Args:
        context: Build context
        settings: Project settings
        python: Interpreter to use (located when not given)
        emitter: Directive emitter for rerun-if-changed tracking (optional)

    Returns:
        GeneratedArtifact for the output directory

    Raises:
        BindingGenerationError: If SERVO_PATH is unset or the manifest is missing
        CodegenProcessError: If the codegen exits with a non-zero status
    """
    if context.servo_path is None:
        raise BindingGenerationError(
            f"{SERVO_PATH_ENV} is not set",
            f"Set {SERVO_PATH_ENV} to the root of your servo repository "
            "to build local webidl bindings.",
        )

    style_manifest = resolve_style_manifest(context, settings)
    webidl_dir = context.cwd / settings.webidl_dir
    script = context.servo_path / settings.codegen_script

    if python is None:
        overrides = {}
        if context.python_override is not None:
            overrides[PYTHON_OVERRIDE_ENV] = context.python_override
        python = find_python(environ=overrides, host_os=context.host_os)

    cmd = [python, str(script), str(style_manifest), str(webidl_dir), str(context.out_dir)]
    logger.info(f"Running WebIDL codegen: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd)
    except OSError as e:
        raise BindingGenerationError(
            f"Failed to start WebIDL codegen with {python}: {e}",
            f"Check that {python} is runnable or set {PYTHON_OVERRIDE_ENV}.",
        ) from e

    if result.returncode != 0:
        raise CodegenProcessError(result.returncode, cmd)

    if emitter is not None:
        emitter.rerun_if_changed(webidl_dir)
        emitter.rerun_if_changed(style_manifest)

    return GeneratedArtifact(path=context.out_dir, generated=True)
