"""EGL binding generation.

The API surface is fixed (EGL 1.5, core profile, no extensions) so the output
only depends on the bundled registry: generating twice into the same
directory yields byte-identical files.
"""

import io
import logging
from pathlib import Path

from ..build.directives import DirectiveEmitter
from .base import BindingGenerationError, GeneratedArtifact
from .generators import StaticStructGenerator
from .registry import Api, Fallbacks, Profile, Registry

logger = logging.getLogger(__name__)

EGL_BINDINGS_FILE = "egl_bindings.rs"
EGL_LIBRARY = "EGL"
EGL_VERSION = (1, 5)


def render_egl_bindings() -> str:
    """Render the EGL bindings source without touching the filesystem."""
    registry = Registry(Api.EGL, EGL_VERSION, Profile.CORE, Fallbacks.ALL, [])
    buffer = io.StringIO()
    registry.write_bindings(StaticStructGenerator(), buffer)
    return buffer.getvalue()


def generate_egl_bindings(out_dir: Path, emitter: DirectiveEmitter) -> GeneratedArtifact:
    """Write egl_bindings.rs into out_dir and request linking against EGL.

    Args:
        out_dir: Build output directory
        emitter: Directive emitter for the link request

    Returns:
        GeneratedArtifact for egl_bindings.rs

    Raises:
        BindingGenerationError: If the file cannot be written
    """
    path = Path(out_dir) / EGL_BINDINGS_FILE
    source = render_egl_bindings()
    try:
        # newline="\n" keeps output identical across hosts
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(source)
    except OSError as e:
        raise BindingGenerationError(
            f"Failed to write EGL bindings to {path}: {e}",
            "Check that OUT_DIR exists and is writable.",
        ) from e

    logger.info(f"Generated EGL bindings: {path}")
    emitter.link_lib(EGL_LIBRARY)
    return GeneratedArtifact(path=path, generated=True)
