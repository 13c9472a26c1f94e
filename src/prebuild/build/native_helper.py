"""Native Helper Builder.

This module compiles a small C helper into a static library that the main
crate links against (used on macOS for thread counting).

Design:
    - Compiles one C source with $CC (default: cc)
    - Archives the object into lib<name>.a with $AR (default: ar)
    - Emits the link-search and static link directives
    - Fails with the compiler output and a remediation hint
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from ..errors import PrebuildError
from .directives import DirectiveEmitter

logger = logging.getLogger(__name__)

MACOS_COMPILER_HINT = (
    "Install the Xcode command line tools (xcode-select --install) "
    "or set CC/AR to a working C toolchain."
)


class NativeCompileError(PrebuildError):
    """Raised when the native helper cannot be compiled or archived."""

    pass


class NativeHelperBuilder:
    """Builds a static library from a single C source file.

    Example usage:
        builder = NativeHelperBuilder(out_dir, emitter)
        builder.build(Path("platform/macos/count_threads.c"), "count_threads")
    """

    def __init__(
        self,
        out_dir: Path,
        emitter: DirectiveEmitter,
        environ: Optional[Mapping[str, str]] = None,
        remediation: str = MACOS_COMPILER_HINT,
    ):
        """Initialize native helper builder.

        Args:
            out_dir: Directory for the object file and archive
            emitter: Directive emitter for link directives
            environ: Environment for CC/AR/OPT_LEVEL/DEBUG (defaults to os.environ)
            remediation: Hint shown when compilation fails
        """
        self.out_dir = Path(out_dir)
        self.emitter = emitter
        self.environ = os.environ if environ is None else environ
        self.remediation = remediation

    def compiler_command(self, source: Path, object_file: Path) -> List[str]:
        """Build the compiler command line for a source file."""
        cmd = [self.environ.get("CC", "cc"), "-c", "-fPIC"]
        opt_level = self.environ.get("OPT_LEVEL")
        if opt_level:
            cmd.append(f"-O{opt_level}")
        if self.environ.get("DEBUG") == "true":
            cmd.append("-g")
        cmd.extend([str(source), "-o", str(object_file)])
        return cmd

    def build(self, source: Path, name: str) -> Path:
        """Compile source into lib<name>.a and link it into the crate.

        Args:
            source: C source file
            name: Library name (without lib prefix / .a suffix)

        Returns:
            Path to the static library

        Raises:
            NativeCompileError: If the source is missing or a tool fails
        """
        if not source.exists():
            raise NativeCompileError(f"Native helper source not found: {source}")

        self.out_dir.mkdir(parents=True, exist_ok=True)
        object_file = self.out_dir / f"{name}.o"
        archive = self.out_dir / f"lib{name}.a"

        self._run(self.compiler_command(source, object_file), f"Compiling {source.name}")
        if archive.exists():
            archive.unlink()
        # 'rcs' flags: r=insert/replace, c=create, s=index (ranlib)
        self._run(
            [self.environ.get("AR", "ar"), "rcs", str(archive), str(object_file)],
            f"Archiving lib{name}.a",
        )

        self.emitter.rerun_if_changed(source)
        self.emitter.link_search(self.out_dir)
        self.emitter.link_lib(name, kind="static")
        return archive

    def _run(self, cmd: List[str], action: str) -> None:
        logger.info(f"{action}: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise NativeCompileError(
                f"{action} failed: could not run {cmd[0]}: {e}", self.remediation
            ) from e

        if result.returncode != 0:
            error_msg = f"{action} failed with exit status {result.returncode}\n"
            error_msg += f"command: {' '.join(cmd)}\n"
            error_msg += f"stderr: {result.stderr}\n"
            error_msg += f"stdout: {result.stdout}"
            raise NativeCompileError(error_msg, self.remediation)
