"""Windows resource embedding.

Writes a resource script with the application icon and manifest, compiles
it with the resource compiler matching the target ABI, and passes the result
to the linker:

    msvc: rc.exe   -> resource.res  (link.exe accepts .res inputs directly)
    gnu:  windres  -> resource.o    (COFF object)

RC and WINDRES override the tool names.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from ..errors import PrebuildError
from .directives import DirectiveEmitter

logger = logging.getLogger(__name__)

RESOURCE_SCRIPT = "resource.rc"

# winuser.h: RT_MANIFEST and CREATEPROCESS_MANIFEST_RESOURCE_ID
RT_MANIFEST = 24
MANIFEST_RESOURCE_ID = 1
ICON_RESOURCE_ID = 1


class ResourceCompileError(PrebuildError):
    """Raised when the resource script cannot be written or compiled."""

    pass


class WindowsResource:
    """Builds and links a Windows resource file.

    Example usage:
        res = WindowsResource(out_dir, target_env="msvc", emitter=emitter)
        res.set_icon(Path("../../resources/servo.ico"))
        res.set_manifest_file(Path("platform/windows/servo.exe.manifest"))
        res.compile()
    """

    def __init__(
        self,
        out_dir: Path,
        target_env: str,
        emitter: DirectiveEmitter,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.out_dir = Path(out_dir)
        self.target_env = target_env
        self.emitter = emitter
        self.environ = os.environ if environ is None else environ
        self.icon: Optional[Path] = None
        self.manifest: Optional[Path] = None

    def set_icon(self, path: Path) -> None:
        self.icon = Path(path)

    def set_manifest_file(self, path: Path) -> None:
        self.manifest = Path(path)

    def render_script(self) -> str:
        """Render the .rc resource script."""
        lines = []
        if self.icon is not None:
            lines.append(f'{ICON_RESOURCE_ID} ICON "{_rc_path(self.icon)}"')
        if self.manifest is not None:
            lines.append(f'{MANIFEST_RESOURCE_ID} {RT_MANIFEST} "{_rc_path(self.manifest)}"')
        return "\n".join(lines) + "\n"

    def output_path(self) -> Path:
        if self.target_env == "gnu":
            return self.out_dir / "resource.o"
        return self.out_dir / "resource.res"

    def compile_command(self, script: Path) -> List[str]:
        """Get the resource compiler command for the target ABI."""
        output = self.output_path()
        if self.target_env == "gnu":
            return [
                self.environ.get("WINDRES", "windres"),
                "--input-format=rc",
                "--output-format=coff",
                str(script),
                "-o",
                str(output),
            ]
        return [self.environ.get("RC", "rc.exe"), "/nologo", "/fo", str(output), str(script)]

    def compile(self) -> Path:
        """Write, compile and link the resource file.

        Returns:
            Path to the compiled resource

        Raises:
            ResourceCompileError: If an input is missing or the compiler fails
        """
        for resource in (self.icon, self.manifest):
            if resource is not None and not resource.exists():
                raise ResourceCompileError(f"Resource file not found: {resource}")

        script = self.out_dir / RESOURCE_SCRIPT
        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
            script.write_text(self.render_script(), encoding="utf-8")
        except OSError as e:
            raise ResourceCompileError(f"Failed to write {script}: {e}") from e

        cmd = self.compile_command(script)
        output = self.output_path()
        logger.info(f"Compiling resources: {' '.join(cmd)}")

        remediation = (
            "Install the Windows SDK (rc.exe) or binutils (windres), "
            "or point RC/WINDRES at the resource compiler."
        )
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ResourceCompileError(f"Could not run {cmd[0]}: {e}", remediation) from e

        if result.returncode != 0:
            error_msg = f"Resource compilation failed with exit status {result.returncode}\n"
            error_msg += f"stderr: {result.stderr}\n"
            error_msg += f"stdout: {result.stdout}"
            raise ResourceCompileError(error_msg, remediation)

        for resource in (self.icon, self.manifest):
            if resource is not None:
                self.emitter.rerun_if_changed(resource)
        self.emitter.link_arg(str(output))
        return output


def _rc_path(path: Path) -> str:
    # rc.exe and windres both accept forward slashes, which need no escaping
    return path.resolve().as_posix()
