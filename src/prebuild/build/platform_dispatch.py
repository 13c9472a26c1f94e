"""Platform Directive Emitter.

Runs the target-specific part of the pre-build. Each TargetPlatform member
has exactly one handler; PlatformDirectiveEmitter checks the handler table
when it is constructed so that adding a platform without a handler fails
immediately rather than silently doing nothing.
"""

import enum
import logging
import os
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from ..bindings.base import BindingGenerationError
from ..bindings.egl import generate_egl_bindings
from ..config.build_context import BuildContext
from ..config.settings import PrebuildSettings
from ..errors import PrebuildError
from .directives import DirectiveEmitter
from .native_helper import NativeHelperBuilder
from .windows_resource import WindowsResource

logger = logging.getLogger(__name__)

# Android NDK r23+ ships libunwind instead of libgcc; this linker script
# satisfies crates that still pass -lgcc.
LIBGCC_SHIM_FILE = "libgcc.a"
LIBGCC_SHIM_CONTENT = "INPUT(-lunwind)"


class CrossCompileError(PrebuildError):
    """Raised when the target cannot be built from this host."""

    pass


class TargetPlatform(enum.Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    ANDROID = "android"
    OHOS = "ohos"
    OTHER = "other"

    @classmethod
    def from_target(cls, target_os: str, target_env: str) -> "TargetPlatform":
        """Map Cargo's target OS/env pair to a platform.

        The OS is checked first; OpenHarmony is identified by its target env.
        """
        if target_os == "windows":
            return cls.WINDOWS
        if target_os == "macos":
            return cls.MACOS
        if target_os == "android":
            return cls.ANDROID
        if target_env == "ohos":
            return cls.OHOS
        return cls.OTHER


class PlatformDirectiveEmitter:
    """Runs the platform-specific stage of the pre-build.

    Example usage:
        platforms = PlatformDirectiveEmitter(context, settings, emitter)
        platforms.dispatch(TargetPlatform.from_target("android", ""))
    """

    def __init__(
        self,
        context: BuildContext,
        settings: PrebuildSettings,
        emitter: DirectiveEmitter,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.context = context
        self.settings = settings
        self.emitter = emitter
        self.environ = os.environ if environ is None else environ

        self._handlers: Dict[TargetPlatform, Callable[[], None]] = {
            TargetPlatform.WINDOWS: self._windows,
            TargetPlatform.MACOS: self._macos,
            TargetPlatform.ANDROID: self._android,
            TargetPlatform.OHOS: self._ohos,
            TargetPlatform.OTHER: self._other,
        }
        missing = [p.name for p in TargetPlatform if p not in self._handlers]
        if missing:
            raise KeyError(f"No platform handler for: {', '.join(missing)}")

    def dispatch(self, platform: TargetPlatform) -> None:
        """Run the handler for a platform.

        Raises:
            CrossCompileError: Windows target on a non-Windows host
            ResourceCompileError: Windows resource compilation failed
            NativeCompileError: macOS helper compilation failed
            BindingGenerationError: EGL bindings or the Android shim could not be written
        """
        logger.info(f"Platform stage: {platform.value}")
        self._handlers[platform]()

    def _windows(self) -> None:
        if self.context.host_os != "windows":
            raise CrossCompileError(
                "Cross-compiling to windows is currently not supported",
                "Build Windows targets on a Windows host.",
            )
        resource = WindowsResource(
            self.context.out_dir, self.context.target_env, self.emitter, environ=self.environ
        )
        resource.set_icon(self.context.cwd / self.settings.windows_icon)
        resource.set_manifest_file(self.context.cwd / self.settings.windows_manifest)
        resource.compile()

    def _macos(self) -> None:
        builder = NativeHelperBuilder(self.context.out_dir, self.emitter, environ=self.environ)
        builder.build(
            self.context.cwd / self.settings.macos_helper_source,
            self.settings.macos_helper_library,
        )

    def _android(self) -> None:
        generate_egl_bindings(self.context.out_dir, self.emitter)
        write_libgcc_shim(self.context.out_dir)
        self.emitter.link_search(self.context.out_dir)

    def _ohos(self) -> None:
        generate_egl_bindings(self.context.out_dir, self.emitter)

    def _other(self) -> None:
        logger.debug(f"No platform directives for target_os={self.context.target_os}")


def write_libgcc_shim(out_dir: Path) -> Path:
    """Write the libgcc.a linker script that redirects to libunwind.

    Raises:
        BindingGenerationError: If the file cannot be written
    """
    path = Path(out_dir) / LIBGCC_SHIM_FILE
    try:
        with open(path, "w", encoding="ascii", newline="\n") as f:
            f.write(LIBGCC_SHIM_CONTENT)
    except OSError as e:
        raise BindingGenerationError(
            f"Failed to write {path}: {e}", "Check that OUT_DIR exists and is writable."
        ) from e
    logger.debug(f"Wrote libgcc shim: {path}")
    return path
