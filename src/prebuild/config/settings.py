"""
Project settings for prebuild.

The defaults match the layout of the browser shell crate. A project can
override any of them with an optional prebuild.ini next to its Cargo.toml:

    [prebuild]
    webidl_dir = webidls
    style_manifest = ../target/release/build/style-1234/out/css-properties.json
    macos_helper_source = platform/macos/count_threads.c
"""

import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional

from ..errors import PrebuildError

SETTINGS_FILE = "prebuild.ini"
SETTINGS_SECTION = "prebuild"


class PrebuildConfigError(PrebuildError):
    """Exception raised for prebuild.ini configuration errors."""

    pass


@dataclass
class PrebuildSettings:
    """Paths and names used by the orchestration stages.

    Relative paths are resolved against the build script's working directory,
    except codegen_script which is relative to SERVO_PATH.
    """

    codegen_script: str = "components/script/dom/bindings/codegen/run.py"
    webidl_dir: str = "webidls"
    style_manifest: Optional[str] = None
    style_manifest_glob: str = "target/*/build/style-*/out/css-properties.json"
    windows_icon: str = "../../resources/servo.ico"
    windows_manifest: str = "platform/windows/servo.exe.manifest"
    macos_helper_source: str = "platform/macos/count_threads.c"
    macos_helper_library: str = "count_threads"
    macos_rpath: str = "@executable_path/lib/"

    @classmethod
    def load(cls, cwd: Path) -> "PrebuildSettings":
        """
        Load settings, applying prebuild.ini overrides when present.

        Args:
            cwd: Directory to look for prebuild.ini in

        Returns:
            PrebuildSettings instance

        Raises:
            PrebuildConfigError: If the file cannot be parsed or has unknown keys
        """
        ini_path = Path(cwd) / SETTINGS_FILE
        if not ini_path.exists():
            return cls()
        return cls(**cls._read_overrides(ini_path))

    @classmethod
    def _read_overrides(cls, ini_path: Path) -> Dict[str, str]:
        parser = configparser.ConfigParser(
            allow_no_value=False, interpolation=configparser.ExtendedInterpolation()
        )
        try:
            parser.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise PrebuildConfigError(f"Failed to parse {ini_path}: {e}") from e

        if not parser.has_section(SETTINGS_SECTION):
            return {}

        known = {f.name for f in fields(cls)}
        overrides = {}
        for key, value in parser.items(SETTINGS_SECTION):
            if key not in known:
                raise PrebuildConfigError(
                    f"Unknown key '{key}' in [{SETTINGS_SECTION}] of {ini_path}",
                    f"Valid keys: {', '.join(sorted(known))}",
                )
            overrides[key] = value.strip()
        return overrides
