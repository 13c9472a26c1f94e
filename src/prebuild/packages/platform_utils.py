"""Platform Detection Utilities.

This module normalizes operating system names for the machine running the
orchestrator (the build host), so they can be compared against Cargo's
target OS names.

Supported Hosts:
    - windows
    - macos
    - linux
    - anything else is passed through lowercased (e.g. freebsd)
"""

import platform


class PlatformDetector:
    """Detects the build host operating system."""

    # platform.system() -> Cargo target_os spelling
    _SYSTEM_NAMES = {
        "windows": "windows",
        "darwin": "macos",
        "linux": "linux",
    }

    @staticmethod
    def detect_host_os() -> str:
        """Detect the build host OS using Cargo's target_os spelling.

        Returns:
            Host OS identifier ('windows', 'macos', 'linux', ...)
        """
        system = platform.system().lower()
        if system.startswith(("cygwin", "msys", "mingw")):
            return "windows"
        return PlatformDetector._SYSTEM_NAMES.get(system, system)

    @staticmethod
    def is_windows_host() -> bool:
        return PlatformDetector.detect_host_os() == "windows"
