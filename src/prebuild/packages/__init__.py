"""External tool discovery for prebuild.

This module locates the host tools the orchestration stages shell out to.
"""

from .platform_utils import PlatformDetector
from .toolchain import PythonLocator, ToolchainError, find_python

__all__ = [
    "PlatformDetector",
    "PythonLocator",
    "ToolchainError",
    "find_python",
]
