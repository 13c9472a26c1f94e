"""Configuration modules for prebuild."""

from .build_context import BuildContext, BuildContextError
from .settings import PrebuildConfigError, PrebuildSettings

__all__ = [
    "BuildContext",
    "BuildContextError",
    "PrebuildSettings",
    "PrebuildConfigError",
]
