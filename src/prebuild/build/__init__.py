"""
Build-script stages for prebuild.

This package provides the directive protocol and the stages that only emit
directives or metadata:
- Directive emission (cargo: line protocol)
- Profile classification
- Native helper and Windows resource compilation
- Version stamping

The platform dispatcher and orchestrator depend on the bindings package and
are imported from their own modules.
"""

from .directives import (
    BuildWarning,
    Cfg,
    CheckCfg,
    DirectiveEmitter,
    DirectiveError,
    LinkArg,
    LinkLib,
    LinkSearch,
    RerunIfChanged,
    RerunIfEnvChanged,
    RustcEnv,
)
from .native_helper import NativeCompileError, NativeHelperBuilder
from .profile import BuildProfile, ProfileError, classify_profile
from .version_stamp import stamp_version
from .windows_resource import ResourceCompileError, WindowsResource

__all__ = [
    "BuildProfile",
    "BuildWarning",
    "Cfg",
    "CheckCfg",
    "DirectiveEmitter",
    "DirectiveError",
    "LinkArg",
    "LinkLib",
    "LinkSearch",
    "NativeCompileError",
    "NativeHelperBuilder",
    "ProfileError",
    "RerunIfChanged",
    "RerunIfEnvChanged",
    "ResourceCompileError",
    "RustcEnv",
    "WindowsResource",
    "classify_profile",
    "stamp_version",
]
