"""Binding generators for prebuild.

This package produces the generated sources the main crate includes:
- EGL bindings from the bundled Khronos registry
- WebIDL DOM bindings through the engine's external codegen
"""

from .base import BindingGenerationError, GeneratedArtifact
from .egl import generate_egl_bindings, render_egl_bindings
from .generators import StaticStructGenerator
from .registry import Api, Fallbacks, Profile, Registry, RegistryError
from .webidl import CodegenProcessError, generate_webidl_bindings, resolve_style_manifest

__all__ = [
    "Api",
    "BindingGenerationError",
    "CodegenProcessError",
    "Fallbacks",
    "GeneratedArtifact",
    "Profile",
    "Registry",
    "RegistryError",
    "StaticStructGenerator",
    "generate_egl_bindings",
    "generate_webidl_bindings",
    "render_egl_bindings",
    "resolve_style_manifest",
]
