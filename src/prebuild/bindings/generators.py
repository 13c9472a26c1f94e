"""Rust binding generators for Khronos registries.

StaticStructGenerator emits bindings where every command is linked
statically: a zero-sized struct whose methods forward to `extern "system"`
declarations resolved by the system linker. Nothing is loaded at runtime,
so the crate must link against the API library (see bindings.egl).

Output layout:
    - __gl_imports: std re-exports used by the rest of the file
    - types: Rust spellings of the registry's C types
    - one `pub const` per enum
    - the struct and its impl
    - the extern block
"""

from typing import Dict, Sequence, TextIO

from .registry import Api, Command, CType, EnumValue, Fallbacks, Param, Registry

# Registry C type -> definition in the generated `types` module
EGL_TYPES: Dict[str, str] = {
    "khronos_int32_t": "i32",
    "khronos_uint64_t": "u64",
    "khronos_ssize_t": "isize",
    "khronos_utime_nanoseconds_t": "u64",
    "EGLBoolean": "super::__gl_imports::raw::c_uint",
    "EGLenum": "super::__gl_imports::raw::c_uint",
    "EGLint": "khronos_int32_t",
    "EGLAttrib": "khronos_ssize_t",
    "EGLTime": "khronos_utime_nanoseconds_t",
    "EGLConfig": "*const super::__gl_imports::raw::c_void",
    "EGLContext": "*const super::__gl_imports::raw::c_void",
    "EGLDisplay": "*const super::__gl_imports::raw::c_void",
    "EGLSurface": "*const super::__gl_imports::raw::c_void",
    "EGLClientBuffer": "*const super::__gl_imports::raw::c_void",
    "EGLImage": "*const super::__gl_imports::raw::c_void",
    "EGLSync": "*const super::__gl_imports::raw::c_void",
    "EGLNativeDisplayType": "*const super::__gl_imports::raw::c_void",
    "EGLNativePixmapType": "*const super::__gl_imports::raw::c_void",
    "EGLNativeWindowType": "*const super::__gl_imports::raw::c_void",
    "__eglMustCastToProperFunctionPointerType": "extern \"system\" fn() -> ()",
}

# Plain C types that appear without <ptype>
C_TYPES: Dict[str, str] = {
    "void": "__gl_imports::raw::c_void",
    "char": "__gl_imports::raw::c_char",
    "int": "__gl_imports::raw::c_int",
    "float": "__gl_imports::raw::c_float",
}

RUST_KEYWORDS = frozenset(
    {
        "as", "box", "break", "const", "continue", "crate", "else", "enum",
        "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
        "match", "mod", "move", "mut", "pub", "ref", "return", "self", "static",
        "struct", "super", "trait", "true", "type", "unsafe", "use", "where",
        "while",
    }
)

_TYPES_BY_API = {Api.EGL: EGL_TYPES}

_IMPORTS = """mod __gl_imports {
    pub use std::mem;
    pub use std::os::raw;
}
"""


class StaticStructGenerator:
    """Writes statically linked struct-style Rust bindings."""

    def write(self, registry: Registry, dest: TextIO) -> None:
        """Write bindings for a registry.

        Args:
            registry: Selected registry subset
            dest: Text stream to write to
        """
        prefix = registry.api.value
        struct_name = prefix.capitalize()

        dest.write(_IMPORTS)
        dest.write("\n")
        self._write_types(registry, dest)
        dest.write("\n")
        for value in registry.enums:
            dest.write(self._enum_line(prefix, value))
        dest.write("\n")
        self._write_struct(registry, struct_name, dest)
        dest.write("\n")
        self._write_extern_block(registry, dest)

    def _write_types(self, registry: Registry, dest: TextIO) -> None:
        dest.write("pub mod types {\n")
        dest.write(
            "    #![allow(non_camel_case_types, non_snake_case, dead_code, "
            "missing_copy_implementations)]\n\n"
        )
        for name, definition in _TYPES_BY_API[registry.api].items():
            dest.write(f"    pub type {name} = {definition};\n")
        dest.write("}\n")

    def _enum_line(self, prefix: str, value: EnumValue) -> str:
        name = _strip_prefix(value.name, prefix.upper() + "_")
        if value.cast:
            ty = f"types::{value.cast}"
            literal = f"{value.value} as {ty}"
        elif value.suffix == "ull":
            ty = "u64"
            literal = value.value
        else:
            ty = f"types::{prefix.upper()}enum"
            literal = value.value
        return f"#[allow(dead_code, non_upper_case_globals)] pub const {name}: {ty} = {literal};\n"

    def _write_struct(self, registry: Registry, struct_name: str, dest: TextIO) -> None:
        prefix = registry.api.value
        dest.write("#[allow(non_camel_case_types, non_snake_case, dead_code)]\n")
        dest.write("#[derive(Copy, Clone)]\n")
        dest.write(f"pub struct {struct_name};\n\n")
        dest.write(f"impl {struct_name} {{\n")
        dest.write("    /// Stub function.\n")
        dest.write("    #[allow(dead_code)]\n")
        dest.write(
            f"    pub fn load_with<F>(mut _loadfn: F) -> {struct_name} "
            "where F: FnMut(&'static str) -> *const __gl_imports::raw::c_void {\n"
        )
        dest.write(f"        {struct_name}\n")
        dest.write("    }\n")

        for command in registry.commands:
            name = _strip_prefix(command.name, prefix)
            dest.write("\n")
            if registry.fallbacks is Fallbacks.ALL and command.aliases:
                dest.write(f"    /// Fallbacks: {', '.join(command.aliases)}\n")
            dest.write("    #[allow(non_snake_case, unused_variables, dead_code)]\n")
            dest.write("    #[inline]\n")
            dest.write(
                f"    pub unsafe fn {name}({_method_params(command.params)})"
                f"{_return_clause(command)} {{\n"
            )
            dest.write(f"        {name}({_arg_list(command.params)})\n")
            dest.write("    }\n")
        dest.write("}\n")

    def _write_extern_block(self, registry: Registry, dest: TextIO) -> None:
        prefix = registry.api.value
        dest.write("#[allow(non_snake_case, unused_variables, dead_code)]\n")
        dest.write('extern "system" {\n')
        for command in registry.commands:
            name = _strip_prefix(command.name, prefix)
            dest.write(f'    #[link_name = "{command.name}"]\n')
            dest.write(
                f"    fn {name}({_param_list(command.params)}){_return_clause(command)};\n"
            )
        dest.write("}\n")


def _strip_prefix(name: str, prefix: str) -> str:
    return name[len(prefix):] if name.startswith(prefix) else name


def rust_ident(name: str) -> str:
    """Make a registry parameter name usable as a Rust identifier."""
    return f"{name}_" if name in RUST_KEYWORDS else name


def rust_type(ctype: CType) -> str:
    """Spell a registry C type in Rust."""
    if ctype.is_registry_type:
        base = f"types::{ctype.base}"
    else:
        base = C_TYPES.get(ctype.base, ctype.base)

    if ctype.pointers == 0:
        return "()" if base == C_TYPES["void"] else base

    pointer = "*const " if ctype.is_const else "*mut "
    # Only the innermost pointer carries the const qualifier
    return "*mut " * (ctype.pointers - 1) + pointer + base


def _method_params(params: Sequence[Param]) -> str:
    return ", ".join(["&self"] + [_param(p) for p in params])


def _param(param: Param) -> str:
    return f"{rust_ident(param.name)}: {rust_type(param.ctype)}"


def _param_list(params: Sequence[Param]) -> str:
    return ", ".join(_param(p) for p in params)


def _arg_list(params: Sequence[Param]) -> str:
    return ", ".join(rust_ident(p.name) for p in params)


def _return_clause(command: Command) -> str:
    ret = rust_type(command.return_type)
    return "" if ret == "()" else f" -> {ret}"
