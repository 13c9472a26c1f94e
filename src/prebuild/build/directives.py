"""Build Directive Emission.

This module is the single place that knows Cargo's build-script line
protocol. Callers build typed directive objects; the emitter renders them to
stdout one per line and keeps a history for inspection.

Design:
    - One dataclass per directive kind, each with render()
    - DirectiveEmitter writes and records every directive
    - The emitter enforces that only one profile cfg is ever emitted
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO, Union

from ..errors import PrebuildError


class DirectiveError(PrebuildError):
    """Raised when a directive would violate the emission contract."""

    pass


@dataclass(frozen=True)
class LinkLib:
    """Link against a library (`cargo:rustc-link-lib`)."""

    name: str
    kind: Optional[str] = None

    def render(self) -> str:
        if self.kind:
            return f"cargo:rustc-link-lib={self.kind}={self.name}"
        return f"cargo:rustc-link-lib={self.name}"


@dataclass(frozen=True)
class LinkSearch:
    """Add a directory to the library search path."""

    path: Path
    kind: str = "native"

    def render(self) -> str:
        return f"cargo:rustc-link-search={self.kind}={self.path}"


@dataclass(frozen=True)
class LinkArg:
    """Pass a raw argument to the linker."""

    arg: str

    def render(self) -> str:
        return f"cargo:rustc-link-arg={self.arg}"


@dataclass(frozen=True)
class CheckCfg:
    """Declare a custom cfg name so rustc does not warn about it."""

    name: str

    def render(self) -> str:
        return f"cargo::rustc-check-cfg=cfg({self.name})"


@dataclass(frozen=True)
class Cfg:
    """Enable a cfg flag for the crate being built."""

    name: str

    def render(self) -> str:
        return f"cargo:rustc-cfg={self.name}"


@dataclass(frozen=True)
class RustcEnv:
    """Set a compile-time environment constant (read with env!())."""

    key: str
    value: str

    def render(self) -> str:
        return f"cargo:rustc-env={self.key}={self.value}"


@dataclass(frozen=True)
class BuildWarning:
    """Surface a warning in Cargo's output."""

    message: str

    def render(self) -> str:
        # Cargo reads one directive per line
        return "cargo:warning=" + " ".join(self.message.splitlines())


@dataclass(frozen=True)
class RerunIfChanged:
    path: Path

    def render(self) -> str:
        return f"cargo:rerun-if-changed={self.path}"


@dataclass(frozen=True)
class RerunIfEnvChanged:
    name: str

    def render(self) -> str:
        return f"cargo:rerun-if-env-changed={self.name}"


Directive = Union[
    LinkLib,
    LinkSearch,
    LinkArg,
    CheckCfg,
    Cfg,
    RustcEnv,
    BuildWarning,
    RerunIfChanged,
    RerunIfEnvChanged,
]


class DirectiveEmitter:
    """Writes build directives to the outer build tool.

    Example usage:
        emitter = DirectiveEmitter()
        emitter.link_lib("EGL")
        emitter.check_cfg("servo_production")
        print(emitter.rendered())
    """

    def __init__(self, stream: Optional[TextIO] = None):
        """Initialize directive emitter.

        Args:
            stream: Output stream (defaults to sys.stdout at emit time)
        """
        self._stream = stream
        self.history: List[Directive] = []
        self._profile_cfg: Optional[str] = None

    def emit(self, directive: Directive) -> None:
        """Render a directive and write it as a single line."""
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(directive.render() + "\n")
        stream.flush()
        self.history.append(directive)

    def rendered(self) -> List[str]:
        """Get every emitted directive as its rendered line."""
        return [directive.render() for directive in self.history]

    def profile(self, profile) -> None:
        """Emit the cfg flag for a build profile.

        Args:
            profile: A prebuild.build.profile.BuildProfile member

        Raises:
            DirectiveError: If a different profile flag was already emitted
        """
        cfg_name = profile.cfg_name
        if self._profile_cfg is not None:
            if self._profile_cfg == cfg_name:
                return
            raise DirectiveError(
                f"Refusing to emit profile cfg '{cfg_name}': "
                f"'{self._profile_cfg}' was already emitted for this run"
            )
        self._profile_cfg = cfg_name
        self.emit(Cfg(cfg_name))

    def link_lib(self, name: str, kind: Optional[str] = None) -> None:
        self.emit(LinkLib(name, kind))

    def link_search(self, path: Path, kind: str = "native") -> None:
        self.emit(LinkSearch(path, kind))

    def link_arg(self, arg: str) -> None:
        self.emit(LinkArg(arg))

    def check_cfg(self, name: str) -> None:
        self.emit(CheckCfg(name))

    def rustc_env(self, key: str, value: str) -> None:
        self.emit(RustcEnv(key, value))

    def warning(self, message: str) -> None:
        self.emit(BuildWarning(message))

    def rerun_if_changed(self, path: Path) -> None:
        self.emit(RerunIfChanged(path))

    def rerun_if_env_changed(self, name: str) -> None:
        self.emit(RerunIfEnvChanged(name))
