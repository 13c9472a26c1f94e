"""Shared types for the binding generators."""

from dataclasses import dataclass
from pathlib import Path

from ..errors import PrebuildError


class BindingGenerationError(PrebuildError):
    """Raised when generated bindings cannot be produced."""

    pass


@dataclass(frozen=True)
class GeneratedArtifact:
    """A file or directory produced by a generator.

    Attributes:
        path: Location of the generated output
        generated: Whether generation was attempted and succeeded
    """

    path: Path
    generated: bool
