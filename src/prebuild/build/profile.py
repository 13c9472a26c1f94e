"""Build profile classification.

Cargo does not tell build scripts which profile is being built, but OUT_DIR
encodes it. With the Cargo directory layout in use since Cargo 1.0,

    target/[<triple>/]<profile>/build/<crate>-<hash>/out

the profile directory is exactly CARGO_OUT_DIR_DEPTH levels above OUT_DIR.
If that layout ever changes, classify_profile raises ProfileError instead of
guessing.
"""

import enum
from pathlib import Path, PurePath
from typing import Union

from ..errors import PrebuildError

CARGO_OUT_DIR_DEPTH = 3

PRODUCTION_PROFILE = "production"
PRODUCTION_CFG = "servo_production"
NON_PRODUCTION_CFG = "servo_do_not_use_in_production"


class ProfileError(PrebuildError):
    """Raised when OUT_DIR does not follow the expected Cargo layout."""

    pass


class BuildProfile(enum.Enum):
    PRODUCTION = "production"
    NON_PRODUCTION = "non-production"

    @property
    def cfg_name(self) -> str:
        """The rustc cfg flag emitted for this profile."""
        if self is BuildProfile.PRODUCTION:
            return PRODUCTION_CFG
        return NON_PRODUCTION_CFG


def profile_dir_name(out_dir: Union[str, PurePath]) -> str:
    """Get the name of the profile directory that contains OUT_DIR.

    Raises:
        ProfileError: If out_dir has fewer than CARGO_OUT_DIR_DEPTH parents
    """
    path = PurePath(out_dir)
    parents = path.parents
    if len(parents) < CARGO_OUT_DIR_DEPTH:
        raise ProfileError(
            f"OUT_DIR {path} is too shallow to contain a profile directory",
            f"Expected Cargo's layout target/<profile>/build/<crate>-<hash>/out "
            f"(profile {CARGO_OUT_DIR_DEPTH} levels above OUT_DIR).",
        )

    name = parents[CARGO_OUT_DIR_DEPTH - 1].name
    if not name:
        raise ProfileError(
            f"OUT_DIR {path} has no profile directory name {CARGO_OUT_DIR_DEPTH} levels up",
            "Expected Cargo's layout target/<profile>/build/<crate>-<hash>/out.",
        )
    return name


def is_production_name(name: str) -> bool:
    return name == PRODUCTION_PROFILE or name.startswith(PRODUCTION_PROFILE + "-")


def classify_profile(out_dir: Union[str, Path]) -> BuildProfile:
    """Classify the build profile from OUT_DIR.

    Args:
        out_dir: Cargo's OUT_DIR for this build script

    Returns:
        BuildProfile.PRODUCTION for `production` and `production-*`
        profiles, BuildProfile.NON_PRODUCTION otherwise

    Raises:
        ProfileError: If OUT_DIR does not follow the Cargo layout
    """
    if is_production_name(profile_dir_name(out_dir)):
        return BuildProfile.PRODUCTION
    return BuildProfile.NON_PRODUCTION
