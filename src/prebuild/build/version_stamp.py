"""Version stamping.

Embeds the short git revision as VERGEN_GIT_SHA. This is the one stage that
never fails the build: without git information the constant is set to
"nogit" and a warning is shown instead.
"""

import logging
import subprocess
from pathlib import Path
from typing import List

from .directives import DirectiveEmitter

logger = logging.getLogger(__name__)

GIT_SHA_ENV = "VERGEN_GIT_SHA"
NO_GIT_SENTINEL = "nogit"


class VersionStampError(Exception):
    """Raised when git information is unavailable."""

    pass


def _git(args: List[str], cwd: Path) -> str:
    try:
        result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True)
    except OSError as e:
        raise VersionStampError(f"could not run git: {e}") from e
    if result.returncode != 0:
        raise VersionStampError(
            f"git {' '.join(args)} exited with {result.returncode}: {result.stderr.strip()}"
        )
    return result.stdout.strip()


def read_git_sha(cwd: Path) -> str:
    """Get the short revision of HEAD.

    Raises:
        VersionStampError: If git is missing, cwd is not a repository, or
            HEAD does not resolve
    """
    sha = _git(["rev-parse", "--short", "HEAD"], cwd)
    if not sha:
        raise VersionStampError("git rev-parse returned no revision")
    return sha


def _resolve_git_path(cwd: Path, flag: str) -> Path:
    path = Path(_git(["rev-parse", flag], cwd))
    if not path.is_absolute():
        path = cwd / path
    return path


def git_tracked_files(cwd: Path) -> List[Path]:
    """Get the git files whose change means HEAD moved.

    A commit on a branch rewrites refs/heads/<branch>, not HEAD, so the
    current ref and packed-refs are tracked along with HEAD. Worktrees keep
    HEAD in their own git dir and refs in the common dir.

    Returns:
        Files to watch with rerun-if-changed (empty if git is unavailable)
    """
    try:
        git_dir = _resolve_git_path(cwd, "--git-dir")
    except VersionStampError as e:
        logger.debug(f"Could not resolve git dir: {e}")
        return []

    try:
        common_dir = _resolve_git_path(cwd, "--git-common-dir")
    except VersionStampError as e:
        logger.debug(f"Could not resolve git common dir: {e}")
        common_dir = git_dir

    files = [git_dir / "HEAD"]
    try:
        ref = _git(["rev-parse", "--symbolic-full-name", "HEAD"], cwd)
    except VersionStampError as e:
        logger.debug(f"Could not resolve current ref: {e}")
        ref = ""
    # Detached HEAD resolves to "HEAD" itself
    if ref.startswith("refs/"):
        files.append(common_dir / ref)

    packed_refs = common_dir / "packed-refs"
    if packed_refs.exists():
        files.append(packed_refs)
    return files


def stamp_version(emitter: DirectiveEmitter, cwd: Path) -> str:
    """Emit the git revision as a compile-time constant.

    Args:
        emitter: Directive emitter
        cwd: Directory inside the repository

    Returns:
        The stamped revision, or "nogit" when unavailable
    """
    try:
        sha = read_git_sha(cwd)
    except VersionStampError as e:
        logger.warning(f"Could not generate git version information: {e}")
        emitter.warning(f"Could not generate git version information: {e}")
        emitter.rustc_env(GIT_SHA_ENV, NO_GIT_SENTINEL)
        return NO_GIT_SENTINEL

    for path in git_tracked_files(cwd):
        emitter.rerun_if_changed(path)
    emitter.rustc_env(GIT_SHA_ENV, sha)
    logger.info(f"Stamped {GIT_SHA_ENV}={sha}")
    return sha
