"""
Pre-build orchestration.

This module runs one pass of the pre-build in the order Cargo expects its
output:
- rerun tracking for the variables and settings file the pass reads
- WebIDL bindings (external codegen)
- check-cfg declarations and the profile flag
- platform-specific stage (resources, native helper, EGL bindings)
- version stamp
- macOS rpath
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..bindings.base import GeneratedArtifact
from ..bindings.webidl import generate_webidl_bindings
from ..config.build_context import TRACKED_ENV_VARS, BuildContext
from ..config.settings import SETTINGS_FILE, PrebuildSettings
from .directives import DirectiveEmitter
from .platform_dispatch import PlatformDirectiveEmitter, TargetPlatform
from .profile import NON_PRODUCTION_CFG, PRODUCTION_CFG, BuildProfile, classify_profile
from .version_stamp import stamp_version

logger = logging.getLogger(__name__)


@dataclass
class PrebuildResult:
    """Result of a complete pre-build pass."""

    profile: BuildProfile
    platform: TargetPlatform
    git_sha: str
    webidl: Optional[GeneratedArtifact]
    build_time: float


class PrebuildOrchestrator:
    """
    Orchestrates the pre-build for one Cargo build-script invocation.

    Phases:
    1. Declare tracked environment variables and prebuild.ini
    2. Generate WebIDL bindings (unless skipped)
    3. Declare the profile cfgs and emit the profile flag
    4. Run the platform stage
    5. Stamp the git revision
    6. Add the macOS rpath

    Any PrebuildError aborts the pass; only version stamping degrades
    gracefully.

    Example usage:
        context = BuildContext.from_environ()
        settings = PrebuildSettings.load(context.cwd)
        result = PrebuildOrchestrator(context, settings, DirectiveEmitter()).run()
    """

    def __init__(
        self,
        context: BuildContext,
        settings: PrebuildSettings,
        emitter: DirectiveEmitter,
        skip_webidl: bool = False,
        platforms: Optional[PlatformDirectiveEmitter] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            context: Build context
            settings: Project settings
            emitter: Directive emitter (stdout for a real build)
            skip_webidl: Skip the WebIDL codegen (bindings provided prebuilt)
            platforms: Platform stage runner (created from context when omitted)
        """
        self.context = context
        self.settings = settings
        self.emitter = emitter
        self.skip_webidl = skip_webidl
        self.platforms = platforms or PlatformDirectiveEmitter(context, settings, emitter)

    def run(self) -> PrebuildResult:
        """
        Execute the pre-build pass.

        Returns:
            PrebuildResult describing what was emitted

        Raises:
            PrebuildError: If any fatal phase fails
        """
        start_time = time.time()
        platform = TargetPlatform.from_target(self.context.target_os, self.context.target_env)
        logger.info(
            f"Pre-build for target_os={self.context.target_os} "
            f"target_env={self.context.target_env} out_dir={self.context.out_dir}"
        )

        logger.debug("[1/6] Declaring tracked inputs")
        for name in TRACKED_ENV_VARS:
            self.emitter.rerun_if_env_changed(name)
        # Cargo also reruns when a tracked path is created
        self.emitter.rerun_if_changed(self.context.cwd / SETTINGS_FILE)

        webidl = None
        if self.skip_webidl:
            logger.info("[2/6] Skipping WebIDL bindings")
        else:
            logger.info("[2/6] Generating WebIDL bindings")
            webidl = generate_webidl_bindings(self.context, self.settings, emitter=self.emitter)

        logger.debug("[3/6] Classifying build profile")
        self.emitter.check_cfg(PRODUCTION_CFG)
        self.emitter.check_cfg(NON_PRODUCTION_CFG)
        profile = classify_profile(self.context.out_dir)
        self.emitter.profile(profile)
        logger.info(f"      Profile: {profile.value}")

        logger.info(f"[4/6] Running {platform.value} platform stage")
        self.platforms.dispatch(platform)

        logger.debug("[5/6] Stamping version")
        git_sha = stamp_version(self.emitter, self.context.cwd)

        if platform is TargetPlatform.MACOS:
            logger.debug("[6/6] Adding macOS rpath")
            self.emitter.link_arg(f"-Wl,-rpath,{self.settings.macos_rpath}")

        build_time = time.time() - start_time
        logger.info(f"Pre-build finished in {build_time:.2f}s")
        return PrebuildResult(
            profile=profile,
            platform=platform,
            git_sha=git_sha,
            webidl=webidl,
            build_time=build_time,
        )
