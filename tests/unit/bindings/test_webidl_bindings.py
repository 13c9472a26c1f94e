"""Unit tests for WebIDL binding generation."""

import os
import subprocess
from unittest.mock import patch

import pytest

from prebuild.bindings.base import BindingGenerationError
from prebuild.bindings.webidl import (
    CodegenProcessError,
    generate_webidl_bindings,
    resolve_style_manifest,
)
from prebuild.config import BuildContext, PrebuildSettings


def make_context(out_dir, crate_dir, **kwargs):
    defaults = dict(
        out_dir=out_dir,
        target_os="linux",
        target_env="gnu",
        cwd=crate_dir,
        host_os="linux",
    )
    defaults.update(kwargs)
    return BuildContext(**defaults)


@pytest.fixture
def manifest(tmp_path):
    path = tmp_path / "css-properties.json"
    path.write_text("{}")
    return path


class TestResolveStyleManifest:
    """Test cases for css-properties.json lookup."""

    def test_environment_wins(self, out_dir, crate_dir, manifest):
        """Test that STYLE_PROPERTIES_JSON beats prebuild.ini."""
        context = make_context(out_dir, crate_dir, style_manifest=manifest)
        settings = PrebuildSettings(style_manifest="elsewhere.json")
        assert resolve_style_manifest(context, settings) == manifest

    def test_settings_relative_to_cwd(self, out_dir, crate_dir):
        """Test that style_manifest resolves against the crate directory."""
        context = make_context(out_dir, crate_dir)
        settings = PrebuildSettings(style_manifest="generated/css-properties.json")
        assert resolve_style_manifest(context, settings) == crate_dir / "generated/css-properties.json"

    def test_discovers_newest_build_output(self, out_dir, crate_dir):
        """Test that the newest style build output is chosen."""
        paths = []
        for name in ("style-aaaa", "style-bbbb"):
            path = crate_dir / "target" / "debug" / "build" / name / "out" / "css-properties.json"
            path.parent.mkdir(parents=True)
            path.write_text("{}")
            paths.append(path)
        os.utime(paths[0], (1000, 1000))
        os.utime(paths[1], (2000, 2000))

        context = make_context(out_dir, crate_dir)
        assert resolve_style_manifest(context, PrebuildSettings()) == paths[1]

    def test_not_found(self, out_dir, crate_dir):
        """Test the error when no manifest can be found."""
        context = make_context(out_dir, crate_dir)
        with pytest.raises(BindingGenerationError, match="css-properties.json") as exc_info:
            resolve_style_manifest(context, PrebuildSettings())
        assert "STYLE_PROPERTIES_JSON" in exc_info.value.remediation


class TestGenerateWebidlBindings:
    """Test cases for generate_webidl_bindings."""

    def test_missing_servo_path_aborts_before_subprocess(self, out_dir, crate_dir, manifest):
        """Test that an unset SERVO_PATH fails before any command runs."""
        context = make_context(out_dir, crate_dir, style_manifest=manifest)
        # Covers both the interpreter lookup and the codegen itself
        with patch("subprocess.run") as mock_run:
            with pytest.raises(BindingGenerationError, match="SERVO_PATH") as exc_info:
                generate_webidl_bindings(context, PrebuildSettings())

        mock_run.assert_not_called()
        assert "Set SERVO_PATH to the root of your servo repository" in exc_info.value.remediation

    def test_runs_codegen(self, out_dir, crate_dir, manifest, tmp_path, emitter):
        """Test the codegen command line and the rerun tracking it emits."""
        servo = tmp_path / "servo"
        context = make_context(out_dir, crate_dir, servo_path=servo, style_manifest=manifest)
        with patch(
            "prebuild.bindings.webidl.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0),
        ) as mock_run:
            artifact = generate_webidl_bindings(
                context, PrebuildSettings(), python="python3", emitter=emitter
            )

        mock_run.assert_called_once_with(
            [
                "python3",
                str(servo / "components/script/dom/bindings/codegen/run.py"),
                str(manifest),
                str(crate_dir / "webidls"),
                str(out_dir),
            ]
        )
        assert artifact.path == out_dir
        assert emitter.rendered() == [
            f"cargo:rerun-if-changed={crate_dir / 'webidls'}",
            f"cargo:rerun-if-changed={manifest}",
        ]

    def test_uses_python_override_without_version_check(self, out_dir, crate_dir, manifest, tmp_path):
        """Test that PYTHON3 is used directly, with no `--version` run first."""
        context = make_context(
            out_dir,
            crate_dir,
            servo_path=tmp_path / "servo",
            style_manifest=manifest,
            python_override="/opt/python/bin/python3.11",
        )
        with patch(
            "subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0),
        ) as mock_run:
            generate_webidl_bindings(context, PrebuildSettings())

        # The codegen is the only command started
        assert mock_run.call_count == 1
        cmd = mock_run.call_args.args[0]
        assert cmd[0] == "/opt/python/bin/python3.11"
        assert cmd[1].endswith("run.py")

    def test_locates_python(self, out_dir, crate_dir, manifest, tmp_path):
        """Test that the interpreter is looked up when PYTHON3 is absent."""
        context = make_context(
            out_dir, crate_dir, servo_path=tmp_path / "servo", style_manifest=manifest
        )
        with patch(
            "prebuild.bindings.webidl.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0),
        ) as mock_run, patch("prebuild.bindings.webidl.find_python", return_value="python") as mock_find:
            generate_webidl_bindings(context, PrebuildSettings())

        mock_find.assert_called_once_with(environ={}, host_os="linux")
        assert mock_run.call_args.args[0][0] == "python"

    @pytest.mark.parametrize("returncode,exit_code", [(3, 3), (1, 1), (-9, 1)])
    def test_codegen_failure_exit_code(self, out_dir, crate_dir, manifest, tmp_path, returncode, exit_code):
        """Test the exit status carried by a failed codegen."""
        context = make_context(
            out_dir, crate_dir, servo_path=tmp_path / "servo", style_manifest=manifest
        )
        with patch(
            "prebuild.bindings.webidl.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=returncode),
        ):
            with pytest.raises(CodegenProcessError) as exc_info:
                generate_webidl_bindings(context, PrebuildSettings(), python="python3")

        assert exc_info.value.returncode == returncode
        assert exc_info.value.exit_code == exit_code

    def test_interpreter_cannot_start(self, out_dir, crate_dir, manifest, tmp_path):
        """Test the error when the interpreter cannot be started."""
        context = make_context(
            out_dir, crate_dir, servo_path=tmp_path / "servo", style_manifest=manifest
        )
        with patch(
            "prebuild.bindings.webidl.subprocess.run", side_effect=FileNotFoundError("python9")
        ):
            with pytest.raises(BindingGenerationError, match="Failed to start WebIDL codegen"):
                generate_webidl_bindings(context, PrebuildSettings(), python="python9")
