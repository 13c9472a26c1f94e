"""Unit tests for prebuild.ini settings."""

import pytest

from prebuild.config import PrebuildConfigError, PrebuildSettings


class TestPrebuildSettings:
    """Test cases for PrebuildSettings.load."""

    def test_defaults_without_file(self, tmp_path):
        """Test that defaults apply when prebuild.ini is absent."""
        settings = PrebuildSettings.load(tmp_path)
        assert settings == PrebuildSettings()
        assert settings.webidl_dir == "webidls"
        assert settings.windows_icon == "../../resources/servo.ico"
        assert settings.macos_helper_library == "count_threads"

    def test_overrides(self, tmp_path):
        """Test that keys in the prebuild section override defaults."""
        (tmp_path / "prebuild.ini").write_text(
            "[prebuild]\n"
            "webidl_dir = dom/webidls\n"
            "style_manifest = generated/css-properties.json\n"
        )
        settings = PrebuildSettings.load(tmp_path)

        assert settings.webidl_dir == "dom/webidls"
        assert settings.style_manifest == "generated/css-properties.json"
        assert settings.codegen_script == PrebuildSettings().codegen_script

    def test_interpolation(self, tmp_path):
        """Test extended interpolation between keys."""
        (tmp_path / "prebuild.ini").write_text(
            "[prebuild]\n"
            "macos_helper_library = count_threads\n"
            "macos_helper_source = platform/macos/${macos_helper_library}.c\n"
        )
        settings = PrebuildSettings.load(tmp_path)
        assert settings.macos_helper_source == "platform/macos/count_threads.c"

    def test_other_sections_ignored(self, tmp_path):
        """Test that sections other than prebuild are ignored."""
        (tmp_path / "prebuild.ini").write_text("[other]\nkey = value\n")
        assert PrebuildSettings.load(tmp_path) == PrebuildSettings()

    def test_unknown_key(self, tmp_path):
        """Test that an unknown key fails and suggests the valid keys."""
        (tmp_path / "prebuild.ini").write_text("[prebuild]\nwebidl_directory = x\n")
        with pytest.raises(PrebuildConfigError, match="webidl_directory") as exc_info:
            PrebuildSettings.load(tmp_path)
        assert "webidl_dir" in exc_info.value.remediation

    def test_malformed_file(self, tmp_path):
        """Test that a file without a section header fails to parse."""
        (tmp_path / "prebuild.ini").write_text("webidl_dir = x\n")
        with pytest.raises(PrebuildConfigError, match="Failed to parse"):
            PrebuildSettings.load(tmp_path)
