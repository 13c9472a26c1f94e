"""Unit tests for EGL binding generation."""

from unittest.mock import patch

import pytest

from prebuild.bindings.base import BindingGenerationError
from prebuild.bindings.egl import EGL_BINDINGS_FILE, generate_egl_bindings, render_egl_bindings


class TestGenerateEglBindings:
    """Test cases for generate_egl_bindings."""

    def test_writes_bindings_and_links_egl(self, out_dir, emitter):
        """Test that egl_bindings.rs is written and EGL is linked."""
        artifact = generate_egl_bindings(out_dir, emitter)

        assert artifact.path == out_dir / EGL_BINDINGS_FILE
        assert artifact.generated
        source = artifact.path.read_text(encoding="utf-8")
        assert "pub struct Egl;" in source
        assert '#[link_name = "eglInitialize"]' in source
        assert emitter.rendered() == ["cargo:rustc-link-lib=EGL"]

    def test_idempotent(self, out_dir, emitter):
        """Test that generating twice gives identical bytes."""
        first = generate_egl_bindings(out_dir, emitter).path.read_bytes()
        second = generate_egl_bindings(out_dir, emitter).path.read_bytes()

        assert first == second
        assert emitter.rendered() == ["cargo:rustc-link-lib=EGL"] * 2

    def test_unix_newlines(self, out_dir, emitter):
        """Test that the file uses LF newlines."""
        data = generate_egl_bindings(out_dir, emitter).path.read_bytes()
        assert b"\r\n" not in data

    def test_render_matches_file(self, out_dir, emitter):
        """Test that the written file matches render_egl_bindings()."""
        artifact = generate_egl_bindings(out_dir, emitter)
        assert artifact.path.read_text(encoding="utf-8") == render_egl_bindings()

    def test_missing_out_dir(self, tmp_path, emitter):
        """Test that a missing OUT_DIR fails without linking EGL."""
        with pytest.raises(BindingGenerationError, match="Failed to write EGL bindings"):
            generate_egl_bindings(tmp_path / "missing", emitter)
        assert emitter.rendered() == []

    def test_write_error(self, out_dir, emitter):
        """Test that a write error is reported."""
        with patch(
            "prebuild.bindings.egl.open", side_effect=PermissionError("read-only"), create=True
        ):
            with pytest.raises(BindingGenerationError, match="read-only"):
                generate_egl_bindings(out_dir, emitter)
