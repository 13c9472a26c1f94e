"""
Pytest configuration for the prebuild test suite.

Provides a crate directory and an OUT_DIR laid out the way Cargo lays them
out, plus the matching build-script environment.
"""

import io
import logging

import pytest

from prebuild.build.directives import DirectiveEmitter


def make_out_dir(root, profile="debug", crate="servoshell-0123456789abcdef"):
    """Create target/<profile>/build/<crate>/out under root."""
    out_dir = root / "target" / profile / "build" / crate / "out"
    out_dir.mkdir(parents=True)
    return out_dir


@pytest.fixture
def crate_dir(tmp_path):
    """Crate root with the files the platform stages read."""
    crate = tmp_path / "ports" / "servoshell"
    (crate / "webidls").mkdir(parents=True)
    (crate / "platform" / "macos").mkdir(parents=True)
    (crate / "platform" / "macos" / "count_threads.c").write_text("int count_threads(void) { return 1; }\n")
    (crate / "platform" / "windows").mkdir(parents=True)
    (crate / "platform" / "windows" / "servo.exe.manifest").write_text("<assembly/>\n")
    (tmp_path / "resources").mkdir()
    (tmp_path / "resources" / "servo.ico").write_bytes(b"\x00\x00\x01\x00")
    return crate


@pytest.fixture
def out_dir(tmp_path):
    return make_out_dir(tmp_path)


@pytest.fixture
def emitter():
    """DirectiveEmitter writing into a StringIO instead of stdout."""
    return DirectiveEmitter(stream=io.StringIO())


@pytest.fixture
def cargo_env(out_dir):
    """Minimal build-script environment for a Linux target."""
    return {
        "OUT_DIR": str(out_dir),
        "CARGO_CFG_TARGET_OS": "linux",
        "CARGO_CFG_TARGET_ENV": "gnu",
    }


@pytest.fixture(autouse=True)
def reset_prebuild_logging():
    """Drop handlers installed by setup_logging so they never outlive capsys."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_prebuild", False):
            root.removeHandler(handler)
