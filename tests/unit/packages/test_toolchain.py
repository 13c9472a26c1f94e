"""Unit tests for Python interpreter discovery."""

import subprocess
from unittest.mock import patch

import pytest

from prebuild.packages.toolchain import PythonLocator, ToolchainError, find_python


def version_results(**returncodes):
    """Fake subprocess.run that answers `<name> --version` by name."""

    def run(cmd, **kwargs):
        name = cmd[0]
        if name not in returncodes:
            raise FileNotFoundError(name)
        return subprocess.CompletedProcess(args=cmd, returncode=returncodes[name])

    return run


class TestPythonLocator:
    """Test cases for PythonLocator."""

    def test_override_returned_without_version_check(self):
        """Test that PYTHON3 is returned without running anything."""
        with patch("prebuild.packages.toolchain.subprocess.run") as mock_run:
            assert find_python(environ={"PYTHON3": "/usr/bin/python3.12"}) == "/usr/bin/python3.12"
        mock_run.assert_not_called()

    def test_empty_override_is_still_an_override(self):
        """Test that an empty PYTHON3 is returned as is."""
        with patch("prebuild.packages.toolchain.subprocess.run") as mock_run:
            assert find_python(environ={"PYTHON3": ""}) == ""
        mock_run.assert_not_called()

    def test_first_working_candidate_wins(self):
        """Test that the search stops at the first working name."""
        with patch(
            "prebuild.packages.toolchain.subprocess.run",
            side_effect=version_results(python3=0, python=0),
        ) as mock_run:
            assert find_python(environ={}, host_os="linux") == "python3"
        assert mock_run.call_count == 1
        assert mock_run.call_args.args[0] == ["python3", "--version"]

    def test_falls_back_to_later_candidate(self):
        """Test that a non-zero --version exit moves on to the next name."""
        with patch(
            "prebuild.packages.toolchain.subprocess.run",
            side_effect=version_results(python3=1, python=0),
        ):
            assert find_python(environ={}, host_os="linux") == "python"

    def test_missing_executable_is_skipped(self):
        """Test that a name that cannot start is skipped."""
        with patch(
            "prebuild.packages.toolchain.subprocess.run", side_effect=version_results(python=0)
        ):
            assert find_python(environ={}, host_os="macos") == "python"

    def test_windows_candidates(self):
        """Test the Windows candidate list."""
        locator = PythonLocator(environ={}, host_os="windows")
        assert locator.candidates == ("python.exe", "python")

    def test_posix_candidates(self):
        """Test the POSIX candidate list."""
        assert PythonLocator(environ={}, host_os="linux").candidates == ("python3", "python")

    def test_explicit_candidates(self):
        """Test that explicit candidates replace the host list."""
        locator = PythonLocator(environ={}, candidates=["py", "python3"])
        assert locator.candidates == ("py", "python3")

    def test_none_found_lists_every_candidate(self):
        """Test the error when no candidate works."""
        with patch("prebuild.packages.toolchain.subprocess.run", side_effect=version_results()):
            with pytest.raises(ToolchainError) as exc_info:
                find_python(environ={}, host_os="windows")

        message = str(exc_info.value)
        assert "Can't find python (tried python.exe, python)!" in message
        assert "Try fixing PATH or setting the PYTHON3 env var" in message
