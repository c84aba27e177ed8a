"""Tests for agency_ui.scaffold.runner - CommandRunner and CommandExecutionError."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from agency_ui.scaffold.runner import CommandExecutionError, CommandRunner


class TestCommandRunner:
    """Tests for CommandRunner.run()."""

    def test_successful_command(self, tmp_path: Path) -> None:
        CommandRunner().run("true", tmp_path)

    def test_runs_in_working_directory(self, tmp_path: Path) -> None:
        CommandRunner().run("touch marker.txt", tmp_path)
        assert (tmp_path / "marker.txt").exists()

    def test_non_zero_exit_raises_with_context(self, tmp_path: Path) -> None:
        with pytest.raises(CommandExecutionError) as exc_info:
            CommandRunner().run("exit 3", tmp_path)
        err = exc_info.value
        assert err.command == "exit 3"
        assert err.cwd == tmp_path
        assert err.returncode == 3
        assert "exited with code 3" in str(err)

    def test_spawn_failure_has_no_returncode(self, tmp_path: Path) -> None:
        """A working directory that does not exist prevents the process from starting."""
        missing = tmp_path / "missing"
        with pytest.raises(CommandExecutionError) as exc_info:
            CommandRunner().run("true", missing)
        assert exc_info.value.returncode is None
        assert exc_info.value.cwd == missing
        assert "could not be started" in str(exc_info.value)

    def test_dry_run_does_not_execute(self, tmp_path: Path) -> None:
        with patch("agency_ui.scaffold.runner.subprocess.run") as mock_run:
            CommandRunner(dry_run=True).run("exit 1", tmp_path)
        mock_run.assert_not_called()

    def test_dry_run_prints_command(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        CommandRunner(dry_run=True).run("npm install", tmp_path)
        assert "would run:" in capsys.readouterr().out
