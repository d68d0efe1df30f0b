"""Tests for the subprocess executor."""

import signal

import pytest

from core.errors import CommandSpawnError
from core.executor import ExecuteResult, SubprocessExecutor


class TestExecuteResult:
    def test_normal_exit(self):
        result = ExecuteResult.from_returncode(3)
        assert result.exit_code == 3
        assert result.signal is None
        assert not result.success

    def test_signal_exit(self):
        result = ExecuteResult.from_returncode(-signal.SIGTERM)
        assert result.exit_code == 128 + signal.SIGTERM
        assert result.signal == signal.SIGTERM


class TestSubprocessExecutor:
    def test_exit_code(self, tmp_path):
        assert SubprocessExecutor().execute(["sh", "-c", "exit 42"], cwd=tmp_path).exit_code == 42

    def test_success(self, tmp_path):
        assert SubprocessExecutor().execute(["true"], cwd=tmp_path).success

    def test_runs_in_cwd(self, tmp_path):
        SubprocessExecutor().execute(["sh", "-c", "pwd > where"], cwd=tmp_path)
        assert (tmp_path / "where").read_text().strip() == str(tmp_path.resolve())

    def test_env_layered_over_parent(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TRAMP_PARENT_VAR", "parent")
        SubprocessExecutor().execute(
            ["sh", "-c", 'echo "$TRAMP_PARENT_VAR $TRAMP_EXTRA" > out'],
            cwd=tmp_path,
            env={"TRAMP_EXTRA": "extra"},
        )
        assert (tmp_path / "out").read_text().strip() == "parent extra"

    def test_killed_by_signal(self, tmp_path):
        result = SubprocessExecutor().execute(["sh", "-c", "kill -TERM $$"], cwd=tmp_path)
        assert result.exit_code == 128 + signal.SIGTERM

    def test_missing_binary(self, tmp_path):
        with pytest.raises(CommandSpawnError) as exc_info:
            SubprocessExecutor().execute([str(tmp_path / "missing")], cwd=tmp_path)
        assert exc_info.value.command == str(tmp_path / "missing")

    def test_not_executable(self, tmp_path):
        script = tmp_path / "plain"
        script.write_text("#!/bin/sh\nexit 0\n")
        with pytest.raises(CommandSpawnError):
            SubprocessExecutor().execute([str(script)], cwd=tmp_path)

    def test_inherit_env_false_uses_only_given_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TRAMP_PARENT_VAR", "parent")
        SubprocessExecutor().execute(
            ["/bin/sh", "-c", 'echo "${TRAMP_PARENT_VAR:-unset} $ONLY" > out'],
            cwd=tmp_path,
            env={"ONLY": "given"},
            inherit_env=False,
        )
        assert (tmp_path / "out").read_text().strip() == "unset given"
