import sys

import pytest
from click.testing import CliRunner

from tryto.cli.__main__ import cli, config, run

PY = sys.executable


@pytest.fixture(autouse=True)
def project_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_run_success():
    runner = CliRunner()
    result = runner.invoke(run, ["--", PY, "-c", "pass"])
    assert result.exit_code == 0


def test_run_failure_with_retries():
    runner = CliRunner()
    result = runner.invoke(run, ["--retries", "2", "--", PY, "-c", "raise SystemExit(3)"])
    assert result.exit_code == 1
    assert "retry 1" in result.output
    assert "retry 2" in result.output
    assert "exited with status 3" in result.output


def test_run_falls_back():
    runner = CliRunner()
    result = runner.invoke(
        run,
        [
            "--fallback",
            f"{PY} -c 'raise SystemExit(1)'",
            "--fallback",
            f"{PY} -c pass",
            "--",
            PY,
            "-c",
            "raise SystemExit(2)",
        ],
    )
    assert result.exit_code == 0
    assert "exited with status 2" in result.output


def test_run_timeout():
    runner = CliRunner()
    result = runner.invoke(run, ["--timeout", "0.2", "--", PY, "-c", "import time; time.sleep(5)"])
    assert result.exit_code == 1
    assert "timed out" in result.output


def test_run_reads_project_defaults(project_dir):
    (project_dir / "pyproject.toml").write_text("[tool.tryto]\nretry = true\nretries = 1\n")
    runner = CliRunner()
    result = runner.invoke(run, ["--", PY, "-c", "raise SystemExit(1)"])
    assert result.exit_code == 1
    assert "retry 1" in result.output
    assert "retry 2" not in result.output


def test_run_no_retry_flag_wins(project_dir):
    (project_dir / "pyproject.toml").write_text("[tool.tryto]\nretry = true\n")
    runner = CliRunner()
    result = runner.invoke(run, ["--no-retry", "--", PY, "-c", "raise SystemExit(1)"])
    assert result.exit_code == 1
    assert "retry 1" not in result.output


def test_run_bad_config(project_dir):
    (project_dir / "pyproject.toml").write_text("[tool.tryto]\nretries = -1\n")
    runner = CliRunner()
    result = runner.invoke(run, ["--", PY, "-c", "pass"])
    assert result.exit_code == 2
    assert "ERROR!" in result.output


def test_run_missing_config_file():
    runner = CliRunner()
    result = runner.invoke(run, ["--config", "missing.toml", "--", PY, "-c", "pass"])
    assert result.exit_code == 2
    assert "not found" in result.output


def test_config_command(project_dir):
    (project_dir / "pyproject.toml").write_text("[tool.tryto]\nretries = 5\n")
    runner = CliRunner()
    result = runner.invoke(cli, ["config"])
    assert result.exit_code == 0
    assert "retries" in result.output
    assert "5" in result.output


def test_config_command_defaults():
    runner = CliRunner()
    result = runner.invoke(config, [])
    assert result.exit_code == 0
    assert "timeout_after" in result.output
