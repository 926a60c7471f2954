from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli import main as cli_main
from conftest import COMPOSE, OLLAMA_EXEC, FakeRunner
from core.domain.models import DiskSpace
from core.services import setup_pipeline

cli = CliRunner()


@pytest.fixture
def fake(monkeypatch, tmp_path) -> FakeRunner:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RAG_STACK_STARTUP_GRACE_SECONDS", "0")
    monkeypatch.setenv("RAG_STACK_READINESS_BASE_DELAY", "0")
    runner = FakeRunner()
    monkeypatch.setattr(cli_main, "SubprocessRunner", lambda: runner)
    return runner


def test_menu_exit(fake):
    result = cli.invoke(cli_main.app, ["menu"], input="0\n")

    assert result.exit_code == 0
    assert "RAG Application Maintenance Menu" in result.output
    assert "Exiting..." in result.output
    assert fake.calls == []


def test_menu_invalid_option_then_exit(fake):
    result = cli.invoke(cli_main.app, ["menu"], input="99\n\n0\n")

    assert result.exit_code == 0
    assert "Invalid option" in result.output


def test_menu_closed_stdin_exits_non_zero(fake):
    result = cli.invoke(cli_main.app, ["menu"], input="")

    assert result.exit_code == 1


def test_menu_command_failure_exits_non_zero(fake):
    fake.on(*COMPOSE, "restart", returncode=1)

    result = cli.invoke(cli_main.app, ["menu"], input="8\n")

    assert result.exit_code == 1
    assert "[ERROR]" in result.output


def test_remove_cancelled_without_yes(fake):
    result = cli.invoke(cli_main.app, ["remove", "llama3.1:8b"], input="y\n")

    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert fake.called(*OLLAMA_EXEC, "rm") == []


def test_remove_with_yes_flag(fake):
    result = cli.invoke(cli_main.app, ["remove", "llama3.1:8b", "--yes"])

    assert result.exit_code == 0
    assert fake.called(*OLLAMA_EXEC, "rm", "llama3.1:8b")


def test_pull_failure_exits_one(fake):
    fake.on(*OLLAMA_EXEC, "pull", returncode=1)

    result = cli.invoke(cli_main.app, ["pull", "missing:tag"])

    assert result.exit_code == 1
    assert "Command failed with exit code 1" in result.output


def test_models_table(fake):
    fake.on(*OLLAMA_EXEC, "list", stdout="NAME            ID        SIZE     MODIFIED\nllama3.1:8b     abc123    4.9 GB   1 hour ago\n")

    result = cli.invoke(cli_main.app, ["models"])

    assert result.exit_code == 0
    assert "llama3.1:8b" in result.output


def test_setup_without_docker_exits_one(fake):
    fake.docker_path = None

    result = cli.invoke(cli_main.app, ["setup"])

    assert result.exit_code == 1
    assert "Docker is not installed" in result.output
    assert "https://docs.docker.com/engine/install/" in result.output


def test_setup_happy_path(fake, monkeypatch):
    monkeypatch.setattr(
        setup_pipeline,
        "measure_disk_space",
        lambda path, required: DiskSpace(path=Path(path), free_gb=500, required_gb=required),
    )
    fake.on(*COMPOSE, "ps", stdout="ollama   Up 3 seconds\n")

    result = cli.invoke(cli_main.app, ["setup"])

    assert result.exit_code == 0, result.output
    assert "Access Open WebUI at: http://localhost:8080" in result.output
    assert "Setup complete!" in result.output
