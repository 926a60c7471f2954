"""Shared fixtures: a scripted CommandRunner and settings without .env files."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from adapters.docker_compose import ComposeClient
from adapters.docker_engine import DockerClient
from adapters.ollama_cli import OllamaClient
from core.config import StackSettings
from core.domain.errors import CommandError
from core.domain.models import CommandResult
from core.services.reporting import Reporter

COMPOSE = ["docker", "compose", "-f", "docker-compose.yaml"]
OLLAMA_EXEC = ["docker", "exec", "ollama", "ollama"]


class FakeRunner:
    """Records argv and answers from prefix rules (last matching rule wins)."""

    def __init__(self, *, docker_path: str | None = "/usr/bin/docker") -> None:
        self.calls: list[list[str]] = []
        self._rules: list[tuple[list[str], list[tuple[int, str, str]]]] = []
        self.docker_path = docker_path

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        self._rules.append((list(prefix), [(returncode, stdout, stderr)]))
        return self

    def on_sequence(self, *prefix: str, returncodes: Sequence[int]) -> "FakeRunner":
        """Answer successive matching calls with these codes; the last one repeats."""

        self._rules.append((list(prefix), [(rc, "", "") for rc in returncodes]))
        return self

    def run(self, args, *, capture: bool = True, check: bool = False, cwd: Path | None = None) -> CommandResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)

        returncode, stdout, stderr = 0, "", ""
        for prefix, answers in reversed(self._rules):
            if argv[: len(prefix)] == prefix:
                returncode, stdout, stderr = answers.pop(0) if len(answers) > 1 else answers[0]
                break

        result = CommandResult(args=argv, returncode=returncode, stdout=stdout, stderr=stderr)
        if check and not result.ok:
            raise CommandError(result)
        return result

    def which(self, executable: str) -> str | None:
        return self.docker_path if executable == "docker" else None

    def called(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]


class RecordingReporter(Reporter):
    """Reporter that keeps every message and answers prompts from a script."""

    def __init__(self, answers: Sequence[str] = ()) -> None:
        self.messages: list[tuple[str, str]] = []
        self.prompts: list[str] = []
        self.ticks = 0
        self._answers = list(answers)
        super().__init__(
            info=lambda m: self.messages.append(("info", m)),
            warn=lambda m: self.messages.append(("warn", m)),
            error=lambda m: self.messages.append(("error", m)),
            echo=lambda m: self.messages.append(("echo", m)),
            prompt=self._prompt,
            tick=self._tick,
        )

    def _prompt(self, text: str) -> str:
        self.prompts.append(text)
        if not self._answers:
            raise AssertionError(f"unexpected prompt: {text!r}")
        return self._answers.pop(0)

    def _tick(self) -> None:
        self.ticks += 1

    def texts(self, level: str) -> list[str]:
        return [m for lvl, m in self.messages if lvl == level]


@pytest.fixture
def settings() -> StackSettings:
    return StackSettings(_env_file=None)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def clients(runner: FakeRunner, settings: StackSettings) -> tuple[ComposeClient, DockerClient, OllamaClient]:
    docker = DockerClient(runner)
    return (
        ComposeClient(runner, settings.compose_file),
        docker,
        OllamaClient(docker, settings.ollama_container),
    )
