"""CLI principal (Typer).

Por qué Typer:
- Subcomandos con ayuda automática y un único entrypoint (`rag-stack`).
- La CLI solo construye adaptadores, inyecta callbacks Rich y traduce
  `StackError` a código de salida 1; la lógica vive en `core/services`.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import typer

from adapters.docker_compose import ComposeClient
from adapters.docker_engine import DockerClient
from adapters.ollama_cli import OllamaClient
from adapters.process_runner import SubprocessRunner
from cli import configure, doctor
from cli.logging_config import configure_logging
from cli.ui_components import (
    build_models_table,
    console,
    echo,
    log_error,
    log_info,
    log_warn,
    print_access_info,
    print_banner,
    render_menu,
    tick,
)
from core.config import StackSettings
from core.domain.errors import StackError
from core.interfaces.runner import CommandRunner
from core.services.maintenance import MaintenanceActions, MaintenanceMenu, build_command_table
from core.services.reporting import Reporter
from core.services.setup_pipeline import SetupOptions, SetupPipeline

app = typer.Typer(
    no_args_is_help=True,
    help="Deploy and maintain a local RAG stack (Ollama + Open WebUI) with Docker Compose.",
)


@dataclass
class StackContext:
    settings: StackSettings
    compose: ComposeClient
    docker: DockerClient
    ollama: OllamaClient


def build_context(settings: StackSettings | None = None, runner: CommandRunner | None = None) -> StackContext:
    settings = settings or StackSettings()
    runner = runner or SubprocessRunner()
    docker = DockerClient(runner)
    return StackContext(
        settings=settings,
        compose=ComposeClient(runner, settings.compose_file),
        docker=docker,
        ollama=OllamaClient(docker, settings.ollama_container),
    )


def _prompt(text: str) -> str:
    try:
        return console.input(text)
    except EOFError:
        console.print()
        raise typer.Exit(code=1)


def console_reporter() -> Reporter:
    return Reporter(info=log_info, warn=log_warn, error=log_error, echo=echo, prompt=_prompt, tick=tick)


@contextmanager
def handle_stack_errors() -> Iterator[None]:
    """Traduce fallos conocidos a mensaje + pistas + exit code 1."""

    try:
        yield
    except StackError as exc:
        console.print()
        log_error(exc.message)
        for hint in exc.hints:
            log_info(hint)
        raise typer.Exit(code=1) from exc


def _actions(ctx: StackContext) -> MaintenanceActions:
    return MaintenanceActions(
        ctx.settings,
        compose=ctx.compose,
        docker=ctx.docker,
        ollama=ctx.ollama,
        reporter=console_reporter(),
        workdir=Path.cwd(),
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show executed commands and retries."),
) -> None:
    configure_logging(verbose)


@app.command()
def setup(
    yes: bool = typer.Option(False, "--yes", "-y", help="Continue without asking when disk space is low."),
) -> None:
    """Tear down, pull, start the stack and provision both models."""

    ctx = build_context()
    print_banner("RAG Stack Setup", "Ollama + Open WebUI")
    pipeline = SetupPipeline(
        ctx.settings,
        compose=ctx.compose,
        docker=ctx.docker,
        ollama=ctx.ollama,
        reporter=console_reporter(),
    )
    with handle_stack_errors():
        pipeline.run(SetupOptions(assume_yes=yes, workdir=Path.cwd()))

    print_access_info(ctx.settings)
    log_info("Setup complete! Happy RAG-ing!")


@app.command()
def menu() -> None:
    """Interactive maintenance menu (options 0-15)."""

    ctx = build_context()
    table = build_command_table(_actions(ctx))
    loop = MaintenanceMenu(table, reporter=console_reporter(), render=render_menu)
    with handle_stack_errors():
        code = loop.run()
    raise typer.Exit(code=code)


@app.command()
def status() -> None:
    """Show `docker compose ps`."""

    with handle_stack_errors():
        _actions(build_context()).view_status()


@app.command()
def models() -> None:
    """List the models present on the model server."""

    ctx = build_context()
    with handle_stack_errors():
        found = ctx.ollama.list_models()
    console.print(build_models_table(found))


@app.command()
def pull(name: str = typer.Argument(..., help="Model name, e.g. llama3.1:8b")) -> None:
    """Pull a model into the model server."""

    with handle_stack_errors():
        ok = _actions(build_context()).pull_model(name)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def remove(
    name: str = typer.Argument(..., help="Model name to remove"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Remove a model (asks to type 'yes' unless --yes)."""

    with handle_stack_errors():
        _actions(build_context()).remove_model(name, confirmed=yes)


@app.command()
def backup() -> None:
    """Archive both data volumes into the backup directory."""

    with handle_stack_errors():
        _actions(build_context()).backup_data()


app.command(name="doctor")(doctor.run)
app.command(name="configure")(configure.run)


def run() -> None:
    app()
