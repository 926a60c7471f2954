"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar mensajes/tablas/paneles en setup, menú y doctor.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import StackSettings
from core.domain.models import ModelInfo, RequirementCheck
from core.services.maintenance import EXIT_KEY, MenuEntry

console = Console(highlight=False)

RULE = "=" * 42


def log_info(message: str) -> None:
    console.print(f"[green]\\[INFO][/green] {escape(message)}")


def log_warn(message: str) -> None:
    console.print(f"[yellow]\\[WARN][/yellow] {escape(message)}")


def log_error(message: str) -> None:
    console.print(f"[red]\\[ERROR][/red] {escape(message)}")


def echo(message: str) -> None:
    console.print(message, markup=False)


def tick() -> None:
    console.print(".", end="")


def print_banner(title: str, subtitle: str) -> None:
    """Imprime el banner de bienvenida."""

    body = Align.center(
        Text.assemble(Text(title, style="bold cyan"), "\n", Text(subtitle, style="dim")),
        vertical="middle",
    )
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def render_menu(table: dict[str, MenuEntry]) -> None:
    console.print()
    console.print(RULE)
    console.print("  RAG Application Maintenance Menu")
    console.print(RULE)
    for key, entry in table.items():
        console.print(f"{key + '.':<4}{entry.label}", markup=False)
    console.print(f"{EXIT_KEY + '.':<4}Exit", markup=False)
    console.print(RULE)


def build_models_table(models: Iterable[ModelInfo]) -> Table:
    table = Table(title="Ollama Models")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("ID", style="dim")
    table.add_column("Size", style="white")
    table.add_column("Modified", style="magenta")
    for model in models:
        table.add_row(model.name, model.id or "", model.size or "", model.modified or "")
    return table


def build_checks_table(title: str, checks: Iterable[RequirementCheck]) -> Table:
    table = Table(title=title)
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    for check in checks:
        status = "[green]OK[/green]" if check.ok else "[red]FAIL[/red]"
        detail = check.detail
        if not check.ok and check.hints:
            detail = detail + "\n" + "\n".join(h.strip() for h in check.hints)
        table.add_row(check.name, status, escape(detail))
    return table


def print_access_info(settings: StackSettings) -> None:
    """Resumen final del setup: URLs, chuleta de comandos y modelos."""

    container = settings.ollama_container
    console.print()
    console.print(RULE)
    log_info("RAG Application Setup Complete!")
    console.print(RULE)
    console.print()
    log_info(f"Access Open WebUI at: {settings.webui_url}")
    log_info(f"Ollama API endpoint: {settings.ollama_url}")
    console.print()
    log_info("Available commands:")
    cheat_sheet = [
        ("View logs:", "docker compose logs -f"),
        ("Stop services:", "docker compose down"),
        ("Restart services:", "docker compose restart"),
        ("Check status:", "docker compose ps"),
        ("Pull more models:", f"docker exec {container} ollama pull <model-name>"),
        ("List models:", f"docker exec {container} ollama list"),
        ("Maintenance menu:", "rag-stack menu"),
    ]
    for label, command in cheat_sheet:
        echo(f"  - {label:<20} {command}")
    console.print()
    log_info("RAG Features enabled:")
    echo("  - Document upload and processing (PDF, TXT, DOC, etc.)")
    echo("  - Web search integration")
    echo(f"  - Embedding model: {settings.embedding_model}")
    echo(f"  - Main LLM: {settings.primary_model}")
    console.print()
    log_warn("Note: First queries may be slow as the model loads into memory.")
    console.print(RULE)
