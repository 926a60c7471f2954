"""Interactive configuration (stores values in the user config .env)."""

from __future__ import annotations

import typer

from cli.ui_components import console
from core.config import StackSettings, write_user_env_vars

# Perfiles de modelos habituales (principal, embeddings).
MODEL_PRESETS: dict[str, dict[str, str]] = {
    # Calidad (GPU grande, ~40 GB de pesos):
    "70b": {"RAG_STACK_PRIMARY_MODEL": "llama3.1:70b", "RAG_STACK_EMBEDDING_MODEL": "nomic-embed-text"},
    # Velocidad / GPUs modestas:
    "8b": {"RAG_STACK_PRIMARY_MODEL": "llama3.1:8b", "RAG_STACK_EMBEDDING_MODEL": "nomic-embed-text"},
    "mxbai": {"RAG_STACK_PRIMARY_MODEL": "llama3.1:8b", "RAG_STACK_EMBEDDING_MODEL": "mxbai-embed-large"},
}


def run() -> None:
    """Interactive stack setup: models, compose file and disk threshold.

    Pensado para no tener que editar `.env` a mano.
    """

    current = StackSettings()

    preset = typer.prompt("Model preset (70b / 8b / mxbai / custom)", default="70b", show_default=True).strip().lower()
    values = MODEL_PRESETS.get(preset, {}).copy()
    if not values:
        console.print("[yellow]Unknown preset. You can still enter custom values.[/yellow]")

    primary = typer.prompt(
        "Primary model",
        default=values.get("RAG_STACK_PRIMARY_MODEL", current.primary_model),
        show_default=True,
    ).strip()
    embedding = typer.prompt(
        "Embedding model",
        default=values.get("RAG_STACK_EMBEDDING_MODEL", current.embedding_model),
        show_default=True,
    ).strip()
    compose_file = typer.prompt("Compose file", default=str(current.compose_file), show_default=True).strip()
    required_gb = typer.prompt("Required free disk (GB)", default=current.required_disk_gb, type=int)
    check_gpu = typer.confirm("Check GPU passthrough during setup?", default=current.check_gpu)

    if not primary or not embedding or not compose_file:
        raise typer.BadParameter("primary model, embedding model and compose file are required")

    env_path = write_user_env_vars(
        {
            "RAG_STACK_PRIMARY_MODEL": primary,
            "RAG_STACK_EMBEDDING_MODEL": embedding,
            "RAG_STACK_COMPOSE_FILE": compose_file,
            "RAG_STACK_REQUIRED_DISK_GB": str(required_gb),
            "RAG_STACK_CHECK_GPU": "true" if check_gpu else "false",
        }
    )

    console.print(f"[green]Saved stack config to:[/green] {env_path}")
