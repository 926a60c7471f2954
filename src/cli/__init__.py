"""CLI (Typer + Rich): comandos, menú interactivo y presentación."""
