"""Logging de diagnóstico (Rich).

Los mensajes para el usuario van por `ui_components`; aquí solo se configura
la traza técnica (argv ejecutados, reintentos) que se ve con `--verbose`.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from cli.ui_components import console


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx/httpcore son muy verbosos en DEBUG.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
