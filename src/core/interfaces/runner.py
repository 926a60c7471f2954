"""Contrato para ejecutar procesos externos.

Por qué Protocol:
- Todos los adaptadores (compose, docker, ollama) hablan con el host a través
  de este contrato, así que los tests los ejercitan con un runner falso sin
  Docker instalado.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Contrato mínimo para lanzar comandos.

    Reglas de diseño:
    - `run` bloquea hasta que el proceso termina.
    - `capture=False` deja la salida en el terminal (tablas de `docker ps`,
      barras de progreso de `ollama pull`).
    - `check=True` convierte un código distinto de cero en `CommandError`.
    """

    def run(
        self,
        args: Sequence[str],
        *,
        capture: bool = True,
        check: bool = False,
        cwd: Path | None = None,
    ) -> CommandResult:
        ...

    def which(self, executable: str) -> str | None:
        """Ruta del ejecutable en PATH, o None."""

        ...
