"""Wrapper de subprocess.

Por qué un wrapper:
- Estandariza captura de salida, logging y conversión de errores para todos
  los comandos (`docker`, `docker compose`, `docker exec ... ollama`).
- Facilita testeo: se puede sustituir por un runner falso.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from core.domain.errors import CommandError
from core.domain.models import CommandResult

logger = logging.getLogger(__name__)

# Código que usa la shell cuando el ejecutable no existe.
_NOT_FOUND = 127


class SubprocessRunner:
    """Implementación de `CommandRunner` sobre `subprocess.run`."""

    def run(
        self,
        args: Sequence[str],
        *,
        capture: bool = True,
        check: bool = False,
        cwd: Path | None = None,
    ) -> CommandResult:
        argv = [str(a) for a in args]
        logger.debug("exec: %s", " ".join(argv))

        try:
            completed = subprocess.run(
                argv,
                capture_output=capture,
                text=True,
                cwd=str(cwd) if cwd else None,
                check=False,
            )
        except FileNotFoundError as exc:
            result = CommandResult(args=argv, returncode=_NOT_FOUND, stderr=str(exc))
        else:
            result = CommandResult(
                args=argv,
                returncode=completed.returncode,
                stdout=completed.stdout or "",
                stderr=completed.stderr or "",
            )

        logger.debug("exit %s: %s", result.returncode, result.command_line)
        if check and not result.ok:
            raise CommandError(result)
        return result

    def which(self, executable: str) -> str | None:
        return shutil.which(executable)
