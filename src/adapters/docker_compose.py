"""Adaptador para `docker compose`.

Responsabilidad:
- Construir el argv de cada subcomando contra un fichero compose concreto.
- No decide políticas (fail-fast, reintentos): eso vive en `core/services`.
"""

from __future__ import annotations

from pathlib import Path

from core.domain.models import CommandResult
from core.interfaces.runner import CommandRunner


class ComposeClient:
    """Operaciones sobre el stack definido por un fichero compose."""

    def __init__(self, runner: CommandRunner, compose_file: Path | None = None) -> None:
        self._runner = runner
        self._compose_file = compose_file

    @property
    def base_args(self) -> list[str]:
        args = ["docker", "compose"]
        if self._compose_file is not None:
            args += ["-f", str(self._compose_file)]
        return args

    def version(self) -> CommandResult:
        return self._runner.run(["docker", "compose", "version"])

    def ps(self, *, capture: bool = True, check: bool = True) -> CommandResult:
        return self._runner.run([*self.base_args, "ps"], capture=capture, check=check)

    def ps_quiet(self) -> CommandResult:
        return self._runner.run([*self.base_args, "ps", "-q"])

    def any_service_up(self) -> bool:
        """True si alguna fila de `ps` reporta estado `Up`."""

        result = self.ps(check=False)
        return result.ok and "Up" in result.stdout

    def down(self) -> CommandResult:
        return self._runner.run([*self.base_args, "down"], capture=False, check=True)

    def pull(self) -> CommandResult:
        return self._runner.run([*self.base_args, "pull"], capture=False, check=True)

    def up(self) -> CommandResult:
        return self._runner.run([*self.base_args, "up", "-d"], capture=False, check=True)

    def restart(self) -> CommandResult:
        return self._runner.run([*self.base_args, "restart"], capture=False, check=True)

    def logs(self, *, follow: bool = True) -> CommandResult:
        args = [*self.base_args, "logs"]
        if follow:
            args.append("-f")
        return self._runner.run(args, capture=False)
