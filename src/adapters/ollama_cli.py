"""Adaptador para el CLI de Ollama dentro de su contenedor.

Responsabilidad:
- Ejecutar `ollama list|pull|rm` vía `docker exec <contenedor>`.
- Parsear la tabla de `ollama list` como `ModelInfo`.

No mantiene caché: cada consulta va al servidor de modelos.
"""

from __future__ import annotations

import re

from adapters.docker_engine import DockerClient
from core.domain.models import CommandResult, ModelInfo

_COLUMN_SPLIT_RE = re.compile(r"\s{2,}")


def parse_model_list(output: str) -> list[ModelInfo]:
    """Convierte la salida tabular de `ollama list` en modelos.

    Ignora la cabecera (`NAME ID SIZE MODIFIED`) y líneas vacías.
    """

    models: list[ModelInfo] = []
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        cols = _COLUMN_SPLIT_RE.split(line)
        if cols[0].upper() == "NAME":
            continue
        models.append(
            ModelInfo(
                name=cols[0],
                id=cols[1] if len(cols) > 1 else None,
                size=cols[2] if len(cols) > 2 else None,
                modified=cols[3] if len(cols) > 3 else None,
            )
        )
    return models


class OllamaClient:
    def __init__(self, docker: DockerClient, container: str = "ollama") -> None:
        self._docker = docker
        self._container = container

    @property
    def container(self) -> str:
        return self._container

    def ping(self) -> bool:
        """Sondeo ligero: `ollama list` responde con código 0."""

        return self._docker.exec(self._container, ["ollama", "list"]).ok

    def list_raw(self, *, check: bool = True) -> CommandResult:
        return self._docker.exec(self._container, ["ollama", "list"], check=check)

    def list_models(self) -> list[ModelInfo]:
        return parse_model_list(self.list_raw().stdout)

    def has_model(self, name: str) -> bool:
        """Coincidencia por subcadena sobre la salida cruda de `ollama list`."""

        return name in self.list_raw(check=False).stdout

    def pull(self, name: str, *, check: bool = False) -> CommandResult:
        return self._docker.exec(self._container, ["ollama", "pull", name], capture=False, check=check)

    def remove(self, name: str) -> CommandResult:
        return self._docker.exec(self._container, ["ollama", "rm", name], capture=False, check=True)

    def nvidia_smi(self) -> CommandResult:
        return self._docker.exec(self._container, ["nvidia-smi"], capture=False, check=True)

    def manual_pull_command(self, name: str) -> str:
        return f"docker exec {self._container} ollama pull {name}"
