"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- El stack no posee estado propio: todo vive en Docker/Ollama. Estos modelos
  solo describen lo que observamos de esos sistemas externos en un momento
  dado (resultado de un comando, fila de `ollama list`, espacio libre...).

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Resultado de un proceso externo (docker, docker compose, ollama)."""

    args: list[str] = Field(
        ...,
        min_length=1,
        description="argv ejecutado.",
    )
    returncode: int = Field(
        ...,
        description="Código de salida del proceso.",
    )
    stdout: str = Field(default="", description="Salida estándar capturada (si aplica).")
    stderr: str = Field(default="", description="Salida de error capturada (si aplica).")

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


class ModelInfo(BaseModel):
    """Una fila de `ollama list`."""

    name: str = Field(..., min_length=1, description="Nombre:tag del modelo.")
    id: str | None = Field(default=None, description="Digest corto del modelo.")
    size: str | None = Field(default=None, description="Tamaño legible (p.ej. '40 GB').")
    modified: str | None = Field(default=None, description="Antigüedad legible.")


class RequirementCheck(BaseModel):
    """Resultado de una comprobación de requisitos del host."""

    name: str = Field(..., min_length=1)
    ok: bool = Field(default=False)
    detail: str = Field(default="")
    hints: list[str] = Field(
        default_factory=list,
        description="Pasos de remediación mostrados al usuario si falla.",
    )


class DiskSpace(BaseModel):
    """Espacio libre en el directorio de trabajo frente al umbral configurado."""

    path: Path
    free_gb: int = Field(..., ge=0, description="GB libres (redondeo hacia abajo).")
    required_gb: int = Field(..., ge=0)

    @property
    def sufficient(self) -> bool:
        return self.free_gb >= self.required_gb


class ModelRole(str, Enum):
    EMBEDDING = "embedding"
    PRIMARY = "primary"


class PullStatus(str, Enum):
    PRESENT = "present"
    PULLED = "pulled"
    FAILED = "failed"


class ModelPullOutcome(BaseModel):
    model: str = Field(..., min_length=1)
    role: ModelRole
    status: PullStatus


class BackupArtifact(BaseModel):
    """Archivo tar.gz generado a partir de un volumen Docker."""

    volume: str = Field(..., min_length=1)
    path: Path
    created_at: datetime


class SetupReport(BaseModel):
    """Resumen de una ejecución completa del setup."""

    requirements: list[RequirementCheck] = Field(default_factory=list)
    disk: DiskSpace | None = None
    models: list[ModelPullOutcome] = Field(default_factory=list)

    @property
    def failed_models(self) -> list[ModelPullOutcome]:
        return [m for m in self.models if m.status is PullStatus.FAILED]
