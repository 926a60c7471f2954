"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Sustituye las constantes fijas de los scripts de despliegue (modelos,
  umbrales, rutas) por un contrato tipado y sobreescribible.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "rag-stack"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "rag-stack"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "rag-stack"
    return Path.home() / ".config" / "rag-stack"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Las claves existentes que no aparecen en `values` se conservan.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# rag-stack user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class StackSettings(BaseSettings):
    """Configuración central del stack (Ollama + Open WebUI).

    Por qué pydantic-settings:
    - Los valores por defecto reproducen el despliegue de referencia
      (llama3.1:70b + nomic-embed-text, 100 GB libres, 30 intentos x 2 s).
    - Cualquier valor se puede sobreescribir con `RAG_STACK_<CAMPO>` o desde
      el `.env` del proyecto / del usuario.
    """

    model_config = SettingsConfigDict(
        env_prefix="RAG_STACK_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    compose_file: Path = Field(
        default=Path("docker-compose.yaml"),
        description="Fichero Docker Compose que define el stack.",
    )
    primary_model: str = Field(
        default="llama3.1:70b",
        min_length=1,
        description="Modelo conversacional principal.",
    )
    embedding_model: str = Field(
        default="nomic-embed-text",
        min_length=1,
        description="Modelo de embeddings para la recuperación de documentos.",
    )
    ollama_container: str = Field(default="ollama", min_length=1)
    webui_container: str = Field(default="open-webui", min_length=1)

    required_disk_gb: int = Field(
        default=100,
        ge=0,
        description="Espacio libre recomendado (GB) antes de desplegar.",
    )
    startup_grace_seconds: float = Field(
        default=10.0,
        ge=0,
        description="Espera tras `up -d` antes de comprobar el estado.",
    )

    readiness_max_attempts: int = Field(default=30, ge=1, le=1000)
    readiness_base_delay: float = Field(
        default=2.0,
        ge=0,
        description="Espera (s) tras un sondeo fallido.",
    )
    readiness_backoff_factor: float = Field(
        default=1.0,
        ge=1.0,
        description="1.0 = intervalo fijo; >1 = backoff exponencial.",
    )
    readiness_max_delay: float = Field(default=30.0, ge=0)

    check_gpu: bool = Field(
        default=True,
        description="Verificar el passthrough de GPU con un contenedor de prueba.",
    )
    gpu_test_image: str = Field(default="nvidia/cuda:12.0.0-base-ubuntu22.04", min_length=1)

    backup_dir: Path = Field(default=Path("backups"))
    backup_image: str = Field(default="ubuntu", min_length=1)
    ollama_volume: str = Field(default="rag_ollama_data", min_length=1)
    webui_volume: str = Field(default="rag_open_webui_data", min_length=1)

    webui_url: str = Field(default="http://localhost:8080", min_length=8)
    ollama_url: str = Field(default="http://localhost:11434", min_length=8)
    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout de los sondeos HTTP del comando doctor.",
    )

    strict_models: bool = Field(
        default=False,
        description="Si es True, un pull de modelo fallido aborta el setup.",
    )
