"""Errores conocidos del stack.

Distinguen "fallo conocido con instrucciones" de "fallo desconocido": la CLI
imprime `message` como error y cada `hint` como información, y sale con 1.
"""

from __future__ import annotations

from typing import Iterable

from core.domain.models import CommandResult


class StackError(Exception):
    """Fallo conocido que termina la operación en curso."""

    def __init__(self, message: str, hints: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.hints = list(hints)


class RequirementError(StackError):
    """Falta un requisito del host (docker, compose, GPU)."""


class DiskSpaceError(StackError):
    """Espacio insuficiente y el usuario no confirmó continuar."""


class ServiceStartError(StackError):
    """Ningún servicio aparece como `Up` tras arrancar el stack."""


class ReadinessTimeout(StackError):
    """El servidor de modelos no respondió dentro del presupuesto de intentos."""


class ModelPullError(StackError):
    """Uno o más modelos no se pudieron descargar (solo en modo estricto)."""


class CommandError(StackError):
    """Un comando externo terminó con código distinto de cero."""

    def __init__(self, result: CommandResult, hints: Iterable[str] = ()) -> None:
        message = f"Command failed with exit code {result.returncode}: {result.command_line}"
        stderr = result.stderr.strip()
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message, hints)
        self.result = result
