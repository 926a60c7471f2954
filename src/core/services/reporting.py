"""Callbacks de presentación para los servicios.

Por qué:
- Los servicios (setup, menú) no imprimen directamente: la CLI inyecta
  funciones Rich y los tests inyectan listas.
- Sin callbacks, todo cae al logger del módulo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


def _no_prompt(_: str) -> str:
    return ""


@dataclass
class Reporter:
    """Optional callbacks for UI layers (messages, prompts, raw output)."""

    info: Callable[[str], None] = field(default=logger.info)
    warn: Callable[[str], None] = field(default=logger.warning)
    error: Callable[[str], None] = field(default=logger.error)
    echo: Callable[[str], None] = field(default=logger.info)
    prompt: Callable[[str], str] = field(default=_no_prompt)
    tick: Callable[[], None] | None = None
