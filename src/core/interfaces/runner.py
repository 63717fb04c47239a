"""Contrato para invocar ejecutables externos.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El pipeline queda independiente de cómo se lanza `pac` (subprocess real,
  fake en tests, wrapper remoto en el futuro).
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Contrato mínimo: (comando, argumentos, cwd) -> (exit code, salida capturada).

    Reglas de diseño:
    - `run` es síncrono y bloquea hasta que el proceso termina.
    - Nunca lanza por exit code distinto de cero: eso lo decide quien llama.
    """

    def run(self, command: str, args: Sequence[str], cwd: Path | None = None) -> CommandResult:
        """Ejecuta `command` con `args` y devuelve el resultado capturado."""

        ...
