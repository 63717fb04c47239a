"""Errores del dominio.

Por qué una jerarquía propia:
- El pipeline lanza; solo la CLI decide cómo presentar el fallo y con qué exit code.
- Cada clase corresponde a una categoría de fallo del flujo (dependencia, input,
  resolución, invocación externa).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import CommandResult


PAC_INSTALL_HINT = (
    "Install it with `dotnet tool install --global Microsoft.PowerApps.CLI.Tool` "
    "(or the Power Platform Tools extension for VS Code) and make sure it is on PATH."
)


class SyncError(Exception):
    """Base de todos los fallos fatales del flujo."""


class MissingDependencyError(SyncError):
    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(f"'{executable}' was not found on PATH. {PAC_INSTALL_HINT}")


class MissingInputError(SyncError):
    """Falta un parámetro obligatorio (URL o alguno de los nombres de solución)."""


class SolutionNotFoundError(SyncError):
    """El listado del entorno no permite resolver la solución pedida."""


class ToolInvocationError(SyncError):
    """Una llamada a la CLI externa terminó con error.

    Conserva el `CommandResult` para que la CLI pueda mostrar el diagnóstico
    original de la herramienta.
    """

    def __init__(self, step: str, result: CommandResult) -> None:
        self.step = step
        self.result = result
        detail = result.diagnostic()
        message = f"{step} failed (exit code {result.exit_code})"
        if detail:
            message = f"{message}:\n{detail}"
        super().__init__(message)
