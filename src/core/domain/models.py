"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a la CLI externa ni a subprocess.
- Facilita serializar el resumen de una ejecución (JSON) para auditoría.

Nota:
- Estos modelos describen *qué* produce cada paso, no *cómo* se invoca `pac`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class CommandResult(BaseModel):
    """Resultado de una invocación síncrona a un ejecutable externo."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(..., min_length=1, description="Ejecutable invocado.")
    args: list[str] = Field(default_factory=list, description="Argumentos, sin el ejecutable.")
    exit_code: int = Field(..., description="Código de salida (negativo si no llegó a ejecutarse).")
    stdout: str = Field(default="")
    stderr: str = Field(default="")

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def diagnostic(self) -> str:
        """Texto de error de la herramienta: stderr si existe, si no stdout."""

        return (self.stderr.strip() or self.stdout.strip())


class SyncRequest(BaseModel):
    """Parámetros de una ejecución.

    Regla: la URL es obligatoria y al menos uno de los dos nombres debe venir
    informado. La validación ocurre antes de cualquier llamada externa.
    """

    env_url: str = Field(..., min_length=1, description="URL del entorno (p.ej. https://org.crm.dynamics.com).")
    solution_name: str | None = Field(default=None, description="Nombre visible (friendly name).")
    unique_name: str | None = Field(default=None, description="Nombre único (identificador interno).")
    decompile_canvas: bool = Field(default=True, description="Desempaquetar los .msapp encontrados.")
    strict: bool = Field(default=False, description="Convertir la resolución degradada en error.")

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: object) -> object:
        if isinstance(data, dict):
            data = dict(data)
            for key in ("env_url", "solution_name", "unique_name"):
                value = data.get(key)
                if isinstance(value, str):
                    data[key] = value.strip() or None
        return data

    @model_validator(mode="after")
    def _require_a_name(self) -> "SyncRequest":
        if not self.solution_name and not self.unique_name:
            raise ValueError("either solution_name or unique_name is required")
        return self


class WorkspaceLayout(BaseModel):
    """Estructura fija en disco bajo la raíz del repositorio."""

    root: Path
    exports_dir: Path
    source_dir: Path
    canvas_dir: Path


class EnvironmentRef(BaseModel):
    url: str = Field(..., min_length=1)
    profile_name: str = Field(..., min_length=1)


class Resolution(str, Enum):
    """Cómo se obtuvo el nombre único."""

    SUPPLIED = "supplied"
    LISTING = "listing"
    FALLBACK = "fallback"


class SolutionRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str | None = None
    unique_name: str = Field(..., min_length=1)
    resolution: Resolution


class SolutionListingEntry(BaseModel):
    """Una fila del listado tabular de `pac solution list`."""

    unique_name: str = Field(..., min_length=1)
    friendly_name: str = Field(default="")
    version: str | None = None
    managed: bool | None = None


class ArchiveArtifact(BaseModel):
    path: Path
    timestamp: str = Field(..., min_length=1)


class CanvasAppPackage(BaseModel):
    """Un paquete canvas (.msapp) detectado y su carpeta de salida."""

    path: Path
    output_dir: Path


class SyncResult(BaseModel):
    """Agregado principal: el resumen de una ejecución completa."""

    environment: EnvironmentRef
    solution: SolutionRef
    layout: WorkspaceLayout
    archive: ArchiveArtifact
    decompiled: list[CanvasAppPackage] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    started_at: datetime
    finished_at: datetime
