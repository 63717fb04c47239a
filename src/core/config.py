"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (pac, runner) y el pipeline lean config de forma consistente.
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
        return base / "pp-solution-sync"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "pp-solution-sync"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "pp-solution-sync"
    return Path.home() / ".config" / "pp-solution-sync"


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


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Las claves con valor vacío se eliminan del fichero.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    for key, value in values.items():
        if value is None:
            continue
        if value == "":
            existing.pop(key, None)
        else:
            existing[key] = value

    lines = ["# pp-solution-sync user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters/pipeline.
    """

    model_config = SettingsConfigDict(
        env_prefix="PPSYNC_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    pac_executable: str = Field(
        default="pac",
        min_length=1,
        description="Nombre o ruta del ejecutable de Power Platform CLI.",
    )
    auth_profile_name: str = Field(
        default="ppsync",
        min_length=1,
        description="Nombre del perfil de autenticación que se crea/sobrescribe en cada ejecución.",
    )
    default_env_url: str | None = Field(
        default=None,
        description="URL del entorno usada cuando no se pasa --env-url.",
    )

    workspace_dir_name: str = Field(
        default="powerplatform",
        min_length=1,
        description="Carpeta de trabajo bajo la raíz del repositorio.",
    )
    exports_dir_name: str = Field(default="exports", min_length=1)
    source_dir_name: str = Field(default="solution-src", min_length=1)
    canvas_dir_name: str = Field(
        default="CanvasApps",
        min_length=1,
        description="Subcarpeta del árbol desempaquetado donde viven los .msapp.",
    )
    canvas_extension: str = Field(default=".msapp", pattern=r"^\.\w+$")
    canvas_sources_suffix: str = Field(default="_src", min_length=1)

    timestamp_format: str = Field(
        default="%Y%m%d-%H%M%S",
        min_length=2,
        description="Formato strftime del sello temporal del zip exportado.",
    )
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por invocación externa (segundos). Sin valor = esperar indefinidamente.",
    )
    strict_resolution: bool = Field(
        default=False,
        description="Fallar si el listado no expone 'Unique Name:' en vez de usar el nombre visible.",
    )
    log_level: str = Field(
        default="WARNING",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL|debug|info|warning|error|critical)$",
        description="Nivel de logging de diagnóstico.",
    )
