"""Wrapper de subprocess.

Por qué un wrapper:
- Estandariza captura de salida, encoding, timeouts y logging de cada invocación.
- Facilita testeo: el pipeline recibe un `CommandRunner` y los tests le pasan un fake.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from core.config import AppSettings
from core.domain.models import CommandResult
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)

# Exit codes sintéticos para fallos que ocurren antes/fuera del proceso.
EXIT_LAUNCH_FAILED = -1
EXIT_TIMED_OUT = -2


class SubprocessRunner(CommandRunner):
    """Ejecuta comandos de forma síncrona con `subprocess.run`."""

    def __init__(self, *, timeout_seconds: float | None = None) -> None:
        self._timeout = timeout_seconds

    def run(self, command: str, args: Sequence[str], cwd: Path | None = None) -> CommandResult:
        argv = [command, *args]
        logger.debug("exec: %s (cwd=%s)", subprocess.list2cmdline(argv), cwd or ".")
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            logger.debug("exec timed out after %ss: %s", self._timeout, command)
            return CommandResult(
                command=command,
                args=list(args),
                exit_code=EXIT_TIMED_OUT,
                stdout=_as_text(exc.stdout),
                stderr=f"timed out after {self._timeout} seconds",
            )
        except OSError as exc:
            logger.debug("exec could not start %s: %s", command, exc)
            return CommandResult(
                command=command,
                args=list(args),
                exit_code=EXIT_LAUNCH_FAILED,
                stderr=str(exc),
            )

        logger.debug("exit %s: %s", completed.returncode, command)
        return CommandResult(
            command=command,
            args=list(args),
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def build_runner(settings: AppSettings | None = None) -> SubprocessRunner:
    """Crea el runner por defecto con el timeout configurado."""

    settings = settings or AppSettings()
    return SubprocessRunner(timeout_seconds=settings.command_timeout_seconds)
