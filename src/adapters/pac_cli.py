"""Adaptador de Power Platform CLI (`pac`).

Por qué está en adapters:
- Conoce los verbos y flags concretos de `pac`; el Core solo pide
  "autentica", "exporta", "desempaqueta".
- Toda invocación pasa por un `CommandRunner`, así que es testeable sin `pac` instalado.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from core.domain.errors import ToolInvocationError
from core.domain.models import CommandResult
from core.interfaces.runner import CommandRunner


class PacCli:
    """Las cinco operaciones de `pac` que usa el flujo, más la cabecera de versión."""

    def __init__(self, runner: CommandRunner, executable: str = "pac", *, cwd: Path | None = None) -> None:
        self._runner = runner
        self._executable = executable
        self._cwd = cwd

    def _call(self, step: str, args: Sequence[str]) -> CommandResult:
        result = self._runner.run(self._executable, list(args), self._cwd)
        if not result.ok:
            raise ToolInvocationError(step, result)
        return result

    def auth_create(self, *, profile_name: str, env_url: str) -> CommandResult:
        return self._call(
            "pac auth create",
            ["auth", "create", "--name", profile_name, "--environment", env_url],
        )

    def auth_select(self, *, profile_name: str) -> CommandResult:
        return self._call("pac auth select", ["auth", "select", "--name", profile_name])

    def list_solutions(self) -> str:
        return self._call("pac solution list", ["solution", "list"]).stdout

    def export_solution(self, *, unique_name: str, path: Path) -> CommandResult:
        # Sin `--managed`: pac exporta unmanaged por defecto.
        return self._call(
            "pac solution export",
            ["solution", "export", "--name", unique_name, "--path", str(path), "--overwrite"],
        )

    def unpack_solution(self, *, zipfile: Path, folder: Path) -> CommandResult:
        return self._call(
            "pac solution unpack",
            [
                "solution",
                "unpack",
                "--zipfile",
                str(zipfile),
                "--folder",
                str(folder),
                "--packagetype",
                "Unmanaged",
            ],
        )

    def canvas_unpack(self, *, msapp: Path, sources: Path) -> CommandResult:
        return self._call(
            "pac canvas unpack",
            ["canvas", "unpack", "--msapp", str(msapp), "--sources", str(sources)],
        )

    def banner(self) -> CommandResult:
        """`pac` sin argumentos imprime la cabecera con la versión; no se valida el exit code."""

        return self._runner.run(self._executable, [], self._cwd)
