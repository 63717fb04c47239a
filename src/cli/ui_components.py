"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `sync`, `solutions` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import SolutionListingEntry, SyncResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (CI/pipelines).
    """

    title = Text("pp-solution-sync", style="bold cyan")
    subtitle = Text("Export • Unpack • Canvas decompile", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_solutions_table(entries: list[SolutionListingEntry]) -> Table:
    table = Table(title="Solutions")
    table.add_column("Unique Name", style="cyan", no_wrap=True)
    table.add_column("Friendly Name", style="white")
    table.add_column("Version", style="dim")
    table.add_column("Managed", style="magenta")
    for entry in entries:
        managed = "" if entry.managed is None else ("yes" if entry.managed else "no")
        table.add_row(entry.unique_name, entry.friendly_name, entry.version or "", managed)
    return table


def build_summary_panel(result: SyncResult) -> Panel:
    """Panel final con lo que produjo la ejecución."""

    body = Text()
    body.append("Environment: ", style="bold")
    body.append(f"{result.environment.url}\n")
    body.append("Solution:    ", style="bold")
    body.append(f"{result.solution.unique_name}")
    body.append(f" ({result.solution.resolution.value})\n", style="dim")
    body.append("Archive:     ", style="bold")
    body.append(f"{result.archive.path}\n")
    body.append("Source:      ", style="bold")
    body.append(f"{result.layout.source_dir}\n")
    body.append("Canvas apps: ", style="bold")
    body.append(f"{len(result.decompiled)} decompiled\n")
    for package in result.decompiled:
        body.append(f"  - {package.path.name} -> {package.output_dir.name}\n", style="dim")
    if result.warnings:
        body.append("\nWarnings:\n", style="bold yellow")
        for w in result.warnings:
            body.append(f"- {w}\n", style="yellow")

    elapsed = (result.finished_at - result.started_at).total_seconds()
    body.append(f"\nElapsed: {elapsed:.1f}s", style="dim")
    return Panel(body, title=Text("Sync complete", style="bold green"), border_style="green")
