"""CLI principal (Typer).

Comandos:
- `sync`: autentica, exporta, limpia, desempaqueta y decompila canvas apps.
- `solutions`: muestra el listado de soluciones del entorno.
- `doctor`: diagnóstico del entorno y configuración por usuario.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.json_exporter import export_sync_json
from adapters.pac_cli import PacCli
from adapters.process_runner import build_runner
from adapters.solution_listing import parse_listing_table
from cli import doctor
from cli.ui_components import build_solutions_table, build_summary_panel, print_banner
from core.config import AppSettings
from core.domain.errors import SyncError
from core.domain.models import EnvironmentRef, SyncRequest
from core.log import configure_logging
from core.services.sync_pipeline import PipelineHooks, authenticate, check_dependency, sync

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Export a Power Platform solution and unpack it into source control.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _fail(exc: SyncError) -> typer.Exit:
    _console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


def _resolve_env_url(env_url: str | None, settings: AppSettings) -> str:
    value = (env_url or settings.default_env_url or "").strip()
    if not value:
        raise typer.BadParameter(
            "an environment URL is required (or set PPSYNC_DEFAULT_ENV_URL)",
            param_hint="--env-url",
        )
    return value


def _hooks() -> PipelineHooks:
    return PipelineHooks(
        step=lambda msg: _console.print(f"[cyan]>[/cyan] {escape(msg)}"),
        info=lambda msg: _console.print(f"[dim]{escape(msg)}[/dim]"),
        warning=lambda msg: _console.print(f"[yellow]Warning:[/yellow] {escape(msg)}"),
    )


@app.command(name="sync")
def sync_command(
    env_url: str | None = typer.Option(None, "--env-url", "-e", help="Environment URL, e.g. https://org.crm.dynamics.com"),
    solution_name: str | None = typer.Option(None, "--solution-name", "-s", help="Solution display (friendly) name."),
    unique_name: str | None = typer.Option(None, "--unique-name", "-u", help="Solution unique name; skips the lookup."),
    repo_root: Path = typer.Option(
        Path("."),
        "--repo-root",
        file_okay=False,
        help="Repository root; output goes to <repo-root>/powerplatform.",
    ),
    profile_name: str | None = typer.Option(None, "--profile-name", help="Auth profile name to create/select."),
    no_canvas: bool = typer.Option(False, "--no-canvas", help="Skip decompiling canvas apps (.msapp)."),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail instead of falling back to the display name when the unique name cannot be extracted.",
    ),
    json_out: Path | None = typer.Option(None, "--json-out", dir_okay=False, help="Write a JSON run summary."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every pac invocation."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    """Export a solution (unmanaged), unpack it and decompile its canvas apps."""

    settings = AppSettings()
    if profile_name:
        settings = settings.model_copy(update={"auth_profile_name": profile_name})
    configure_logging("DEBUG" if verbose else settings.log_level)

    url = _resolve_env_url(env_url, settings)
    try:
        request = SyncRequest(
            env_url=url,
            solution_name=solution_name,
            unique_name=unique_name,
            decompile_canvas=not no_canvas,
            strict=strict or settings.strict_resolution,
        )
    except ValidationError as exc:
        raise typer.BadParameter("provide --solution-name or --unique-name") from exc

    if not no_banner:
        print_banner(_console)

    try:
        result = sync(
            settings=settings,
            request=request,
            repo_root=repo_root.resolve(),
            runner=build_runner(settings),
            hooks=_hooks(),
        )
    except SyncError as exc:
        raise _fail(exc) from exc

    _console.print(build_summary_panel(result))
    if json_out:
        path = export_sync_json(result=result, output_path=json_out)
        _console.print(f"[green]Summary written to:[/green] {path}")

    _console.print(
        f"\n[bold green]Done.[/bold green] Review and commit the changes under "
        f"[bold]{result.layout.root}[/bold] with git."
    )


@app.command(name="solutions")
def solutions_command(
    env_url: str | None = typer.Option(None, "--env-url", "-e", help="Environment URL."),
    profile_name: str | None = typer.Option(None, "--profile-name", help="Auth profile name to create/select."),
    raw: bool = typer.Option(False, "--raw", help="Print pac's output as-is."),
) -> None:
    """List the solutions visible in an environment."""

    settings = AppSettings()
    if profile_name:
        settings = settings.model_copy(update={"auth_profile_name": profile_name})
    configure_logging(settings.log_level)
    url = _resolve_env_url(env_url, settings)

    try:
        executable = check_dependency(settings)
        pac = PacCli(build_runner(settings), executable)
        authenticate(pac, EnvironmentRef(url=url, profile_name=settings.auth_profile_name))
        listing = pac.list_solutions()
    except SyncError as exc:
        raise _fail(exc) from exc

    entries = parse_listing_table(listing)
    if raw or not entries:
        _console.print(listing, markup=False, highlight=False)
        return
    _console.print(build_solutions_table(entries))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
