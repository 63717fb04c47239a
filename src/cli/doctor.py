"""Doctor command for environment diagnostics."""

from __future__ import annotations

import re
import tempfile
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.pac_cli import PacCli
from adapters.process_runner import build_runner
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import PAC_INSTALL_HINT, MissingDependencyError
from core.services.sync_pipeline import check_dependency

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_VERSION_RE = re.compile(r"Version:\s*(\S+)", re.IGNORECASE)


def _check_pac(settings: AppSettings) -> tuple[bool, str, str | None]:
    """Locate `pac` and read its version banner. Returns (ok, detail, version)."""

    try:
        executable = check_dependency(settings)
    except MissingDependencyError:
        return False, f"'{settings.pac_executable}' not on PATH", None

    result = PacCli(build_runner(settings), executable).banner()
    m = _VERSION_RE.search(result.stdout or "")
    return True, executable, m.group(1) if m else None


def _check_writable(path: Path) -> tuple[bool, str]:
    try:
        path.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=path, prefix=".ppsync-doctor-"):
            pass
        return True, str(path)
    except OSError as exc:
        return False, str(exc)


@app.command()
def run(
    repo_root: Path = typer.Option(Path("."), "--repo-root", file_okay=False, help="Repository root to check."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="pp-solution-sync Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_pac, detail_pac, version = _check_pac(settings)
    table.add_row("pac executable", "OK" if ok_pac else "FAIL", detail_pac)
    if ok_pac:
        table.add_row("pac version", "OK" if version else "UNKNOWN", version or "no version banner")

    workspace = repo_root.resolve() / settings.workspace_dir_name
    ok_ws, detail_ws = _check_writable(workspace)
    table.add_row("Workspace writable", "OK" if ok_ws else "FAIL", detail_ws)

    # Config
    if settings.default_env_url:
        table.add_row("Default env URL", "OK", settings.default_env_url)
    else:
        table.add_row("Default env URL", "OPTIONAL", "Not set -> pass --env-url")
    table.add_row("Auth profile", "OK", settings.auth_profile_name)
    table.add_row("Strict resolution", "ON" if settings.strict_resolution else "OFF", "")
    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))

    _console.print(table)

    if not ok_pac:
        _console.print(f"\n[yellow]Note:[/yellow] {PAC_INSTALL_HINT}")
    if not (ok_pac and ok_ws):
        raise typer.Exit(code=1)


@app.command(name="configure")
def configure() -> None:
    """Interactive setup (stores defaults in the user config .env).

    Leave a prompt empty to remove that value.
    """

    settings = AppSettings()

    env_url = typer.prompt(
        "Default environment URL",
        default=settings.default_env_url or "",
        show_default=True,
    ).strip()
    profile = typer.prompt("Auth profile name", default=settings.auth_profile_name, show_default=True).strip()
    pac_executable = typer.prompt("pac executable", default=settings.pac_executable, show_default=True).strip()

    if not profile or not pac_executable:
        raise typer.BadParameter("profile name and pac executable are required")

    env_path = write_user_env_vars(
        {
            "PPSYNC_DEFAULT_ENV_URL": env_url,
            "PPSYNC_AUTH_PROFILE_NAME": profile,
            "PPSYNC_PAC_EXECUTABLE": pac_executable,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
