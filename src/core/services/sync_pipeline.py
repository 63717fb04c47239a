"""Solution export/unpack orchestration.

The CLI delegates the whole workflow to these helpers: prepare the workspace,
check that `pac` is installed, authenticate, resolve the solution's unique
name, export, clean and unpack into source control, then decompile any canvas
apps. Steps run strictly in order and the first failure raises a `SyncError`;
nothing is rolled back. Printing stays in the UI layer through `PipelineHooks`.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from adapters.pac_cli import PacCli
from adapters.process_runner import build_runner
from adapters.solution_listing import find_solution
from core.config import AppSettings
from core.domain.errors import MissingDependencyError, MissingInputError, SolutionNotFoundError
from core.domain.models import (
    ArchiveArtifact,
    CanvasAppPackage,
    EnvironmentRef,
    Resolution,
    SolutionRef,
    SyncRequest,
    SyncResult,
    WorkspaceLayout,
)
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, info, warnings)."""

    step: Callable[[str], None] | None = None
    info: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None


@dataclass
class StepReporter:
    """Forwards progress to the hooks and collects the run's warnings."""

    hooks: PipelineHooks = field(default_factory=PipelineHooks)
    warnings: list[str] = field(default_factory=list)

    def step(self, message: str) -> None:
        logger.debug(message)
        if self.hooks.step:
            self.hooks.step(message)

    def info(self, message: str) -> None:
        logger.debug(message)
        if self.hooks.info:
            self.hooks.info(message)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)
        if self.hooks.warning:
            self.hooks.warning(message)


def build_layout(settings: AppSettings, repo_root: Path) -> WorkspaceLayout:
    root = repo_root / settings.workspace_dir_name
    source_dir = root / settings.source_dir_name
    return WorkspaceLayout(
        root=root,
        exports_dir=root / settings.exports_dir_name,
        source_dir=source_dir,
        canvas_dir=source_dir / settings.canvas_dir_name,
    )


def prepare_layout(settings: AppSettings, repo_root: Path) -> WorkspaceLayout:
    """Create the workspace, exports and source directories (idempotent)."""

    layout = build_layout(settings, repo_root)
    for directory in (layout.root, layout.exports_dir, layout.source_dir):
        directory.mkdir(parents=True, exist_ok=True)
    return layout


def check_dependency(
    settings: AppSettings,
    *,
    which: Callable[[str], str | None] | None = None,
) -> str:
    """Return the resolved path of the `pac` executable or raise `MissingDependencyError`."""

    resolved = (which or shutil.which)(settings.pac_executable)
    if not resolved:
        raise MissingDependencyError(settings.pac_executable)
    return resolved


def authenticate(pac: PacCli, environment: EnvironmentRef) -> None:
    """Create (or overwrite) the named profile for the URL and make it active."""

    pac.auth_create(profile_name=environment.profile_name, env_url=environment.url)
    pac.auth_select(profile_name=environment.profile_name)


def resolve_solution(
    pac: PacCli,
    request: SyncRequest,
    *,
    warn: Callable[[str], None] | None = None,
) -> SolutionRef:
    """Resolve the unique name to export.

    A supplied unique name is used verbatim. Otherwise the display name is
    looked up in `pac solution list`. When the matching line carries no
    identifier the display name itself is used, with a warning; the export
    call may then reject it. `request.strict` turns that case into an error.
    """

    if request.unique_name:
        return SolutionRef(
            display_name=request.solution_name,
            unique_name=request.unique_name,
            resolution=Resolution.SUPPLIED,
        )

    display_name = request.solution_name
    if not display_name:
        raise MissingInputError("Provide --solution-name or --unique-name.")

    listing = pac.list_solutions()
    match = find_solution(listing, display_name)
    if match is None:
        raise SolutionNotFoundError(
            f"No solution matching '{display_name}' was found in the environment listing."
        )

    if match.unique_name:
        logger.debug("resolved '%s' -> '%s' via %s", display_name, match.unique_name, match.via)
        return SolutionRef(
            display_name=display_name,
            unique_name=match.unique_name,
            resolution=Resolution.LISTING,
        )

    message = (
        f"Found '{display_name}' in the listing but could not extract its unique name; "
        f"falling back to the display name as the export identifier."
    )
    if request.strict:
        raise SolutionNotFoundError(f"{message} Strict mode is on, aborting.")
    if warn:
        warn(message)
    return SolutionRef(
        display_name=display_name,
        unique_name=display_name,
        resolution=Resolution.FALLBACK,
    )


def archive_for(
    layout: WorkspaceLayout,
    unique_name: str,
    *,
    now: datetime,
    timestamp_format: str = "%Y%m%d-%H%M%S",
) -> ArchiveArtifact:
    timestamp = now.strftime(timestamp_format)
    return ArchiveArtifact(
        path=layout.exports_dir / f"{unique_name}-unmanaged-{timestamp}.zip",
        timestamp=timestamp,
    )


def export_solution(pac: PacCli, archive: ArchiveArtifact, unique_name: str) -> ArchiveArtifact:
    pac.export_solution(unique_name=unique_name, path=archive.path)
    return archive


def clean_source_tree(source_dir: Path) -> None:
    """Delete everything inside `source_dir`, keeping the directory itself.

    Best-effort: failures inside a subtree are ignored, failures on a top-level
    entry are logged at debug and skipped.
    """

    if not source_dir.exists():
        source_dir.mkdir(parents=True, exist_ok=True)
        return

    for child in source_dir.iterdir():
        try:
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child, ignore_errors=True)
            else:
                child.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug("could not remove %s: %s", child, exc)


def unpack_solution(pac: PacCli, archive: ArchiveArtifact, source_dir: Path) -> None:
    pac.unpack_solution(zipfile=archive.path, folder=source_dir)


def find_canvas_apps(layout: WorkspaceLayout, settings: AppSettings) -> list[CanvasAppPackage]:
    """Recursively find canvas app packages under the unpacked tree."""

    if not layout.canvas_dir.is_dir():
        return []
    packages: list[CanvasAppPackage] = []
    for path in sorted(layout.canvas_dir.rglob(f"*{settings.canvas_extension}")):
        if not path.is_file():
            continue
        packages.append(
            CanvasAppPackage(
                path=path,
                output_dir=path.parent / f"{path.stem}{settings.canvas_sources_suffix}",
            )
        )
    return packages


def decompile_canvas_apps(pac: PacCli, packages: list[CanvasAppPackage]) -> list[CanvasAppPackage]:
    """One `pac canvas unpack` per package; the first failure aborts the rest."""

    done: list[CanvasAppPackage] = []
    for package in packages:
        pac.canvas_unpack(msapp=package.path, sources=package.output_dir)
        done.append(package)
    return done


def sync(
    *,
    settings: AppSettings,
    request: SyncRequest,
    repo_root: Path,
    runner: CommandRunner | None = None,
    hooks: PipelineHooks | None = None,
    clock: Callable[[], datetime] = datetime.now,
    which: Callable[[str], str | None] | None = None,
) -> SyncResult:
    """Run the full workflow and return a summary of what was produced."""

    started_at = clock()
    hooks = hooks or PipelineHooks()

    layout = prepare_layout(settings, repo_root)

    executable = check_dependency(settings, which=which)
    pac = PacCli(runner or build_runner(settings), executable, cwd=repo_root)
    ctx = StepReporter(hooks=hooks)

    environment = EnvironmentRef(url=request.env_url, profile_name=settings.auth_profile_name)
    ctx.step(f"Authenticating to {environment.url} (profile '{environment.profile_name}')")
    authenticate(pac, environment)

    if not request.unique_name:
        ctx.step(f"Resolving unique name for '{request.solution_name}'")
    solution = resolve_solution(pac, request, warn=ctx.warn)
    ctx.info(f"Using solution '{solution.unique_name}' ({solution.resolution.value})")

    archive = archive_for(layout, solution.unique_name, now=clock(), timestamp_format=settings.timestamp_format)
    ctx.step(f"Exporting '{solution.unique_name}' (unmanaged) to {archive.path}")
    export_solution(pac, archive, solution.unique_name)

    ctx.step(f"Cleaning {layout.source_dir}")
    clean_source_tree(layout.source_dir)

    ctx.step(f"Unpacking into {layout.source_dir}")
    unpack_solution(pac, archive, layout.source_dir)

    decompiled: list[CanvasAppPackage] = []
    if request.decompile_canvas:
        packages = find_canvas_apps(layout, settings)
        if not packages:
            ctx.info(f"No canvas apps ({settings.canvas_extension}) found; skipping decompile.")
        else:
            ctx.step(f"Decompiling {len(packages)} canvas app(s)")
            decompiled = decompile_canvas_apps(pac, packages)

    return SyncResult(
        environment=environment,
        solution=solution,
        layout=layout,
        archive=archive,
        decompiled=decompiled,
        warnings=list(ctx.warnings),
        started_at=started_at,
        finished_at=clock(),
    )
