"""cms-migrate CLI.

Commands delegate to `core.services`; this module only parses options,
prints, and maps `CmsMigrateError` to exit codes (1 for migration/API
failures, 2 for usage/configuration problems).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.contentful_client import ContentfulManagementClient
from adapters.http_client import build_async_client
from adapters.json_exporter import dumps_plans, export_plans_json
from cli import doctor
from cli.ui_components import build_plan_table, build_results_table, print_banner
from core.config import AppSettings
from core.domain.models import ApplyResult, MigrationPlan
from core.errors import CmsMigrateError
from core.logging_setup import configure_logging
from core.services.migration_loader import discover_migrations
from core.services.migration_runner import RunnerHooks, apply_plan, build_plans

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cms-migrate",
    no_args_is_help=True,
    help="Declare and apply Contentful content model migrations.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...). Defaults to CMS_MIGRATE_LOG_LEVEL.",
    ),
) -> None:
    try:
        settings = AppSettings()
    except ValidationError as exc:
        _err_console.print(f"[red]Invalid configuration:[/red] {_describe_settings_error(exc)}", soft_wrap=True)
        raise typer.Exit(code=2) from exc
    ctx.obj = settings

    try:
        configure_logging(log_level or settings.log_level, console=_err_console)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _describe_settings_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        parts.append(f"CMS_MIGRATE_{field.upper()}: {error['msg']}")
    return "; ".join(parts)


def _resolve_paths(
    settings: AppSettings,
    paths: Optional[List[Path]],
    migrations_dir: Optional[Path],
) -> list[Path]:
    if paths:
        return list(paths)
    directory = migrations_dir or settings.migrations_dir
    if not directory.is_dir():
        raise typer.BadParameter(f"directory not found: {directory}", param_hint="--migrations-dir")
    return discover_migrations(directory)


def _fail(exc: CmsMigrateError) -> typer.Exit:
    _err_console.print(f"[red]Error:[/red] {exc}", soft_wrap=True)
    return typer.Exit(code=1)


def _load_plans(
    settings: AppSettings,
    paths: Optional[List[Path]],
    migrations_dir: Optional[Path],
) -> list[MigrationPlan]:
    resolved = _resolve_paths(settings, paths, migrations_dir)
    try:
        return build_plans(resolved)
    except CmsMigrateError as exc:
        raise _fail(exc) from exc


_PATHS_ARGUMENT = typer.Argument(None, help="Migration scripts. Defaults to every script in the migrations dir.")
_DIR_OPTION = typer.Option(None, "--migrations-dir", "-d", help="Directory scanned when no PATHS are given.")


@app.command()
def plan(
    ctx: typer.Context,
    paths: Optional[List[Path]] = _PATHS_ARGUMENT,
    migrations_dir: Optional[Path] = _DIR_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON instead of tables."),
) -> None:
    """Show what the migration scripts declare, without contacting Contentful."""

    plans = _load_plans(ctx.obj, paths, migrations_dir)

    if as_json:
        typer.echo(dumps_plans(plans), nl=False)
        return

    print_banner(_console)
    if not plans:
        _console.print("[yellow]No migrations found.[/yellow]")
        return
    for migration_plan in plans:
        _console.print(build_plan_table(migration_plan))


@app.command()
def export(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Destination JSON file."),
    paths: Optional[List[Path]] = _PATHS_ARGUMENT,
    migrations_dir: Optional[Path] = _DIR_OPTION,
) -> None:
    """Write the migration plans to a JSON file."""

    plans = _load_plans(ctx.obj, paths, migrations_dir)
    written = export_plans_json(plans=plans, output_path=output)
    _console.print(f"[green]Plan written to:[/green] {written}")


async def _apply_all(plans: list[MigrationPlan], settings: AppSettings) -> list[ApplyResult]:
    hooks = RunnerHooks(step=lambda message: _console.print(f"  [green]✓[/green] {message}"))
    results: list[ApplyResult] = []
    async with build_async_client(settings) as http:
        client = ContentfulManagementClient.from_settings(http, settings)
        for migration_plan in plans:
            _console.print(f"[bold]{migration_plan.source}[/bold]")
            results.extend(await apply_plan(migration_plan, client, hooks))
    return results


@app.command()
def apply(
    ctx: typer.Context,
    paths: Optional[List[Path]] = _PATHS_ARGUMENT,
    migrations_dir: Optional[Path] = _DIR_OPTION,
    space: Optional[str] = typer.Option(None, "--space", help="Space id (overrides CMS_MIGRATE_SPACE_ID)."),
    environment: Optional[str] = typer.Option(
        None, "--environment", "-e", help="Environment id (overrides CMS_MIGRATE_ENVIRONMENT_ID)."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Apply the migration scripts to a Contentful environment."""

    overrides: dict[str, str] = {}
    if space:
        overrides["space_id"] = space
    if environment:
        overrides["environment_id"] = environment
    settings: AppSettings = ctx.obj.model_copy(update=overrides)

    if not settings.has_credentials():
        _err_console.print(
            "[red]Error:[/red] space id and management token are required "
            "(CMS_MIGRATE_SPACE_ID / CMS_MIGRATE_MANAGEMENT_TOKEN, or `cms-migrate doctor setup`).",
            soft_wrap=True,
        )
        raise typer.Exit(code=2)

    plans = _load_plans(settings, paths, migrations_dir)
    if not plans:
        _console.print("[yellow]No migrations found.[/yellow]")
        return

    for migration_plan in plans:
        _console.print(build_plan_table(migration_plan))

    target = f"{settings.space_id}/{settings.environment_id}"
    if not yes and not typer.confirm(f"Apply {len(plans)} migration(s) to {target}?"):
        _console.print("Aborted.")
        raise typer.Exit(code=1)

    try:
        results = asyncio.run(_apply_all(plans, settings))
    except CmsMigrateError as exc:
        raise _fail(exc) from exc

    logger.info("applied %d content type(s) to %s", len(results), target)
    _console.print(build_results_table(results))


def run() -> None:
    app()
