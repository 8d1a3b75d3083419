"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.contentful_client import ContentfulManagementClient
from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.errors import CmsMigrateError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_space(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as http:
            client = ContentfulManagementClient.from_settings(http, settings)
            space = await client.get_space()
        return True, str(space.get("name") or settings.space_id)
    except CmsMigrateError as exc:
        return False, str(exc)


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings: AppSettings = ctx.obj or AppSettings()

    table = Table(title="cms-migrate Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Space id", "OK" if settings.space_id else "MISSING", settings.space_id or "CMS_MIGRATE_SPACE_ID")
    table.add_row("Environment", "OK", settings.environment_id)
    table.add_row(
        "Management token",
        "OK" if settings.management_token else "MISSING",
        "set" if settings.management_token else "CMS_MIGRATE_MANAGEMENT_TOKEN",
    )
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row(
        "Migrations dir",
        "OK" if settings.migrations_dir.is_dir() else "MISSING",
        str(settings.migrations_dir),
    )

    ok_api = False
    if settings.has_credentials():
        ok_api, detail_api = asyncio.run(_check_space(settings))
        table.add_row("Content Management API", "OK" if ok_api else "FAIL", detail_api)
    else:
        table.add_row("Content Management API", "SKIPPED", "credentials missing")

    _console.print(table)

    if not settings.has_credentials():
        _console.print("\n[yellow]Note:[/yellow] run `cms-migrate doctor setup` to store credentials.", soft_wrap=True)
    elif not ok_api:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup(ctx: typer.Context) -> None:
    """Interactive setup (stores config in the user config .env).

    Leaving the token blank keeps the one already stored.
    """

    current: AppSettings = ctx.obj or AppSettings()

    space_id = typer.prompt("Space id", default=current.space_id or "", show_default=True).strip()
    environment_id = typer.prompt("Environment", default=current.environment_id, show_default=True).strip()
    token = typer.prompt(
        "Management token",
        default="",
        show_default=False,
        hide_input=True,
        confirmation_prompt=False,
    ).strip()

    if not space_id or not environment_id:
        raise typer.BadParameter("space id and environment are required")

    env_path = write_user_env_vars(
        {
            "CMS_MIGRATE_SPACE_ID": space_id,
            "CMS_MIGRATE_ENVIRONMENT_ID": environment_id,
            "CMS_MIGRATE_MANAGEMENT_TOKEN": token or None,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
