"""CLI UI components (Rich).

- Keeps command logic apart from presentation.
- Tables/panels are shared by `plan` and `apply`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import (
    ApplyResult,
    ChangeFieldControlIntent,
    CreateContentTypeIntent,
    CreateFieldIntent,
    MigrationPlan,
)


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in JSON mode)."""

    title = Text("cms-migrate", style="bold cyan")
    subtitle = Text("Contentful content model migrations", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _bool_cell(value: bool) -> str:
    return "yes" if value else "no"


def build_plan_table(plan: MigrationPlan) -> Table:
    """One row per recorded intent, in declaration order."""

    table = Table(title=plan.source, title_justify="left")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Target", style="white")
    table.add_column("Details", style="magenta")

    for index, intent in enumerate(plan.intents, start=1):
        if isinstance(intent, CreateContentTypeIntent):
            ct = intent.content_type
            details = f"name={ct.name!r}"
            if ct.display_field:
                details += f", displayField={ct.display_field}"
            table.add_row(str(index), "create content type", ct.id, details)
        elif isinstance(intent, CreateFieldIntent):
            field = intent.field
            details = (
                f"{field.type.value if field.type else '?'}, "
                f"required={_bool_cell(field.required)}, localized={_bool_cell(field.localized)}"
            )
            table.add_row(str(index), "create field", f"{intent.content_type_id}.{field.id}", details)
        elif isinstance(intent, ChangeFieldControlIntent):
            control = intent.control
            table.add_row(
                str(index),
                "change field control",
                f"{intent.content_type_id}.{control.field_id}",
                f"{control.widget_namespace.value}/{control.widget_id}",
            )
    return table


def build_results_table(results: list[ApplyResult]) -> Table:
    table = Table(title="Applied")
    table.add_column("Content type", style="cyan", no_wrap=True)
    table.add_column("Version", style="white", justify="right")
    table.add_column("Controls", style="green")
    for result in results:
        table.add_row(
            result.content_type_id,
            str(result.published_version),
            ", ".join(result.controls_applied) or "-",
        )
    return table
