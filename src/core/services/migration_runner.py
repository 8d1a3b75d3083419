"""Migration orchestration.

Two steps, kept apart so the CLI can show a plan before touching anything:
- `build_plan` runs a script against the recording `Migration`.
- `apply_plan` submits a recorded plan through the Content Management API.

Side-effects for UI layers (progress lines) go through `RunnerHooks`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable

from core.domain.models import ApplyResult, FieldControl, MigrationPlan
from core.errors import ContentTypeExistsError, MigrationValidationError
from core.migration import Migration
from core.services.migration_loader import load_migration

if TYPE_CHECKING:
    from adapters.contentful_client import ContentfulManagementClient

logger = logging.getLogger(__name__)


@dataclass
class RunnerHooks:
    """Optional callbacks for UI layers."""

    step: Callable[[str], None] | None = None

    def emit(self, message: str) -> None:
        logger.info(message)
        if self.step:
            self.step(message)


def build_plan(path: Path) -> MigrationPlan:
    """Run the script at `path` against a fresh recording context."""

    func = load_migration(path)
    migration = Migration(source=str(path))
    try:
        func(migration)
        return migration.to_plan()
    except MigrationValidationError as exc:
        if exc.source is None:
            raise MigrationValidationError(str(exc), source=str(path)) from exc
        raise


def build_plans(paths: Iterable[Path]) -> list[MigrationPlan]:
    return [build_plan(p) for p in paths]


def merge_controls(existing: list[dict[str, Any]], changes: list[FieldControl]) -> list[dict[str, Any]]:
    """Replace controls for the changed fields; keep every other control as-is."""

    by_field = {c.field_id: c.to_api_payload() for c in changes}
    merged: list[dict[str, Any]] = []
    seen: set[str] = set()
    for control in existing:
        field_id = control.get("fieldId")
        if field_id in by_field:
            merged.append(by_field[field_id])
            seen.add(field_id)
        else:
            merged.append(control)
    for field_id, payload in by_field.items():
        if field_id not in seen:
            merged.append(payload)
    return merged


async def apply_plan(
    plan: MigrationPlan,
    client: "ContentfulManagementClient",
    hooks: RunnerHooks | None = None,
) -> list[ApplyResult]:
    """Create, publish and configure every content type declared in `plan`."""

    hooks = hooks or RunnerHooks()
    results: list[ApplyResult] = []

    for content_type in plan.content_types():
        ct_id = content_type.id

        if await client.get_content_type(ct_id) is not None:
            raise ContentTypeExistsError(ct_id)

        created = await client.put_content_type(content_type)
        hooks.emit(f"created content type '{ct_id}'")

        published = await client.publish_content_type(ct_id, created["sys"]["version"])
        published_version = int(published["sys"]["version"])
        hooks.emit(f"published content type '{ct_id}' (version {published_version})")

        applied: list[str] = []
        controls = plan.field_controls(ct_id)
        if controls:
            editor_interface = await client.get_editor_interface(ct_id)
            merged = merge_controls(editor_interface.get("controls") or [], controls)
            await client.put_editor_interface(ct_id, merged, editor_interface["sys"]["version"])
            applied = [c.field_id for c in controls]
            hooks.emit(f"updated editor interface of '{ct_id}' ({', '.join(applied)})")

        results.append(
            ApplyResult(
                content_type_id=ct_id,
                published_version=published_version,
                controls_applied=applied,
            )
        )

    return results
