"""Create the `migrations` content type that records applied migrations."""

from __future__ import annotations

from core.interfaces.migration_context import MigrationContext

DESCRIPTION = (
    "Tracks content model migrations that have been applied at deploy time. "
    "These do not appear on the site. AVOID EDITING DIRECTLY!"
)


def migrate(migration: MigrationContext) -> None:
    migrations = (
        migration.create_content_type("migrations")
        .name("Migrations")
        .description(DESCRIPTION)
        .display_field("name")
    )

    migrations.create_field("name").name("name").type("Symbol").localized(False).required(True)
    migrations.create_field("appliedAt").name("appliedAt").type("Date").localized(False).required(True)

    migrations.change_field_control("name", "builtin", "singleLine", {})
    migrations.change_field_control("appliedAt", "builtin", "datePicker", {})
