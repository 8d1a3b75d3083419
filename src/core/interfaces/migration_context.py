"""Contracts for migration scripts.

Protocols instead of base classes:
- A script only needs an object with the right methods, so the recording
  `core.migration.Migration` and a `unittest.mock.MagicMock` are equally valid.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class FieldContext(Protocol):
    """Fluent setters for a field being created."""

    def name(self, value: str) -> "FieldContext": ...

    def type(self, value: str) -> "FieldContext": ...

    def localized(self, value: bool) -> "FieldContext": ...

    def required(self, value: bool) -> "FieldContext": ...


@runtime_checkable
class ContentTypeContext(Protocol):
    """Fluent setters for a content type being created."""

    def name(self, value: str) -> "ContentTypeContext": ...

    def description(self, value: str) -> "ContentTypeContext": ...

    def display_field(self, field_id: str) -> "ContentTypeContext": ...

    def create_field(self, field_id: str) -> FieldContext: ...

    def change_field_control(
        self,
        field_id: str,
        widget_namespace: str,
        widget_id: str,
        settings: dict[str, Any] | None = None,
    ) -> "ContentTypeContext": ...


@runtime_checkable
class MigrationContext(Protocol):
    """Object handed to a script's `migrate` function."""

    def create_content_type(self, content_type_id: str) -> ContentTypeContext: ...


MigrationFunction = Callable[[MigrationContext], None]
