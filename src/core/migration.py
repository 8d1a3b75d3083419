"""Recording migration context.

`Migration` is what a script's `migrate(migration)` receives. Nothing talks to
the network here: every fluent call updates an intent in an ordered list, and
`to_plan()` checks the result the way Contentful would before anything is
submitted.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from core.domain.models import (
    BUILTIN_WIDGETS,
    DISPLAY_FIELD_TYPES,
    ChangeFieldControlIntent,
    ContentTypeDefinition,
    CreateContentTypeIntent,
    CreateFieldIntent,
    FieldControl,
    FieldDefinition,
    FieldType,
    Intent,
    MigrationPlan,
    WidgetNamespace,
)
from core.errors import MigrationValidationError

logger = logging.getLogger(__name__)


def _assign(model: BaseModel, attr: str, value: Any) -> None:
    try:
        setattr(model, attr, value)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise MigrationValidationError(
            f"invalid value {value!r} for '{attr}': {first['msg']}"
        ) from exc


class FieldBuilder:
    """Fluent builder for one field; every setter returns the builder."""

    def __init__(self, field: FieldDefinition, content_type_id: str) -> None:
        self._field = field
        self._content_type_id = content_type_id

    @property
    def definition(self) -> FieldDefinition:
        return self._field

    def name(self, value: str) -> "FieldBuilder":
        _assign(self._field, "name", value)
        return self

    def type(self, value: str | FieldType) -> "FieldBuilder":
        try:
            field_type = FieldType(value)
        except ValueError:
            allowed = ", ".join(t.value for t in FieldType)
            raise MigrationValidationError(
                f"field '{self._content_type_id}.{self._field.id}': unknown type {value!r} (expected one of {allowed})"
            ) from None
        self._field.type = field_type
        return self

    def localized(self, value: bool) -> "FieldBuilder":
        _assign(self._field, "localized", value)
        return self

    def required(self, value: bool) -> "FieldBuilder":
        _assign(self._field, "required", value)
        return self

    def disabled(self, value: bool) -> "FieldBuilder":
        _assign(self._field, "disabled", value)
        return self

    def omitted(self, value: bool) -> "FieldBuilder":
        _assign(self._field, "omitted", value)
        return self

    def validations(self, value: list[dict[str, Any]]) -> "FieldBuilder":
        _assign(self._field, "validations", list(value))
        return self


class ContentTypeBuilder:
    """Fluent builder returned by `Migration.create_content_type`."""

    def __init__(self, migration: "Migration", content_type: ContentTypeDefinition) -> None:
        self._migration = migration
        self._content_type = content_type

    @property
    def definition(self) -> ContentTypeDefinition:
        return self._content_type

    def name(self, value: str) -> "ContentTypeBuilder":
        _assign(self._content_type, "name", value)
        return self

    def description(self, value: str) -> "ContentTypeBuilder":
        _assign(self._content_type, "description", value)
        return self

    def display_field(self, field_id: str) -> "ContentTypeBuilder":
        _assign(self._content_type, "display_field", field_id)
        return self

    def create_field(self, field_id: str) -> FieldBuilder:
        ct = self._content_type
        if ct.get_field(field_id) is not None:
            raise MigrationValidationError(f"field '{ct.id}.{field_id}' is created more than once")
        try:
            field = FieldDefinition(id=field_id)
        except ValidationError as exc:
            raise MigrationValidationError(f"invalid field id {field_id!r}") from exc

        ct.fields.append(field)
        self._migration._record(CreateFieldIntent(content_type_id=ct.id, field=field))
        logger.debug("create field %s.%s", ct.id, field_id)
        return FieldBuilder(field, ct.id)

    def change_field_control(
        self,
        field_id: str,
        widget_namespace: str,
        widget_id: str,
        settings: dict[str, Any] | None = None,
    ) -> "ContentTypeBuilder":
        try:
            namespace = WidgetNamespace(widget_namespace)
        except ValueError:
            raise MigrationValidationError(
                f"field control '{self._content_type.id}.{field_id}': unknown widget namespace {widget_namespace!r}"
            ) from None

        control = FieldControl(
            field_id=field_id,
            widget_namespace=namespace,
            widget_id=widget_id,
            settings=dict(settings or {}),
        )
        self._migration._record(
            ChangeFieldControlIntent(content_type_id=self._content_type.id, control=control)
        )
        logger.debug("change field control %s.%s -> %s/%s", self._content_type.id, field_id, namespace.value, widget_id)
        return self


class Migration:
    """Migration context that records intents instead of executing them."""

    def __init__(self, source: str = "<inline>") -> None:
        self.source = source
        self._intents: list[Intent] = []
        self._content_types: dict[str, ContentTypeDefinition] = {}

    @property
    def intents(self) -> list[Intent]:
        return list(self._intents)

    def _record(self, intent: Intent) -> None:
        self._intents.append(intent)

    def create_content_type(self, content_type_id: str) -> ContentTypeBuilder:
        if content_type_id in self._content_types:
            raise MigrationValidationError(
                f"content type '{content_type_id}' is created more than once",
                source=self.source,
            )
        try:
            content_type = ContentTypeDefinition(id=content_type_id)
        except ValidationError as exc:
            raise MigrationValidationError(
                f"invalid content type id {content_type_id!r}", source=self.source
            ) from exc

        self._content_types[content_type_id] = content_type
        self._record(CreateContentTypeIntent(content_type=content_type))
        logger.debug("create content type %s", content_type_id)
        return ContentTypeBuilder(self, content_type)

    def validate(self) -> None:
        """Raise `MigrationValidationError` on the first problem found."""

        for ct in self._content_types.values():
            if not ct.name:
                raise MigrationValidationError(f"content type '{ct.id}' has no name", source=self.source)

            for field in ct.fields:
                if not field.name:
                    raise MigrationValidationError(f"field '{ct.id}.{field.id}' has no name", source=self.source)
                if field.type is None:
                    raise MigrationValidationError(f"field '{ct.id}.{field.id}' has no type", source=self.source)

            if ct.display_field is not None:
                display = ct.get_field(ct.display_field)
                if display is None:
                    raise MigrationValidationError(
                        f"content type '{ct.id}': display field '{ct.display_field}' is not one of its fields",
                        source=self.source,
                    )
                if display.type not in DISPLAY_FIELD_TYPES:
                    raise MigrationValidationError(
                        f"content type '{ct.id}': display field '{ct.display_field}' must be Symbol or Text",
                        source=self.source,
                    )

        for intent in self._intents:
            if not isinstance(intent, ChangeFieldControlIntent):
                continue
            ct = self._content_types[intent.content_type_id]
            control = intent.control
            field = ct.get_field(control.field_id)
            if field is None:
                raise MigrationValidationError(
                    f"field control targets unknown field '{ct.id}.{control.field_id}'",
                    source=self.source,
                )
            if control.widget_namespace is WidgetNamespace.BUILTIN:
                allowed = BUILTIN_WIDGETS.get(field.type, frozenset()) if field.type else frozenset()
                if control.widget_id not in allowed:
                    raise MigrationValidationError(
                        f"widget 'builtin/{control.widget_id}' cannot edit '{ct.id}.{field.id}' of type {field.type.value}",
                        source=self.source,
                    )

    def to_plan(self) -> MigrationPlan:
        self.validate()
        return MigrationPlan(source=self.source, intents=self._intents)
