"""Domain models (Pydantic v2).

These models describe *what* a migration declares (content types, fields,
editor controls), not *how* it reaches the Content Management API. The
`to_api_payload` helpers are the single place where the camelCase wire
format appears.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class FieldType(str, Enum):
    """Field types accepted by Contentful content types."""

    SYMBOL = "Symbol"
    TEXT = "Text"
    RICH_TEXT = "RichText"
    INTEGER = "Integer"
    NUMBER = "Number"
    DATE = "Date"
    LOCATION = "Location"
    BOOLEAN = "Boolean"
    LINK = "Link"
    ARRAY = "Array"
    OBJECT = "Object"


class WidgetNamespace(str, Enum):
    BUILTIN = "builtin"
    EXTENSION = "extension"
    APP = "app"


# Built-in editor widgets Contentful offers per field type.
BUILTIN_WIDGETS: dict[FieldType, frozenset[str]] = {
    FieldType.SYMBOL: frozenset({"singleLine", "urlEditor", "dropdown", "radio", "slugEditor"}),
    FieldType.TEXT: frozenset({"singleLine", "multipleLine", "markdown", "dropdown", "radio"}),
    FieldType.RICH_TEXT: frozenset({"richTextEditor"}),
    FieldType.INTEGER: frozenset({"numberEditor", "dropdown", "radio", "rating"}),
    FieldType.NUMBER: frozenset({"numberEditor", "dropdown", "radio", "rating"}),
    FieldType.DATE: frozenset({"datePicker"}),
    FieldType.LOCATION: frozenset({"locationEditor"}),
    FieldType.BOOLEAN: frozenset({"boolean"}),
    FieldType.LINK: frozenset({"entryLinkEditor", "entryCardEditor", "assetLinkEditor"}),
    FieldType.ARRAY: frozenset(
        {
            "tagEditor",
            "listInput",
            "checkbox",
            "entryLinksEditor",
            "entryCardsEditor",
            "assetLinksEditor",
            "assetGalleryEditor",
        }
    ),
    FieldType.OBJECT: frozenset({"objectEditor"}),
}

# Only these types may be used as a content type's display field.
DISPLAY_FIELD_TYPES = frozenset({FieldType.SYMBOL, FieldType.TEXT})


class FieldDefinition(BaseModel):
    """A field declared on a content type."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Field id (API name), unique within the content type.",
    )
    name: str | None = Field(
        default=None,
        max_length=50,
        description="Human readable field name shown in the web app.",
    )
    type: FieldType | None = Field(
        default=None,
        description="Contentful field type.",
    )
    localized: bool = Field(
        default=False,
        description="Whether the field holds one value per locale.",
    )
    required: bool = Field(
        default=False,
        description="Whether entries must provide a value before publishing.",
    )
    disabled: bool = Field(
        default=False,
        description="Disable editing in the web app.",
    )
    omitted: bool = Field(
        default=False,
        description="Omit the field from delivery API responses.",
    )
    validations: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Raw Contentful validation objects.",
    )

    def to_api_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value if self.type else None,
            "localized": self.localized,
            "required": self.required,
            "disabled": self.disabled,
            "omitted": self.omitted,
        }
        if self.validations:
            payload["validations"] = self.validations
        return payload


class ContentTypeDefinition(BaseModel):
    """A content type as declared by a migration."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Content type id.",
    )
    name: str | None = Field(
        default=None,
        description="Human readable name.",
    )
    description: str | None = Field(
        default=None,
        description="Free-form description shown to editors.",
    )
    display_field: str | None = Field(
        default=None,
        description="Id of the field used as the entry title.",
    )
    fields: list[FieldDefinition] = Field(
        default_factory=list,
        description="Fields in declaration order.",
    )

    def get_field(self, field_id: str) -> FieldDefinition | None:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def to_api_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "fields": [f.to_api_payload() for f in self.fields],
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.display_field is not None:
            payload["displayField"] = self.display_field
        return payload


class FieldControl(BaseModel):
    """Editor widget assignment for one field."""

    field_id: str = Field(..., min_length=1)
    widget_namespace: WidgetNamespace = Field(default=WidgetNamespace.BUILTIN)
    widget_id: str = Field(..., min_length=1)
    settings: dict[str, Any] = Field(default_factory=dict)

    def to_api_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "fieldId": self.field_id,
            "widgetNamespace": self.widget_namespace.value,
            "widgetId": self.widget_id,
        }
        if self.settings:
            payload["settings"] = self.settings
        return payload


class CreateContentTypeIntent(BaseModel):
    kind: Literal["content_type/create"] = "content_type/create"
    content_type: ContentTypeDefinition


class CreateFieldIntent(BaseModel):
    kind: Literal["field/create"] = "field/create"
    content_type_id: str
    field: FieldDefinition


class ChangeFieldControlIntent(BaseModel):
    kind: Literal["field_control/change"] = "field_control/change"
    content_type_id: str
    control: FieldControl


Intent = Annotated[
    Union[CreateContentTypeIntent, CreateFieldIntent, ChangeFieldControlIntent],
    Field(discriminator="kind"),
]


class MigrationPlan(BaseModel):
    """Ordered record of everything one migration script declared."""

    source: str = Field(
        ...,
        min_length=1,
        description="Script path (or label) the plan was recorded from.",
    )
    intents: list[Intent] = Field(default_factory=list)

    def content_types(self) -> list[ContentTypeDefinition]:
        return [i.content_type for i in self.intents if isinstance(i, CreateContentTypeIntent)]

    def field_controls(self, content_type_id: str) -> list[FieldControl]:
        return [
            i.control
            for i in self.intents
            if isinstance(i, ChangeFieldControlIntent) and i.content_type_id == content_type_id
        ]


class ApplyResult(BaseModel):
    """Outcome of submitting one content type to the API."""

    content_type_id: str
    published_version: int
    controls_applied: list[str] = Field(default_factory=list)
