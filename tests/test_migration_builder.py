import pytest

from core.domain.models import FieldType
from core.errors import MigrationValidationError
from core.migration import Migration


def _article(migration: Migration):
    ct = migration.create_content_type("article").name("Article").display_field("title")
    ct.create_field("title").name("Title").type("Symbol").required(True)
    return ct


def test_fluent_setters_return_builder():
    migration = Migration()
    ct = migration.create_content_type("article")
    assert ct.name("Article") is ct
    field = ct.create_field("title")
    assert field.name("Title").type(FieldType.SYMBOL).localized(True).required(True) is field
    assert ct.change_field_control("title", "builtin", "singleLine") is ct


def test_optional_field_flags_are_recorded():
    migration = Migration()
    ct = _article(migration)
    ct.create_field("tags").name("Tags").type("Array").disabled(True).omitted(True).validations(
        [{"size": {"max": 5}}]
    )

    tags = migration.to_plan().content_types()[0].get_field("tags")
    assert tags.disabled and tags.omitted
    assert tags.to_api_payload()["validations"] == [{"size": {"max": 5}}]


def test_duplicate_content_type_is_rejected():
    migration = Migration(source="m.py")
    migration.create_content_type("article")
    with pytest.raises(MigrationValidationError, match="created more than once") as info:
        migration.create_content_type("article")
    assert info.value.source == "m.py"


def test_duplicate_field_is_rejected():
    migration = Migration()
    ct = _article(migration)
    with pytest.raises(MigrationValidationError, match="article.title"):
        ct.create_field("title")


def test_unknown_field_type_is_rejected():
    migration = Migration()
    field = migration.create_content_type("article").create_field("title")
    with pytest.raises(MigrationValidationError, match="unknown type 'ShortText'"):
        field.type("ShortText")


def test_unknown_widget_namespace_is_rejected():
    migration = Migration()
    ct = _article(migration)
    with pytest.raises(MigrationValidationError, match="widget namespace"):
        ct.change_field_control("title", "custom", "singleLine")


def test_invalid_value_is_reported_as_validation_error():
    migration = Migration()
    field = migration.create_content_type("article").create_field("title")
    with pytest.raises(MigrationValidationError, match="'name'"):
        field.name("x" * 51)


def test_content_type_without_name_fails_validation():
    migration = Migration()
    migration.create_content_type("article")
    with pytest.raises(MigrationValidationError, match="has no name"):
        migration.to_plan()


def test_field_without_type_fails_validation():
    migration = Migration()
    ct = migration.create_content_type("article").name("Article")
    ct.create_field("title").name("Title")
    with pytest.raises(MigrationValidationError, match="has no type"):
        migration.to_plan()


def test_display_field_must_exist():
    migration = Migration()
    migration.create_content_type("article").name("Article").display_field("missing")
    with pytest.raises(MigrationValidationError, match="display field 'missing'"):
        migration.to_plan()


def test_display_field_must_be_text_like():
    migration = Migration()
    ct = migration.create_content_type("event").name("Event").display_field("startsAt")
    ct.create_field("startsAt").name("Starts at").type("Date")
    with pytest.raises(MigrationValidationError, match="must be Symbol or Text"):
        migration.to_plan()


def test_control_for_unknown_field_fails_validation():
    migration = Migration()
    ct = _article(migration)
    ct.change_field_control("body", "builtin", "markdown")
    with pytest.raises(MigrationValidationError, match="unknown field 'article.body'"):
        migration.to_plan()


def test_builtin_widget_must_fit_field_type():
    migration = Migration()
    ct = _article(migration)
    ct.change_field_control("title", "builtin", "datePicker", {})
    with pytest.raises(MigrationValidationError, match="builtin/datePicker"):
        migration.to_plan()


def test_extension_widgets_are_not_checked():
    migration = Migration()
    ct = _article(migration)
    ct.change_field_control("title", "extension", "my-color-picker", {"theme": "dark"})

    (control,) = migration.to_plan().field_controls("article")
    assert control.to_api_payload() == {
        "fieldId": "title",
        "widgetNamespace": "extension",
        "widgetId": "my-color-picker",
        "settings": {"theme": "dark"},
    }
