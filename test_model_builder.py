"""
Unit tests for model_builder module.
"""

import pytest
from pydantic import ValidationError

from formbuilder.component_model import FormComponent
from formbuilder.field_registry import FieldKind, EMPTY_TEXT_MESSAGE
from formbuilder.model_builder import (
    ComponentShape,
    FormSchemaShape,
    LABEL_REQUIRED_MESSAGE,
    format_validation_errors,
    validate_components,
    validate_schema_data,
)


class TestComponentShape:
    """Test the per-component structural model."""

    def test_valid_text_component(self):
        shape = ComponentShape.model_validate({'id': "text-1-1", 'type': "text", 'label': "Name"})

        assert shape.type == FieldKind.TEXT

    def test_empty_label_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ComponentShape.model_validate({'id': "text-1-1", 'type': "text", 'label': ""})

        assert LABEL_REQUIRED_MESSAGE in str(exc_info.value)

    def test_empty_string_value_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            ComponentShape.model_validate({'id': "text-1-1", 'type': "text", 'label': "Name", 'value': ""})

        assert EMPTY_TEXT_MESSAGE in str(exc_info.value)

    def test_boolean_and_list_values_accepted(self):
        ComponentShape.model_validate({'id': "checkbox-1-1", 'type': "checkbox", 'label': "Agree", 'value': False})
        ComponentShape.model_validate({'id': "text-1-1", 'type': "text", 'label': "Tags", 'value': ["a", "b"]})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            ComponentShape.model_validate({'id': "x-1-1", 'type': "date", 'label': "When"})

    def test_option_kind_requires_options(self):
        with pytest.raises(ValidationError) as exc_info:
            ComponentShape.model_validate({'id': "select-1-1", 'type': "select", 'label': "Color", 'options': []})

        assert "at least one option" in str(exc_info.value)

    def test_plain_kind_rejects_options(self):
        with pytest.raises(ValidationError) as exc_info:
            ComponentShape.model_validate({'id': "text-1-1", 'type': "text", 'label': "Name", 'options': ["a"]})

        assert "cannot have options" in str(exc_info.value)

    def test_non_string_label_rejected(self):
        with pytest.raises(ValidationError):
            ComponentShape.model_validate({'id': "text-1-1", 'type': "text", 'label': 5})


class TestFormSchemaShape:
    """Test whole-list validation."""

    def test_duplicate_ids_rejected(self):
        data = {'components': [
            {'id': "text-1-1", 'type': "text", 'label': "A"},
            {'id': "text-1-1", 'type': "text", 'label': "B"},
        ]}

        with pytest.raises(ValidationError) as exc_info:
            FormSchemaShape.model_validate(data)

        assert "Duplicate component ids: text-1-1" in str(exc_info.value)

    def test_empty_schema_is_valid(self):
        assert validate_schema_data({'components': []}) == []


class TestValidationHelpers:
    """Test error formatting and list validation."""

    def test_errors_include_location(self):
        errors = validate_schema_data({'components': [{'id': "text-1-1", 'type': "text", 'label': ""}]})

        assert len(errors) == 1
        assert errors[0].startswith("components -> 0 -> label:")

    def test_format_validation_errors(self):
        try:
            ComponentShape.model_validate({'type': "text", 'label': "Name"})
        except ValidationError as e:
            messages = format_validation_errors(e)

        assert any(message.startswith("id:") for message in messages)

    def test_validate_components_on_live_list(self):
        components = [
            FormComponent(id="select-1-1", kind=FieldKind.SELECT, label="Color", options=["Red", "Blue"]),
            FormComponent(id="text-1-2", kind=FieldKind.TEXT, label="Name", value="Ada"),
        ]

        assert validate_components(components) == []

    def test_validate_components_reports_empty_label(self):
        components = [FormComponent(id="text-1-1", kind=FieldKind.TEXT, label="")]

        errors = validate_components(components)

        assert len(errors) == 1
        assert LABEL_REQUIRED_MESSAGE in errors[0]
