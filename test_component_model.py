"""
Unit tests for component_model module.
"""

import pytest

from formbuilder.component_model import (
    FormComponent,
    components_from_dicts,
    components_to_dicts,
)
from formbuilder.exceptions import UnknownFieldKindError
from formbuilder.field_registry import FieldKind


class TestFormComponentSerialization:
    """Test conversion to and from the exported shape."""

    def test_to_dict_uses_type_key(self):
        component = FormComponent(id="text-1-1", kind=FieldKind.TEXT, label="Name")

        assert component.to_dict() == {
            'id': "text-1-1",
            'type': "text",
            'label': "Name",
            'required': False
        }

    def test_to_dict_includes_options_and_value_when_present(self):
        component = FormComponent(
            id="select-1-1",
            kind=FieldKind.SELECT,
            label="Color",
            required=True,
            options=["Red", "Blue"],
            value="Blue"
        )

        data = component.to_dict()

        assert data['options'] == ["Red", "Blue"]
        assert data['value'] == "Blue"
        assert data['required'] is True

    def test_to_dict_keeps_false_checkbox_value(self):
        component = FormComponent(id="checkbox-1-1", kind=FieldKind.CHECKBOX, label="Agree", value=False)

        assert component.to_dict()['value'] is False

    def test_to_dict_copies_options(self):
        component = FormComponent(id="radio-1-1", kind=FieldKind.RADIO, label="Size", options=["S", "M"])

        component.to_dict()['options'].append("L")

        assert component.options == ["S", "M"]

    def test_from_dict_restores_component(self):
        data = {'id': "radio-5-2", 'type': "radio", 'label': "Size", 'required': True, 'options': ["S", "M"]}

        component = FormComponent.from_dict(data)

        assert component.kind == FieldKind.RADIO
        assert component.options == ["S", "M"]
        assert component.value is None
        assert component.required is True

    def test_from_dict_defaults_required(self):
        component = FormComponent.from_dict({'id': "text-1-1", 'type': "text", 'label': "Name"})

        assert component.required is False

    def test_from_dict_unknown_type(self):
        with pytest.raises(UnknownFieldKindError):
            FormComponent.from_dict({'id': "x-1-1", 'type': "slider", 'label': "Volume"})

    def test_from_dict_missing_label(self):
        with pytest.raises(KeyError):
            FormComponent.from_dict({'id': "text-1-1", 'type': "text"})

    def test_list_helpers_keep_order(self):
        components = [
            FormComponent(id="text-1-1", kind=FieldKind.TEXT, label="First"),
            FormComponent(id="textarea-1-2", kind=FieldKind.TEXTAREA, label="Second"),
        ]

        rebuilt = components_from_dicts(components_to_dicts(components))

        assert [c.id for c in rebuilt] == ["text-1-1", "textarea-1-2"]
        assert rebuilt == components

    def test_copy_is_independent(self):
        component = FormComponent(id="select-1-1", kind=FieldKind.SELECT, label="Color", options=["Red"])

        clone = component.copy()
        clone.options.append("Green")
        clone.label = "Colour"

        assert component.options == ["Red"]
        assert component.label == "Color"
