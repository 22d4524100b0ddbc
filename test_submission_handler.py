"""
Unit tests for submission_handler module.
"""

from datetime import datetime
from unittest.mock import patch
import pytest

from formbuilder.component_model import FormComponent
from formbuilder.exceptions import RequiredFieldMissing, SchemaInvalid, REQUIRED_FIELD_MESSAGE, SCHEMA_INVALID_MESSAGE
from formbuilder.field_registry import FieldKind
from formbuilder.schema_exporter import parse_timestamp
from formbuilder.submission_handler import (
    SubmissionHandler,
    SubmissionResult,
    STAGE_PRESENCE,
    STAGE_STRUCTURE,
    STAGE_SUCCESS,
    PRESENCE_FAILED_MESSAGE,
    SUBMIT_SUCCESS_MESSAGE,
    is_missing,
)


def text_component(component_id="text-1-1", label="Name", required=False, value=None):
    return FormComponent(id=component_id, kind=FieldKind.TEXT, label=label, required=required, value=value)


class TestPresenceValidation:
    """Test the presence check."""

    @pytest.mark.parametrize("value", [None, "", False, []])
    def test_falsy_values_are_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", ["x", True, ["a"], "Option 1"])
    def test_truthy_values_are_present(self, value):
        assert not is_missing(value)

    def test_only_required_components_checked(self):
        components = [
            text_component("text-1-1", "Optional"),
            text_component("text-1-2", "Required", required=True),
        ]

        errors = SubmissionHandler.validate_presence(components, {})

        assert list(errors) == ["text-1-2"]
        assert isinstance(errors["text-1-2"], RequiredFieldMissing)
        assert errors["text-1-2"].message == REQUIRED_FIELD_MESSAGE
        assert errors["text-1-2"].label == "Required"

    def test_errors_keep_component_order(self):
        components = [text_component(f"text-1-{i}", f"Field {i}", required=True) for i in range(3, 0, -1)]

        errors = SubmissionHandler.validate_presence(components, {})

        assert list(errors) == ["text-1-3", "text-1-2", "text-1-1"]

    def test_option_membership_not_checked(self):
        """Presence only: an out-of-range choice still counts as present."""
        component = FormComponent(
            id="select-1-1", kind=FieldKind.SELECT, label="Color", required=True, options=["Red"]
        )

        assert SubmissionHandler.validate_presence([component], {"select-1-1": "Purple"}) == {}


class TestSubmit:
    """Test the two-phase submit workflow."""

    def test_success_returns_snapshot(self):
        components = [text_component(required=True, value="Ada")]

        result = SubmissionHandler.submit(components, {"text-1-1": "Ada"})

        assert result.overall_valid
        assert result.stage == STAGE_SUCCESS
        assert result.message == SUBMIT_SUCCESS_MESSAGE
        assert result.errors_by_id == {}
        assert result.snapshot['components'][0]['value'] == "Ada"
        assert isinstance(parse_timestamp(result.snapshot['created_at']), datetime)

    def test_presence_failure(self):
        result = SubmissionHandler.submit([text_component(required=True)], {})

        assert not result.overall_valid
        assert result.stage == STAGE_PRESENCE
        assert result.message == PRESENCE_FAILED_MESSAGE
        assert result.errors_by_id == {"text-1-1": REQUIRED_FIELD_MESSAGE}
        assert result.snapshot is None

    def test_presence_checked_before_structure(self):
        """A missing required field is reported and structure is never checked."""
        components = [
            text_component("text-1-1", "A", required=True),
            text_component("text-1-2", ""),
        ]

        with patch.object(SubmissionHandler, 'validate_structure') as mock_structure:
            result = SubmissionHandler.submit(components, {})

        mock_structure.assert_not_called()
        assert result.stage == STAGE_PRESENCE
        assert list(result.errors_by_id) == ["text-1-1"]
        assert result.schema_error is None

    def test_structural_failure_is_generic(self):
        components = [text_component("text-1-1", "")]

        result = SubmissionHandler.submit(components, {})

        assert result.stage == STAGE_STRUCTURE
        assert result.message == SCHEMA_INVALID_MESSAGE
        assert result.errors_by_id == {}
        assert isinstance(result.schema_error, SchemaInvalid)
        assert result.schema_error.errors

    def test_structural_failure_logs_details(self, caplog):
        with caplog.at_level("ERROR"):
            SubmissionHandler.submit([text_component("text-1-1", "")], {})

        assert "Structural validation error" in caplog.text

    def test_validate_structure_raises(self):
        with pytest.raises(SchemaInvalid):
            SubmissionHandler.validate_structure([text_component("text-1-1", "")])

    def test_empty_form_submits(self):
        result = SubmissionHandler.submit([], {})

        assert result.overall_valid
        assert result.snapshot['components'] == []


class TestScenarios:
    """End-to-end submit scenarios over plain component lists."""

    def test_optional_select_then_required(self):
        component = FormComponent(
            id="select-1-1", kind=FieldKind.SELECT, label="Color",
            options=["Option 1", "Option 2", "Option 3"]
        )

        assert SubmissionHandler.submit([component], {}).overall_valid

        component.required = True
        result = SubmissionHandler.submit([component], {})

        assert not result.overall_valid
        assert list(result.errors_by_id) == ["select-1-1"]

    def test_required_checkbox_false_is_missing(self):
        component = FormComponent(id="checkbox-1-1", kind=FieldKind.CHECKBOX, label="Agree", required=True)

        result = SubmissionHandler.submit([component], {"checkbox-1-1": False})

        assert not result.overall_valid
        assert "checkbox-1-1" in result.errors_by_id


class TestSubmissionResult:
    """Test result helpers."""

    def test_errors_by_id_maps_messages(self):
        result = SubmissionResult(
            stage=STAGE_PRESENCE,
            message=PRESENCE_FAILED_MESSAGE,
            field_errors={"a": RequiredFieldMissing("a", "A")}
        )

        assert result.errors_by_id == {"a": REQUIRED_FIELD_MESSAGE}
        assert not result.overall_valid
