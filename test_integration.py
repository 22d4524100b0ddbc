"""
Integration tests for the form builder workflow.

These tests drive the builder the way the Streamlit app does: place
components, edit labels, switch to preview, fill values, submit and export.
"""

import json
import pytest

from formbuilder.exceptions import REQUIRED_FIELD_MESSAGE, SCHEMA_INVALID_MESSAGE
from formbuilder.field_registry import FieldKind
from formbuilder.form_builder import BuilderMode
from formbuilder.schema_exporter import EXPORT_FILENAME, document_to_bytes, load_document, save_document
from formbuilder.session_manager import SessionManager
from formbuilder.submission_handler import STAGE_PRESENCE, STAGE_STRUCTURE, PRESENCE_FAILED_MESSAGE
from formbuilder.ui_feedback import Notify, notify_submission
from test_fixtures import BuilderFixtures, mock_streamlit_environment  # noqa: F401


class TestBuildSubmitExport:
    """Full build, submit and export cycle."""

    def test_complete_workflow(self, tmp_path):
        builder = BuilderFixtures.contact_form()
        name, color, agree = builder.components

        builder.begin_label_edit(name.id)
        builder.commit_label_edit(name.id, "Full name")
        builder.set_mode(BuilderMode.PREVIEW)

        first = builder.submit()
        assert first.stage == STAGE_PRESENCE
        assert first.message == PRESENCE_FAILED_MESSAGE
        assert builder.errors == {name.id: REQUIRED_FIELD_MESSAGE, agree.id: REQUIRED_FIELD_MESSAGE}

        for component_id, value in BuilderFixtures.filled_values(builder).items():
            builder.record_value(component_id, value)

        second = builder.submit()
        assert second.overall_valid
        assert builder.errors == {}
        assert [c['label'] for c in second.snapshot['components']] == ["Full name", "Color", "Agree"]

        document = builder.export()
        path = save_document(document, tmp_path)
        assert path.name == EXPORT_FILENAME

        restored = load_document(path)
        assert restored['components'] == builder.components
        assert json.loads(document_to_bytes(document).decode('utf-8')) == document

    def test_structural_failure_after_presence_passes(self):
        builder = BuilderFixtures.contact_form()
        name = builder.components[0]
        builder.commit_label_edit(name.id, "")

        result = builder.submit(BuilderFixtures.filled_values(builder))

        assert result.stage == STAGE_STRUCTURE
        assert result.message == SCHEMA_INVALID_MESSAGE
        assert builder.errors == {}

    def test_presence_errors_win_over_structure(self):
        builder = BuilderFixtures.contact_form()
        name = builder.components[0]
        builder.commit_label_edit(name.id, "")

        result = builder.submit({})

        assert result.stage == STAGE_PRESENCE
        assert name.id in result.errors_by_id

    def test_mode_round_trip_keeps_values(self):
        builder = BuilderFixtures.contact_form()
        values = BuilderFixtures.filled_values(builder)
        builder.set_mode(BuilderMode.PREVIEW)
        for component_id, value in values.items():
            builder.record_value(component_id, value)

        builder.toggle_mode()
        builder.toggle_mode()

        assert builder.value_map() == values

    def test_export_change_tracking(self):
        builder = BuilderFixtures.contact_form()
        builder.export()
        assert not builder.has_unexported_changes()

        builder.add_component(FieldKind.TEXTAREA, "Comments")

        assert builder.has_unexported_changes()
        assert builder.unexported_changes()['iterable_item_added']


class TestSessionWorkflow:
    """Workflow through the session layer."""

    def test_notifications_survive_rerun(self, mock_streamlit_environment):
        SessionManager.initialize()
        builder = SessionManager.get_builder()
        builder.add_component(FieldKind.CHECKBOX, "Agree", required=True)
        builder.set_mode(BuilderMode.PREVIEW)

        notify_submission(builder.submit(), deferred=True)
        mock_streamlit_environment['toast'].assert_not_called()

        # Next script run
        SessionManager.initialize()
        assert Notify.flush() == 1

        mock_streamlit_environment['toast'].assert_called_once_with(PRESENCE_FAILED_MESSAGE, icon='❌')
        assert SessionManager.get_builder() is builder

    @pytest.mark.parametrize("kind", list(FieldKind))
    def test_every_kind_exports(self, kind, mock_streamlit_environment):
        SessionManager.initialize()
        builder = SessionManager.get_builder()
        builder.add_component(kind)

        document = builder.export()

        assert document['components'][0]['type'] == kind.value
