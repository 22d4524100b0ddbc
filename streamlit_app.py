"""
Main Streamlit application for the form schema builder.
Add typed field components, edit their labels, preview and submit the form,
and export the schema as JSON.
"""

import streamlit as st
import logging

from formbuilder.config_loader import get_config, get_config_value, get_config_summary, configure_logging, validate_config
from formbuilder.diff_utils import format_diff_for_display, get_change_summary
from formbuilder.error_handler import ErrorHandler, ErrorType
from formbuilder.form_builder import FormBuilder, BuilderMode
from formbuilder.form_renderer import FormRenderer
from formbuilder.schema_exporter import EXPORT_FILENAME, EXPORT_MIME_TYPE, document_to_bytes, save_document
from formbuilder.session_manager import SessionManager
from formbuilder.ui_feedback import Notify, notify_submission, EXPORT_SUCCESS_MESSAGE

# Configure logging dynamically from config
try:
    configure_logging()
    logger = logging.getLogger(__name__)
except Exception as e:
    # Fallback to INFO if config reading fails
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

config = get_config()
if not validate_config(config):
    logger.warning("Configuration has invalid values; defaults apply where needed")

page_title = get_config_value('ui', 'page_title', 'Form Builder')
logger.info(f"Starting app version: {get_config_value('app', 'version', 'Unknown')}")

# Page configuration
st.set_page_config(
    page_title=page_title,
    page_icon=get_config_value('ui', 'page_icon', '🧩'),
    layout=get_config_value('ui', 'layout', 'wide'),
    initial_sidebar_state="expanded"
)


def main():
    """Main application entry point."""
    try:
        SessionManager.initialize()
        Notify.flush()

        builder = SessionManager.get_builder()
        render_header(builder)
        render_sidebar(builder)
        render_main_content(builder)

        if SessionManager.is_export_dialog_open():
            export_dialog(builder)

    except Exception as e:
        ErrorHandler.handle_error(
            e,
            "application run",
            ErrorType.SYSTEM,
            recovery_options=ErrorHandler.create_recovery_options("system")
        )


def render_header(builder: FormBuilder):
    """Render title and the mode / export controls."""
    col_title, col_mode, col_export = st.columns([4, 1, 1])

    with col_title:
        st.title(page_title)

    with col_mode:
        preview = builder.mode == BuilderMode.PREVIEW
        if st.button("Edit Mode" if preview else "Preview Mode", key="toggle_mode",
                     type="secondary" if preview else "primary", width="stretch"):
            builder.toggle_mode()
            SessionManager.clear_last_submission()
            SessionManager.update_activity()
            st.rerun()

    with col_export:
        if st.button("Export Schema", key="open_export", width="stretch"):
            SessionManager.set_export_dialog_open(True)
            st.rerun()


def render_sidebar(builder: FormBuilder):
    """Render the component palette and a summary of the form."""
    with st.sidebar:
        if builder.mode == BuilderMode.EDIT:
            if FormRenderer.render_palette(builder) is not None:
                SessionManager.update_activity()
                st.rerun()
            st.divider()

        st.header("Form Summary")
        rows = FormRenderer.component_summaries(builder)
        if rows:
            st.dataframe(rows, hide_index=True, width="stretch")
        else:
            st.caption("No components yet")

        if builder.has_unexported_changes():
            changes = builder.unexported_changes()
            st.caption(f"⚠️ {get_change_summary(changes)['total']} change(s) since last export")
            if builder.state.last_export is not None:
                for line in format_diff_for_display(changes)[:5]:
                    st.caption(line)

        st.divider()
        if st.button("🔄 New Form", help="Discard the current form and start over"):
            SessionManager.reset_session()
            st.rerun()

        if get_config_value('app', 'debug', False):
            with st.expander("Debug"):
                st.json(get_config_summary(config))
                st.json(SessionManager.get_session_info())


def render_main_content(builder: FormBuilder):
    """Render the canvas and, in preview mode, the submit control and last outcome."""
    FormRenderer.render_canvas(builder)

    result = ErrorHandler.with_error_handling(
        lambda: FormRenderer.render_submit(builder),
        "form submit",
        ErrorType.SCHEMA,
        recovery_options=ErrorHandler.create_recovery_options("form submit")
    )
    if result is not None:
        handle_submission(result)

    if builder.mode == BuilderMode.PREVIEW:
        render_last_submission(SessionManager.get_last_submission())


def handle_submission(result):
    """Single place where submit outcomes turn into user notifications.

    The result is kept in session state and the script reruns, so every field
    on the canvas renders against the errors of this submit.
    """
    SessionManager.set_last_submission(result)
    notify_submission(result, deferred=True)
    st.rerun()


def render_last_submission(result):
    if result is None:
        return

    if result.overall_valid:
        with st.expander("Submitted data", expanded=False):
            st.json(result.snapshot)
    elif result.errors_by_id:
        st.error(f"{len(result.errors_by_id)} required field(s) missing")


@st.dialog("Export Form Schema", on_dismiss=lambda: SessionManager.set_export_dialog_open(False))
def export_dialog(builder: FormBuilder):
    """Confirm and download the exported schema."""
    filename = get_config_value('export', 'filename', EXPORT_FILENAME)
    indent = get_config_value('export', 'indent', 2)
    document = builder.export(remember=False)

    st.write(f"The form schema will be exported to: {filename}")
    with st.expander(f"Schema ({len(document['components'])} components)", expanded=False):
        st.json(document)

    col_cancel, col_export = st.columns(2)

    with col_cancel:
        if st.button("Cancel", key="cancel_export", width="stretch"):
            close_export_dialog()

    with col_export:
        downloaded = st.download_button(
            "Export",
            data=document_to_bytes(document, indent),
            file_name=filename,
            mime=EXPORT_MIME_TYPE,
            type="primary",
            width="stretch"
        )

    if downloaded:
        ErrorHandler.with_error_handling(
            lambda: finish_export(builder, document, filename, indent),
            "schema export",
            ErrorType.EXPORT
        )


def finish_export(builder: FormBuilder, document, filename: str, indent: int):
    """Record a completed download and optionally keep a copy on disk."""
    builder.mark_exported(document)

    if get_config_value('export', 'save_copy', False):
        directory = get_config_value('export', 'directory', 'exports')
        if save_document(document, directory, filename, indent) is None:
            Notify.queue("Exported schema could not be saved to disk", 'warning')

    Notify.queue(EXPORT_SUCCESS_MESSAGE, 'success')
    close_export_dialog()


def close_export_dialog():
    SessionManager.set_export_dialog_open(False)
    st.rerun()


if __name__ == "__main__":
    main()
