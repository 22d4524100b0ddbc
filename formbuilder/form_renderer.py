"""
Streamlit renderer for the form builder.
Draws the component palette, the label editor and one widget per component,
and reports widget changes back to the FormBuilder.
"""

import streamlit as st
from typing import Dict, Any, List, Optional, Callable
import logging

from .component_model import FormComponent
from .field_registry import FieldKind, palette, validate_value, check_kind_coverage
from .form_builder import FormBuilder, BuilderMode
from .ui_feedback import Notify, show_field_error, COMPONENT_ADDED_MESSAGE

logger = logging.getLogger(__name__)

TEXT_PLACEHOLDER = "Enter text..."
SELECT_PLACEHOLDER = "Select an option"
EMPTY_CANVAS_MESSAGE = "Add components from the palette to build your form"
UNTITLED_LABEL = "Untitled field"


def _display_label(component: FormComponent) -> str:
    label = component.label or UNTITLED_LABEL
    return f"{label} *" if component.required else label


def _option_index(component: FormComponent) -> Optional[int]:
    options = component.options or []
    if isinstance(component.value, str) and component.value in options:
        return options.index(component.value)
    return None


def _render_text_input(component: FormComponent, key: str, disabled: bool) -> Any:
    return st.text_input(
        _display_label(component),
        value=component.value if isinstance(component.value, str) else "",
        placeholder=TEXT_PLACEHOLDER,
        key=key,
        disabled=disabled
    )


def _render_text_area(component: FormComponent, key: str, disabled: bool) -> Any:
    return st.text_area(
        _display_label(component),
        value=component.value if isinstance(component.value, str) else "",
        placeholder=TEXT_PLACEHOLDER,
        key=key,
        disabled=disabled
    )


def _render_selectbox(component: FormComponent, key: str, disabled: bool) -> Any:
    return st.selectbox(
        _display_label(component),
        options=component.options or [],
        index=_option_index(component),
        placeholder=SELECT_PLACEHOLDER,
        key=key,
        disabled=disabled
    )


def _render_radio(component: FormComponent, key: str, disabled: bool) -> Any:
    return st.radio(
        _display_label(component),
        options=component.options or [],
        index=_option_index(component),
        key=key,
        disabled=disabled
    )


def _render_checkbox(component: FormComponent, key: str, disabled: bool) -> Any:
    return st.checkbox(
        _display_label(component),
        value=component.value is True,
        key=key,
        disabled=disabled
    )


_FIELD_RENDERERS: Dict[FieldKind, Callable[[FormComponent, str, bool], Any]] = {
    FieldKind.TEXT: _render_text_input,
    FieldKind.SELECT: _render_selectbox,
    FieldKind.RADIO: _render_radio,
    FieldKind.CHECKBOX: _render_checkbox,
    FieldKind.TEXTAREA: _render_text_area,
}

check_kind_coverage(_FIELD_RENDERERS, "_FIELD_RENDERERS")


def widget_value(component: FormComponent) -> Any:
    """What the component's widget shows before the user touches it."""
    if component.kind == FieldKind.CHECKBOX:
        return component.value is True
    if component.kind in (FieldKind.TEXT, FieldKind.TEXTAREA):
        return component.value if isinstance(component.value, str) else ""
    return component.value


def normalize_widget_value(component: FormComponent, raw_value: Any) -> Any:
    """Map a widget's return value to the value stored on the component.

    A cleared text box stores no value rather than an empty string.
    """
    if component.kind in (FieldKind.TEXT, FieldKind.TEXTAREA) and raw_value == "":
        return None
    return raw_value


class FormRenderer:
    """Renders the builder canvas and palette with Streamlit widgets."""

    @staticmethod
    def render_palette(builder: FormBuilder) -> Optional[FormComponent]:
        """
        Render one button per field kind; a click appends a component.

        Returns:
            The component added on this run, if any
        """
        st.subheader("Components")
        added = None

        for kind, label in palette():
            if st.button(label, key=f"palette_{kind.value}", width="stretch"):
                added = builder.add_component(kind, label)
                Notify.queue(COMPONENT_ADDED_MESSAGE, 'success')

        return added

    @staticmethod
    def render_canvas(builder: FormBuilder) -> None:
        """Render every component in insertion order."""
        preview = builder.mode == BuilderMode.PREVIEW
        st.subheader("Form Preview" if preview else "Build Your Form")

        for component in builder.components:
            with st.container(border=True):
                FormRenderer.render_component(builder, component)

        if not builder.components and not preview:
            st.caption(EMPTY_CANVAS_MESSAGE)

    @staticmethod
    def render_component(builder: FormBuilder, component: FormComponent) -> None:
        """Render one component with the controls for the current mode."""
        if builder.mode == BuilderMode.PREVIEW:
            FormRenderer.render_field(builder, component, preview=True)
            return

        if builder.editing_id == component.id:
            FormRenderer.render_label_editor(builder, component)
            return

        col_field, col_actions = st.columns([4, 1])

        with col_field:
            FormRenderer.render_field(builder, component, preview=False)

        with col_actions:
            if st.button("Edit Label", key=f"edit_label_{component.id}"):
                builder.begin_label_edit(component.id)
                st.rerun()

            required = st.toggle("Required", value=component.required, key=f"required_{component.id}")
            if required != component.required:
                builder.set_required(component.id, required)

    @staticmethod
    def render_label_editor(builder: FormBuilder, component: FormComponent) -> None:
        """Inline label editor; Enter or Save commits, Cancel discards."""
        with st.form(key=f"label_form_{component.id}"):
            new_label = st.text_input("Label", value=component.label, key=f"label_input_{component.id}")

            col_save, col_cancel = st.columns(2)
            with col_save:
                saved = st.form_submit_button("Save", type="primary")
            with col_cancel:
                cancelled = st.form_submit_button("Cancel")

        if saved:
            builder.commit_label_edit(component.id, new_label)
            st.rerun()
        elif cancelled:
            builder.cancel_label_edit()
            st.rerun()

    @staticmethod
    def render_field(builder: FormBuilder, component: FormComponent, preview: bool) -> Any:
        """
        Render the input widget for a component.

        In preview mode a changed widget value is recorded on the builder and
        checked against the kind's value rule for live feedback; the last
        submit's error for the component is shown underneath.

        Args:
            builder: Session builder
            component: Component to render
            preview: Whether the widget is interactive

        Returns:
            The widget's raw return value
        """
        key = f"value_{component.id}" if preview else f"design_{component.id}"
        raw_value = _FIELD_RENDERERS[component.kind](component, key, not preview)

        if not preview:
            return raw_value

        touched_key = f"touched_{component.id}"
        if raw_value != widget_value(component):
            builder.record_value(component.id, normalize_widget_value(component, raw_value))
            st.session_state[touched_key] = True

        live_error = None
        if st.session_state.get(touched_key):
            check = validate_value(component, component.value)
            live_error = check.reason if not check.valid else None
        show_field_error(live_error)

        submit_error = builder.errors.get(component.id)
        if submit_error != live_error:
            show_field_error(submit_error)
        return raw_value

    @staticmethod
    def render_submit(builder: FormBuilder) -> Optional[Any]:
        """Render the submit button in preview mode; returns the result when clicked."""
        if builder.mode != BuilderMode.PREVIEW or not builder.components:
            return None
        if st.button("Submit Form", type="primary", key="submit_form"):
            return builder.submit()
        return None

    @staticmethod
    def component_summaries(builder: FormBuilder) -> List[Dict[str, Any]]:
        """Rows for the sidebar overview table."""
        return [
            {
                'label': component.label,
                'type': component.kind.value,
                'required': component.required,
                'has_value': component.value is not None
            }
            for component in builder.components
        ]
