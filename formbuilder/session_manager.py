"""
Session state management for the Streamlit form builder.
Binds one FormBuilder to each browser session and handles session reset.
"""

import streamlit as st
from typing import Dict, Any, Optional
from datetime import datetime
import logging

from .form_builder import FormBuilder

logger = logging.getLogger(__name__)

BUILDER_KEY = 'form_builder'
EXPORT_DIALOG_KEY = 'export_dialog_open'
LAST_SUBMISSION_KEY = 'last_submission'


class SessionManager:
    """Manages Streamlit session state for the form builder."""

    @staticmethod
    def initialize() -> None:
        """Initialize all session state variables with default values.

        Safe to call on every rerun; existing keys are not overwritten.
        """
        defaults = {
            'session_id': None,
            'last_activity': datetime.now(),
            EXPORT_DIALOG_KEY: False,
            LAST_SUBMISSION_KEY: None,
            'pending_notifications': [],
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if st.session_state.get(BUILDER_KEY) is None:
            st.session_state[BUILDER_KEY] = FormBuilder()

        if not st.session_state.get('session_id'):
            st.session_state['session_id'] = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state['session_id']}")

    @staticmethod
    def get_builder() -> FormBuilder:
        """Get this session's builder, creating it if needed."""
        builder = st.session_state.get(BUILDER_KEY)
        if builder is None:
            builder = FormBuilder()
            st.session_state[BUILDER_KEY] = builder
        return builder

    @staticmethod
    def is_export_dialog_open() -> bool:
        return bool(st.session_state.get(EXPORT_DIALOG_KEY, False))

    @staticmethod
    def set_export_dialog_open(is_open: bool) -> None:
        st.session_state[EXPORT_DIALOG_KEY] = bool(is_open)

    @staticmethod
    def get_last_submission() -> Optional[Any]:
        """The most recent submit result, kept across the rerun that follows a submit."""
        return st.session_state.get(LAST_SUBMISSION_KEY)

    @staticmethod
    def set_last_submission(result: Any) -> None:
        st.session_state[LAST_SUBMISSION_KEY] = result

    @staticmethod
    def clear_last_submission() -> None:
        st.session_state[LAST_SUBMISSION_KEY] = None

    @staticmethod
    def update_activity() -> None:
        """Update last activity timestamp."""
        st.session_state['last_activity'] = datetime.now()

    @staticmethod
    def clear_widget_state(prefixes: tuple = ('value_', 'design_', 'touched_', 'label_input_', 'required_')) -> int:
        """Drop widget keys for component fields. Returns how many were removed."""
        stale = [key for key in list(st.session_state.keys()) if str(key).startswith(prefixes)]
        for key in stale:
            del st.session_state[key]
        return len(stale)

    @staticmethod
    def reset_session() -> None:
        """Discard the current form and start a fresh builder."""
        SessionManager.clear_widget_state()
        st.session_state[BUILDER_KEY] = FormBuilder()
        st.session_state[EXPORT_DIALOG_KEY] = False
        st.session_state[LAST_SUBMISSION_KEY] = None
        logger.info("Session reset: new form builder created")

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        builder = SessionManager.get_builder()
        last_activity: Optional[datetime] = st.session_state.get('last_activity')
        return {
            'session_id': st.session_state.get('session_id'),
            'mode': builder.mode.value,
            'component_count': len(builder.components),
            'editing_id': builder.editing_id,
            'error_count': len(builder.errors),
            'last_activity': last_activity.isoformat() if last_activity else None
        }
