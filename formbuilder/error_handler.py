"""
Error handling utilities for the form schema builder.
Logs failures, shows user-friendly messages and offers recovery actions.
"""

import streamlit as st
import logging
import traceback
from typing import Dict, Any, Optional, Callable, List
from datetime import datetime
from pathlib import Path
import json

from .exceptions import FormBuilderError, SchemaInvalid, UnknownFieldKindError
from .form_builder import BuilderMode
from .session_manager import SessionManager

logger = logging.getLogger(__name__)

ANALYTICS_LOG = Path("logs/error_analytics.jsonl")


class ErrorType:
    """Categories used to pick a user-facing message."""
    SCHEMA = "schema"
    EXPORT = "export"
    SYSTEM = "system"


# Checked in order; the first matching exception class wins.
_MESSAGES: Dict[str, Dict[Any, str]] = {
    ErrorType.SCHEMA: {
        SchemaInvalid: "📋 Form validation failed. Check labels and values, then submit again.",
        UnknownFieldKindError: "📋 The form contains an unsupported field type.",
        KeyError: "📋 A component is missing a required attribute.",
        "default": "📋 The form schema could not be processed."
    },
    ErrorType.EXPORT: {
        PermissionError: "💾 Permission denied while writing the export file.",
        OSError: "💾 The export file could not be written. Please try again.",
        TypeError: "💾 The form contains a value that cannot be exported.",
        "default": "💾 Export failed. Please try again."
    },
    ErrorType.SYSTEM: {
        MemoryError: "💻 The app ran out of memory. Start a new form and try again.",
        ImportError: "💻 A required package is not installed.",
        "default": "💻 Something went wrong. Restart the session if the problem persists."
    }
}


class ErrorHandler:
    """Error handling for the form builder UI."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False
    ) -> None:
        """
        Log an error, show it to the user and record it in the analytics log.

        Args:
            error: Exception raised by the failed operation
            context: Short description of the failed operation
            error_type: One of the ErrorType categories
            user_message: Message to show instead of the category default
            recovery_options: Actions offered below the message
            show_details: Add an expander with the traceback
        """
        logger.error(f"Error during {context}: {error}", exc_info=True)

        message = user_message or ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(message, error, context, recovery_options, show_details)
        ErrorHandler._log_error_analytics(error, context, error_type)

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        messages = _MESSAGES.get(error_type, _MESSAGES[ErrorType.SYSTEM])

        for exception_class, message in messages.items():
            if exception_class != "default" and isinstance(error, exception_class):
                return message

        return messages["default"]

    @staticmethod
    def _display_error(
        message: str,
        error: Exception,
        context: str,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False
    ) -> None:
        """Show the message, one button per recovery option and optional details."""
        st.error(message)

        if recovery_options:
            st.subheader("🔧 What you can do")

            for index, option in enumerate(recovery_options):
                col_text, col_button = st.columns([3, 1])

                with col_text:
                    st.write(f"**{option['title']}**")
                    st.write(option['description'])

                with col_button:
                    clicked = st.button(option['button_text'], key=f"recovery_{index}")

                action = option.get('action')
                if clicked and callable(action):
                    try:
                        action()
                    except Exception as e:
                        logger.error(f"Recovery action '{option['title']}' failed: {e}", exc_info=True)
                        st.error(f"Recovery action failed: {e}")

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Operation:** {context}")
                st.write(f"**Exception:** {type(error).__name__}: {error}")
                if isinstance(error, FormBuilderError) and error.context:
                    st.json(error.context)
                st.code(traceback.format_exc())

    @staticmethod
    def _log_error_analytics(error: Exception, context: str, error_type: str) -> None:
        """Append a JSON line describing the error to the analytics log."""
        record = {
            'timestamp': datetime.now().isoformat(),
            'error_type': error_type,
            'exception_type': type(error).__name__,
            'context': context,
            'message': str(error)
        }

        try:
            ANALYTICS_LOG.parent.mkdir(parents=True, exist_ok=True)
            with open(ANALYTICS_LOG, 'a', encoding='utf-8') as f:
                f.write(json.dumps(record) + '\n')
        except OSError as e:
            logger.error(f"Failed to log error analytics: {e}")

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False,
        default_return: Any = None
    ) -> Any:
        """
        Run ``func`` and route any exception it raises through handle_error.

        Returns:
            The result of ``func``, or ``default_return`` if it raised
        """
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(e, context, error_type, user_message, recovery_options, show_details)
            return default_return

    @staticmethod
    def create_recovery_options(context: str) -> List[Dict[str, Any]]:
        """Recovery actions that make sense for the failed operation."""
        options: List[Dict[str, Any]] = []
        lowered = context.lower()

        if "preview" in lowered or "submit" in lowered:
            options.append({
                'title': 'Back to Edit Mode',
                'description': 'Return to the builder to fix labels or fields',
                'button_text': '✏️ Edit Mode',
                'action': ErrorHandler._back_to_edit_mode
            })

        options.append({
            'title': 'Restart Session',
            'description': 'Discard the current form and start fresh',
            'button_text': '🔄 New Form',
            'action': ErrorHandler._restart_session
        })

        return options

    @staticmethod
    def _back_to_edit_mode() -> None:
        SessionManager.get_builder().set_mode(BuilderMode.EDIT)
        st.rerun()

    @staticmethod
    def _restart_session() -> None:
        SessionManager.reset_session()
        st.success("🔄 Started a new form")
        st.rerun()
