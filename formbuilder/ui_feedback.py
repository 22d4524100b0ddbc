"""
UI feedback utilities for the form schema builder.
Toast notifications, a pending-notification queue that survives st.rerun(),
and the mapping from core result values to user-facing messages.
"""

import streamlit as st
from typing import List, Dict, Optional
import logging

from .submission_handler import SubmissionResult, STAGE_SUCCESS

# Configure logging
logger = logging.getLogger(__name__)

PENDING_KEY = 'pending_notifications'
COMPONENT_ADDED_MESSAGE = "Component added to form"
EXPORT_SUCCESS_MESSAGE = "Form schema exported successfully"

_ICONS = {
    'success': '✅',
    'info': 'ℹ️',
    'warning': '⚠️',
    'error': '❌'
}


class Notify:
    """
    Toast-first notification helper.

    The API includes: success, info, warn, error, queue and flush.

    Usage:
    Notify.success("Operation successful!")
    Notify.queue("Component added to form", "success")  # shown after the next rerun
    """

    @staticmethod
    def _display_notification(message: str, notification_type: str = 'info') -> None:
        """Internal method to display notification based on type."""
        icon = _ICONS.get(notification_type, _ICONS['info'])

        try:
            st.toast(message, icon=icon)
        except Exception as e:
            logger.error(f"Error using st.toast: {e}", exc_info=True)
            full_message = f"{icon} {message}"
            if notification_type == 'success':
                st.success(full_message)
            elif notification_type == 'warning':
                st.warning(full_message)
            elif notification_type == 'error':
                st.error(full_message)
            else:
                st.info(full_message)

    @staticmethod
    def success(message: str) -> None:
        """Show success notification."""
        Notify._display_notification(message, 'success')

    @staticmethod
    def info(message: str) -> None:
        """Show info notification."""
        Notify._display_notification(message, 'info')

    @staticmethod
    def warn(message: str) -> None:
        """Show warning notification."""
        Notify._display_notification(message, 'warning')

    @staticmethod
    def error(message: str) -> None:
        """Show error notification."""
        Notify._display_notification(message, 'error')

    @staticmethod
    def queue(message: str, notification_type: str = 'info') -> None:
        """Hold a notification until the next flush (after st.rerun())."""
        pending: List[Dict[str, str]] = list(st.session_state.get(PENDING_KEY) or [])
        pending.append({'message': message, 'type': notification_type})
        st.session_state[PENDING_KEY] = pending

    @staticmethod
    def flush() -> int:
        """Display and clear queued notifications. Returns how many were shown."""
        pending = list(st.session_state.get(PENDING_KEY) or [])
        st.session_state[PENDING_KEY] = []
        for item in pending:
            Notify._display_notification(item['message'], item.get('type', 'info'))
        return len(pending)


def submission_notification(result: SubmissionResult) -> Dict[str, str]:
    """
    Choose the message and severity for a submit outcome.

    Args:
        result: Outcome returned by the submission handler

    Returns:
        Dictionary with ``message`` and ``type``
    """
    if result.stage == STAGE_SUCCESS:
        return {'message': result.message, 'type': 'success'}
    # Structural failures carry only the generic message.
    return {'message': result.message, 'type': 'error'}


def notify_submission(result: SubmissionResult, deferred: bool = False) -> None:
    """Show (or queue) the notification for a submit outcome."""
    note = submission_notification(result)
    if deferred:
        Notify.queue(note['message'], note['type'])
    else:
        Notify._display_notification(note['message'], note['type'])


def show_field_error(message: Optional[str]) -> None:
    """Render a per-field error message under a widget."""
    if message:
        st.caption(f":red[{message}]")
