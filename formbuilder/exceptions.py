"""
Custom exception classes for the form schema builder.

This module provides the error kinds produced by validation and configuration
loading, each carrying context and recovery suggestions for the UI.
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)

REQUIRED_FIELD_MESSAGE = "This field is required"
SCHEMA_INVALID_MESSAGE = "Form validation failed"


class FormBuilderError(Exception):
    """
    Base exception for form builder errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class RequiredFieldMissing(FormBuilderError):
    """
    Raised (or collected) when a required component has no usable value.

    Produced per field by presence validation at submit time.
    """

    def __init__(self, component_id: str, label: Optional[str] = None):
        self.component_id = component_id
        self.label = label

        context = {
            'component_id': component_id,
            'label': label
        }

        recovery_suggestions = [
            f"Provide a value for '{label or component_id}'",
            "Resubmit the form once all required fields are filled"
        ]

        super().__init__(REQUIRED_FIELD_MESSAGE, context, recovery_suggestions)


class SchemaInvalid(FormBuilderError):
    """
    Raised when the component list fails structural validation.

    Only the occurrence reaches the user; the individual errors are kept on
    the exception for logging.
    """

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)

        if message is None:
            message = SCHEMA_INVALID_MESSAGE

        context = {
            'error_count': len(self.errors),
            'errors': self.errors
        }

        recovery_suggestions = [
            "Give every component a non-empty label",
            "Clear or re-enter values that were left empty",
            "Check that select and radio components still have options"
        ]

        super().__init__(message, context, recovery_suggestions)


class UnknownFieldKindError(FormBuilderError, ValueError):
    """Raised when a string does not name a supported field kind."""

    def __init__(self, raw_kind: Any, supported: Optional[List[str]] = None):
        self.raw_kind = raw_kind
        self.supported = supported or []

        message = f"Unknown field kind: {raw_kind!r}"
        context = {
            'raw_kind': repr(raw_kind),
            'supported_kinds': self.supported
        }
        recovery_suggestions = [
            f"Use one of: {', '.join(self.supported)}" if self.supported else "Use a supported field kind"
        ]

        super().__init__(message, context, recovery_suggestions)


class ConfigurationLoadError(FormBuilderError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, file not found, permission issues, etc.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


def log_error_with_context(error: FormBuilderError, operation: str) -> None:
    """
    Log error with full context information.

    Args:
        error: FormBuilderError instance
        operation: Description of the operation that failed
    """
    logger.error(f"Form builder error during {operation}")
    logger.error(f"Error type: {type(error).__name__}")
    logger.error(f"Error message: {error.message}")

    if error.context:
        logger.error("Error context:")
        for key, value in error.context.items():
            logger.error(f"  {key}: {value}")

    if error.recovery_suggestions:
        logger.info("Recovery suggestions:")
        for i, suggestion in enumerate(error.recovery_suggestions, 1):
            logger.info(f"  {i}. {suggestion}")
