"""
Submission handler for the form schema builder.
Runs presence validation, then structural validation, and reports the outcome
as a value. Notifying the user is left to the caller.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
import logging

from .component_model import FormComponent
from .exceptions import (
    RequiredFieldMissing,
    SchemaInvalid,
    SCHEMA_INVALID_MESSAGE,
    log_error_with_context,
)
from .model_builder import validate_components
from .schema_exporter import export_schema

logger = logging.getLogger(__name__)

STAGE_PRESENCE = "presence"
STAGE_STRUCTURE = "structure"
STAGE_SUCCESS = "success"

PRESENCE_FAILED_MESSAGE = "Please fill in all required fields"
SUBMIT_SUCCESS_MESSAGE = "Form submitted successfully!"


@dataclass
class SubmissionResult:
    """Outcome of one submit attempt."""
    stage: str
    message: str
    field_errors: Dict[str, RequiredFieldMissing] = field(default_factory=dict)
    schema_error: Optional[SchemaInvalid] = None
    snapshot: Optional[Dict[str, Any]] = None

    @property
    def overall_valid(self) -> bool:
        return self.stage == STAGE_SUCCESS

    @property
    def errors_by_id(self) -> Dict[str, str]:
        """Per-component error messages, keyed by component id."""
        return {component_id: error.message for component_id, error in self.field_errors.items()}


def is_missing(value: Any) -> bool:
    """Whether a submitted value counts as absent for presence validation.

    ``None``, ``""``, ``False`` and an empty list are all missing.
    """
    return not value


class SubmissionHandler:
    """Handles the two-phase submit workflow for a built form."""

    @staticmethod
    def validate_presence(
        components: List[FormComponent],
        value_map: Dict[str, Any]
    ) -> Dict[str, RequiredFieldMissing]:
        """
        Check that every required component has a value.

        This is presence only; option membership and other per-kind rules are
        not applied here.

        Args:
            components: Ordered component list
            value_map: Submitted values keyed by component id

        Returns:
            RequiredFieldMissing per failing component id, in component order
        """
        errors: Dict[str, RequiredFieldMissing] = {}

        for component in components:
            value = value_map.get(component.id)
            logger.debug(f"Validating component {component.id}: value={value!r}, required={component.required}")

            if component.required and is_missing(value):
                errors[component.id] = RequiredFieldMissing(component.id, component.label)

        return errors

    @staticmethod
    def validate_structure(components: List[FormComponent]) -> None:
        """
        Validate the component list structurally.

        Raises:
            SchemaInvalid: If the list violates the schema shape rules
        """
        errors = validate_components(components)
        if errors:
            raise SchemaInvalid(errors)

    @staticmethod
    def submit(components: List[FormComponent], value_map: Dict[str, Any]) -> SubmissionResult:
        """
        Validate and submit a form.

        Order is fixed: presence first; structural validation only runs when
        presence passes.

        Args:
            components: Ordered component list
            value_map: Submitted values keyed by component id

        Returns:
            SubmissionResult describing where the submit stopped
        """
        logger.info(f"Form submitted with {len(value_map)} values for {len(components)} components")

        # Step 1: presence
        field_errors = SubmissionHandler.validate_presence(components, value_map)
        if field_errors:
            logger.warning(f"Presence validation failed: {len(field_errors)} required fields missing")
            return SubmissionResult(
                stage=STAGE_PRESENCE,
                message=PRESENCE_FAILED_MESSAGE,
                field_errors=field_errors
            )

        # Step 2: structure
        try:
            SubmissionHandler.validate_structure(components)
        except SchemaInvalid as e:
            log_error_with_context(e, "form submission")
            for detail in e.errors:
                logger.error(f"Structural validation error: {detail}")
            return SubmissionResult(
                stage=STAGE_STRUCTURE,
                message=SCHEMA_INVALID_MESSAGE,
                schema_error=e
            )

        # Step 3: success
        snapshot = export_schema(components)
        logger.info("Form validation passed")
        return SubmissionResult(
            stage=STAGE_SUCCESS,
            message=SUBMIT_SUCCESS_MESSAGE,
            snapshot=snapshot
        )
