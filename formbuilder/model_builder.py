"""
Pydantic models for structural validation of a form schema.
Checks the whole component list against the shape rules of the data model.
"""

from typing import Dict, Any, List, Optional, Union
import logging

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from .component_model import FormComponent, components_to_dicts
from .field_registry import FieldKind, has_options, EMPTY_TEXT_MESSAGE

logger = logging.getLogger(__name__)

LABEL_REQUIRED_MESSAGE = "Label is required"


class ComponentShape(BaseModel):
    """Shape of one serialized component."""

    model_config = ConfigDict(extra='ignore')

    id: StrictStr
    type: FieldKind
    label: StrictStr
    required: Optional[StrictBool] = None
    options: Optional[List[StrictStr]] = None
    value: Optional[Union[StrictBool, StrictStr, List[StrictStr]]] = None

    @field_validator('label')
    @classmethod
    def label_not_empty(cls, v: str) -> str:
        if len(v) < 1:
            raise ValueError(LABEL_REQUIRED_MESSAGE)
        return v

    @field_validator('value')
    @classmethod
    def value_not_empty(cls, v: Any) -> Any:
        if isinstance(v, str) and len(v) < 1:
            raise ValueError(EMPTY_TEXT_MESSAGE)
        return v

    @model_validator(mode='after')
    def options_match_kind(self) -> 'ComponentShape':
        if has_options(self.type):
            if not self.options:
                raise ValueError(f"'{self.type.value}' components must have at least one option")
        elif self.options is not None:
            raise ValueError(f"'{self.type.value}' components cannot have options")
        return self


class FormSchemaShape(BaseModel):
    """Shape of the whole component list."""

    model_config = ConfigDict(extra='ignore')

    components: List[ComponentShape]

    @model_validator(mode='after')
    def ids_unique(self) -> 'FormSchemaShape':
        seen = set()
        duplicates = []
        for component in self.components:
            if component.id in seen:
                duplicates.append(component.id)
            seen.add(component.id)
        if duplicates:
            raise ValueError(f"Duplicate component ids: {', '.join(duplicates)}")
        return self


def format_validation_errors(error: ValidationError) -> List[str]:
    """
    Turn a pydantic ValidationError into readable messages.

    Args:
        error: Pydantic validation error

    Returns:
        List of "path: message" strings
    """
    error_messages = []
    for item in error.errors():
        field_path = ' -> '.join(str(loc) for loc in item.get('loc', []))
        message = f"{field_path}: {item.get('msg')}" if field_path else str(item.get('msg'))
        error_messages.append(message)
    return error_messages


def validate_schema_data(data: Dict[str, Any]) -> List[str]:
    """
    Validate a serialized schema ({"components": [...]}) and return errors.

    Args:
        data: Serialized schema

    Returns:
        List of validation error messages (empty when valid)
    """
    try:
        FormSchemaShape.model_validate(data)
        return []
    except ValidationError as e:
        return format_validation_errors(e)


def validate_components(components: List[FormComponent]) -> List[str]:
    """
    Validate a live component list structurally.

    Args:
        components: Ordered component list

    Returns:
        List of validation error messages (empty when valid)
    """
    errors = validate_schema_data({'components': components_to_dicts(components)})
    if errors:
        logger.debug(f"Structural validation found {len(errors)} errors in {len(components)} components")
    return errors
