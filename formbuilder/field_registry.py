"""
Field type registry for the form schema builder.
Maps each supported field kind to its default shape, palette label, widget
and value rule. The registry is closed over FieldKind and checks itself on import.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional, Callable, Tuple
import logging

from .exceptions import UnknownFieldKindError, REQUIRED_FIELD_MESSAGE

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = ("Option 1", "Option 2", "Option 3")
EMPTY_TEXT_MESSAGE = "This field cannot be empty"


class FieldKind(str, Enum):
    """Closed set of placeable field kinds. Values are the exported wire names."""
    TEXT = "text"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"


@dataclass(frozen=True)
class ValueCheck:
    """Outcome of applying a value rule: valid, or invalid with a reason."""
    valid: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> 'ValueCheck':
        return cls(True)

    @classmethod
    def invalid(cls, reason: str) -> 'ValueCheck':
        return cls(False, reason)


# rule(component, value) -> ValueCheck; component is any object exposing
# ``required`` and ``options`` (normally a FormComponent).
ValueRule = Callable[[Any, Any], ValueCheck]


def _text_rule(component: Any, value: Any) -> ValueCheck:
    if value is None:
        return ValueCheck.invalid(REQUIRED_FIELD_MESSAGE) if component.required else ValueCheck.ok()
    if not isinstance(value, str):
        return ValueCheck.invalid("Value must be text")
    if component.required and value == "":
        return ValueCheck.invalid(EMPTY_TEXT_MESSAGE)
    return ValueCheck.ok()


def _choice_rule(component: Any, value: Any) -> ValueCheck:
    if value is None:
        return ValueCheck.invalid(REQUIRED_FIELD_MESSAGE) if component.required else ValueCheck.ok()
    if not isinstance(value, str):
        return ValueCheck.invalid("Value must be one of the available options")
    options = component.options or []
    if value not in options:
        return ValueCheck.invalid(f"Value must be one of: {', '.join(options)}")
    return ValueCheck.ok()


def _checkbox_rule(component: Any, value: Any) -> ValueCheck:
    if value is None:
        return ValueCheck.invalid(REQUIRED_FIELD_MESSAGE) if component.required else ValueCheck.ok()
    if not isinstance(value, bool):
        return ValueCheck.invalid("Value must be true or false")
    if component.required and value is not True:
        return ValueCheck.invalid(REQUIRED_FIELD_MESSAGE)
    return ValueCheck.ok()


@dataclass(frozen=True)
class FieldSpec:
    """Registry entry describing one field kind."""
    kind: FieldKind
    palette_label: str
    widget: str
    has_options: bool
    rule: ValueRule


FIELD_REGISTRY: Dict[FieldKind, FieldSpec] = {
    FieldKind.TEXT: FieldSpec(FieldKind.TEXT, "Text Input", "text_input", False, _text_rule),
    FieldKind.SELECT: FieldSpec(FieldKind.SELECT, "Select Dropdown", "selectbox", True, _choice_rule),
    FieldKind.RADIO: FieldSpec(FieldKind.RADIO, "Radio Group", "radio", True, _choice_rule),
    FieldKind.CHECKBOX: FieldSpec(FieldKind.CHECKBOX, "Checkbox", "checkbox", False, _checkbox_rule),
    FieldKind.TEXTAREA: FieldSpec(FieldKind.TEXTAREA, "Text Area", "text_area", False, _text_rule),
}


def check_kind_coverage(table: Dict[FieldKind, Any], table_name: str) -> None:
    """
    Verify that a dispatch table has exactly one entry per FieldKind.

    Args:
        table: Mapping keyed by FieldKind
        table_name: Name used in the error message

    Raises:
        RuntimeError: If any kind is missing or an unknown key is present
    """
    missing = [kind.value for kind in FieldKind if kind not in table]
    extra = [repr(key) for key in table if not isinstance(key, FieldKind)]
    if missing or extra:
        raise RuntimeError(
            f"{table_name} does not cover FieldKind exactly "
            f"(missing: {missing or 'none'}, unexpected: {extra or 'none'})"
        )


check_kind_coverage(FIELD_REGISTRY, "FIELD_REGISTRY")


def get_field_spec(kind: FieldKind) -> FieldSpec:
    """Return the registry entry for a kind."""
    return FIELD_REGISTRY[parse_kind(kind)]


def parse_kind(raw_kind: Any) -> FieldKind:
    """
    Convert a kind name (or FieldKind) into a FieldKind.

    Args:
        raw_kind: FieldKind instance or its string value, e.g. "select"

    Returns:
        Matching FieldKind

    Raises:
        UnknownFieldKindError: If the value names no supported kind
    """
    if isinstance(raw_kind, FieldKind):
        return raw_kind
    try:
        return FieldKind(raw_kind)
    except ValueError:
        raise UnknownFieldKindError(raw_kind, [kind.value for kind in FieldKind]) from None


def defaults_for(kind: FieldKind) -> Dict[str, Any]:
    """
    Get the default shape of a newly placed component.

    Args:
        kind: Field kind

    Returns:
        Dictionary with ``required`` (always False) and, for option-bearing
        kinds, a fresh copy of the placeholder ``options``
    """
    spec = get_field_spec(kind)
    defaults: Dict[str, Any] = {'required': False}
    if spec.has_options:
        defaults['options'] = list(DEFAULT_OPTIONS)
    return defaults


def rules_for(kind: FieldKind) -> ValueRule:
    """Return the value rule for a kind."""
    return get_field_spec(kind).rule


def validate_value(component: Any, value: Any) -> ValueCheck:
    """
    Apply the kind's value rule to a candidate value for one component.

    Args:
        component: Component exposing ``kind``, ``required`` and ``options``
        value: Candidate value reported by the field widget

    Returns:
        ValueCheck describing the outcome
    """
    check = rules_for(component.kind)(component, value)
    logger.debug(f"Validated value for {getattr(component, 'id', '?')}: {check}")
    return check


def has_options(kind: FieldKind) -> bool:
    """Whether components of this kind carry an option list."""
    return get_field_spec(kind).has_options


def palette_label(kind: FieldKind) -> str:
    """Default label a component gets when added from the palette."""
    return get_field_spec(kind).palette_label


def palette() -> List[Tuple[FieldKind, str]]:
    """Palette entries in display order."""
    return [(kind, FIELD_REGISTRY[kind].palette_label) for kind in FieldKind]
