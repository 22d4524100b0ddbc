"""
Form component model for the form schema builder.
One FormComponent is one placed field instance.
"""

import copy
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Union

from .field_registry import FieldKind, parse_kind

ComponentValue = Union[str, bool, List[str]]


@dataclass
class FormComponent:
    """A placed field: identity, kind, label, required flag, options and current value.

    ``id`` and ``kind`` are fixed at creation; the builder only ever edits
    ``label``, ``required`` and ``value`` in place.
    """

    id: str
    kind: FieldKind
    label: str
    required: bool = False
    options: Optional[List[str]] = None
    value: Optional[ComponentValue] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the exported document shape.

        The kind is written under ``type``; ``options`` and ``value`` are
        omitted while absent.
        """
        result: Dict[str, Any] = {
            'id': self.id,
            'type': self.kind.value,
            'label': self.label,
            'required': self.required
        }

        if self.options is not None:
            result['options'] = list(self.options)
        if self.value is not None:
            result['value'] = copy.deepcopy(self.value)

        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FormComponent':
        """Rebuild a component from its ``to_dict`` form.

        Raises:
            KeyError: If ``id``, ``type`` or ``label`` is missing
            UnknownFieldKindError: If ``type`` is not a supported kind
        """
        options = data.get('options')
        return cls(
            id=data['id'],
            kind=parse_kind(data['type']),
            label=data['label'],
            required=bool(data.get('required', False)),
            options=list(options) if options is not None else None,
            value=copy.deepcopy(data.get('value'))
        )

    def copy(self) -> 'FormComponent':
        return copy.deepcopy(self)


def components_to_dicts(components: List[FormComponent]) -> List[Dict[str, Any]]:
    """Serialize an ordered component list."""
    return [component.to_dict() for component in components]


def components_from_dicts(items: List[Dict[str, Any]]) -> List[FormComponent]:
    """Rebuild an ordered component list."""
    return [FormComponent.from_dict(item) for item in items]
