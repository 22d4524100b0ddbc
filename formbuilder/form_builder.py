"""
Builder state for the form schema builder.
Owns the ordered component list, the edit/preview mode flag, the single
label-editing pointer and the last submit's errors, and exposes the
mutation operations.
"""

import copy
import itertools
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional
import logging

from .component_model import FormComponent, ComponentValue
from .diff_utils import diff_against_export, has_changes
from .field_registry import FieldKind, defaults_for, parse_kind, palette_label
from .schema_exporter import export_schema
from .submission_handler import SubmissionHandler, SubmissionResult

logger = logging.getLogger(__name__)


class BuilderMode(str, Enum):
    EDIT = "edit"
    PREVIEW = "preview"


@dataclass
class BuilderState:
    """Everything the builder owns for one session."""
    components: List[FormComponent] = field(default_factory=list)
    mode: BuilderMode = BuilderMode.EDIT
    editing_id: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    last_export: Optional[Dict[str, Any]] = None


class FormBuilder:
    """Applies user actions to a BuilderState.

    Every mutation takes the builder's lock, so a builder shared between
    threads still sees one writer at a time. Operations that name a
    component id expect the id to exist; unknown ids are logged and ignored.
    """

    def __init__(self, state: Optional[BuilderState] = None, clock=None):
        self.state = state or BuilderState()
        self._clock = clock or time.time
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()

    # -- read access -------------------------------------------------------

    @property
    def components(self) -> List[FormComponent]:
        return self.state.components

    @property
    def mode(self) -> BuilderMode:
        return self.state.mode

    @property
    def editing_id(self) -> Optional[str]:
        return self.state.editing_id

    @property
    def errors(self) -> Dict[str, str]:
        return self.state.errors

    def get_component(self, component_id: str) -> Optional[FormComponent]:
        """Find a component by id."""
        for component in self.state.components:
            if component.id == component_id:
                return component
        return None

    def value_map(self) -> Dict[str, ComponentValue]:
        """Current values of all components that hold one, keyed by id."""
        return {
            component.id: copy.deepcopy(component.value)
            for component in self.state.components
            if component.value is not None
        }

    # -- mutations ---------------------------------------------------------

    def _next_id(self, kind: FieldKind) -> str:
        millis = int(self._clock() * 1000)
        return f"{kind.value}-{millis}-{next(self._sequence)}"

    def add_component(self, kind: FieldKind, label: Optional[str] = None, required: bool = False) -> FormComponent:
        """
        Append a new component of the given kind.

        Args:
            kind: Field kind (FieldKind or its string value)
            label: Display label; defaults to the kind's palette label
            required: Initial required flag

        Returns:
            The appended component
        """
        kind = parse_kind(kind)
        defaults = defaults_for(kind)

        with self._lock:
            component_id = self._next_id(kind)
            while self.get_component(component_id) is not None:
                component_id = self._next_id(kind)

            component = FormComponent(
                id=component_id,
                kind=kind,
                label=palette_label(kind) if label is None else label,
                required=bool(required),
                options=defaults.get('options')
            )
            self.state.components = self.state.components + [component]

        logger.info(f"Component added to form: {component.id} ({component.label!r})")
        return component

    def begin_label_edit(self, component_id: str) -> None:
        """Open a component for label editing. Unknown ids are ignored."""
        with self._lock:
            if self.get_component(component_id) is None:
                logger.warning(f"Ignoring label edit for unknown component {component_id}")
                return
            self.state.editing_id = component_id

    def commit_label_edit(self, component_id: str, new_label: str) -> None:
        """
        Replace a component's label and close label editing.

        The label is stored verbatim; empty labels are accepted here and
        rejected later by structural validation.
        """
        with self._lock:
            component = self.get_component(component_id)
            if component is None:
                logger.warning(f"Ignoring label commit for unknown component {component_id}")
            else:
                component.label = new_label
                logger.info(f"Label updated for {component_id}: {new_label!r}")
            self.state.editing_id = None

    def cancel_label_edit(self) -> None:
        with self._lock:
            self.state.editing_id = None

    def set_mode(self, mode: BuilderMode) -> None:
        """Switch between edit and preview. Components and errors are untouched."""
        mode = BuilderMode(mode)
        with self._lock:
            if self.state.mode != mode:
                logger.info(f"Mode transition: {self.state.mode.value} -> {mode.value}")
            self.state.mode = mode

    def toggle_mode(self) -> BuilderMode:
        with self._lock:
            target = BuilderMode.PREVIEW if self.state.mode == BuilderMode.EDIT else BuilderMode.EDIT
            self.set_mode(target)
            return target

    def record_value(self, component_id: str, value: Optional[ComponentValue]) -> None:
        """Store the value reported by a component's rendered field."""
        with self._lock:
            component = self.get_component(component_id)
            if component is None:
                logger.warning(f"Ignoring value for unknown component {component_id}")
                return
            component.value = copy.deepcopy(value)

    def set_required(self, component_id: str, required: bool) -> None:
        with self._lock:
            component = self.get_component(component_id)
            if component is None:
                logger.warning(f"Ignoring required flag for unknown component {component_id}")
                return
            component.required = bool(required)

    # -- submit / export ---------------------------------------------------

    def submit(self, value_map: Optional[Dict[str, Any]] = None) -> SubmissionResult:
        """
        Validate a submission and replace the error map with its outcome.

        Args:
            value_map: Values keyed by component id; defaults to the values
                recorded on the components

        Returns:
            SubmissionResult from SubmissionHandler.submit
        """
        if value_map is None:
            value_map = self.value_map()

        with self._lock:
            result = SubmissionHandler.submit(self.state.components, value_map)
            self.state.errors = result.errors_by_id
        return result

    def export(self, remember: bool = True) -> Dict[str, Any]:
        """
        Export the current schema.

        Args:
            remember: Record the document as the last export. Pass False to
                prepare a document the user may still cancel.

        Returns:
            Exported document
        """
        with self._lock:
            document = export_schema(self.state.components)
        if remember:
            self.mark_exported(document)
        return document

    def mark_exported(self, document: Dict[str, Any]) -> None:
        """Record a document the user actually exported."""
        with self._lock:
            self.state.last_export = copy.deepcopy(document)
        logger.info(f"Form schema exported with {len(document['components'])} components")

    def unexported_changes(self) -> Dict[str, Any]:
        """Diff of the current components against the last export."""
        return diff_against_export(self.state.last_export, self.state.components)

    def has_unexported_changes(self) -> bool:
        if self.state.last_export is None:
            return bool(self.state.components)
        return has_changes(self.unexported_changes())
