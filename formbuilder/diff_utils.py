"""
Diff utilities for the form schema builder.
Compares the current component list with the last exported document using
DeepDiff, so the UI can tell the user the schema changed since the last export.
"""

from typing import Dict, Any, List, Optional
import json
import logging

from deepdiff import DeepDiff

from .component_model import FormComponent, components_to_dicts

logger = logging.getLogger(__name__)

CHANGE_TYPES = [
    'values_changed',
    'dictionary_item_added',
    'dictionary_item_removed',
    'iterable_item_added',
    'iterable_item_removed',
    'type_changes'
]


def calculate_diff(original: List[Dict[str, Any]], modified: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Calculate differences between two serialized component lists.

    Order is significant: components are compared position by position.

    Args:
        original: Serialized components before
        modified: Serialized components after

    Returns:
        Plain dictionary keyed by DeepDiff change type
    """
    try:
        diff = DeepDiff(original, modified, verbose_level=2)
        return json.loads(diff.to_json())
    except Exception as e:
        logger.error(f"Failed to calculate schema diff: {e}", exc_info=True)
        return {}


def has_changes(diff: Dict[str, Any]) -> bool:
    """
    Check if there are any changes in the diff.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        True if there are changes, False otherwise
    """
    if not diff:
        return False
    return any(change_type in diff and diff[change_type] for change_type in CHANGE_TYPES)


def get_change_summary(diff: Dict[str, Any]) -> Dict[str, int]:
    """Count entries per change type, plus a ``total``."""
    summary = {change_type: len(diff.get(change_type) or {}) for change_type in CHANGE_TYPES}
    summary['total'] = sum(summary.values())
    return summary


def diff_against_export(
    last_export: Optional[Dict[str, Any]],
    components: List[FormComponent]
) -> Dict[str, Any]:
    """
    Diff the live component list against an exported document.

    With no previous export every component counts as added.

    Args:
        last_export: Previously exported document, or None
        components: Current component list

    Returns:
        Diff dictionary from calculate_diff
    """
    previous = last_export.get('components', []) if last_export else []
    return calculate_diff(previous, components_to_dicts(components))


def format_diff_for_display(diff: Dict[str, Any]) -> List[str]:
    """
    Format a diff as short human-readable lines.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        One line per change
    """
    if not has_changes(diff):
        return []

    lines: List[str] = []

    for path, change in (diff.get('values_changed') or {}).items():
        lines.append(f"{_clean_path(path)}: {change.get('old_value')!r} → {change.get('new_value')!r}")

    for path, change in (diff.get('type_changes') or {}).items():
        lines.append(f"{_clean_path(path)}: {change.get('old_value')!r} → {change.get('new_value')!r}")

    for path in (diff.get('dictionary_item_added') or {}):
        lines.append(f"{_clean_path(path)}: added")

    for path in (diff.get('dictionary_item_removed') or {}):
        lines.append(f"{_clean_path(path)}: removed")

    for path, item in (diff.get('iterable_item_added') or {}).items():
        label = item.get('label') if isinstance(item, dict) else item
        lines.append(f"{_clean_path(path)}: added {label!r}")

    for path, item in (diff.get('iterable_item_removed') or {}).items():
        label = item.get('label') if isinstance(item, dict) else item
        lines.append(f"{_clean_path(path)}: removed {label!r}")

    return lines


def _clean_path(path: str) -> str:
    """Turn "root[0]['label']" into "component 1 › label"."""
    tokens = path.replace('root', '', 1).strip('[]').split('][')
    parts = []
    for token in tokens:
        token = token.strip("'\"")
        if token.isdigit():
            parts.append(f"component {int(token) + 1}")
        elif token:
            parts.append(token)
    return ' › '.join(parts) if parts else path
