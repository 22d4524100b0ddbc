"""
Schema exporter for the form schema builder.
Serializes the component list with a creation timestamp into a portable JSON document.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
import logging

from .component_model import FormComponent, components_to_dicts, components_from_dicts

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "dummy-form-data.json"
EXPORT_MIME_TYPE = "application/json"


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as an ISO-8601 UTC timestamp with a ``Z`` suffix.

    Args:
        moment: Timezone-aware datetime; defaults to now

    Returns:
        Timestamp string, e.g. "2024-01-15T09:30:00.123456Z"
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse a timestamp produced by iso_timestamp."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


def export_schema(components: List[FormComponent], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Build the exported document for a component list.

    No validation is performed; empty and partially filled schemas export as-is.

    Args:
        components: Ordered component list
        now: Export instant (defaults to the current time)

    Returns:
        Document dictionary with ``components`` and ``created_at``
    """
    document = {
        'components': components_to_dicts(components),
        'created_at': iso_timestamp(now)
    }
    logger.debug(f"Exported schema with {len(components)} components at {document['created_at']}")
    return document


def document_to_json(document: Dict[str, Any], indent: int = 2) -> str:
    """Serialize a document to JSON text."""
    return json.dumps(document, indent=indent, ensure_ascii=False)


def document_to_bytes(document: Dict[str, Any], indent: int = 2) -> bytes:
    """Serialize a document to the UTF-8 byte stream handed to the download control."""
    return document_to_json(document, indent).encode('utf-8')


def save_document(
    document: Dict[str, Any],
    directory: Union[str, Path],
    filename: str = EXPORT_FILENAME,
    indent: int = 2
) -> Optional[Path]:
    """
    Write an exported document to disk.

    Args:
        document: Exported document
        directory: Target directory (created if missing)
        filename: Target file name
        indent: JSON indentation

    Returns:
        Path of the written file, or None if writing failed
    """
    target_dir = Path(directory)

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / filename
        with open(target, 'w', encoding='utf-8') as f:
            f.write(document_to_json(document, indent))

        logger.info(f"Saved exported schema: {target}")
        return target

    except OSError as e:
        logger.error(f"Failed to save exported schema to {target_dir / filename}: {e}")
        return None


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read an exported document and rebuild its components.

    Args:
        path: Path to an exported JSON file

    Returns:
        Dictionary with ``components`` (FormComponent list) and ``created_at``

    Raises:
        OSError: If the file cannot be read
        json.JSONDecodeError: If the file is not valid JSON
        KeyError: If the document lacks ``components`` or a component lacks a key
    """
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    return {
        'components': components_from_dicts(raw['components']),
        'created_at': raw.get('created_at')
    }
