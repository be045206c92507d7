"""
Observation normalization.

Turns raw datastore rows into the document shape the Chroma indexer expects.
Every function here is pure and total over ``ObservationRecord``: collection
fields may be JSON text, decoded structures, or missing, and all three come
out as JSON-array text.
"""

import json
from typing import Any, List, Mapping, Optional

from memsync.models import JsonListField, ObservationRecord, StoredObservation


def serialize_json_list(value: JsonListField) -> str:
    """Resolve a collection field to JSON-array text.

    Text is passed through untouched so an already-serialized column is never
    encoded twice. Blank text and ``None`` become ``"[]"``. A mapping is
    wrapped as a single element; any other iterable is listed.
    """
    if isinstance(value, str):
        return value if value.strip() else "[]"
    if value is None:
        return "[]"
    if isinstance(value, (bytes, bytearray)):
        return serialize_json_list(value.decode("utf-8", errors="replace"))
    if isinstance(value, Mapping):
        items: List[Any] = [dict(value)]
    else:
        try:
            items = list(value)
        except TypeError:
            items = [value]
    try:
        return json.dumps(items, ensure_ascii=False, default=str)
    except ValueError:
        # circular references
        return json.dumps([str(item) for item in items], ensure_ascii=False)


def parse_json_list(value: JsonListField) -> List[Any]:
    """Decode a collection field back to a list, ``[]`` on anything unusable."""
    if value is None:
        return []
    if not isinstance(value, str):
        return json.loads(serialize_json_list(value))
    try:
        parsed = json.loads(value)
    except ValueError:
        return []
    return parsed if isinstance(parsed, list) else []


def _as_int(value: Any, default: Optional[int]) -> Optional[int]:
    """Best-effort int; SQLite's loose typing can hand back text or floats."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _as_count(value: Any) -> int:
    return _as_int(value, 0)


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def to_stored_observation(record: ObservationRecord) -> StoredObservation:
    """Normalize one datastore record.

    ``text`` is always cleared; the indexer derives its own documents from the
    structured fields. Scalars are coerced to the document's types, with the
    field default standing in for anything that cannot be converted.
    """
    return StoredObservation(
        id=_as_int(record.id, 0),
        memory_session_id=_as_text(record.memory_session_id),
        project=_as_text(record.project),
        text=None,
        type=_as_text(record.type),
        title=_as_text(record.title),
        subtitle=_as_text(record.subtitle),
        facts=serialize_json_list(record.facts),
        narrative=_as_text(record.narrative),
        concepts=serialize_json_list(record.concepts),
        files_read=serialize_json_list(record.files_read),
        files_modified=serialize_json_list(record.files_modified),
        prompt_number=_as_count(record.prompt_number),
        discovery_tokens=_as_count(record.discovery_tokens),
        created_at=_as_text(record.created_at),
        created_at_epoch=_as_int(record.created_at_epoch, None),
    )
