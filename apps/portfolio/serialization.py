"""
Storage encoding for section ``content`` and ``settings``.

Both mappings live in TEXT columns as JSON. An absent blob (NULL or empty
string) reads back as an empty mapping; anything else that is not a JSON
object raises CorruptData.
"""
import json
from typing import Any, Optional

from apps.portfolio.exceptions import CorruptData, ValidationError


def dump_blob(value: Optional[dict], field: str = "content") -> str:
    """Serialize a mapping for storage. None is stored as an empty object."""
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise ValidationError(f"{field} must be an object, got {type(value).__name__}")
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} is not JSON-serializable: {exc}") from exc


def load_blob(raw: Optional[str], field: str = "content", section_id=None) -> dict[str, Any]:
    """Deserialize a stored blob, failing loudly on anything unparseable."""
    if raw is None or raw == "":
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise CorruptData(
            f"Stored {field} for section {section_id} is not valid JSON",
            section_id=section_id,
            field=field,
        ) from exc
    if not isinstance(value, dict):
        raise CorruptData(
            f"Stored {field} for section {section_id} is not an object",
            section_id=section_id,
            field=field,
        )
    return value
