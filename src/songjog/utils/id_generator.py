import hashlib
import json
from typing import Any, Dict

FALLBACK_ID_FIELDS = ("title", "organization", "date", "time", "location")


def derive_event_id(raw: Dict[str, Any]) -> str:
    """
    Stable identifier for an event that arrived without eventId/_id/id.

    Hashes the fields that identify an event to a person reading the listing,
    so the same payload always yields the same identifier.
    """
    stable_fields = {field: raw.get(field) for field in FALLBACK_ID_FIELDS}
    try:
        stable_json = json.dumps(stable_fields, sort_keys=True, default=str)
    except (TypeError, ValueError):
        # Unsortable or unserializable field values (e.g. dicts with mixed key types)
        stable_json = "|".join(
            f"{field}={_safe_repr(stable_fields[field])}" for field in FALLBACK_ID_FIELDS
        )
    return f"EVT-{hashlib.sha256(stable_json.encode('utf-8')).hexdigest()[:10]}"


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except ValueError:
        return f"<{type(value).__name__}>"


def check_in_code(event_id: str, participant: str = "") -> str:
    """
    Check-in code shown to a volunteer who joined an event.

    Format: EVT-<event id>-<6 uppercase hex chars>, deterministic per
    (event, participant) pair.
    """
    digest = hashlib.sha256(f"{event_id}||{participant}".encode("utf-8")).hexdigest()
    return f"EVT-{event_id}-{digest[:6].upper()}"
