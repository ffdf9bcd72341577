"""Validation and payload shaping for organizer-created event drafts."""

import math
import re
from collections.abc import Mapping
from typing import Any, Dict, Optional

from songjog.config.loader import get_placeholders
from songjog.metrics.derived import suggested_points
from songjog.utils.logging import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

REQUIRED_TEXT_FIELDS = {
    "title": "Event title is required",
    "organization": "Organization name is required",
    "organizer": "Organizer name is required",
    "description": "Short description is required",
    "fullDescription": "Full description is required",
    "category": "Category is required",
    "date": "Event date is required",
    "time": "Start time is required",
    "location": "Location is required",
}


class DraftValidationError(ValueError):
    """Raised when a draft with field errors is turned into a payload."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Event draft has invalid fields: {fields}")


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def validate_event_draft(draft: Any) -> Dict[str, str]:
    """
    Check a create-event form before submission.

    Args:
        draft: Form values keyed like the API payload (camelCase)

    Returns:
        Dict of field -> error message; empty when the draft is valid.
        Contact email errors are reported under "contactEmail".
    """
    if not isinstance(draft, Mapping):
        draft = {}
    errors: Dict[str, str] = {}

    for field, message in REQUIRED_TEXT_FIELDS.items():
        if not _text(draft.get(field)):
            errors[field] = message

    max_volunteers = _to_int(draft.get("maxVolunteers"))
    if max_volunteers is None or max_volunteers < 1:
        errors["maxVolunteers"] = "Maximum volunteers must be at least 1"

    contact = draft.get("contact")
    email = _text(contact.get("email")) if isinstance(contact, Mapping) else ""
    if not email:
        errors["contactEmail"] = "Contact email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["contactEmail"] = "Invalid email address"

    return errors


def build_event_payload(
    draft: Mapping,
    owner: Optional[Mapping] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Shape a validated draft into the JSON body the events API accepts.

    Args:
        draft: Form values (camelCase keys)
        owner: Optional signed-in user ({"uid", "email", "displayName"})
        config: Optional songjog config (points table, placeholder image)

    Returns:
        Payload dict

    Raises:
        DraftValidationError: If validate_event_draft reports any errors
    """
    errors = validate_event_draft(draft)
    if errors:
        raise DraftValidationError(errors)

    placeholders = get_placeholders(config)
    category = _text(draft.get("category")).lower() or "other"
    coordinates = draft.get("coordinates") if isinstance(draft.get("coordinates"), Mapping) else {}
    contact = draft.get("contact") if isinstance(draft.get("contact"), Mapping) else {}
    impact = draft.get("impact") if isinstance(draft.get("impact"), Mapping) else {}
    requirements = draft.get("requirements") if isinstance(draft.get("requirements"), (list, tuple)) else []
    images = draft.get("images") if isinstance(draft.get("images"), (list, tuple)) else []
    images = [_text(image) for image in images if _text(image)]

    payload: Dict[str, Any] = {
        "title": _text(draft.get("title")),
        "organization": _text(draft.get("organization")),
        "organizer": _text(draft.get("organizer")),
        "description": _text(draft.get("description")),
        "fullDescription": _text(draft.get("fullDescription")),
        "category": category,
        "date": _text(draft.get("date")),
        "time": _text(draft.get("time")),
        "endTime": _text(draft.get("endTime")),
        "location": _text(draft.get("location")),
        "coordinates": {
            "lat": _to_float(coordinates.get("lat")),
            "lng": _to_float(coordinates.get("lng")),
        },
        "maxVolunteers": _to_int(draft.get("maxVolunteers")),
        "volunteers": 0,
        "requirements": [_text(req) for req in requirements if _text(req)],
        "images": images or [placeholders["image"]],
        "contact": {
            "email": _text(contact.get("email")),
            "phone": _text(contact.get("phone")),
            "website": _text(contact.get("website")),
        },
        "verified": bool(draft.get("verified", False)),
        "rating": 0,
        "reviews": 0,
        "impact": {
            "wasteCollected": _text(impact.get("wasteCollected")),
            "areaCleaned": _text(impact.get("areaCleaned")),
            "previousParticipants": _text(impact.get("previousParticipants")),
        },
        "liveAttendance": 0,
        "points": suggested_points(category, config),
        "isRecurring": bool(draft.get("isRecurring", False)),
        "recurrence": _text(draft.get("recurrence")),
        "visibility": "public",
    }

    if owner:
        payload["ownerId"] = _text(owner.get("uid"))
        payload["ownerEmail"] = _text(owner.get("email"))
        payload["ownerName"] = _text(owner.get("displayName")) or "Anonymous"

    logger.debug("Built payload for draft %r (%s, %d points)", payload["title"], category, payload["points"])
    return payload
