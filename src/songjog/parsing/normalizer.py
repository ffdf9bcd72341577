import math
from collections.abc import Mapping
from datetime import date
from typing import Any, Dict, List, Optional

from songjog.config.loader import get_placeholders
from songjog.events.event_models import (
    Contact,
    Coordinates,
    Impact,
    NormalizedEvent,
    RawEventRecord,
)
from songjog.utils.id_generator import derive_event_id
from songjog.utils.logging import get_logger
from songjog.utils.time import parse_event_date_safely, today_utc

logger = get_logger(__name__)

TRUTHY_STRINGS = {"true", "1", "yes"}


def _clean_str(value: Any) -> Optional[str]:
    """Return a stripped, non-empty string, or None if the value can't serve as text."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return str(value)
        except ValueError:
            # int-to-str digit limit
            return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _coerce_number(value: Any) -> Optional[float]:
    """Read ints, floats and numeric strings. Bools, NaN and infinities are not numbers here."""
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        # Integers beyond float range are as unusable as garbage text
        return None
    if not math.isfinite(number):
        return None
    return number


def _coerce_count(value: Any) -> Optional[int]:
    number = _coerce_number(value)
    if number is None:
        return None
    return int(number)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return False


def _string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items = []
    for item in value:
        text = _clean_str(item)
        if text:
            items.append(text)
    return items


def candidate_identifiers(record: RawEventRecord) -> List[str]:
    """
    Identifiers a raw record can be looked up by, in priority order.

    eventId wins over _id, _id over id. Mongo extended JSON ({"$oid": ...}) is unwrapped.
    """
    identifiers = []
    for candidate in (record.event_id, record.mongo_id, record.id):
        if isinstance(candidate, Mapping):
            candidate = candidate.get("$oid")
        text = _clean_str(candidate)
        if text and text not in identifiers:
            identifiers.append(text)
    return identifiers


def _extract_coordinates(value: Any) -> Optional[Coordinates]:
    if not isinstance(value, Mapping):
        return None
    lat = _coerce_number(value.get("lat"))
    lng = _coerce_number(value.get("lng"))
    if lat is None or lng is None:
        return None
    # Event forms submit 0/0 when no coordinates were entered
    if lat == 0 and lng == 0:
        return None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return Coordinates(lat=lat, lng=lng)


def _extract_contact(value: Any) -> Contact:
    if not isinstance(value, Mapping):
        return Contact()
    return Contact(
        email=_clean_str(value.get("email")) or "",
        phone=_clean_str(value.get("phone")) or "",
        website=_clean_str(value.get("website")) or "",
    )


def _extract_impact(value: Any, placeholder: str) -> Impact:
    if not isinstance(value, Mapping):
        return Impact(waste_collected=placeholder, area_cleaned=placeholder, previous_participants=placeholder)
    return Impact(
        waste_collected=_clean_str(value.get("wasteCollected")) or placeholder,
        area_cleaned=_clean_str(value.get("areaCleaned")) or placeholder,
        previous_participants=_clean_str(value.get("previousParticipants")) or placeholder,
    )


def to_raw_record(raw: Any) -> tuple[RawEventRecord, Dict[str, Any]]:
    """
    Wrap untrusted input in a RawEventRecord.

    Returns:
        Tuple of (record, plain dict copy of the input). Non-mapping input
        yields an empty record and an empty dict.
    """
    if not isinstance(raw, Mapping):
        return RawEventRecord(), {}
    payload = {key: value for key, value in raw.items() if isinstance(key, str)}
    return RawEventRecord.model_validate(payload), payload


def normalize_event(
    raw: Any,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
) -> NormalizedEvent:
    """
    Turn a raw API event into a fully defaulted NormalizedEvent.

    Never raises: missing, blank or wrongly typed fields fall back to their
    placeholders, and non-mapping input yields an all-default shell record.

    Args:
        raw: Event payload as received (any type)
        today: Date substituted for a missing/invalid event date
        config: Optional songjog config (placeholder overrides)

    Returns:
        NormalizedEvent
    """
    placeholders = get_placeholders(config)
    record, payload = to_raw_record(raw)
    defaulted: List[str] = []

    def text_or(value: Any, field: str, fallback: str) -> str:
        text = _clean_str(value)
        if text is None:
            defaulted.append(field)
            return fallback
        return text

    identifiers = candidate_identifiers(record)
    if identifiers:
        event_id = identifiers[0]
    else:
        event_id = derive_event_id(payload)
        defaulted.append("id")

    organization_raw = _clean_str(record.organization)
    description_raw = _clean_str(record.description)

    event_date = parse_event_date_safely(record.date)
    date_known = event_date is not None
    if event_date is None:
        event_date = today or today_utc()
        defaulted.append("date")

    category = _clean_str(record.category)
    if category is None:
        defaulted.append("category")
        category = placeholders["category"]
    category = category.lower()

    volunteers = _coerce_count(record.volunteers)
    if volunteers is None or volunteers < 0:
        defaulted.append("volunteers")
        volunteers = 0

    max_volunteers = _coerce_count(record.max_volunteers)
    if max_volunteers is None:
        defaulted.append("maxVolunteers")
        max_volunteers = int(placeholders["max_volunteers"])
    max_volunteers = max(max_volunteers, 1)

    requirements = _string_list(record.requirements)
    if not requirements:
        defaulted.append("requirements")
        requirements = [placeholders["requirement"]]

    rating = _coerce_number(record.rating)
    rating = min(max(rating or 0.0, 0.0), 5.0)

    event = NormalizedEvent(
        id=event_id,
        title=text_or(record.title, "title", placeholders["title"]),
        organization=organization_raw or placeholders["organization"],
        organizer=text_or(record.organizer, "organizer", organization_raw or placeholders["organizer"]),
        description=description_raw or placeholders["description"],
        full_description=text_or(
            record.full_description, "fullDescription", description_raw or placeholders["description"]
        ),
        location=text_or(record.location, "location", placeholders["location"]),
        category=category,
        date=event_date,
        date_known=date_known,
        time=text_or(record.time, "time", placeholders["time"]),
        end_time=text_or(record.end_time, "endTime", placeholders["end_time"]),
        coordinates=_extract_coordinates(record.coordinates),
        volunteers=volunteers,
        max_volunteers=max_volunteers,
        requirements=requirements,
        images=_string_list(record.images),
        contact=_extract_contact(record.contact),
        verified=_coerce_bool(record.verified),
        rating=rating,
        reviews=max(_coerce_count(record.reviews) or 0, 0),
        impact=_extract_impact(record.impact, placeholders["impact"]),
        points=max(_coerce_count(record.points) or 0, 0),
        live_attendance=max(_coerce_count(record.live_attendance) or 0, 0),
        draft=isinstance(record.status, str) and record.status.strip().lower() == "draft",
    )

    if defaulted:
        logger.debug("Event %s: defaulted fields %s", event_id, ", ".join(defaulted))
    return event


def unwrap_payload(data: Any) -> List[Dict[str, Any]]:
    """
    Extract the list of raw event records from an API response body.

    Accepted shapes, checked in order:
    - {"data": [...]}
    - {"events": [...]}
    - [...]
    - a single event object -> [object]

    Anything else is treated as an empty collection. Non-object list items
    are dropped.
    """
    if isinstance(data, Mapping):
        if isinstance(data.get("data"), list):
            items = data["data"]
        elif isinstance(data.get("events"), list):
            items = data["events"]
        else:
            items = [data]
    elif isinstance(data, list):
        items = data
    else:
        return []

    records = [item for item in items if isinstance(item, Mapping)]
    dropped = len(items) - len(records)
    if dropped:
        logger.debug("Dropped %d non-object items from event payload", dropped)
    return records


def _dedupe_identifiers(events: List[NormalizedEvent]) -> List[NormalizedEvent]:
    """Make identifiers unique: later duplicates get -2, -3, ... suffixes in input order."""
    seen: set[str] = set()
    unique: List[NormalizedEvent] = []
    for event in events:
        event_id = event.id
        if event_id in seen:
            suffix = 2
            while f"{event.id}-{suffix}" in seen:
                suffix += 1
            event_id = f"{event.id}-{suffix}"
            logger.debug("Duplicate event id %s renamed to %s", event.id, event_id)
            event = event.model_copy(update={"id": event_id})
        seen.add(event_id)
        unique.append(event)
    return unique


def normalize_collection(
    data: Any,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[NormalizedEvent]:
    """
    Normalize every event in an API response body.

    Args:
        data: Response body (envelope, list, or anything else)
        today: Date substituted for missing/invalid event dates
        config: Optional songjog config

    Returns:
        List of NormalizedEvent with unique identifiers, in input order
    """
    today = today or today_utc()
    events = [normalize_event(raw, today=today, config=config) for raw in unwrap_payload(data)]
    return _dedupe_identifiers(events)
