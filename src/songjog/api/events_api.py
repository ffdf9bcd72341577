"""Events API: canonical query surface for event listings and detail views."""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from ..config.loader import get_featured_settings
from ..events.event_models import (
    Coordinates,
    EventLifecycle,
    EventStatus,
    EventViewModel,
    NormalizedEvent,
)
from ..metrics.derived import (
    category_display,
    classify_status,
    days_remaining,
    is_featured,
    is_full,
    lifecycle_status,
    progress_percent,
    seats_remaining,
    split_location,
    status_label,
)
from ..metrics.geo import haversine_km, parse_distance_option
from ..parsing.normalizer import (
    candidate_identifiers,
    normalize_collection,
    normalize_event,
    to_raw_record,
    unwrap_payload,
)
from ..utils.logging import get_logger
from ..utils.time import format_event_date, today_utc
from .models import EventBoardStats, EventPartition, FilterSpec, JoinedEvents, SortKey

logger = get_logger(__name__)

EventT = TypeVar("EventT", bound=NormalizedEvent)


def assemble_view_model(
    event: NormalizedEvent,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
) -> EventViewModel:
    """
    Combine a normalized event with every derived metric.

    Args:
        event: NormalizedEvent
        today: Reference date for day counts and status (defaults to UTC today)
        config: Optional songjog config (category table, featured threshold)

    Returns:
        EventViewModel
    """
    today = today or today_utc()
    known_date = event.date if event.date_known else None

    days = days_remaining(known_date, today)
    status = classify_status(known_date, today)
    category = category_display(event.category, config)
    city, region = split_location(event.location, config)

    return EventViewModel(
        **event.model_dump(),
        progress_percent=progress_percent(event.volunteers, event.max_volunteers),
        days_remaining=days,
        status=status,
        status_label=status_label(status, days),
        category_label=category.label,
        category_color=category.color,
        seats_remaining=seats_remaining(event.volunteers, event.max_volunteers),
        is_full=is_full(event.volunteers, event.max_volunteers),
        featured=is_featured(event.rating, config),
        lifecycle=lifecycle_status(known_date, today, draft=event.draft),
        display_date=format_event_date(known_date),
        city=city,
        region=region,
    )


def build_view_model(
    raw: Any,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
) -> EventViewModel:
    """
    Normalize one raw event and derive its metrics.

    Calling this twice with the same raw input and the same `today` yields
    identical view models.
    """
    today = today or today_utc()
    event = normalize_event(raw, today=today, config=config)
    return assemble_view_model(event, today=today, config=config)


def build_view_models(
    data: Any,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[EventViewModel]:
    """Normalize and assemble every event in an API response body, in input order."""
    today = today or today_utc()
    return [
        assemble_view_model(event, today=today, config=config)
        for event in normalize_collection(data, today=today, config=config)
    ]


def _matches_search(event: NormalizedEvent, needle: str) -> bool:
    return (
        needle in event.title.lower()
        or needle in event.organization.lower()
        or needle in event.description.lower()
    )


def _within_radius(event: NormalizedEvent, origin: Optional[Coordinates], radius_km: Optional[float]) -> bool:
    # No user location, radius or event coordinates: keep the event
    if origin is None or radius_km is None or event.coordinates is None:
        return True
    return haversine_km(origin, event.coordinates) <= radius_km


def filter_events(
    events: Sequence[EventT],
    filters: Union[FilterSpec, Dict[str, Any], None] = None,
) -> List[EventT]:
    """
    Keep events matching every active filter (logical AND), preserving order.

    Predicates:
    - search_text: case-insensitive substring of title, organization or
      description; empty disables
    - category: exact category id; "all" disables
    - date: exact event date; None disables. Events whose date was unknown
      never match an active date filter
    - distance: radius around filters.user_location; no-op when either the
      user location or the event's coordinates are missing

    Args:
        events: NormalizedEvent or EventViewModel list
        filters: FilterSpec, or a dict of FilterSpec fields

    Returns:
        New list of matching events
    """
    if not isinstance(events, (list, tuple)):
        return []
    if filters is None:
        filters = FilterSpec()
    elif isinstance(filters, dict):
        filters = FilterSpec.model_validate(filters)

    needle = filters.search_text.strip().lower()
    category = filters.category.strip().lower()
    radius_km = parse_distance_option(filters.distance)

    filtered = []
    for event in events:
        if needle and not _matches_search(event, needle):
            continue
        if category and category != "all" and event.category != category:
            continue
        if filters.date is not None and not (event.date_known and event.date == filters.date):
            continue
        if not _within_radius(event, filters.user_location, radius_km):
            continue
        filtered.append(event)
    return filtered


def sort_events(
    events: Sequence[EventT],
    key: Union[SortKey, str] = SortKey.DATE,
    *,
    user_location: Optional[Coordinates] = None,
) -> List[EventT]:
    """
    Return a new list ordered by the given key. The input is never mutated.

    Orders (all stable, ties keep input order):
    - date: soonest first; events with unknown dates go last
    - volunteers: most volunteers first
    - rating / recommended: highest rating first
    - distance: nearest first when user_location is given; events without
      coordinates follow in input order. Without user_location: input order.

    Unknown keys return the input order unchanged.
    """
    if not isinstance(events, (list, tuple)):
        return []
    try:
        sort_key = SortKey(key)
    except ValueError:
        logger.warning("Unknown sort key: %s, keeping input order", key)
        return list(events)

    if sort_key == SortKey.DATE:
        return sorted(events, key=lambda e: (not e.date_known, e.date))
    if sort_key == SortKey.VOLUNTEERS:
        return sorted(events, key=lambda e: -e.volunteers)
    if sort_key in (SortKey.RATING, SortKey.RECOMMENDED):
        return sorted(events, key=lambda e: -(e.rating or 0))
    if user_location is None:
        return list(events)
    return sorted(
        events,
        key=lambda e: (
            e.coordinates is None,
            haversine_km(user_location, e.coordinates) if e.coordinates is not None else 0.0,
        ),
    )


def query_events(
    data: Any,
    filters: Union[FilterSpec, Dict[str, Any], None] = None,
    sort: Union[SortKey, str] = SortKey.DATE,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[EventViewModel]:
    """
    Full listing pipeline: unwrap -> normalize -> assemble -> filter -> sort -> page.

    Args:
        data: API response body
        filters: FilterSpec or dict of its fields
        sort: SortKey or its string value
        today: Reference date (defaults to UTC today)
        config: Optional songjog config
        limit: Maximum number of events to return (None = all)
        offset: Number of events to skip

    Returns:
        List of EventViewModel
    """
    if isinstance(filters, dict):
        filters = FilterSpec.model_validate(filters)
    view_models = build_view_models(data, today=today, config=config)
    filtered = filter_events(view_models, filters)
    user_location = filters.user_location if filters is not None else None
    ordered = sort_events(filtered, sort, user_location=user_location)

    offset = max(offset, 0)
    if limit is None:
        return ordered[offset:]
    return ordered[offset:offset + max(limit, 0)]


def find_event(
    data: Any,
    event_id: str,
    *,
    today: Optional[date] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Optional[EventViewModel]:
    """
    Find one event in an API response body by eventId, _id or id.

    Returns:
        EventViewModel, or None if no raw record carries that identifier
    """
    for raw in unwrap_payload(data):
        record, _ = to_raw_record(raw)
        if event_id in candidate_identifiers(record):
            return build_view_model(raw, today=today, config=config)
    return None


def featured_events(
    view_models: Iterable[EventViewModel],
    limit: Optional[int] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[EventViewModel]:
    """Highly rated events, in listing order, capped at the configured count."""
    _, default_limit = get_featured_settings(config)
    cap = default_limit if limit is None else limit
    return [vm for vm in view_models if vm.featured][:max(cap, 0)]


def partition_by_lifecycle(view_models: Iterable[EventViewModel]) -> EventPartition:
    """Split events into the organizer dashboard's active / draft / completed tabs."""
    partition = EventPartition()
    for vm in view_models:
        if vm.lifecycle == EventLifecycle.DRAFT:
            partition.draft.append(vm)
        elif vm.lifecycle == EventLifecycle.COMPLETED:
            partition.completed.append(vm)
        else:
            partition.active.append(vm)
    return partition


def partition_joined(view_models: Iterable[EventViewModel]) -> JoinedEvents:
    """Split a volunteer's joined events into upcoming and past. Drafts are skipped."""
    joined = JoinedEvents()
    for vm in view_models:
        if vm.draft:
            continue
        if vm.status == EventStatus.COMPLETED:
            joined.past.append(vm)
        else:
            joined.upcoming.append(vm)
    return joined


def summarize_events(partition: EventPartition) -> EventBoardStats:
    """Dashboard counters. Volunteers on drafts are not counted."""
    return EventBoardStats(
        total=len(partition.active) + len(partition.draft) + len(partition.completed),
        active=len(partition.active),
        draft=len(partition.draft),
        completed=len(partition.completed),
        total_volunteers=sum(vm.volunteers for vm in partition.active)
        + sum(vm.volunteers for vm in partition.completed),
    )
