"""Derived, render-ready metrics computed from a normalized event.

All functions here are pure: no I/O, no clock reads. Callers pass "today"
explicitly so the same inputs always give the same outputs.
"""

import math
from datetime import date
from typing import Any, Dict, NamedTuple, Optional

from songjog.config.loader import (
    get_category_table,
    get_featured_settings,
    get_neutral_color,
    get_placeholders,
    get_points_table,
)
from songjog.events.event_models import EventLifecycle, EventStatus

UPCOMING_SOON_DAYS = 7


class CategoryDisplay(NamedTuple):
    label: str
    color: str


def progress_percent(volunteers: int, max_volunteers: int) -> int:
    """
    Share of volunteer seats filled, as a whole percentage.

    Over-subscribed events clamp to 100. A capacity below 1 is treated as 1.

    Examples:
        >>> progress_percent(45, 100)
        45
        >>> progress_percent(150, 100)
        100
    """
    capacity = max(max_volunteers, 1)
    joined = max(volunteers, 0)
    # Round half away from zero (Python's round() is banker's rounding)
    percent = math.floor(joined / capacity * 100 + 0.5)
    return min(100, percent)


def days_remaining(event_date: Optional[date], today: date) -> int:
    """
    Whole days from today until the event, floored at 0.

    Past and same-day events report 0. An unknown date also reports 0.
    """
    if event_date is None:
        return 0
    return max((event_date - today).days, 0)


def classify_status(event_date: Optional[date], today: date) -> EventStatus:
    """
    Status badge for an event. First matching rule wins:

    1. completed      - event date is before today
    2. today          - 0 days remaining
    3. tomorrow       - 1 day remaining
    4. upcoming-soon  - 7 days or fewer remaining
    5. confirmed      - everything further out

    Unknown dates classify as EventStatus.UNKNOWN.
    """
    if event_date is None:
        return EventStatus.UNKNOWN
    if event_date < today:
        return EventStatus.COMPLETED
    days = days_remaining(event_date, today)
    if days == 0:
        return EventStatus.TODAY
    if days == 1:
        return EventStatus.TOMORROW
    if days <= UPCOMING_SOON_DAYS:
        return EventStatus.UPCOMING_SOON
    return EventStatus.CONFIRMED


def status_label(status: EventStatus, days: int) -> str:
    if status == EventStatus.COMPLETED:
        return "Completed"
    if status == EventStatus.TODAY:
        return "Today"
    if status == EventStatus.TOMORROW:
        return "Tomorrow"
    if status == EventStatus.UPCOMING_SOON:
        return f"In {days} days"
    if status == EventStatus.CONFIRMED:
        return "Confirmed"
    return "Date TBD"


def category_display(category: Optional[str], config: Optional[Dict[str, Any]] = None) -> CategoryDisplay:
    """
    Display label and color for a category.

    Categories missing from the table get the neutral color and a
    capitalized version of their own name as label ("general" -> "General").
    """
    key = (category or "").strip().lower()
    entry = get_category_table(config).get(key)
    if entry:
        return CategoryDisplay(
            label=entry.get("label") or key.capitalize(),
            color=entry.get("color") or get_neutral_color(config),
        )
    return CategoryDisplay(label=key.capitalize() or "General", color=get_neutral_color(config))


def seats_remaining(volunteers: int, max_volunteers: int) -> int:
    return max(max_volunteers - volunteers, 0)


def is_full(volunteers: int, max_volunteers: int) -> bool:
    return volunteers >= max_volunteers


def lifecycle_status(event_date: Optional[date], today: date, draft: bool = False) -> EventLifecycle:
    """Drafts stay drafts; otherwise events dated today or later are upcoming."""
    if draft:
        return EventLifecycle.DRAFT
    if event_date is None or event_date >= today:
        return EventLifecycle.UPCOMING
    return EventLifecycle.COMPLETED


def is_featured(rating: float, config: Optional[Dict[str, Any]] = None) -> bool:
    min_rating, _ = get_featured_settings(config)
    return rating >= min_rating


def suggested_points(category: Optional[str], config: Optional[Dict[str, Any]] = None) -> int:
    """Points a new event awards, by category. Unlisted categories get the default."""
    by_category, default = get_points_table(config)
    return by_category.get((category or "").strip().lower(), default)


def split_location(location: str, config: Optional[Dict[str, Any]] = None) -> tuple[str, str]:
    """
    Split "Cox's Bazar, Chittagong" into ("Cox's Bazar", "Chittagong").

    A location without a comma gets the configured default region.
    """
    parts = [part.strip() for part in location.split(",")]
    city = parts[0] or "Location"
    region = parts[1] if len(parts) > 1 and parts[1] else get_placeholders(config)["region"]
    return city, region
