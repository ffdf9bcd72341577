from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventStatus(str, Enum):
    """Status badge shown on an event card, derived from date versus today."""

    COMPLETED = "completed"
    TODAY = "today"
    TOMORROW = "tomorrow"
    UPCOMING_SOON = "upcoming-soon"
    CONFIRMED = "confirmed"
    UNKNOWN = "unknown"


class EventLifecycle(str, Enum):
    """Organizer-side grouping used by the manage-events dashboard."""

    UPCOMING = "upcoming"
    COMPLETED = "completed"
    DRAFT = "draft"


class RawEventRecord(BaseModel):
    """Event payload as received from the API.

    Every field is optional and untyped: nothing here is trusted until the
    normalizer has looked at it. Unknown keys are ignored.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)

    event_id: Any = None
    mongo_id: Any = Field(default=None, alias="_id")
    id: Any = None
    title: Any = None
    organization: Any = None
    organizer: Any = None
    description: Any = None
    full_description: Any = None
    category: Any = None
    date: Any = None
    time: Any = None
    end_time: Any = None
    location: Any = None
    coordinates: Any = None
    volunteers: Any = None
    max_volunteers: Any = None
    contact: Any = None
    verified: Any = None
    rating: Any = None
    reviews: Any = None
    impact: Any = None
    requirements: Any = None
    images: Any = None
    points: Any = None
    live_attendance: Any = None
    status: Any = None


class _EventModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class Coordinates(_EventModel):
    lat: float
    lng: float


class Contact(_EventModel):
    email: str = ""
    phone: str = ""
    website: str = ""


class Impact(_EventModel):
    waste_collected: str = "0"
    area_cleaned: str = "0"
    previous_participants: str = "0"


class NormalizedEvent(_EventModel):
    """Fully defaulted event. Every field has a value; nothing is None except coordinates."""
    id: str
    title: str
    organization: str
    organizer: str
    description: str
    full_description: str
    location: str
    category: str
    date: date
    date_known: bool = True
    time: str
    end_time: str
    coordinates: Optional[Coordinates] = None
    volunteers: int = 0
    max_volunteers: int = 10
    requirements: list[str]
    images: list[str] = []
    contact: Contact = Contact()
    verified: bool = False
    rating: float = 0.0
    reviews: int = 0
    impact: Impact = Impact()
    points: int = 0
    live_attendance: int = 0
    draft: bool = False


class EventViewModel(NormalizedEvent):
    """NormalizedEvent plus every render-ready derived metric."""
    progress_percent: int
    days_remaining: int
    status: EventStatus
    status_label: str
    category_label: str
    category_color: str
    seats_remaining: int
    is_full: bool
    featured: bool
    lifecycle: EventLifecycle
    display_date: str
    city: str
    region: str
