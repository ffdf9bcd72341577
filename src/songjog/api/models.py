"""Composition DTOs for the API layer.

Thin wrappers around EventViewModel; event fields are never duplicated here.
"""

import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ..events.event_models import Coordinates, EventViewModel
from ..utils.time import parse_event_date_safely


class SortKey(str, Enum):
    DATE = "date"
    VOLUNTEERS = "volunteers"
    RATING = "rating"
    RECOMMENDED = "recommended"
    DISTANCE = "distance"


class FilterSpec(BaseModel):
    """Listing filters as chosen in the UI. Defaults disable every predicate."""
    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    category: str = "all"
    date: Optional[datetime.date] = None
    distance: str = "any"
    user_location: Optional[Coordinates] = None

    @field_validator("search_text", "category", "distance", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Optional[datetime.date]:
        # Unparseable dates disable the date predicate
        return parse_event_date_safely(value)


class EventPartition(BaseModel):
    """Organizer dashboard tabs."""
    active: List[EventViewModel] = []
    draft: List[EventViewModel] = []
    completed: List[EventViewModel] = []


class JoinedEvents(BaseModel):
    """Volunteer dashboard tabs."""
    upcoming: List[EventViewModel] = []
    past: List[EventViewModel] = []


class EventBoardStats(BaseModel):
    total: int = 0
    active: int = 0
    draft: int = 0
    completed: int = 0
    total_volunteers: int = 0
