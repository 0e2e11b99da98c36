"""Data models for calendar events and the calendar view - planner_lite."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class EventColor(str, Enum):
    """Fixed palette an event color is drawn from."""

    TEAL = "#c6e8ee"
    ROSE = "#f7c8c8"
    AMBER = "#fde68a"
    INDIGO = "#c7d2fe"
    CYAN = "#a5f3fc"


# Color used by the store for records saved without one
DEFAULT_STORED_COLOR = "#3788d8"


class RepeatRule(str, Enum):
    """Closed set of repeat rules offered by the event form."""

    NONE = "none"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    EVERY3 = "every3"
    EVERY6 = "every6"
    YEARLY = "yearly"

    @classmethod
    def coerce(cls, value: Any) -> RepeatRule:
        """Map any input to a rule; unknown or missing values become NONE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.NONE
        return cls.NONE


class Granularity(str, Enum):
    """Display resolution of the calendar view."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def view_key(self) -> str:
        """Native view name understood by the embedded calendar widget."""
        return _VIEW_KEYS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_view_key(cls, key: str) -> Granularity:
        for granularity, view_key in _VIEW_KEYS.items():
            if view_key == key:
                return granularity
        return cls(key)


_VIEW_KEYS: dict[Granularity, str] = {
    Granularity.DAY: "timeGridDay",
    Granularity.WEEK: "timeGridWeek",
    Granularity.MONTH: "dayGridMonth",
}


class Occurrence(BaseModel):
    """One concrete, time-bound calendar event instance.

    Datetimes are naive local wall-clock values.
    """

    title: str = Field(..., description="Event title")
    start: datetime = Field(..., description="Local start time")
    end: datetime = Field(..., description="Local end time")
    color: EventColor = Field(default=EventColor.TEAL, description="Display color")
    location: str = Field(default="", description="Free-text location")
    notes: str = Field(default="", description="Free-text notes")
    all_day: bool = Field(default=False, description="All-day event flag")

    model_config = ConfigDict(frozen=True)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class PersistedOccurrence(BaseModel):
    """An occurrence together with the identifier the store assigned to it."""

    id: str = Field(..., description="Store-assigned identifier")
    title: str
    start: datetime
    end: datetime
    color: str = Field(default=DEFAULT_STORED_COLOR)
    location: str = ""
    notes: str = ""
    all_day: bool = False

    @classmethod
    def from_occurrence(cls, identifier: str, occurrence: Occurrence) -> PersistedOccurrence:
        return cls(
            id=identifier,
            title=occurrence.title,
            start=occurrence.start,
            end=occurrence.end,
            color=occurrence.color.value,
            location=occurrence.location,
            notes=occurrence.notes,
            all_day=occurrence.all_day,
        )

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class EventDraft(BaseModel):
    """Pre-filled state of the new-event form."""

    title: str = ""
    location: str = ""
    date: str = Field(..., description="Date as YYYY-MM-DD")
    start_time: str = Field(default="09:00", description="Start time as HH:MM")
    end_time: str = Field(default="10:00", description="End time as HH:MM")
    notes: str = ""
    repeat: RepeatRule = RepeatRule.NONE

    @field_validator("repeat", mode="before")
    @classmethod
    def coerce_repeat(cls, value: Any) -> RepeatRule:
        return RepeatRule.coerce(value)


@dataclass
class ViewState:
    """Mutable state of one calendar session's visible range."""

    granularity: Granularity
    anchor_date: date
    displayed_title: str = ""
    title_override: Optional[str] = None
    month_picker: str = ""
