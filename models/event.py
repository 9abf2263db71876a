"""Calendar event value objects."""

from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from models.errors import InvalidArgumentError, validation_message

ALL_DAY_START = time(8, 0)
ALL_DAY_END = time(17, 0)

EDITABLE_PROPERTIES = ("subject", "start", "end", "description", "location", "status")
TIME_PROPERTIES = frozenset({"start", "end"})


class EventStatus(str, Enum):
    """Visibility of an event."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


def _require_aware(dt: datetime, field_name: str) -> datetime:
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"Event {field_name} time must be timezone-aware")
    return dt


def normalize_property(property_name: str) -> str:
    """Return the canonical editable property name.

    Args:
        property_name: Property name as given by the caller (any case).

    Returns:
        The lower-case property name.

    Raises:
        InvalidArgumentError: If the property cannot be edited.
    """
    name = (property_name or "").strip().lower()
    if name not in EDITABLE_PROPERTIES:
        raise InvalidArgumentError(f"Unknown property: {property_name}")
    return name


class Event(BaseModel):
    """An immutable calendar entry.

    Equality and hashing use the identity triple (subject, start, end), with
    the subject compared case-insensitively. This triple is the primary key of
    an event inside a calendar.

    Args:
        subject: Event title, must not be blank.
        start: Timezone-aware start datetime.
        end: Timezone-aware end datetime, strictly after start.
        description: Free-text description.
        location: Free-text location.
        status: PUBLIC or PRIVATE.
        all_day: When True, start/end are normalized to 08:00-17:00 of the
            start date.
        series_id: Identifier shared by the events of one recurring series,
            None for standalone events.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(description="Event title")
    start: datetime = Field(description="Start datetime (timezone-aware)")
    end: datetime = Field(description="End datetime (timezone-aware)")
    description: str = Field(default="", description="Event description")
    location: str = Field(default="", description="Event location")
    status: EventStatus = Field(default=EventStatus.PRIVATE, description="Visibility")
    all_day: bool = Field(default=False, description="All-day event flag")
    series_id: Optional[str] = Field(
        default=None, description="Recurring series identifier"
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_all_day(cls, data: Any) -> Any:
        """Pin all-day events to 08:00-17:00 of their start date."""
        if not isinstance(data, dict) or not data.get("all_day"):
            return data
        start = data.get("start")
        if isinstance(start, str):
            start = datetime.fromisoformat(start)
        if not isinstance(start, datetime):
            return data
        return {
            **data,
            "start": datetime.combine(start.date(), ALL_DAY_START, tzinfo=start.tzinfo),
            "end": datetime.combine(start.date(), ALL_DAY_END, tzinfo=start.tzinfo),
        }

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, subject: str) -> str:
        if not subject.strip():
            raise ValueError("Event subject cannot be blank")
        return subject

    @field_validator("start")
    @classmethod
    def validate_start(cls, start: datetime) -> datetime:
        return _require_aware(start, "start")

    @field_validator("end")
    @classmethod
    def validate_end(cls, end: datetime) -> datetime:
        return _require_aware(end, "end")

    @field_validator("description", "location", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, EventStatus):
            return value.strip().upper()
        return value

    @field_validator("series_id", mode="before")
    @classmethod
    def blank_series_id_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def validate_time_range(self) -> "Event":
        if self.end <= self.start:
            raise ValueError("Event end time must be after start time")
        return self

    @property
    def identity(self) -> tuple[str, datetime, datetime]:
        """Storage key of this event: (case-folded subject, start, end)."""
        return (self.subject.casefold(), self.start, self.end)

    @property
    def key(self) -> "EventKey":
        """Exact lookup key for this event."""
        return EventKey(subject=self.subject, start=self.start, end=self.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def sort_key(self) -> tuple[datetime, datetime, str]:
        return (self.start, self.end, self.subject.casefold())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def is_recurring(self) -> bool:
        """Check if this event belongs to a series.

        Returns:
            True if the event has a series_id.
        """
        return self.series_id is not None

    def belongs_to_series(self, series_id: Optional[str]) -> bool:
        return series_id is not None and self.series_id == series_id

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        """Check if [start, end) intersects the given range.

        Args:
            range_start: Start of the range.
            range_end: End of the range.

        Returns:
            True if the event overlaps the range.
        """
        return self.start < range_end and self.end > range_start

    def occurs_on(self, day: date, zone: Optional[tzinfo] = None) -> bool:
        """Check if the event overlaps a calendar day.

        Args:
            day: The calendar date.
            zone: Timezone the day is measured in (defaults to the event's own).

        Returns:
            True if [start, end) intersects the day.
        """
        zone = zone or self.start.tzinfo
        day_start = datetime.combine(day, time.min, tzinfo=zone)
        day_end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
        return self.overlaps(day_start, day_end)

    def contains(self, timestamp: datetime) -> bool:
        """Check if a timestamp falls within [start, end], both ends inclusive."""
        return self.start <= timestamp <= self.end

    def copy_with(self, property_name: str, value: Any) -> "Event":
        """Return a new event with one property replaced.

        The copy goes through full validation, so a start moved past the end
        (or a blank subject) is rejected. Editing start or end of an all-day
        event turns it into a timed event.

        Args:
            property_name: One of subject, start, end, description, location,
                status (case-insensitive).
            value: The new value.

        Returns:
            The modified copy.

        Raises:
            InvalidArgumentError: If the property is unknown or the result
                violates an event invariant.
        """
        name = normalize_property(property_name)
        data = self.model_dump()
        data[name] = value
        if name in TIME_PROPERTIES:
            data["all_day"] = False
        return build_event(**data)

    def with_series_id(self, series_id: Optional[str]) -> "Event":
        """Return a copy assigned to another series (or to none)."""
        return build_event(**{**self.model_dump(), "series_id": series_id})

    def get_summary(self) -> str:
        """Generate a one-line description of this event.

        Returns:
            Summary such as ``Standup (2025-11-10 09:00 - 2025-11-10 09:30)``.
        """
        fmt = "%Y-%m-%d %H:%M"
        return f"{self.subject} ({self.start.strftime(fmt)} - {self.end.strftime(fmt)})"

    def __str__(self) -> str:
        return self.get_summary()


def build_event(**fields: Any) -> Event:
    """Construct an Event, reporting invariant violations as InvalidArgumentError.

    Args:
        **fields: Event field values.

    Returns:
        The validated event.

    Raises:
        InvalidArgumentError: If any field or invariant is invalid.
    """
    try:
        return Event(**fields)
    except ValidationError as e:
        raise InvalidArgumentError(validation_message(e)) from e


class EventKey(BaseModel):
    """Descriptor used to locate a stored event or the anchor of a series.

    Args:
        subject: Event title, matched case-insensitively.
        start: Exact start datetime.
        end: Exact end datetime, or None to match any end.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(description="Event title (case-insensitive)")
    start: datetime = Field(description="Exact start datetime")
    end: Optional[datetime] = Field(
        default=None, description="Exact end datetime, None matches any"
    )

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, subject: str) -> str:
        if not subject.strip():
            raise ValueError("EventKey subject cannot be blank")
        return subject

    @property
    def is_wildcard(self) -> bool:
        return self.end is None

    def matches(self, event: Event) -> bool:
        """Check if an event matches this key.

        Args:
            event: Event to test.

        Returns:
            True if subject (case-insensitive) and start match, and end
            matches or is a wildcard.
        """
        return (
            event.subject.casefold() == self.subject.casefold()
            and event.start == self.start
            and (self.end is None or event.end == self.end)
        )

    def __str__(self) -> str:
        end = self.end.isoformat() if self.end else "*"
        return f"{self.subject} [{self.start.isoformat()} -> {end}]"
