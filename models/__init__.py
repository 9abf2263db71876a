"""Virtual calendar data models package.

This package contains the calendar engine: immutable events, weekly
recurrence rules, the in-memory calendar with scoped series edits, the
cross-calendar copier and the calendar registry.
"""

from models.base_calendar import BaseCalendar
from models.calendar import CalendarModel, EditMode
from models.copier import CopyReport, EventCopier, SkippedEvent
from models.errors import (
    CalendarError,
    CalendarNotFoundError,
    DuplicateEventError,
    EventNotFoundError,
    InvalidArgumentError,
    NoActiveCalendarError,
)
from models.event import Event, EventKey, EventStatus
from models.manager import CalendarManager
from models.recurrence import RecurrenceRule, Weekday, new_series_id

__all__ = [
    "BaseCalendar",
    "CalendarModel",
    "EditMode",
    "CopyReport",
    "EventCopier",
    "SkippedEvent",
    "CalendarError",
    "CalendarNotFoundError",
    "DuplicateEventError",
    "EventNotFoundError",
    "InvalidArgumentError",
    "NoActiveCalendarError",
    "Event",
    "EventKey",
    "EventStatus",
    "CalendarManager",
    "RecurrenceRule",
    "Weekday",
    "new_series_id",
]
