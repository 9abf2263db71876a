"""Base class for calendar implementations."""

from abc import abstractmethod
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from models.errors import InvalidArgumentError

if TYPE_CHECKING:
    from models.calendar import EditMode
    from models.event import Event, EventKey
    from models.recurrence import RecurrenceRule


def resolve_zone(name: str) -> ZoneInfo:
    """Look up an IANA timezone.

    Args:
        name: Zone name such as "America/New_York".

    Returns:
        The ZoneInfo for the name.

    Raises:
        InvalidArgumentError: If the name is blank or unknown.
    """
    if not name or not name.strip():
        raise InvalidArgumentError("Timezone cannot be blank")
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid timezone: {name}") from e


class BaseCalendar(BaseModel):
    """Contract every calendar offers to the command layer, copier and exporters.

    A calendar owns a set of events and a timezone. Callers never touch the
    event storage directly; every interaction goes through these operations.

    Args:
        timezone: IANA name of the calendar's timezone.
    """

    timezone: str = Field(description="IANA timezone name")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, timezone: str) -> str:
        resolve_zone(timezone)
        return timezone.strip()

    @property
    def zone(self) -> ZoneInfo:
        """The calendar's timezone as a tzinfo."""
        return ZoneInfo(self.timezone)

    def set_timezone(self, timezone: str) -> None:
        """Change the calendar's timezone.

        Stored events keep their absolute instants.

        Args:
            timezone: New IANA zone name.

        Raises:
            InvalidArgumentError: If the zone is unknown.
        """
        resolve_zone(timezone)
        self.timezone = timezone.strip()

    @abstractmethod
    def create_event(self, event: "Event") -> "Event":
        """Store a single event.

        Raises:
            DuplicateEventError: If an event with the same identity exists.
        """

    @abstractmethod
    def create_series(self, seed: "Event", rule: "RecurrenceRule") -> list["Event"]:
        """Expand a seed with a rule and store the whole series atomically.

        Raises:
            DuplicateEventError: If any generated event collides; nothing
                is stored in that case.
        """

    @abstractmethod
    def edit_event(self, key: "EventKey", property_name: str, value: Any) -> "Event":
        """Replace one property of the single event matching the key.

        Raises:
            EventNotFoundError: If no event matches.
        """

    @abstractmethod
    def edit_series(
        self, key: "EventKey", property_name: str, value: Any, mode: "EditMode"
    ) -> list["Event"]:
        """Replace one property across the scope selected by mode.

        Raises:
            EventNotFoundError: If no anchor event matches.
        """

    @abstractmethod
    def query_events_on(self, day: date) -> list["Event"]:
        """Return events overlapping a calendar day."""

    @abstractmethod
    def query_events_between(self, start: datetime, end: datetime) -> list["Event"]:
        """Return events overlapping a time range."""

    @abstractmethod
    def is_busy(self, timestamp: datetime) -> bool:
        """Check if any event covers the timestamp."""

    @abstractmethod
    def get_all_events(self) -> list["Event"]:
        """Return a snapshot of every stored event."""

    @abstractmethod
    def validate_state(self) -> list[str]:
        """Validate internal consistency.

        Returns:
            List of validation error messages (empty list if valid).
        """
