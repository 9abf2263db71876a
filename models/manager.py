"""Calendar registry - named calendars plus the active selection."""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from models.base_calendar import resolve_zone
from models.calendar import CalendarModel
from models.errors import CalendarNotFoundError, InvalidArgumentError, NoActiveCalendarError
from models.recurrence import SeriesIdFactory, new_series_id

logger = logging.getLogger(__name__)


class CalendarManager(BaseModel):
    """Registry of named calendars.

    The manager is a passive container: it creates, renames and selects
    calendars but never touches their events. The first calendar created
    becomes the active one.

    Args:
        calendars: Mapping of calendar name to calendar.
        active_name: Name of the active calendar, if any.
        series_id_factory: Series id factory handed to every new calendar.

    Example:
        >>> manager = CalendarManager()
        >>> _ = manager.create_calendar("work", "America/New_York")
        >>> manager.active_calendar.timezone
        'America/New_York'
    """

    calendars: dict[str, CalendarModel] = Field(
        default_factory=dict, description="Calendars by name"
    )
    active_name: Optional[str] = Field(default=None, description="Active calendar name")
    series_id_factory: SeriesIdFactory = Field(
        default=new_series_id, exclude=True, description="Series id factory for new calendars"
    )

    def create_calendar(self, name: str, timezone: str) -> CalendarModel:
        """Create and register a new calendar.

        Args:
            name: Unique, non-blank calendar name.
            timezone: IANA timezone name.

        Returns:
            The new calendar.

        Raises:
            InvalidArgumentError: If the name is blank or taken, or the
                timezone is invalid.
        """
        if not name or not name.strip():
            raise InvalidArgumentError("Calendar name cannot be blank")
        if name in self.calendars:
            raise InvalidArgumentError(f"Calendar with name '{name}' already exists")
        resolve_zone(timezone)

        calendar = CalendarModel(timezone=timezone, series_id_factory=self.series_id_factory)
        self.calendars[name] = calendar
        if self.active_name is None:
            self.active_name = name
        logger.info("Created calendar %s [%s]", name, calendar.timezone)
        return calendar

    def edit_calendar(self, name: str, property_name: str, value: str) -> None:
        """Rename a calendar or change its timezone.

        Args:
            name: Calendar to edit.
            property_name: "name" or "timezone" (case-insensitive).
            value: New name or IANA zone.

        Raises:
            CalendarNotFoundError: If no calendar has that name.
            InvalidArgumentError: If the property or value is invalid.
        """
        calendar = self.get_calendar(name)
        if calendar is None:
            raise CalendarNotFoundError(name)

        prop = (property_name or "").strip().lower()
        if prop == "name":
            if not value or not value.strip():
                raise InvalidArgumentError("New name cannot be blank")
            if value in self.calendars:
                raise InvalidArgumentError(f"A calendar named '{value}' already exists")
            self.calendars[value] = self.calendars.pop(name)
            if self.active_name == name:
                self.active_name = value
        elif prop == "timezone":
            calendar.set_timezone(value)
        else:
            raise InvalidArgumentError(f"Unsupported calendar property: {property_name}")
        logger.info("Calendar %s updated: %s -> %s", name, prop, value)

    def use_calendar(self, name: str) -> CalendarModel:
        """Make a calendar the active one.

        Args:
            name: Calendar name.

        Returns:
            The now-active calendar.

        Raises:
            CalendarNotFoundError: If no calendar has that name.
        """
        if name not in self.calendars:
            raise CalendarNotFoundError(name)
        self.active_name = name
        logger.debug("Active calendar is now %s", name)
        return self.calendars[name]

    def get_calendar(self, name: str) -> Optional[CalendarModel]:
        """Get calendar by name.

        Args:
            name: Calendar name.

        Returns:
            The calendar or None if not found.
        """
        return self.calendars.get(name)

    def require_calendar(self, name: str) -> CalendarModel:
        """Get calendar by name, failing if it does not exist.

        Raises:
            CalendarNotFoundError: If no calendar has that name.
        """
        calendar = self.get_calendar(name)
        if calendar is None:
            raise CalendarNotFoundError(name)
        return calendar

    def list_calendars(self) -> list[str]:
        return list(self.calendars)

    @property
    def active_calendar(self) -> CalendarModel:
        """The active calendar.

        Raises:
            NoActiveCalendarError: If none is selected.
        """
        if self.active_name is None:
            raise NoActiveCalendarError()
        return self.calendars[self.active_name]
