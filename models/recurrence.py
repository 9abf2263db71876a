"""Weekly recurrence rules and series generation."""

from datetime import date, datetime, timedelta
from enum import IntEnum
from typing import Any, Callable, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.event import Event, build_event

SeriesIdFactory = Callable[[], str]


def new_series_id() -> str:
    """Mint a fresh, globally unique series identifier."""
    return str(uuid4())


class Weekday(IntEnum):
    """Day of the week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.weekday())


class RecurrenceRule(BaseModel):
    """Weekly recurrence pattern with a termination condition.

    Exactly one of ``occurrences`` or ``until`` must be given.

    Args:
        weekdays: Days of the week the series repeats on (non-empty).
        occurrences: Number of events to generate.
        until: Last date (inclusive) on which an event may be generated.
    """

    model_config = ConfigDict(frozen=True)

    weekdays: frozenset[Weekday] = Field(description="Days the series repeats on")
    occurrences: Optional[int] = Field(
        default=None, ge=1, description="Number of occurrences"
    )
    until: Optional[date] = Field(default=None, description="Inclusive end date")

    @field_validator("weekdays", mode="before")
    @classmethod
    def coerce_weekday_names(cls, value: Any) -> Any:
        """Accept weekday names ("monday") alongside Weekday members."""
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value
        weekdays = set()
        for day in value:
            if isinstance(day, str):
                try:
                    day = Weekday[day.strip().upper()]
                except KeyError as e:
                    raise ValueError(f"Unknown weekday: {day}") from e
            weekdays.add(day)
        return frozenset(weekdays)

    @field_validator("weekdays")
    @classmethod
    def validate_weekdays(cls, weekdays: frozenset[Weekday]) -> frozenset[Weekday]:
        if not weekdays:
            raise ValueError("Recurrence rule needs at least one weekday")
        return weekdays

    @model_validator(mode="after")
    def validate_termination(self) -> "RecurrenceRule":
        if (self.occurrences is None) == (self.until is None):
            raise ValueError("Specify either occurrences or until date, not both")
        return self

    def generate_series(
        self, seed: Event, series_id_factory: SeriesIdFactory = new_series_id
    ) -> list[Event]:
        """Expand a seed event into the events of one series.

        Walks forward a day at a time from the seed's start date and emits an
        event on every matching weekday, at the seed's wall-clock start time
        and with the seed's duration. All emitted events share one freshly
        minted series id.

        Args:
            seed: Event providing subject, times and descriptive fields.
            series_id_factory: Callable returning a new series id.

        Returns:
            The generated events in chronological order.
        """
        series_id = series_id_factory()
        duration = seed.end - seed.start
        day = seed.start.date()
        events: list[Event] = []

        while self.until is None or day <= self.until:
            if Weekday.of(day) in self.weekdays:
                start = datetime.combine(day, seed.start.time(), tzinfo=seed.start.tzinfo)
                events.append(
                    build_event(
                        subject=seed.subject,
                        start=start,
                        end=start + duration,
                        description=seed.description,
                        location=seed.location,
                        status=seed.status,
                        all_day=seed.all_day,
                        series_id=series_id,
                    )
                )
                if self.occurrences is not None and len(events) >= self.occurrences:
                    break
            day += timedelta(days=1)

        return events

    def describe(self) -> str:
        """Short description such as ``MON,WED for 3 times``."""
        days = ",".join(day.name[:3] for day in sorted(self.weekdays))
        if self.occurrences is not None:
            return f"{days} for {self.occurrences} times"
        return f"{days} until {self.until.isoformat()}"
