"""Copying events between calendars.

The copier reads a snapshot of a source calendar and inserts rebased clones
into a target calendar, which may live in another timezone. Batch copies
isolate failures per event: an event that collides with a target event, or
whose rebased times are invalid, is recorded in the returned report and the
rest of the batch carries on.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from pydantic import BaseModel, Field

from models.base_calendar import BaseCalendar
from models.errors import DuplicateEventError, EventNotFoundError, InvalidArgumentError
from models.event import Event, build_event
from models.recurrence import SeriesIdFactory, new_series_id

logger = logging.getLogger(__name__)


class SkippedEvent(BaseModel):
    """A source event a batch copy could not insert.

    Args:
        event: The source event.
        reason: Why it was skipped.
    """

    event: Event = Field(description="Source event that was not copied")
    reason: str = Field(description="Why the event was skipped")


class CopyReport(BaseModel):
    """Outcome of a batch copy.

    Args:
        copied: Events inserted into the target calendar.
        skipped: Source events that were not copied, with reasons.
    """

    copied: list[Event] = Field(default_factory=list, description="Inserted events")
    skipped: list[SkippedEvent] = Field(
        default_factory=list, description="Source events that failed to copy"
    )

    @property
    def copied_count(self) -> int:
        return len(self.copied)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def get_summary(self) -> str:
        return f"{self.copied_count} copied, {self.skipped_count} skipped"


def rebase_wall_clock(
    moment: datetime, source_zone: tzinfo, day_offset: int, target_zone: tzinfo
) -> datetime:
    """Shift a timestamp by whole days, keeping its local time of day.

    The timestamp is read as wall-clock time in the source zone, moved by
    ``day_offset`` days, and the same wall-clock reading is attached to the
    target zone.

    Args:
        moment: Timestamp to rebase.
        source_zone: Zone in which the wall-clock time is read.
        day_offset: Number of days to move.
        target_zone: Zone the result is expressed in.

    Returns:
        The rebased timestamp.
    """
    local = moment.astimezone(source_zone).replace(tzinfo=None)
    return (local + timedelta(days=day_offset)).replace(tzinfo=target_zone)


class EventCopier:
    """Copies events out of one source calendar.

    Args:
        source: Calendar to read events from.
        series_id_factory: Callable minting series ids for copied series.

    Raises:
        InvalidArgumentError: If source is None.
    """

    def __init__(
        self,
        source: BaseCalendar,
        series_id_factory: SeriesIdFactory = new_series_id,
    ) -> None:
        if source is None:
            raise InvalidArgumentError("Source calendar cannot be None")
        self.source = source
        self._series_id_factory = series_id_factory

    def copy_event(
        self,
        name: str,
        source_start: datetime,
        target: BaseCalendar,
        new_start: datetime,
    ) -> Event:
        """Copy one event to a new start time in the target calendar.

        The copy keeps the source event's duration and descriptive fields
        and is standalone (no series id).

        Args:
            name: Subject of the source event (case-insensitive).
            source_start: Exact start of the source event.
            target: Calendar to insert into.
            new_start: Start of the copy.

        Returns:
            The inserted event.

        Raises:
            InvalidArgumentError: If target is None, name is blank, or several
                source events share the name and start.
            EventNotFoundError: If the source event does not exist.
            DuplicateEventError: If the copy collides with a target event.
        """
        if target is None:
            raise InvalidArgumentError("Target calendar cannot be None")
        if not name or not name.strip():
            raise InvalidArgumentError("Event name cannot be blank")
        if new_start.tzinfo is None:
            raise InvalidArgumentError("New start must be timezone-aware")

        source_event = self._find_event(name, source_start)
        start = new_start.astimezone(target.zone)
        copy = build_event(
            subject=source_event.subject,
            start=start,
            end=start + source_event.duration,
            description=source_event.description,
            location=source_event.location,
            status=source_event.status,
            all_day=source_event.all_day,
        )
        target.create_event(copy)
        logger.info("Copied %s to %s", source_event.get_summary(), copy.get_summary())
        return copy

    def copy_events_on_date(
        self, source_date: date, target: BaseCalendar, target_date: date
    ) -> CopyReport:
        """Copy every event of one day onto another day of the target calendar.

        Args:
            source_date: Day to copy from (in the source calendar's zone).
            target: Calendar to insert into.
            target_date: Day the copies land on.

        Returns:
            Report of copied and skipped events.

        Raises:
            InvalidArgumentError: If target or either date is None.
        """
        if target is None:
            raise InvalidArgumentError("Target calendar cannot be None")
        if source_date is None or target_date is None:
            raise InvalidArgumentError("Dates cannot be None")

        events = self.source.query_events_on(source_date)
        day_offset = (target_date - source_date).days
        return self._copy_batch(events, target, day_offset)

    def copy_events_between(
        self,
        start_date: date,
        end_date: date,
        target: BaseCalendar,
        target_start_date: date,
    ) -> CopyReport:
        """Copy every event starting within an inclusive date range.

        Events of one source series land in one new series in the target,
        distinct from the source series and from every other copied series.

        Args:
            start_date: First day of the range.
            end_date: Last day of the range (inclusive).
            target: Calendar to insert into.
            target_start_date: Day that start_date maps to.

        Returns:
            Report of copied and skipped events.

        Raises:
            InvalidArgumentError: If target or a date is None, or the range is
                reversed. Raised before anything is copied.
        """
        if target is None:
            raise InvalidArgumentError("Target calendar cannot be None")
        if start_date is None or end_date is None or target_start_date is None:
            raise InvalidArgumentError("Dates cannot be None")
        if end_date < start_date:
            raise InvalidArgumentError("End date must be after or equal to start date")

        zone = self.source.zone
        range_start = datetime.combine(start_date, time.min, tzinfo=zone)
        range_end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=zone)
        events = [
            event
            for event in self.source.query_events_between(range_start, range_end)
            if start_date <= event.start.astimezone(zone).date() <= end_date
        ]
        day_offset = (target_start_date - start_date).days
        return self._copy_batch(events, target, day_offset)

    def _find_event(self, name: str, start: datetime) -> Event:
        matches = [
            event
            for event in self.source.get_all_events()
            if event.subject.casefold() == name.casefold() and event.start == start
        ]
        if not matches:
            raise EventNotFoundError(f"Event '{name}' not found at {start.isoformat()}")
        if len(matches) > 1:
            raise InvalidArgumentError(
                f"{len(matches)} events named '{name}' start at {start.isoformat()}; "
                "specify the end time"
            )
        return matches[0]

    def _copy_batch(
        self, events: list[Event], target: BaseCalendar, day_offset: int
    ) -> CopyReport:
        report = CopyReport()
        new_series_ids: dict[str, str] = defaultdict(self._series_id_factory)

        for event in sorted(events, key=lambda e: e.sort_key):
            series_id: Optional[str] = None
            if event.series_id is not None:
                series_id = new_series_ids[event.series_id]
            try:
                copy = self._rebase(event, target, day_offset, series_id)
                target.create_event(copy)
            except (DuplicateEventError, InvalidArgumentError) as e:
                logger.warning("Skipped copying %s: %s", event.get_summary(), e)
                report.skipped.append(SkippedEvent(event=event, reason=str(e)))
                continue
            logger.debug("Copied %s to %s", event.get_summary(), copy.get_summary())
            report.copied.append(copy)

        logger.info("Copied events: %s", report.get_summary())
        return report

    def _rebase(
        self,
        event: Event,
        target: BaseCalendar,
        day_offset: int,
        series_id: Optional[str],
    ) -> Event:
        source_zone = self.source.zone
        target_zone = target.zone
        return build_event(
            subject=event.subject,
            start=rebase_wall_clock(event.start, source_zone, day_offset, target_zone),
            end=rebase_wall_clock(event.end, source_zone, day_offset, target_zone),
            description=event.description,
            location=event.location,
            status=event.status,
            all_day=event.all_day,
            series_id=series_id,
        )
