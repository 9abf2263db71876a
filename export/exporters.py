"""Calendar exporters writing CSV and iCalendar files."""

import csv
import io
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from uuid import NAMESPACE_URL, uuid5

from icalendar import Calendar as ICalCalendar
from icalendar import Event as ICalEvent

from models.errors import InvalidArgumentError
from models.event import Event

logger = logging.getLogger(__name__)

CSV_HEADER = ("Subject", "Start", "End", "Description", "Location", "Status", "AllDay", "SeriesId")
PRODID = "-//Virtual Calendar//EN"


class Exporter(ABC):
    """Base class for event exporters.

    Subclasses render a list of events to text; ``export`` takes care of the
    file name extension and of writing the file.
    """

    extensions: tuple[str, ...] = ()

    @abstractmethod
    def render(self, events: list[Event]) -> str:
        """Render events to the exporter's text format."""

    def export(self, events: list[Event], file_name: str) -> Path:
        """Write events to a file.

        Args:
            events: Events to export.
            file_name: Target file; the default extension is appended when
                the name lacks a supported one.

        Returns:
            Absolute path of the written file.
        """
        if not file_name.lower().endswith(self.extensions):
            file_name += self.extensions[0]
        path = Path(file_name).absolute()
        path.write_text(self.render(events), encoding="utf-8", newline="")
        logger.info("Exported %d events to %s", len(events), path)
        return path


class CsvExporter(Exporter):
    """CSV export with one row per event."""

    extensions = (".csv",)

    def render(self, events: list[Event]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for event in events:
            writer.writerow(
                (
                    event.subject,
                    event.start.isoformat(),
                    event.end.isoformat(),
                    event.description,
                    event.location,
                    event.status.value,
                    str(event.all_day).lower(),
                    event.series_id or "",
                )
            )
        return buffer.getvalue()


class IcsExporter(Exporter):
    """iCalendar (RFC 5545) export with times in UTC.

    Args:
        now: Timestamp used for DTSTAMP (defaults to the current time).
    """

    extensions = (".ics", ".ical")

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now

    def render(self, events: list[Event]) -> str:
        vcal = ICalCalendar()
        vcal.add("prodid", PRODID)
        vcal.add("version", "2.0")
        stamp = self.now or datetime.now(timezone.utc)

        for event in events:
            vevent = ICalEvent()
            vevent.add("uid", event_uid(event))
            vevent.add("dtstamp", stamp.astimezone(timezone.utc))
            vevent.add("summary", event.subject)
            if event.description:
                vevent.add("description", event.description)
            if event.location:
                vevent.add("location", event.location)
            vevent.add("dtstart", event.start.astimezone(timezone.utc))
            vevent.add("dtend", event.end.astimezone(timezone.utc))
            vcal.add_component(vevent)

        return vcal.to_ical().decode("utf-8")


def event_uid(event: Event) -> str:
    """Stable UID derived from the event's identity triple."""
    subject, start, end = event.identity
    name = f"{subject}|{start.isoformat()}|{end.isoformat()}"
    return f"{uuid5(NAMESPACE_URL, name)}@virtual-calendar"


def exporter_for(file_name: str) -> Exporter:
    """Pick the exporter matching a file name's extension.

    Args:
        file_name: Target file name.

    Returns:
        A CSV or iCalendar exporter.

    Raises:
        InvalidArgumentError: If the extension is not supported.
    """
    lowered = file_name.strip().lower()
    for exporter_class in (CsvExporter, IcsExporter):
        if lowered.endswith(exporter_class.extensions):
            return exporter_class()
    raise InvalidArgumentError("Unsupported format. Use .csv or .ical/.ics extension.")
