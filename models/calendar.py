"""Calendar model: event storage, series creation and scoped edits."""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import ConfigDict, Field, PrivateAttr

from models.base_calendar import BaseCalendar
from models.errors import DuplicateEventError, EventNotFoundError, InvalidArgumentError
from models.event import TIME_PROPERTIES, Event, EventKey, normalize_property
from models.recurrence import RecurrenceRule, SeriesIdFactory, new_series_id

logger = logging.getLogger(__name__)

Identity = tuple[str, datetime, datetime]


class EditMode(str, Enum):
    """Which events of a series an edit reaches."""

    SINGLE = "single"
    FROM_THIS_ONWARD = "from_this_onward"
    ENTIRE_SERIES = "entire_series"


class CalendarModel(BaseCalendar):
    """In-memory calendar holding one set of events.

    Events are keyed by their identity triple (case-folded subject, start,
    end), so no two stored events can share it. Events are never mutated in
    place: every edit builds a validated replacement and swaps it in.

    Args:
        timezone: IANA name of the calendar's timezone.
        series_id_factory: Callable minting new series ids (for generated
            series and for series splits).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    series_id_factory: SeriesIdFactory = Field(
        default=new_series_id,
        exclude=True,
        description="Callable returning a fresh series id",
    )

    _events: dict[Identity, Event] = PrivateAttr(default_factory=dict)

    # ===== Creation =====

    def create_event(self, event: Event) -> Event:
        """Store a single event.

        Args:
            event: Event to store.

        Returns:
            The stored event.

        Raises:
            DuplicateEventError: If an event with the same identity exists.
        """
        self._check_batch([event])
        self._events[event.identity] = event
        logger.info("Created event %s", event.get_summary())
        return event

    def create_series(self, seed: Event, rule: RecurrenceRule) -> list[Event]:
        """Generate a series from a seed and store it all-or-nothing.

        Args:
            seed: First event of the series.
            rule: Weekly recurrence rule.

        Returns:
            The stored events.

        Raises:
            InvalidArgumentError: If the rule produces no events.
            DuplicateEventError: If any generated event collides with a stored
                one; storage is left unchanged.
        """
        series = rule.generate_series(seed, self.series_id_factory)
        if not series:
            raise InvalidArgumentError(
                f"Recurrence {rule.describe()} produces no events for '{seed.subject}'"
            )

        self._check_batch(series)
        for event in series:
            self._events[event.identity] = event

        logger.info(
            "Created series '%s' (%s) with %d events",
            seed.subject,
            rule.describe(),
            len(series),
        )
        return series

    # ===== Editing =====

    def edit_event(self, key: EventKey, property_name: str, value: Any) -> Event:
        """Replace one property of the event matching the key.

        Args:
            key: Lookup key; a missing end matches any end.
            property_name: Property to change.
            value: New value.

        Returns:
            The replacement event.

        Raises:
            EventNotFoundError: If no event matches.
            InvalidArgumentError: If the key is ambiguous or the edit is invalid.
            DuplicateEventError: If the edited event collides with another one.
        """
        anchor = self._resolve_anchor(key)
        updated = anchor.copy_with(property_name, value)
        self._replace([(anchor, updated)])
        logger.info("Edited %s: %s -> %r", anchor.get_summary(), property_name, value)
        return updated

    def edit_series(
        self, key: EventKey, property_name: str, value: Any, mode: EditMode
    ) -> list[Event]:
        """Replace one property across the events selected by mode.

        The anchor is resolved like in edit_event. Standalone anchors are
        always edited alone. Start/end edits that reach several events shift
        each event by the anchor's wall-clock change. A start/end edit in
        FROM_THIS_ONWARD mode moves the edited events into a new series.

        Args:
            key: Lookup key of the anchor event.
            property_name: Property to change.
            value: New value (for start/end: the anchor's new time).
            mode: Edit scope.

        Returns:
            The replacement events.

        Raises:
            EventNotFoundError: If no anchor matches.
            InvalidArgumentError: If the edit is invalid for any affected event.
            DuplicateEventError: If a replacement collides with an unaffected
                event. Storage is unchanged on every failure.
        """
        name = normalize_property(property_name)
        mode = EditMode(mode)
        anchor = self._resolve_anchor(key)

        if mode is EditMode.SINGLE or not anchor.is_recurring():
            if mode is not EditMode.SINGLE:
                logger.debug(
                    "%s is not part of a series, editing it alone", anchor.get_summary()
                )
            updated = anchor.copy_with(name, value)
            self._replace([(anchor, updated)])
            return [updated]

        affected = self._select_scope(anchor, mode)
        split_series_id: Optional[str] = None
        if name in TIME_PROPERTIES and mode is EditMode.FROM_THIS_ONWARD:
            split_series_id = self.series_id_factory()

        replacements = []
        for event in affected:
            updated = event.copy_with(name, self._scoped_value(anchor, event, name, value))
            if split_series_id is not None:
                updated = updated.with_series_id(split_series_id)
            replacements.append((event, updated))

        self._replace(replacements)
        logger.info(
            "Edited %d events of series %s (%s): %s -> %r",
            len(replacements),
            anchor.series_id,
            mode.value,
            name,
            value,
        )
        if split_series_id is not None:
            logger.info("Split series %s into %s", anchor.series_id, split_series_id)
        return [updated for _, updated in replacements]

    def _resolve_anchor(self, key: EventKey) -> Event:
        matches = [event for event in self._sorted_events() if key.matches(event)]
        if not matches:
            raise EventNotFoundError(f"No event found matching {key}")
        if len(matches) > 1:
            raise InvalidArgumentError(
                f"{len(matches)} events match {key}; specify the end time"
            )
        return matches[0]

    def _select_scope(self, anchor: Event, mode: EditMode) -> list[Event]:
        members = [
            event
            for event in self._sorted_events()
            if event.belongs_to_series(anchor.series_id)
        ]
        if mode is EditMode.FROM_THIS_ONWARD:
            return [event for event in members if event.start >= anchor.start]
        return members

    @staticmethod
    def _scoped_value(anchor: Event, event: Event, name: str, value: Any) -> Any:
        if name not in TIME_PROPERTIES:
            return value
        if not isinstance(value, datetime) or value.tzinfo is None:
            raise InvalidArgumentError(f"New {name} must be a timezone-aware datetime")
        current = getattr(anchor, name)
        shift = value.astimezone(current.tzinfo).replace(tzinfo=None) - current.replace(
            tzinfo=None
        )
        return getattr(event, name) + shift

    def _check_batch(self, events: list[Event], replacing: Iterable[Identity] = ()) -> None:
        freed = set(replacing)
        seen: set[Identity] = set()
        for event in events:
            taken = event.identity in self._events and event.identity not in freed
            if taken or event.identity in seen:
                raise DuplicateEventError(
                    f"Duplicate or conflicting event: {event.get_summary()}", event
                )
            seen.add(event.identity)

    def _replace(self, replacements: list[tuple[Event, Event]]) -> None:
        old_identities = [old.identity for old, _ in replacements]
        self._check_batch([new for _, new in replacements], replacing=old_identities)
        for identity in old_identities:
            del self._events[identity]
        for _, new in replacements:
            self._events[new.identity] = new

    # ===== Queries =====

    def _sorted_events(self) -> list[Event]:
        return sorted(self._events.values(), key=lambda event: event.sort_key)

    def query_events_on(self, day: date) -> list[Event]:
        """Return events whose [start, end) intersects the day in this calendar's zone.

        Args:
            day: Calendar date.

        Returns:
            Matching events sorted by start.
        """
        zone = self.zone
        return [event for event in self._sorted_events() if event.occurs_on(day, zone)]

    def query_events_between(self, start: datetime, end: datetime) -> list[Event]:
        """Return events with start < range end and end > range start.

        Args:
            start: Range start.
            end: Range end.

        Returns:
            Matching events sorted by start.
        """
        return [event for event in self._sorted_events() if event.overlaps(start, end)]

    def is_busy(self, timestamp: datetime) -> bool:
        """Check if any event covers the timestamp (both ends inclusive)."""
        return any(event.contains(timestamp) for event in self._events.values())

    def get_all_events(self) -> list[Event]:
        return self._sorted_events()

    def get_series(self, series_id: str) -> list[Event]:
        """Return the stored events of one series.

        Args:
            series_id: Series identifier.

        Returns:
            Events of the series sorted by start (empty if unknown).
        """
        return [event for event in self._sorted_events() if event.belongs_to_series(series_id)]

    @property
    def event_count(self) -> int:
        return len(self._events)

    def validate_state(self) -> list[str]:
        errors = []
        for identity, event in self._events.items():
            if identity != event.identity:
                errors.append(f"Event {event.get_summary()} is stored under a stale key")
            if event.end <= event.start:
                errors.append(
                    f"Event {event.get_summary()} has invalid time range: "
                    f"{event.start} to {event.end}"
                )
        return errors

    @property
    def summary(self) -> str:
        """Brief description such as ``5 events (1 series) in Europe/Paris``."""
        series = {event.series_id for event in self._events.values() if event.series_id}
        return f"{self.event_count} events ({len(series)} series) in {self.timezone}"
