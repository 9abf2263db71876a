"""Unit tests for CalendarModel.

Covers storage and duplicate detection, all-or-nothing series creation, the
three edit scopes and the read-only queries.
"""

from datetime import date, timedelta

import pytest

from models.calendar import CalendarModel, EditMode
from models.errors import DuplicateEventError, EventNotFoundError, InvalidArgumentError
from models.event import EventKey
from tests.fixtures.core.events import MEETING_EVENT, at, create_event, create_rule


@pytest.fixture
def standup_series(calendar, standup_seed, mwf_rule):
    """Store the Mon/Wed/Fri standup series (2025-11-10, 12, 14)."""
    return calendar.create_series(standup_seed, mwf_rule)


class TestCalendarInstantiation:
    def test_empty_calendar(self, calendar):
        assert calendar.timezone == "America/New_York"
        assert calendar.event_count == 0
        assert calendar.get_all_events() == []
        assert calendar.validate_state() == []

    def test_invalid_timezone_rejected(self):
        with pytest.raises(ValueError, match="Invalid timezone"):
            CalendarModel(timezone="Mars/Olympus")

    def test_set_timezone(self, calendar):
        calendar.set_timezone("Europe/Paris")

        assert calendar.timezone == "Europe/Paris"
        assert calendar.zone.key == "Europe/Paris"

    def test_set_invalid_timezone_keeps_old_zone(self, calendar):
        with pytest.raises(InvalidArgumentError, match="Invalid timezone"):
            calendar.set_timezone("Nowhere/Special")

        assert calendar.timezone == "America/New_York"


class TestCreateEvent:
    """Test single-event insertion and duplicate detection."""

    def test_create_event(self, calendar):
        stored = calendar.create_event(MEETING_EVENT)

        assert stored == MEETING_EVENT
        assert calendar.get_all_events() == [MEETING_EVENT]

    def test_duplicate_rejected(self, calendar):
        """Creating the same meeting twice fails the second time."""
        calendar.create_event(MEETING_EVENT)

        with pytest.raises(DuplicateEventError, match="Duplicate") as exc_info:
            calendar.create_event(create_event("Meeting", at(2025, 11, 10, 9), at(2025, 11, 10, 10)))

        assert exc_info.value.event.subject == "Meeting"
        assert calendar.event_count == 1

    def test_duplicate_detection_ignores_subject_case(self, calendar):
        calendar.create_event(MEETING_EVENT)

        with pytest.raises(DuplicateEventError):
            calendar.create_event(create_event("MEETING", at(2025, 11, 10, 9), at(2025, 11, 10, 10)))

    def test_overlapping_events_allowed(self, calendar):
        calendar.create_event(MEETING_EVENT)
        calendar.create_event(create_event("Meeting", at(2025, 11, 10, 9), at(2025, 11, 10, 11)))
        calendar.create_event(create_event("Lunch", at(2025, 11, 10, 9), at(2025, 11, 10, 10)))

        assert calendar.event_count == 3


class TestCreateSeries:
    """Test all-or-nothing series insertion."""

    def test_series_stored(self, calendar, standup_series):
        assert len(standup_series) == 3
        assert calendar.get_all_events() == standup_series
        assert calendar.get_series("series-1") == standup_series

    def test_collision_stores_nothing(self, calendar, standup_seed, mwf_rule):
        blocker = calendar.create_event(create_event("standup", at(2025, 11, 14, 9)))

        with pytest.raises(DuplicateEventError):
            calendar.create_series(standup_seed, mwf_rule)

        assert calendar.get_all_events() == [blocker]

    def test_empty_series_rejected(self, calendar, standup_seed):
        rule = create_rule(until=date(2025, 11, 1))

        with pytest.raises(InvalidArgumentError, match="produces no events"):
            calendar.create_series(standup_seed, rule)

        assert calendar.event_count == 0

    def test_summary(self, calendar, standup_series):
        calendar.create_event(MEETING_EVENT)

        assert calendar.summary == "4 events (1 series) in America/New_York"


class TestEditEvent:
    """Test single-event edits."""

    def test_edit_location(self, calendar):
        calendar.create_event(MEETING_EVENT)

        updated = calendar.edit_event(MEETING_EVENT.key, "location", "Room 7")

        assert updated.location == "Room 7"
        assert calendar.get_all_events()[0].location == "Room 7"

    def test_edit_subject_rekeys_event(self, calendar):
        calendar.create_event(MEETING_EVENT)

        calendar.edit_event(MEETING_EVENT.key, "subject", "Review")

        assert [event.subject for event in calendar.get_all_events()] == ["Review"]
        assert calendar.validate_state() == []

    def test_wildcard_key_finds_event(self, calendar):
        calendar.create_event(MEETING_EVENT)
        key = EventKey(subject="meeting", start=at(2025, 11, 10, 9))

        updated = calendar.edit_event(key, "description", "agenda")

        assert updated.description == "agenda"

    def test_missing_event(self, calendar):
        key = EventKey(subject="Ghost", start=at(2025, 11, 10, 9))

        with pytest.raises(EventNotFoundError, match="No event found"):
            calendar.edit_event(key, "location", "Zoom")

    def test_ambiguous_wildcard_rejected(self, calendar):
        calendar.create_event(MEETING_EVENT)
        calendar.create_event(create_event("Meeting", at(2025, 11, 10, 9), at(2025, 11, 10, 11)))
        key = EventKey(subject="Meeting", start=at(2025, 11, 10, 9))

        with pytest.raises(InvalidArgumentError, match="specify the end time"):
            calendar.edit_event(key, "location", "Zoom")

    def test_edit_into_collision_leaves_storage_unchanged(self, calendar):
        calendar.create_event(MEETING_EVENT)
        other = calendar.create_event(create_event("Review", at(2025, 11, 10, 9), at(2025, 11, 10, 10)))

        with pytest.raises(DuplicateEventError):
            calendar.edit_event(other.key, "subject", "Meeting")

        assert {event.subject for event in calendar.get_all_events()} == {"Meeting", "Review"}

    def test_invalid_time_edit_rejected(self, calendar):
        calendar.create_event(MEETING_EVENT)

        with pytest.raises(InvalidArgumentError, match="end time must be after start time"):
            calendar.edit_event(MEETING_EVENT.key, "end", at(2025, 11, 10, 8))

        assert calendar.get_all_events()[0].end == at(2025, 11, 10, 10)

    def test_edit_series_member_keeps_series(self, calendar, standup_series):
        updated = calendar.edit_event(standup_series[1].key, "location", "Zoom")

        assert updated.series_id == "series-1"
        assert [event.location for event in calendar.get_all_events()] == ["", "Zoom", ""]


class TestEditSeries:
    """Test scoped edits across a series."""

    def test_entire_series_location(self, calendar, standup_series, standup_key):
        """Editing the location of the whole series from its middle event."""
        updated = calendar.edit_series(standup_key, "location", "Zoom", EditMode.ENTIRE_SERIES)

        assert len(updated) == 3
        assert all(event.location == "Zoom" for event in calendar.get_all_events())
        assert {event.series_id for event in calendar.get_all_events()} == {"series-1"}

    def test_from_this_onward_end_splits_series(self, calendar, standup_series, standup_key):
        """Moving the end from the Wednesday onward splits off a new series."""
        updated = calendar.edit_series(
            standup_key, "end", at(2025, 11, 12, 10), EditMode.FROM_THIS_ONWARD
        )

        monday, wednesday, friday = calendar.get_all_events()
        assert monday.end == at(2025, 11, 10, 9, 30)
        assert monday.series_id == "series-1"
        assert wednesday.end == at(2025, 11, 12, 10)
        assert friday.end == at(2025, 11, 14, 10)
        assert wednesday.series_id == friday.series_id == "series-2"
        assert updated == [wednesday, friday]

    def test_entire_series_edit_after_split(self, calendar, standup_series, standup_key):
        """The split-off events no longer follow edits to the original series."""
        calendar.edit_series(standup_key, "end", at(2025, 11, 12, 10), EditMode.FROM_THIS_ONWARD)

        updated = calendar.edit_series(
            EventKey(subject="Standup", start=at(2025, 11, 10, 9)),
            "location",
            "Zoom",
            EditMode.ENTIRE_SERIES,
        )

        monday, wednesday, friday = calendar.get_all_events()
        assert updated == [monday]
        assert monday.location == "Zoom"
        assert wednesday.location == friday.location == ""
        assert wednesday.series_id == friday.series_id == "series-2"

    def test_from_this_onward_location_keeps_series(self, calendar, standup_series, standup_key):
        calendar.edit_series(standup_key, "location", "Zoom", EditMode.FROM_THIS_ONWARD)

        events = calendar.get_all_events()
        assert [event.location for event in events] == ["", "Zoom", "Zoom"]
        assert {event.series_id for event in events} == {"series-1"}

    def test_entire_series_start_shift(self, calendar, standup_series, standup_key):
        calendar.edit_series(standup_key, "start", at(2025, 11, 12, 8, 45), EditMode.ENTIRE_SERIES)

        events = calendar.get_all_events()
        assert [event.start for event in events] == [
            at(2025, 11, 10, 8, 45),
            at(2025, 11, 12, 8, 45),
            at(2025, 11, 14, 8, 45),
        ]
        assert all(event.end.hour == 9 and event.end.minute == 30 for event in events)
        assert {event.series_id for event in events} == {"series-1"}

    def test_invalid_result_rolls_back_whole_edit(self, calendar, standup_series, standup_key):
        with pytest.raises(InvalidArgumentError, match="end time must be after start time"):
            calendar.edit_series(standup_key, "start", at(2025, 11, 12, 10), EditMode.ENTIRE_SERIES)

        assert calendar.get_all_events() == standup_series

    def test_collision_rolls_back_whole_edit(self, calendar, standup_series, standup_key):
        calendar.create_event(create_event("Retro", at(2025, 11, 14, 9)))

        with pytest.raises(DuplicateEventError):
            calendar.edit_series(standup_key, "subject", "Retro", EditMode.ENTIRE_SERIES)

        assert [event.subject for event in calendar.get_series("series-1")] == ["Standup"] * 3

    def test_single_mode_edits_one_event(self, calendar, standup_series, standup_key):
        updated = calendar.edit_series(standup_key, "description", "notes", EditMode.SINGLE)

        assert len(updated) == 1
        assert [event.description for event in calendar.get_all_events()] == ["", "notes", ""]

    def test_standalone_anchor_edited_alone(self, calendar, standup_series):
        calendar.create_event(MEETING_EVENT)

        updated = calendar.edit_series(MEETING_EVENT.key, "location", "HQ", EditMode.ENTIRE_SERIES)

        assert [event.subject for event in updated] == ["Meeting"]
        assert all(event.location == "" for event in calendar.get_series("series-1"))

    def test_mode_given_as_string(self, calendar, standup_series, standup_key):
        calendar.edit_series(standup_key, "status", "PUBLIC", "entire_series")

        assert all(event.status.value == "PUBLIC" for event in calendar.get_all_events())

    def test_unknown_property_rejected(self, calendar, standup_series, standup_key):
        with pytest.raises(InvalidArgumentError, match="Unknown property"):
            calendar.edit_series(standup_key, "attendees", "bob", EditMode.ENTIRE_SERIES)

    def test_missing_anchor(self, calendar, standup_series):
        key = EventKey(subject="Standup", start=at(2025, 11, 11, 9))

        with pytest.raises(EventNotFoundError):
            calendar.edit_series(key, "location", "Zoom", EditMode.ENTIRE_SERIES)

    def test_naive_time_value_rejected(self, calendar, standup_series, standup_key):
        with pytest.raises(InvalidArgumentError, match="timezone-aware"):
            calendar.edit_series(
                standup_key,
                "end",
                at(2025, 11, 12, 10).replace(tzinfo=None),
                EditMode.ENTIRE_SERIES,
            )


class TestQueries:
    """Test read-only queries."""

    def test_query_events_on(self, calendar, standup_series):
        calendar.create_event(create_event("Late", at(2025, 11, 11, 23), at(2025, 11, 12, 0, 30)))

        events = calendar.query_events_on(date(2025, 11, 12))

        assert [event.subject for event in events] == ["Late", "Standup"]

    def test_query_events_on_uses_calendar_zone(self, paris_calendar):
        paris_calendar.create_event(create_event("Call", at(2025, 11, 10, 20), at(2025, 11, 10, 21)))

        assert paris_calendar.query_events_on(date(2025, 11, 11))
        assert not paris_calendar.query_events_on(date(2025, 11, 10))

    def test_query_events_between(self, calendar, standup_series):
        events = calendar.query_events_between(at(2025, 11, 12, 9, 15), at(2025, 11, 14, 9))

        assert [event.start for event in events] == [at(2025, 11, 12, 9)]

    def test_is_busy_inclusive(self, calendar):
        calendar.create_event(MEETING_EVENT)

        assert calendar.is_busy(at(2025, 11, 10, 9))
        assert calendar.is_busy(at(2025, 11, 10, 10))
        assert not calendar.is_busy(at(2025, 11, 10, 10) + timedelta(seconds=1))

    def test_get_all_events_sorted(self, calendar):
        late = calendar.create_event(create_event("B", at(2025, 11, 11, 9)))
        early = calendar.create_event(create_event("A", at(2025, 11, 10, 9)))

        assert calendar.get_all_events() == [early, late]

    def test_snapshot_is_detached(self, calendar):
        calendar.create_event(MEETING_EVENT)

        calendar.get_all_events().clear()

        assert calendar.event_count == 1

    def test_get_series_unknown(self, calendar, standup_series):
        assert calendar.get_series("missing") == []
