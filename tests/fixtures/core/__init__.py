"""Core engine fixtures."""

from tests.fixtures.core.calendars import (
    RecordingOutput,
    SequentialSeriesIds,
    create_calendar,
)
from tests.fixtures.core.events import (
    MEETING_EVENT,
    STANDUP_SEED,
    TEAM_SYNC_EVENT,
    at,
    create_event,
    create_rule,
)

__all__ = [
    "RecordingOutput",
    "SequentialSeriesIds",
    "create_calendar",
    "MEETING_EVENT",
    "STANDUP_SEED",
    "TEAM_SYNC_EVENT",
    "at",
    "create_event",
    "create_rule",
]
