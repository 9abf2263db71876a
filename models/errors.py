"""Exception hierarchy for the calendar engine.

Every error raised by the engine derives from ``CalendarError``, which is a
``ValueError`` so callers that only care about "the request was rejected" can
catch ``ValueError`` the same way they catch pydantic validation failures.

Exception Hierarchy:
    CalendarError (base)
    ├── InvalidArgumentError - malformed or missing values, unknown property
    ├── DuplicateEventError - (subject, start, end) already stored
    ├── EventNotFoundError - edit/copy references a missing event
    ├── CalendarNotFoundError - registry has no calendar by that name
    └── NoActiveCalendarError - no calendar has been selected

Example:
    Catching a duplicate insert::

        try:
            calendar.create_event(event)
        except DuplicateEventError as e:
            print(f"Already booked: {e.event.subject}")
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pydantic import ValidationError

    from models.event import Event


class CalendarError(ValueError):
    """Base exception for all calendar engine errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(CalendarError):
    """A value passed to the engine is malformed, missing, or unsupported."""


class DuplicateEventError(CalendarError):
    """An insert would store a second event with the same identity triple.

    Attributes:
        message: Human-readable error description.
        event: The event that could not be stored.
    """

    def __init__(self, message: str, event: Optional["Event"] = None) -> None:
        self.event = event
        super().__init__(message)


class EventNotFoundError(CalendarError):
    """No stored event matches the requested subject and times."""


class CalendarNotFoundError(CalendarError):
    """The registry holds no calendar with the requested name.

    Attributes:
        message: Human-readable error description.
        name: The calendar name that was looked up.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Calendar '{name}' not found")


class NoActiveCalendarError(CalendarError):
    """An operation needs an active calendar but none has been selected."""

    def __init__(
        self, message: str = "No active calendar selected. Use 'use calendar --name <name>' first."
    ) -> None:
        super().__init__(message)


def validation_message(exc: "ValidationError") -> str:
    """Flatten a pydantic ValidationError into a one-line message.

    Args:
        exc: The validation error.

    Returns:
        The individual error messages joined with "; ".
    """
    messages = []
    for error in exc.errors():
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(message)
    return "; ".join(messages)
