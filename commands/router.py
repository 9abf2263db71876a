"""Command routing primitives.

Each command module owns a ``CommandRouter`` and registers handlers on it
with the ``command`` decorator, keyed by the first two words of the command
line (for example ``create event``). The interpreter includes every router.
"""

from typing import Callable, Optional

from pydantic import BaseModel, Field

from commands.parsing import TokenStream
from models.calendar import CalendarModel
from models.manager import CalendarManager

CommandHandler = Callable[["CommandContext", TokenStream], Optional[str]]


class CommandContext(BaseModel):
    """State shared by every command handler.

    Args:
        manager: Calendar registry the commands act on.
        default_timezone: Zone for calendars created without one.
    """

    manager: CalendarManager = Field(description="Calendar registry")
    default_timezone: str = Field(
        default="America/New_York", description="Zone for new calendars"
    )

    @property
    def active_calendar(self) -> CalendarModel:
        return self.manager.active_calendar


class CommandRouter:
    """Registry of handlers for a group of related commands."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], CommandHandler] = {}

    def command(self, verb: str, noun: str) -> Callable[[CommandHandler], CommandHandler]:
        """Register the decorated function as the handler for ``verb noun``."""

        def decorator(handler: CommandHandler) -> CommandHandler:
            self.routes[(verb, noun)] = handler
            return handler

        return decorator
