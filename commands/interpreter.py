"""Line-oriented command interpreter.

The interpreter tokenizes each line, routes it to the handler registered for
its first two words and writes the handler's output. A failing line prints
``Error: <message>`` and the interpreter carries on with the next one; only
``exit`` stops it.
"""

import logging
from typing import Callable, Iterable

import click
from pydantic import ValidationError

from commands import calendars, copying, events, queries
from commands.parsing import TokenStream, tokenize
from commands.router import CommandContext, CommandHandler, CommandRouter
from models.errors import InvalidArgumentError, validation_message
from models.manager import CalendarManager

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
ROUTERS = (calendars.router, events.router, copying.router, queries.router)


class CommandInterpreter:
    """Executes command lines against a calendar registry.

    Args:
        manager: Calendar registry the commands act on.
        default_timezone: Zone for calendars created without ``--timezone``.
        write: Output sink, one call per message.

    Example:
        >>> interpreter = CommandInterpreter(CalendarManager())
        >>> interpreter.execute("create calendar --name work --timezone UTC")
        Created calendar 'work' (UTC)
        True
    """

    def __init__(
        self,
        manager: CalendarManager,
        default_timezone: str = "America/New_York",
        write: Callable[[str], None] = click.echo,
    ) -> None:
        self.context = CommandContext(manager=manager, default_timezone=default_timezone)
        self.running = True
        self._write = write
        self._routes: dict[tuple[str, str], CommandHandler] = {}
        for router in ROUTERS:
            self.include_router(router)

    def include_router(self, router: CommandRouter) -> None:
        self._routes.update(router.routes)

    def execute(self, line: str) -> bool:
        """Run one command line.

        Blank lines and lines starting with ``#`` are ignored.

        Args:
            line: Raw command line.

        Returns:
            False once ``exit`` has been executed, True otherwise.
        """
        tokens = tokenize(line)
        if not tokens or tokens[0].startswith("#"):
            return self.running
        if tokens[0].lower() == EXIT_COMMAND and len(tokens) == 1:
            logger.debug("Exit requested")
            self.running = False
            return self.running

        logger.debug("Executing: %s", line.strip())
        try:
            handler = self._resolve(tokens)
            output = handler(self.context, TokenStream(tokens[2:]))
        except ValidationError as e:
            self._write(f"Error: {validation_message(e)}")
        except (ValueError, OSError) as e:
            logger.debug("Command failed: %s", e)
            self._write(f"Error: {e}")
        else:
            if output:
                self._write(output)
        return self.running

    def run(self, lines: Iterable[str]) -> bool:
        """Run lines until they are exhausted or ``exit`` is executed.

        Returns:
            True if ``exit`` was executed.
        """
        for line in lines:
            if not self.execute(line.rstrip("\r\n")):
                return True
        return False

    def _resolve(self, tokens: list[str]) -> CommandHandler:
        key = tuple(token.lower() for token in tokens[:2])
        handler = self._routes.get(key)
        if handler is None:
            raise InvalidArgumentError(f"Unknown command: {' '.join(tokens[:2])}")
        return handler
