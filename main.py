"""Command-line entry point for the virtual calendar.

Interactive mode reads commands from standard input; headless mode runs a
command file, which must end with ``exit``.

Usage:
    vcal --mode interactive
    vcal --mode headless commands.txt
"""

import logging
import sys
from typing import Optional, TextIO

import click

from commands import CommandInterpreter
from config import Settings
from models.manager import CalendarManager

logger = logging.getLogger(__name__)

PROMPT = "> "


def build_interpreter(settings: Settings) -> CommandInterpreter:
    """Create a registry holding the startup calendar and an interpreter over it."""
    manager = CalendarManager()
    manager.create_calendar(settings.default_calendar, settings.default_timezone)
    return CommandInterpreter(manager, default_timezone=settings.default_timezone)


@click.command()
@click.option(
    "--mode",
    type=click.Choice(["interactive", "headless"], case_sensitive=False),
    required=True,
    help="Read commands from stdin (interactive) or from a file (headless).",
)
@click.argument("command_file", required=False, type=click.File("r", encoding="utf-8"))
def main(mode: str, command_file: Optional[TextIO]) -> None:
    """Run the virtual calendar command interpreter."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug("Starting in %s mode with %s", mode, settings)
    interpreter = build_interpreter(settings)

    if mode.lower() == "headless":
        if command_file is None:
            raise click.UsageError("Headless mode requires a command file")
        if not interpreter.run(command_file):
            click.echo("Error: command file must end with 'exit'", err=True)
            sys.exit(1)
        return

    stdin = click.get_text_stream("stdin")
    while interpreter.running:
        click.echo(PROMPT, nl=False)
        line = stdin.readline()
        if not line:
            break
        interpreter.execute(line.rstrip("\r\n"))


if __name__ == "__main__":
    main()
