"""Tokenizing and value parsing for command lines."""

import re
from datetime import date, datetime, tzinfo
from typing import Optional

from models.errors import InvalidArgumentError
from models.recurrence import Weekday

TOKEN_PATTERN = re.compile(r'"([^"]*)"|(\S+)')

WEEKDAY_LETTERS = {
    "M": Weekday.MONDAY,
    "T": Weekday.TUESDAY,
    "W": Weekday.WEDNESDAY,
    "R": Weekday.THURSDAY,
    "F": Weekday.FRIDAY,
    "S": Weekday.SATURDAY,
    "U": Weekday.SUNDAY,
}


def tokenize(line: str) -> list[str]:
    """Split a command line on whitespace, keeping double-quoted text together.

    Args:
        line: Raw command line.

    Returns:
        Tokens with surrounding quotes removed.

    Example:
        >>> tokenize('create event "Team Sync" on 2025-05-01')
        ['create', 'event', 'Team Sync', 'on', '2025-05-01']
    """
    tokens = []
    for match in TOKEN_PATTERN.finditer(line):
        quoted, bare = match.groups()
        tokens.append(quoted if quoted is not None else bare)
    return tokens


class TokenStream:
    """Cursor over the arguments of one command."""

    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._position = 0

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._tokens)

    def peek(self) -> Optional[str]:
        if self.at_end:
            return None
        return self._tokens[self._position]

    def next(self, what: str) -> str:
        """Consume the next token.

        Args:
            what: Name of the expected value, used in the error message.

        Raises:
            InvalidArgumentError: If no tokens are left.
        """
        if self.at_end:
            raise InvalidArgumentError(f"Missing {what}")
        token = self._tokens[self._position]
        self._position += 1
        return token

    def accept(self, keyword: str) -> bool:
        """Consume the next token if it equals keyword (case-insensitive)."""
        token = self.peek()
        if token is not None and token.lower() == keyword:
            self._position += 1
            return True
        return False

    def expect(self, keyword: str) -> None:
        """Consume a required keyword.

        Raises:
            InvalidArgumentError: If the next token is missing or different.
        """
        token = self.next(f"'{keyword}'")
        if token.lower() != keyword:
            raise InvalidArgumentError(f"Expected '{keyword}' but found '{token}'")

    def finish(self) -> None:
        """Fail if any tokens are left over."""
        if not self.at_end:
            raise InvalidArgumentError(f"Unexpected token: '{self.peek()}'")


def parse_date(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` date."""
    try:
        return date.fromisoformat(text.strip())
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid date '{text}', expected YYYY-MM-DD") from e


def parse_datetime(text: str, zone: tzinfo) -> datetime:
    """Parse a date-time given as ``YYYY-MM-DDTHH:MM[:SS]``.

    Naive values are read as wall-clock time in ``zone``; values carrying an
    explicit offset are converted to it.

    Args:
        text: Date-time text.
        zone: Timezone of the active calendar.

    Returns:
        Timezone-aware datetime in ``zone``.

    Raises:
        InvalidArgumentError: If the text is not a date-time.
    """
    text = text.strip()
    try:
        if len(text) <= len("YYYY-MM-DD"):
            raise ValueError(text)
        value = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidArgumentError(
            f"Invalid date-time '{text}', expected YYYY-MM-DDTHH:MM"
        ) from e
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def parse_weekdays(text: str) -> frozenset[Weekday]:
    """Parse weekday letters such as ``MWF``.

    Letters are M, T, W, R (Thursday), F, S (Saturday) and U (Sunday).

    Raises:
        InvalidArgumentError: If the text is empty or holds another letter.
    """
    letters = text.strip().upper()
    if not letters:
        raise InvalidArgumentError("Weekdays cannot be empty")
    days = set()
    for letter in letters:
        if letter not in WEEKDAY_LETTERS:
            raise InvalidArgumentError(f"Invalid weekday letter '{letter}', use MTWRFSU")
        days.add(WEEKDAY_LETTERS[letter])
    return frozenset(days)


def parse_count(text: str) -> int:
    """Parse a positive repeat count."""
    try:
        count = int(text)
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid repeat count '{text}'") from e
    if count < 1:
        raise InvalidArgumentError("Repeat count must be positive")
    return count
