"""Unit tests for command tokenizing and value parsing."""

from datetime import date

import pytest

from commands.parsing import (
    TokenStream,
    parse_count,
    parse_date,
    parse_datetime,
    parse_weekdays,
    tokenize,
)
from models.errors import InvalidArgumentError
from models.recurrence import Weekday
from tests.fixtures.core.events import NEW_YORK, PARIS, at


class TestTokenize:
    def test_splits_on_whitespace(self):
        assert tokenize("print events on  2025-05-01") == ["print", "events", "on", "2025-05-01"]

    def test_quotes_group_words(self):
        assert tokenize('create event "Team Sync" on 2025-05-01') == [
            "create",
            "event",
            "Team Sync",
            "on",
            "2025-05-01",
        ]

    def test_empty_quotes_give_empty_token(self):
        assert tokenize('edit event X from 2025-05-01T09:00 with location ""')[-1] == ""

    def test_blank_line(self):
        assert tokenize("   ") == []


class TestTokenStream:
    def test_next_and_expect(self):
        args = TokenStream(["from", "a", "TO", "b"])

        args.expect("from")
        assert args.next("start") == "a"
        args.expect("to")
        assert args.next("end") == "b"
        assert args.at_end

    def test_missing_token(self):
        with pytest.raises(InvalidArgumentError, match="Missing end date-time"):
            TokenStream([]).next("end date-time")

    def test_wrong_keyword(self):
        with pytest.raises(InvalidArgumentError, match="Expected 'to' but found 'until'"):
            TokenStream(["until"]).expect("to")

    def test_accept_is_optional(self):
        args = TokenStream(["on"])

        assert not args.accept("from")
        assert args.accept("on")

    def test_finish_rejects_leftovers(self):
        args = TokenStream(["extra"])

        with pytest.raises(InvalidArgumentError, match="Unexpected token: 'extra'"):
            args.finish()


class TestParseValues:
    def test_parse_date(self):
        assert parse_date("2025-05-01") == date(2025, 5, 1)

    def test_parse_date_invalid(self):
        with pytest.raises(InvalidArgumentError, match="expected YYYY-MM-DD"):
            parse_date("05/01/2025")

    def test_parse_datetime_in_zone(self):
        assert parse_datetime("2025-05-01T09:30", NEW_YORK) == at(2025, 5, 1, 9, 30)

    def test_parse_datetime_with_seconds(self):
        assert parse_datetime("2025-05-01T09:30:15", NEW_YORK).second == 15

    def test_parse_datetime_with_offset_converted(self):
        value = parse_datetime("2025-01-01T09:00+00:00", PARIS)

        assert value == at(2025, 1, 1, 10, zone=PARIS)
        assert value.tzinfo == PARIS

    def test_parse_datetime_requires_time(self):
        with pytest.raises(InvalidArgumentError, match="Invalid date-time"):
            parse_datetime("2025-05-01", NEW_YORK)

    def test_parse_datetime_invalid(self):
        with pytest.raises(InvalidArgumentError, match="Invalid date-time"):
            parse_datetime("tomorrow at nine", NEW_YORK)

    def test_parse_weekdays(self):
        assert parse_weekdays("mwRU") == frozenset(
            {Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.SUNDAY}
        )

    def test_parse_weekdays_invalid_letter(self):
        with pytest.raises(InvalidArgumentError, match="Invalid weekday letter 'X'"):
            parse_weekdays("MX")

    def test_parse_count(self):
        assert parse_count("4") == 4

    @pytest.mark.parametrize("text", ["0", "-2", "four"])
    def test_parse_count_invalid(self, text):
        with pytest.raises(InvalidArgumentError):
            parse_count(text)
