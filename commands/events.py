"""Event creation and editing commands.

    create event <subject> from <dt> to <dt> [repeats <days> (for <N> [times] | until <date>)]
        [description <text>] [location <text>] [status <PUBLIC|PRIVATE>]
    create event <subject> on <date> [...]
    edit event <subject> from <dt> [to <dt>] with <property> <value>
    edit events <subject> from <dt> [to <dt>] with <property> <value>
    edit series <subject> from <dt> [to <dt>] with <property> <value>

``edit event`` changes one event, ``edit events`` the anchor and the later
events of its series, ``edit series`` the whole series.
"""

from datetime import datetime, tzinfo
from typing import Any, Optional

from pydantic import ValidationError

from commands.parsing import (
    TokenStream,
    parse_count,
    parse_date,
    parse_datetime,
    parse_weekdays,
)
from commands.router import CommandContext, CommandRouter
from models.calendar import EditMode
from models.errors import InvalidArgumentError, validation_message
from models.event import (
    ALL_DAY_END,
    ALL_DAY_START,
    TIME_PROPERTIES,
    EventKey,
    build_event,
    normalize_property,
)
from models.recurrence import RecurrenceRule

router = CommandRouter()

OPTIONAL_FIELDS = ("description", "location", "status")


@router.command("create", "event")
def create_event(ctx: CommandContext, args: TokenStream) -> str:
    calendar = ctx.active_calendar
    zone = calendar.zone
    subject = args.next("event subject")

    if args.accept("from"):
        start = parse_datetime(args.next("start date-time"), zone)
        args.expect("to")
        end = parse_datetime(args.next("end date-time"), zone)
        all_day = False
    elif args.accept("on"):
        day = parse_date(args.next("event date"))
        start = datetime.combine(day, ALL_DAY_START, tzinfo=zone)
        end = datetime.combine(day, ALL_DAY_END, tzinfo=zone)
        all_day = True
    else:
        raise InvalidArgumentError("Expected 'from <start> to <end>' or 'on <date>'")

    rule: Optional[RecurrenceRule] = None
    fields: dict[str, str] = {}
    while not args.at_end:
        keyword = args.next("option").lower()
        if keyword == "repeats" and rule is None:
            rule = _parse_repeat(args)
        elif keyword in OPTIONAL_FIELDS and keyword not in fields:
            fields[keyword] = args.next(keyword)
        else:
            raise InvalidArgumentError(f"Unexpected token: '{keyword}'")

    seed = build_event(subject=subject, start=start, end=end, all_day=all_day, **fields)
    if rule is None:
        event = calendar.create_event(seed)
        return f"Created event {event.get_summary()}"

    series = calendar.create_series(seed, rule)
    return f"Created {len(series)} events for '{seed.subject}' repeating {rule.describe()}"


def _parse_repeat(args: TokenStream) -> RecurrenceRule:
    weekdays = parse_weekdays(args.next("repeat weekdays"))
    try:
        if args.accept("for"):
            occurrences = parse_count(args.next("repeat count"))
            args.accept("times")
            return RecurrenceRule(weekdays=weekdays, occurrences=occurrences)
        if args.accept("until"):
            until = parse_date(args.next("repeat end date"))
            return RecurrenceRule(weekdays=weekdays, until=until)
    except ValidationError as e:
        raise InvalidArgumentError(validation_message(e)) from e
    raise InvalidArgumentError("Expected 'for <N> times' or 'until <date>' after repeats")


@router.command("edit", "event")
def edit_event(ctx: CommandContext, args: TokenStream) -> str:
    return _edit(ctx, args, EditMode.SINGLE)


@router.command("edit", "events")
def edit_events(ctx: CommandContext, args: TokenStream) -> str:
    return _edit(ctx, args, EditMode.FROM_THIS_ONWARD)


@router.command("edit", "series")
def edit_series(ctx: CommandContext, args: TokenStream) -> str:
    return _edit(ctx, args, EditMode.ENTIRE_SERIES)


def _edit(ctx: CommandContext, args: TokenStream, mode: EditMode) -> str:
    calendar = ctx.active_calendar
    zone = calendar.zone

    subject = args.next("event subject")
    args.expect("from")
    start = parse_datetime(args.next("start date-time"), zone)
    end = None
    if args.accept("to"):
        end = parse_datetime(args.next("end date-time"), zone)
    args.expect("with")
    property_name = normalize_property(args.next("property name"))
    value = _coerce_value(property_name, args.next("new value"), zone)
    args.finish()

    key = EventKey(subject=subject, start=start, end=end)
    if mode is EditMode.SINGLE:
        updated = [calendar.edit_event(key, property_name, value)]
    else:
        updated = calendar.edit_series(key, property_name, value, mode)

    noun = "event" if len(updated) == 1 else "events"
    return f"Updated {len(updated)} {noun}: {property_name} set to {value}"


def _coerce_value(property_name: str, raw: str, zone: tzinfo) -> Any:
    if property_name in TIME_PROPERTIES:
        return parse_datetime(raw, zone)
    return raw
