"""Read-only commands: listing, availability and export.

    print events on <date>
    print events from <dt> to <dt>
    show status on <dt>
    export cal <file.csv|file.ics|file.ical>
"""

from datetime import tzinfo

from commands.parsing import TokenStream, parse_date, parse_datetime
from commands.router import CommandContext, CommandRouter
from export import exporter_for
from models.errors import InvalidArgumentError
from models.event import Event

router = CommandRouter()

NO_EVENTS = "No events found"


@router.command("print", "events")
def print_events(ctx: CommandContext, args: TokenStream) -> str:
    calendar = ctx.active_calendar
    zone = calendar.zone

    if args.accept("on"):
        day = parse_date(args.next("date"))
        args.finish()
        events = calendar.query_events_on(day)
        header = f"Events on {day.isoformat()}:"
    elif args.accept("from"):
        start = parse_datetime(args.next("start date-time"), zone)
        args.expect("to")
        end = parse_datetime(args.next("end date-time"), zone)
        args.finish()
        if end < start:
            raise InvalidArgumentError("End must not be before start")
        events = calendar.query_events_between(start, end)
        header = f"Events from {start:%Y-%m-%d %H:%M} to {end:%Y-%m-%d %H:%M}:"
    else:
        raise InvalidArgumentError("Expected 'on <date>' or 'from <start> to <end>'")

    if not events:
        return NO_EVENTS
    return "\n".join([header] + [format_event(event, zone) for event in events])


def format_event(event: Event, zone: tzinfo) -> str:
    """One bullet line for an event, times shown in the calendar's zone."""
    fmt = "%Y-%m-%d %H:%M"
    start = event.start.astimezone(zone)
    end = event.end.astimezone(zone)
    line = f"- {event.subject}: {start.strftime(fmt)} to {end.strftime(fmt)}"
    if event.location:
        line += f" at {event.location}"
    return line


@router.command("show", "status")
def show_status(ctx: CommandContext, args: TokenStream) -> str:
    calendar = ctx.active_calendar
    args.expect("on")
    timestamp = parse_datetime(args.next("date-time"), calendar.zone)
    args.finish()
    return "busy" if calendar.is_busy(timestamp) else "available"


@router.command("export", "cal")
def export_calendar(ctx: CommandContext, args: TokenStream) -> str:
    calendar = ctx.active_calendar
    file_name = args.next("file name")
    args.finish()

    events = calendar.get_all_events()
    path = exporter_for(file_name).export(events, file_name)
    return f"Exported {len(events)} events to {path}"
