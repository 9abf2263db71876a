"""Copy commands.

    copy event <subject> on <dt> --target <calendar> to <dt>
    copy events on <date> --target <calendar> to <date>
    copy events between <date> and <date> --target <calendar> to <date>

Source times are read in the active calendar's zone, target times in the
target calendar's zone.
"""

from commands.parsing import TokenStream, parse_date, parse_datetime
from commands.router import CommandContext, CommandRouter
from models.copier import CopyReport, EventCopier
from models.errors import InvalidArgumentError

router = CommandRouter()


@router.command("copy", "event")
def copy_event(ctx: CommandContext, args: TokenStream) -> str:
    source = ctx.active_calendar
    subject = args.next("event subject")
    args.expect("on")
    source_start = parse_datetime(args.next("source date-time"), source.zone)
    target_name = _parse_target(args)
    target = ctx.manager.require_calendar(target_name)
    args.expect("to")
    new_start = parse_datetime(args.next("target date-time"), target.zone)
    args.finish()

    copier = EventCopier(source, ctx.manager.series_id_factory)
    copy = copier.copy_event(subject, source_start, target, new_start)
    return f"Copied event to '{target_name}': {copy.get_summary()}"


@router.command("copy", "events")
def copy_events(ctx: CommandContext, args: TokenStream) -> str:
    source = ctx.active_calendar
    copier = EventCopier(source, ctx.manager.series_id_factory)

    if args.accept("on"):
        source_date = parse_date(args.next("source date"))
        target_name = _parse_target(args)
        args.expect("to")
        target_date = parse_date(args.next("target date"))
        args.finish()
        target = ctx.manager.require_calendar(target_name)
        report = copier.copy_events_on_date(source_date, target, target_date)
    elif args.accept("between"):
        start_date = parse_date(args.next("range start date"))
        args.expect("and")
        end_date = parse_date(args.next("range end date"))
        target_name = _parse_target(args)
        args.expect("to")
        target_date = parse_date(args.next("target date"))
        args.finish()
        target = ctx.manager.require_calendar(target_name)
        report = copier.copy_events_between(start_date, end_date, target, target_date)
    else:
        raise InvalidArgumentError("Expected 'on <date>' or 'between <date> and <date>'")

    return format_report(report, target_name)


def _parse_target(args: TokenStream) -> str:
    args.expect("--target")
    return args.next("target calendar name")


def format_report(report: CopyReport, target_name: str) -> str:
    """Render a copy report, one line per skipped event."""
    lines = [f"Copied events to '{target_name}': {report.get_summary()}"]
    for skipped in report.skipped:
        lines.append(f"  Skipped {skipped.event.get_summary()}: {skipped.reason}")
    return "\n".join(lines)
