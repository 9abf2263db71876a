"""Calendar commands.

Creating, editing and selecting named calendars:

    create calendar --name <name> [--timezone <Area/Location>]
    edit calendar --name <name> --property <name|timezone> <value>
    use calendar --name <name>
"""

from commands.parsing import TokenStream
from commands.router import CommandContext, CommandRouter

router = CommandRouter()


@router.command("create", "calendar")
def create_calendar(ctx: CommandContext, args: TokenStream) -> str:
    """Create a calendar, in the default timezone unless one is given."""
    args.expect("--name")
    name = args.next("calendar name")
    timezone = ctx.default_timezone
    if args.accept("--timezone"):
        timezone = args.next("timezone")
    args.finish()

    calendar = ctx.manager.create_calendar(name, timezone)
    return f"Created calendar '{name}' ({calendar.timezone})"


@router.command("edit", "calendar")
def edit_calendar(ctx: CommandContext, args: TokenStream) -> str:
    args.expect("--name")
    name = args.next("calendar name")
    args.expect("--property")
    property_name = args.next("property name")
    value = args.next("property value")
    args.finish()

    ctx.manager.edit_calendar(name, property_name, value)
    return f"Updated calendar '{name}': {property_name.lower()} set to {value}"


@router.command("use", "calendar")
def use_calendar(ctx: CommandContext, args: TokenStream) -> str:
    args.expect("--name")
    name = args.next("calendar name")
    args.finish()

    calendar = ctx.manager.use_calendar(name)
    return f"Using calendar '{name}' ({calendar.timezone})"
