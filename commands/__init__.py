"""Text command layer.

Parses command lines into typed values and drives the calendar registry.
Handlers are grouped by concern (calendars, events, copying, queries), each
module registering its commands on its own router.
"""

from commands.interpreter import CommandInterpreter
from commands.parsing import TokenStream, tokenize
from commands.router import CommandContext, CommandRouter

__all__ = ["CommandInterpreter", "CommandContext", "CommandRouter", "TokenStream", "tokenize"]
