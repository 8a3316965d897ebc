"""
Bot commands and reply texts.

Both `/convert` and inline queries take arguments in FROM TO AMOUNT order.
"""

from typing import NamedTuple

HELP_COMMAND = "/help"
CONVERT_COMMAND = "/convert"

DEFAULT_REPLY = "Try /help command."
FAILED_TO_CONVERT = "Failed to convert."

HELP_TEXT = (
    "List of available commands:\n"
    "/help - usage info\n"
    "/convert - convert currency using [FROM TO AMOUNT] format (i.e. /convert USD EUR 100)\n\n"
    "Inline query mode is available:\n"
    "Try writing: @cnvtbot usd uah 250\n"
)


class ConversionArgs(NamedTuple):
    from_code: str | None
    to_code: str | None
    amount: str | None


def parse_conversion_args(tokens) -> ConversionArgs:
    """Take FROM TO AMOUNT from the first three tokens; missing ones are None."""
    tokens = list(tokens)[:3]
    tokens += [None] * (3 - len(tokens))
    return ConversionArgs(*tokens)


def tokenize(text: str | None) -> tuple[str, ...]:
    return tuple((text or "").split())
