"""
Command Dispatcher

Classifies inbound Telegram updates, converts, and replies. Each update is
handled in isolation: a failure is logged and answered with a fallback
reply, it never reaches the polling loop or the webhook route.
"""

import logging
from typing import Protocol

from cnvtbot.bot.commands import (
    CONVERT_COMMAND,
    DEFAULT_REPLY,
    FAILED_TO_CONVERT,
    HELP_COMMAND,
    HELP_TEXT,
    parse_conversion_args,
    tokenize,
)
from cnvtbot.cache import SnapshotHolder
from cnvtbot.conversion import convert, format_result
from cnvtbot.models import Command
from cnvtbot.telegram.adapter import extract_command
from cnvtbot.telegram.schemas import (
    InlineQueryResultArticle,
    InputTextMessageContent,
    Update,
)

logger = logging.getLogger(__name__)


class ReplyTransport(Protocol):
    async def send_message(self, chat_id: int, text: str) -> None: ...

    async def answer_inline_query(
        self,
        inline_query_id: str,
        results: list[InlineQueryResultArticle],
        cache_time: int = 0
    ) -> None: ...


class Dispatcher:
    """Routes bot commands and inline queries to the conversion engine."""

    def __init__(self, holder: SnapshotHolder, transport: ReplyTransport):
        self.holder = holder
        self.transport = transport

    async def handle_update(self, update: Update) -> None:
        try:
            if update.message is not None:
                await self.handle_message(update.message.chat.id, extract_command(update.message))
            elif update.inline_query is not None:
                await self.handle_inline_query(update.inline_query.id, update.inline_query.query)
            else:
                logger.debug(f"Ignoring update {update.update_id}: no message or inline query")
        except Exception:
            logger.exception(f"Failed to handle update {update.update_id}")
            await self._send_fallback(update)

    async def handle_message(self, chat_id: int, command: Command | None) -> None:
        """Reply to a direct message; anything but a leading command gets the default reply."""
        text = DEFAULT_REPLY

        if command is not None:
            if command.name == HELP_COMMAND:
                text = HELP_TEXT
            elif command.name == CONVERT_COMMAND:
                text = await self._convert(command.args) or DEFAULT_REPLY

        await self.transport.send_message(chat_id, text)

    async def handle_inline_query(self, inline_query_id: str, query: str) -> None:
        text = await self._convert(tokenize(query)) or FAILED_TO_CONVERT
        await self._answer_inline(inline_query_id, text)

    async def _convert(self, tokens) -> str | None:
        """Formatted conversion of FROM TO AMOUNT tokens, or None when rejected."""
        today = self.holder.manager.clock()
        snapshot = await self.holder.refresh_if_stale(today)

        args = parse_conversion_args(tokens)
        result = convert(snapshot, args.from_code, args.to_code, args.amount)
        if result is None:
            logger.debug(f"Conversion rejected: {args}")
            return None
        return format_result(args.amount, args.from_code, args.to_code, result)

    async def _send_fallback(self, update: Update) -> None:
        try:
            if update.message is not None:
                await self.transport.send_message(update.message.chat.id, FAILED_TO_CONVERT)
            elif update.inline_query is not None:
                await self._answer_inline(update.inline_query.id, FAILED_TO_CONVERT)
        except Exception:
            logger.exception(f"Fallback reply for update {update.update_id} failed")

    async def _answer_inline(self, inline_query_id: str, text: str) -> None:
        """Answer with exactly one article; cache_time=0 so every keystroke gets fresh text."""
        article = InlineQueryResultArticle(
            id=inline_query_id,
            title=text,
            input_message_content=InputTextMessageContent(message_text=text)
        )
        await self.transport.answer_inline_query(inline_query_id, [article], cache_time=0)
