"""
CNVTBOT Telegram Transport Module
"""

from cnvtbot.telegram.adapter import extract_command
from cnvtbot.telegram.client import TelegramClient, TelegramError
from cnvtbot.telegram.polling import run_polling
from cnvtbot.telegram.schemas import (
    InlineQuery,
    InlineQueryResultArticle,
    InputTextMessageContent,
    Message,
    MessageEntity,
    Update,
)

__all__ = [
    "extract_command",
    "TelegramClient",
    "TelegramError",
    "run_polling",
    "InlineQuery",
    "InlineQueryResultArticle",
    "InputTextMessageContent",
    "Message",
    "MessageEntity",
    "Update",
]
