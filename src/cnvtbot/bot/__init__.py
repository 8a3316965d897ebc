"""
CNVTBOT Command Handling Module
"""

from cnvtbot.bot.dispatcher import Dispatcher, ReplyTransport

__all__ = [
    "Dispatcher",
    "ReplyTransport",
]
