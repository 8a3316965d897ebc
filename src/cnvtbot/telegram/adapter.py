"""
Translate Telegram message entities into a typed Command.

A message is a command only when its first entity is a bot_command at
offset 0 and no other bot_command appears later in the text.
"""

from cnvtbot.models import Command
from cnvtbot.telegram.schemas import Message

BOT_COMMAND = "bot_command"


def _utf16_slice(text: str, start: int, end: int | None = None) -> str:
    encoded = text.encode("utf-16-le")
    stop = None if end is None else end * 2
    return encoded[start * 2:stop].decode("utf-16-le", errors="ignore")


def extract_command(message: Message) -> Command | None:
    entities = message.entities
    if not entities or not message.text:
        return None

    if any(entity.type == BOT_COMMAND and entity.offset for entity in entities):
        return None

    first = entities[0]
    if first.type != BOT_COMMAND:
        return None

    end = first.offset + first.length
    token = _utf16_slice(message.text, first.offset, end)
    # "/convert@cnvtbot" in group chats
    name = token.split("@", 1)[0]

    return Command(name=name, args=tuple(_utf16_slice(message.text, end).split()))
