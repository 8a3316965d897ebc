"""
Telegram Bot API Schemas

Only the fields the bot reads or writes; unknown fields are ignored.
See https://core.telegram.org/bots/api
"""

from typing import Literal

from pydantic import BaseModel, Field


class Chat(BaseModel):
    id: int


class MessageEntity(BaseModel):
    """Offsets and lengths are in UTF-16 code units."""
    type: str
    offset: int = Field(ge=0)
    length: int = Field(ge=0)


class Message(BaseModel):
    message_id: int
    chat: Chat
    text: str | None = None
    entities: list[MessageEntity] | None = None


class InlineQuery(BaseModel):
    id: str
    query: str = ""


class Update(BaseModel):
    update_id: int
    message: Message | None = None
    inline_query: InlineQuery | None = None


class InputTextMessageContent(BaseModel):
    message_text: str


class InlineQueryResultArticle(BaseModel):
    type: Literal["article"] = "article"
    id: str
    title: str
    input_message_content: InputTextMessageContent
