"""Shared datatypes for Gaia."""

from __future__ import annotations

from dataclasses import dataclass, field

from telegram import Message

PRIVATE_CHAT = "private"


@dataclass
class Sender:
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass
class MentionEntity:
    type: str
    offset: int
    length: int
    text: str = ""


@dataclass
class InboundMessage:
    """Platform-neutral view of one incoming chat message."""

    chat_id: int | str
    chat_type: str
    text: str = ""
    sender: Sender | None = None
    entities: list[MentionEntity] = field(default_factory=list)
    reply_to_username: str | None = None
    message_id: int | None = None

    @property
    def is_private(self) -> bool:
        return self.chat_type == PRIVATE_CHAT

    @classmethod
    def from_telegram(cls, message: Message) -> "InboundMessage":
        """Build from a python-telegram-bot Message.

        Entity text is resolved here because Telegram offsets count UTF-16
        code units, not Python characters.
        """
        sender = None
        if message.from_user:
            user = message.from_user
            sender = Sender(
                username=user.username or None,
                first_name=user.first_name or None,
                last_name=user.last_name or None,
            )

        entities = []
        if message.text:
            for entity in message.entities or ():
                entities.append(
                    MentionEntity(
                        type=str(entity.type),
                        offset=entity.offset,
                        length=entity.length,
                        text=message.parse_entity(entity),
                    )
                )

        reply_to_username = None
        replied = message.reply_to_message
        if replied and replied.from_user and replied.from_user.username:
            reply_to_username = replied.from_user.username

        return cls(
            chat_id=message.chat.id,
            chat_type=str(message.chat.type),
            text=message.text or "",
            sender=sender,
            entities=entities,
            reply_to_username=reply_to_username,
            message_id=message.message_id,
        )


@dataclass
class CommandInvocation:
    name: str
    args: list[str] = field(default_factory=list)

    @property
    def arg(self) -> str | None:
        return self.args[0] if self.args else None
