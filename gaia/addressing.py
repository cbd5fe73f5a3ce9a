"""Decide whether an inbound message is meant for the bot."""

from __future__ import annotations

from .constants import MENTION_SIGIL
from .types import InboundMessage

MENTION_ENTITY = "mention"


def should_respond(message: InboundMessage, agent_handle: str | None) -> bool:
    """Private chats always get a reply; group messages must address the bot.

    In groups the bot answers when it is mentioned through a structured
    mention entity, when its @handle appears anywhere in the raw text (some
    clients omit entities), or when the message replies to one of its own.
    An unknown handle fails closed.
    """
    if message.is_private:
        return True
    if not agent_handle:
        return False

    tag = f"{MENTION_SIGIL}{agent_handle}"
    text = message.text or ""

    for entity in message.entities or ():
        if entity.type != MENTION_ENTITY:
            continue
        mention = entity.text or text[entity.offset : entity.offset + entity.length]
        if mention == tag:
            return True

    if tag in text:
        return True

    return bool(message.reply_to_username) and message.reply_to_username == agent_handle
