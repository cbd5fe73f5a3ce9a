"""Composed Gaia bot class built from focused mixins."""

from __future__ import annotations

from .base import BotBaseMixin
from .commands import BotCommandsMixin
from .context import BotContextMixin
from .handlers import BotHandlersMixin
from .messaging import BotMessagingMixin


class GaiaBot(
    BotMessagingMixin,
    BotHandlersMixin,
    BotCommandsMixin,
    BotContextMixin,
    BotBaseMixin,
):
    """The main bot class wiring Telegram, Memory, the LLM, and the Solana RPC together."""

    pass


__all__ = ["GaiaBot"]
