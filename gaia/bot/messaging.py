"""Telegram message chunking/sending and framework error handling."""

from __future__ import annotations

import time

from telegram import Update
from telegram.error import Conflict, NetworkError, RetryAfter, TimedOut
from telegram.ext import ContextTypes

from ..constants import TELEGRAM_MESSAGE_LIMIT
from ..logging_setup import log


class BotMessagingMixin:
    @staticmethod
    def _chunk_message(text: str, max_len: int = TELEGRAM_MESSAGE_LIMIT) -> list[str]:
        """Split a long message into chunks that fit Telegram's limit.

        Splits at newline boundaries where possible so JSON dumps stay readable.
        """
        if len(text) <= max_len:
            return [text]

        chunks = []
        while text:
            if len(text) <= max_len:
                chunks.append(text)
                break

            split_at = text.rfind("\n", 0, max_len)
            if split_at <= 0:
                split_at = max_len

            chunks.append(text[:split_at])
            text = text[split_at:].lstrip("\n")

        return chunks

    async def _send_reply(self, bot, chat_id: int | str, text: str) -> bool:
        """Send a reply to the chat, chunked. Returns True if every chunk went out."""
        chunks = self._chunk_message(text)
        for chunk in chunks:
            try:
                await bot.send_message(chat_id=chat_id, text=chunk)
            except Exception as e:
                log.error(f"[{chat_id}] Failed to send message chunk: {e}")
                return False

        if len(chunks) > 1:
            log.info(f"[{chat_id}] Long response split into {len(chunks)} messages ({len(text)} chars)")
        return True

    # ── Global Telegram Error Handler ────────────────────────

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        """Last-resort handler: log framework and handler errors, keep the bot running."""
        err = context.error
        session_id = "unknown"
        if isinstance(update, Update) and update.effective_chat:
            session_id = str(update.effective_chat.id)

        if isinstance(err, Conflict):
            now = time.time()
            # Polling conflicts repeat every few seconds; avoid log spam.
            if now - self._last_telegram_conflict_log_at >= 30:
                self._last_telegram_conflict_log_at = now
                log.warning(
                    f"[{session_id}] Telegram polling conflict: another bot instance is using getUpdates. "
                    "Run a single Gaia instance per bot token."
                )
            return
        if isinstance(err, RetryAfter):
            log.warning(f"[{session_id}] Telegram rate limit: retry after {err.retry_after}s")
            return
        if isinstance(err, (TimedOut, NetworkError)):
            log.warning(f"[{session_id}] Telegram network issue: {err}")
            return

        log.error(f"[{session_id}] Unhandled error", exc_info=err)
