"""Telegram text handler and the per-message orchestration pipeline."""

from __future__ import annotations

import time

from telegram import Update
from telegram.constants import ChatAction
from telegram.ext import ContextTypes

from providers import CompletionError

from ..addressing import should_respond
from ..errors import FailureKind, failure_reply
from ..logging_setup import log
from ..prompt import build_prompt
from ..types import InboundMessage


class BotHandlersMixin:
    # ── Message Handler ──────────────────────────────────────

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handle text messages: gate, route, and reply."""
        message = update.message
        if not message or message.text is None:
            return

        inbound = InboundMessage.from_telegram(message)
        reply = await self.process_message(inbound, on_thinking=self._typing_action(context, inbound))
        if reply:
            await self._send_reply(context.bot, inbound.chat_id, reply)

    @staticmethod
    def _typing_action(context: ContextTypes.DEFAULT_TYPE, inbound: InboundMessage):
        async def _send():
            try:
                await context.bot.send_chat_action(chat_id=inbound.chat_id, action=ChatAction.TYPING)
            except Exception as e:
                log.debug(f"[{inbound.chat_id}] Typing indicator failed: {e}")

        return _send

    # ── Core Processing Pipeline ─────────────────────────────

    async def process_message(self, message: InboundMessage, on_thinking=None) -> str | None:
        """
        Per-message pipeline. Returns the reply text, or None when the message is dropped.

        1. Drop everything until our own handle is known
        2. Work out the speaker's display name
        3. Drop group messages that don't address us
        4. /sol commands: run the command router, skip memory entirely
        5. Chat: load memory, build prompt, call the completion service
        6. Remember the user/assistant pair (fallback text included)
        """
        session_id = str(message.chat_id)

        if not self.identity.is_ready:
            log.info(f"[{session_id}] Waiting for bot username, dropping message")
            return failure_reply(FailureKind.IDENTITY_NOT_READY)

        speaker_name = self._display_name(message.sender)
        user_text = message.text or ""

        if not should_respond(message, self.identity.handle):
            log.info(f'[{session_id}] Ignoring: {speaker_name} said "{self._trim_for_log(user_text, 200)}" (not tagged)')
            return failure_reply(FailureKind.NOT_ADDRESSED)

        self._log_user_message(session_id, speaker_name, user_text)

        if self.is_command(user_text):
            invocation = self.parse_command(user_text)
            reply = await self.dispatch_command(invocation, speaker_name, session_id)
            self._log_bot_message(session_id, reply)
            return reply

        if on_thinking is not None:
            await on_thinking()

        async with self.memory.lock(message.chat_id):
            history = await self._load_history(session_id, message.chat_id)
            reply = await self._complete_chat(session_id, user_text, history, speaker_name)
            await self._remember_exchange(
                session_id, message.chat_id, history, speaker_name, user_text, reply
            )

        self._log_bot_message(session_id, reply)
        return reply

    async def _complete_chat(self, session_id: str, user_text: str, history, speaker_name: str) -> str:
        """Ask the completion service for a reply; any failure yields the fallback text."""
        messages = build_prompt(
            user_text,
            history,
            speaker_name,
            knowledge=self.knowledge,
            limit=self.config.memory_limit,
        )

        start = time.monotonic()
        try:
            reply = await self.llm.complete(messages)
        except CompletionError as e:
            log.error(f"[{session_id}] Completion failed: {e}")
            return failure_reply(FailureKind.COMPLETION_UNAVAILABLE)
        except Exception:
            log.exception(f"[{session_id}] Unexpected completion failure")
            return failure_reply(FailureKind.COMPLETION_UNAVAILABLE)

        log.info(f"[{session_id}] Completion received ({time.monotonic() - start:.1f}s)")
        return reply
