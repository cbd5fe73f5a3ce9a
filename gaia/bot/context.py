"""Identity resolution and conversation-memory bookkeeping."""

from __future__ import annotations

import asyncio
import time

from memory import Turn

from ..logging_setup import log


class BotContextMixin:
    # ── Identity ─────────────────────────────────────────────

    async def resolve_identity(
        self,
        bot,
        initial_delay: float = 3.0,
        max_delay: float = 60.0,
    ) -> str:
        """Look up our own @handle, retrying with backoff until Telegram answers.

        Messages that arrive before this completes are dropped.
        """
        delay = initial_delay
        while True:
            try:
                me = await bot.get_me()
                self.identity.resolve(me.username)
                log.info(f"🤖 Bot username detected: @{self.identity.handle}")
                return self.identity.handle
            except Exception as e:
                log.warning(f"Bot username lookup failed ({e}); retrying in {delay:.0f}s")
                await asyncio.sleep(delay)
                delay = min(max_delay, delay * 2)

    # ── Memory ───────────────────────────────────────────────

    async def _load_history(self, session_id: str, chat_id: int | str) -> list[Turn]:
        history = await asyncio.to_thread(self.memory.load, chat_id)
        log.info(f"[{session_id}] Loaded {len(history)} remembered turns")
        return history

    async def _remember_exchange(
        self,
        session_id: str,
        chat_id: int | str,
        history: list[Turn],
        speaker_name: str,
        user_text: str,
        reply: str,
    ) -> bool:
        """Append the user/assistant pair and persist. Returns False if the save failed.

        A failed save loses this exchange from memory but does not block the reply.
        """
        now = time.time()
        turns = list(history)
        turns.append(Turn(role="user", name=speaker_name, text=user_text, ts=now))
        turns.append(Turn(role="assistant", text=reply, ts=now))
        try:
            await asyncio.to_thread(self.memory.save, chat_id, turns)
        except OSError as e:
            log.error(f"[{session_id}] Failed to save memory, exchange not remembered: {e}")
            return False
        return True
