"""Core bot base state and shared utility methods."""

from __future__ import annotations

import time

from config import Config
from ledger import LedgerClient
from memory import MemoryStore
from providers import LLMClient

from ..constants import PLACEHOLDER_SPEAKER
from ..identity import AgentIdentity
from ..knowledge import load_knowledge
from ..logging_setup import log
from ..types import Sender


class BotBaseMixin:
    def __init__(
        self,
        config: Config,
        *,
        memory: MemoryStore | None = None,
        llm: LLMClient | None = None,
        ledger: LedgerClient | None = None,
        identity: AgentIdentity | None = None,
        knowledge: str | None = None,
    ):
        self.config = config
        self.memory = memory if memory is not None else MemoryStore(config.memory_dir)
        self.llm = llm if llm is not None else LLMClient(config)
        self.ledger = ledger if ledger is not None else LedgerClient(
            config.solana_rpc_url, timeout=config.rpc_timeout_sec
        )
        self.identity = identity if identity is not None else AgentIdentity()
        if knowledge is None:
            knowledge = load_knowledge(config.knowledge_dir, config.knowledge_files)
        self.knowledge = knowledge
        self.start_time = time.time()

        # Throttle repeated Telegram polling conflict warnings.
        self._last_telegram_conflict_log_at: float = 0.0

    async def close(self):
        """Release network resources held by collaborators."""
        aclose = getattr(self.ledger, "aclose", None)
        if aclose is not None:
            await aclose()

    @staticmethod
    def _display_name(sender: Sender | None) -> str:
        if sender is None:
            return PLACEHOLDER_SPEAKER
        return sender.username or sender.first_name or sender.last_name or PLACEHOLDER_SPEAKER

    @staticmethod
    def _trim_for_log(text: str, max_chars: int = 8000) -> str:
        if len(text) <= max_chars:
            return text
        return text[:max_chars] + "\n...[truncated]"

    def _log_user_message(self, session_id: str, speaker: str, text: str):
        log.info(f"[{session_id}] User: {speaker} says: {self._trim_for_log(text)}")

    def _log_bot_message(self, session_id: str, text: str):
        log.info(f"[{session_id}] Bot: {self._trim_for_log(text)}")
