"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project root is on the import path (for local imports without installing)
ROOT_PATH = Path(__file__).resolve().parent.parent
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))

from config import Config  # noqa: E402
from gaia.bot import GaiaBot  # noqa: E402
from gaia.identity import AgentIdentity  # noqa: E402
from gaia.types import InboundMessage, MentionEntity, Sender  # noqa: E402
from memory import MemoryStore  # noqa: E402
from providers import CompletionError  # noqa: E402

BOT_HANDLE = "GaiaBot"
VALID_WALLET = "11111111111111111111111111111111"


class FakeLedger:
    """Records every call; returns canned values or raises `error` when set."""

    def __init__(self, *, valid=True, lamports=0, txs=None, slot=0, error=None):
        self.valid = valid
        self.lamports = lamports
        self.txs = txs if txs is not None else []
        self.slot = slot
        self.error = error
        self.calls: list[tuple] = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    async def validate_address(self, address):
        self.calls.append(("validate_address", address))
        return self.valid

    async def get_balance(self, address):
        self.calls.append(("get_balance", address))
        self._maybe_fail()
        return self.lamports

    async def get_transactions(self, address, limit=10):
        self.calls.append(("get_transactions", address, limit))
        self._maybe_fail()
        return self.txs

    async def get_current_slot(self):
        self.calls.append(("get_current_slot",))
        self._maybe_fail()
        return self.slot

    async def get_block_time(self, slot):
        self.calls.append(("get_block_time", slot))
        self._maybe_fail()
        return 0


class FakeLLM:
    """Returns `reply` (or raises CompletionError when `fail`) and keeps the prompts it saw."""

    def __init__(self, reply="Hello from Gaia!", fail=False):
        self.reply = reply
        self.fail = fail
        self.prompts: list[list[dict]] = []

    async def complete(self, messages):
        self.prompts.append(messages)
        if self.fail:
            raise CompletionError("upstream exploded: secret-token-123")
        return self.reply


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        llm_provider="openai",
        llm_model="test-model",
        memory_dir=str(tmp_path / "memory"),
        memory_limit=20,
        knowledge_dir=str(tmp_path / "knowledge"),
    )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def make_bot(config: Config, ledger: FakeLedger, llm: FakeLLM):
    def _make(handle: str | None = BOT_HANDLE, **overrides) -> GaiaBot:
        kwargs = {
            "memory": MemoryStore(config.memory_dir),
            "llm": llm,
            "ledger": ledger,
            "identity": AgentIdentity(handle),
            "knowledge": "### book0.txt\nGaia is a garden world.\n",
        }
        kwargs.update(overrides)
        return GaiaBot(config, **kwargs)

    return _make


def make_message(
    text: str = "",
    *,
    chat_type: str = "group",
    chat_id: int = -1001,
    username: str | None = "alice",
    first_name: str | None = "Alice",
    last_name: str | None = None,
    entities: list[MentionEntity] | None = None,
    reply_to_username: str | None = None,
) -> InboundMessage:
    return InboundMessage(
        chat_id=chat_id,
        chat_type=chat_type,
        text=text,
        sender=Sender(username=username, first_name=first_name, last_name=last_name),
        entities=entities or [],
        reply_to_username=reply_to_username,
    )


def mention(text: str, tag: str) -> MentionEntity:
    offset = text.index(tag)
    return MentionEntity(type="mention", offset=offset, length=len(tag), text=tag)
