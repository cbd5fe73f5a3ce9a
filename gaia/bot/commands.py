"""The /sol command family: Solana balance, transaction, and slot lookups."""

from __future__ import annotations

import json
from decimal import Decimal

from ..constants import LAMPORTS_PER_SOL, TX_HISTORY_LIMIT
from ..errors import FailureKind, failure_reply
from ..logging_setup import log
from ..types import CommandInvocation


def format_sol(lamports: int) -> str:
    """Render a lamport amount in SOL without float rounding or trailing zeros."""
    value = (Decimal(int(lamports)) / Decimal(LAMPORTS_PER_SOL)).normalize()
    return format(value, "f")


class BotCommandsMixin:
    @property
    def _command_token(self) -> str:
        return f"/{self.config.command_prefix}"

    def is_command(self, text: str) -> bool:
        """True when the first token is `/sol`, or `/sol@<our handle>` as Telegram sends in groups."""
        tokens = (text or "").split()
        if not tokens:
            return False
        head = tokens[0]
        if head == self._command_token:
            return True
        addressed = f"{self._command_token}@"
        if head.startswith(addressed) and self.identity.handle:
            return head[len(addressed):] == self.identity.handle
        return False

    def parse_command(self, text: str) -> CommandInvocation:
        tokens = (text or "").split()
        name = tokens[1] if len(tokens) > 1 else ""
        return CommandInvocation(name=name, args=tokens[2:])

    # ── Dispatch ──────────────────────────────────────────────

    async def dispatch_command(
        self,
        invocation: CommandInvocation,
        speaker_name: str,
        session_id: str = "?",
    ) -> str:
        """Run one /sol subcommand and return the reply text.

        Never raises: ledger failures become the generic RPC error reply.
        """
        handlers = {
            "balance": self._cmd_balance,
            "tx": self._cmd_tx,
            "slot": self._cmd_slot,
        }
        handler = handlers.get(invocation.name)
        if handler is None:
            log.info(f"[{session_id}] Command: unknown subcommand {invocation.name!r}")
            return failure_reply(FailureKind.UNKNOWN_COMMAND)

        log.info(f"[{session_id}] Command: {invocation.name} {' '.join(invocation.args)}".rstrip())
        try:
            return await handler(invocation, speaker_name)
        except Exception:
            log.exception(f"[{session_id}] Solana RPC error during {invocation.name}")
            return failure_reply(FailureKind.LEDGER_UNAVAILABLE)

    def _usage(self, command: str) -> str:
        return failure_reply(
            FailureKind.MISSING_ARGUMENT,
            prefix=self.config.command_prefix,
            command=command,
        )

    # ── Subcommands ───────────────────────────────────────────

    async def _cmd_balance(self, invocation: CommandInvocation, speaker_name: str) -> str:
        wallet = invocation.arg
        if not wallet:
            return self._usage("balance")

        if not await self.ledger.validate_address(wallet):
            return failure_reply(FailureKind.INVALID_ADDRESS)

        lamports = await self.ledger.get_balance(wallet)
        return f"{speaker_name}, that wallet holds {format_sol(lamports)} SOL."

    async def _cmd_tx(self, invocation: CommandInvocation, speaker_name: str) -> str:
        wallet = invocation.arg
        if not wallet:
            return self._usage("tx")

        txs = await self.ledger.get_transactions(wallet, TX_HISTORY_LIMIT)
        if not txs:
            return f"{speaker_name}, no recent transactions for that wallet."
        return json.dumps(txs, indent=2, ensure_ascii=False)

    async def _cmd_slot(self, invocation: CommandInvocation, speaker_name: str) -> str:
        slot = await self.ledger.get_current_slot()
        return f"{speaker_name}, current slot: {slot}"
