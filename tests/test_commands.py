from __future__ import annotations

import asyncio
import json

import pytest

from conftest import BOT_HANDLE, VALID_WALLET, FakeLedger, make_message
from gaia.bot.commands import format_sol
from gaia.types import CommandInvocation
from ledger import LedgerError


def _run(bot, text, speaker="alice"):
    return asyncio.run(bot.dispatch_command(bot.parse_command(text), speaker))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("/sol balance abc", True),
        ("/sol", True),
        ("  /sol slot", True),
        (f"/sol@{BOT_HANDLE} slot", True),
        ("/sol@OtherBot slot", False),
        ("/solana balance abc", False),
        ("/SOL slot", False),
        ("sol slot", False),
        ("hello /sol slot", False),
        ("", False),
    ],
)
def test_is_command(make_bot, text, expected):
    assert make_bot().is_command(text) is expected


def test_parse_command(make_bot):
    parse = make_bot().parse_command
    assert parse("/sol balance  Wallet123 extra") == CommandInvocation("balance", ["Wallet123", "extra"])
    assert parse("/sol slot") == CommandInvocation("slot", [])
    assert parse("/sol") == CommandInvocation("", [])


@pytest.mark.parametrize(
    "lamports, expected",
    [(2_500_000_000, "2.5"), (1_000_000_000, "1"), (10_000_000_000, "10"), (0, "0"), (1, "0.000000001")],
)
def test_format_sol(lamports, expected):
    assert format_sol(lamports) == expected


def test_balance_reports_sol(make_bot, ledger: FakeLedger):
    ledger.lamports = 2_500_000_000
    reply = _run(make_bot(), f"/sol balance {VALID_WALLET}")
    assert "2.5" in reply
    assert reply == "alice, that wallet holds 2.5 SOL."
    assert ledger.calls == [("validate_address", VALID_WALLET), ("get_balance", VALID_WALLET)]


def test_balance_without_argument_shows_usage_and_skips_ledger(make_bot, ledger: FakeLedger):
    reply = _run(make_bot(), "/sol balance")
    assert reply == "Usage: /sol balance <wallet>"
    assert ledger.calls == []


def test_tx_without_argument_shows_usage_and_skips_ledger(make_bot, ledger: FakeLedger):
    reply = _run(make_bot(), "/sol tx")
    assert reply == "Usage: /sol tx <wallet>"
    assert ledger.calls == []


def test_balance_with_invalid_address_never_fetches(make_bot, ledger: FakeLedger):
    ledger.valid = False
    reply = _run(make_bot(), "/sol balance not-a-wallet")
    assert reply == "❌ Invalid wallet address."
    assert ("get_balance", "not-a-wallet") not in ledger.calls
    assert ledger.calls == [("validate_address", "not-a-wallet")]


def test_tx_dumps_recent_signatures(make_bot, ledger: FakeLedger):
    ledger.txs = [{"signature": "5xyz", "slot": 100, "err": None, "blockTime": 1700000000}]
    reply = _run(make_bot(), f"/sol tx {VALID_WALLET}")
    assert json.loads(reply) == ledger.txs
    assert ledger.calls == [("get_transactions", VALID_WALLET, 5)]


def test_tx_with_no_history(make_bot, ledger: FakeLedger):
    reply = _run(make_bot(), f"/sol tx {VALID_WALLET}")
    assert "no recent transactions" in reply


def test_slot(make_bot, ledger: FakeLedger):
    ledger.slot = 287_654_321
    assert _run(make_bot(), "/sol slot", speaker="bob") == "bob, current slot: 287654321"


@pytest.mark.parametrize("text", ["/sol", "/sol price", "/sol Balance abc", "/sol SLOT"])
def test_unknown_subcommand(make_bot, ledger: FakeLedger, text):
    assert _run(make_bot(), text) == "Unknown command."
    assert ledger.calls == []


@pytest.mark.parametrize(
    "text",
    [f"/sol balance {VALID_WALLET}", f"/sol tx {VALID_WALLET}", "/sol slot"],
)
@pytest.mark.parametrize("error", [LedgerError("node down: internal detail"), RuntimeError("boom"), TimeoutError()])
def test_ledger_failures_become_generic_reply(make_bot, ledger: FakeLedger, text, error):
    ledger.error = error
    reply = _run(make_bot(), text)
    assert reply == "RPC error, try again soon."


def test_command_is_answered_through_pipeline_without_llm(make_bot, ledger: FakeLedger, llm):
    ledger.slot = 42
    bot = make_bot()
    reply = asyncio.run(bot.process_message(make_message(f"/sol@{BOT_HANDLE} slot")))
    assert reply == "alice, current slot: 42"
    assert llm.prompts == []
