#!/usr/bin/env python3
"""
Smoke-test the configured Solana RPC endpoint and completion provider.

Usage:
  python scripts/smoke_test.py
  python scripts/smoke_test.py --wallet <address>
  python scripts/smoke_test.py --skip-llm --rpc-url https://api.devnet.solana.com
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import Config, load_config
from gaia.bot.commands import format_sol
from ledger import LedgerClient, is_valid_address
from providers import LLMClient


async def _check_rpc(rpc_url: str, wallet: str, timeout_seconds: int) -> list[Tuple[str, str, str]]:
    results: list[Tuple[str, str, str]] = []
    client = LedgerClient(rpc_url, timeout=timeout_seconds)
    try:
        try:
            slot = await client.get_current_slot()
            results.append(("OK", "getSlot", str(slot)))
        except Exception as exc:
            results.append(("FAIL", "getSlot", str(exc)))
            return results

        try:
            block_time = await client.get_block_time(slot)
            results.append(("OK", "getBlockTime", str(block_time)))
        except Exception as exc:
            # Very recent slots are often not yet timestamped.
            results.append(("SKIP", "getBlockTime", str(exc)))

        if not wallet:
            return results
        if not is_valid_address(wallet):
            results.append(("FAIL", "validate", f"not a valid address: {wallet}"))
            return results

        try:
            lamports = await client.get_balance(wallet)
            results.append(("OK", "getBalance", f"{format_sol(lamports)} SOL"))
            txs = await client.get_transactions(wallet, 5)
            results.append(("OK", "getSignaturesForAddress", f"{len(txs)} signature(s)"))
        except Exception as exc:
            results.append(("FAIL", "wallet queries", str(exc)))
    finally:
        await client.aclose()
    return results


async def _check_llm(cfg: Config, prompt: str, timeout_seconds: int) -> Tuple[str, str]:
    if not cfg.llm_provider:
        return "SKIP", "no LLM provider configured"
    try:
        client = LLMClient(cfg)
        text = await asyncio.wait_for(
            client.complete([{"role": "user", "content": prompt}]),
            timeout=timeout_seconds,
        )
    except Exception as exc:
        return "FAIL", str(exc)
    return "OK", text.replace("\n", " ")[:120]


async def _run(args: argparse.Namespace) -> int:
    cfg = load_config()
    rpc_url = args.rpc_url or cfg.solana_rpc_url

    failures = 0
    for status, step, detail in await _check_rpc(rpc_url, args.wallet, args.timeout):
        print(f"[{status}] rpc {step} -> {detail}")
        if status == "FAIL":
            failures += 1

    if not args.skip_llm:
        status, detail = await _check_llm(cfg, args.prompt, args.timeout)
        print(f"[{status}] llm {cfg.llm_provider or '-'} ({cfg.llm_model}) -> {detail}")
        if status == "FAIL":
            failures += 1

    if failures:
        print(f"\nDone with {failures} failure(s).")
        return 1

    print("\nDone with no hard failures.")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Smoke-test the Solana RPC endpoint and LLM provider.")
    parser.add_argument("--rpc-url", default="", help="Override SOLANA_RPC_URL.")
    parser.add_argument("--wallet", default="", help="Optional wallet to query balance and history for.")
    parser.add_argument("--skip-llm", action="store_true", help="Only check the RPC endpoint.")
    parser.add_argument(
        "--prompt",
        default="Reply with exactly: OK",
        help="Test prompt sent to the completion provider.",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=30,
        help="Timeout in seconds per call.",
    )
    args = parser.parse_args()
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
