"""
Gaia — Solana Ledger Client
Thin async JSON-RPC client for the handful of queries the bot exposes.
"""

import itertools
import logging

import base58
import httpx

log = logging.getLogger("gaia.ledger")

PUBKEY_LENGTH = 32
DEFAULT_COMMITMENT = "confirmed"


class LedgerError(RuntimeError):
    """Raised when the RPC endpoint fails or returns an error object."""


def is_valid_address(address: str) -> bool:
    """True if `address` is a base58-encoded 32-byte public key."""
    if not address or not isinstance(address, str):
        return False
    try:
        decoded = base58.b58decode(address)
    except ValueError:
        return False
    return len(decoded) == PUBKEY_LENGTH


class LedgerClient:
    """
    Solana RPC access for balance, transaction history, and slot queries.

    Every network method is async and raises `LedgerError` on transport
    failures, non-2xx responses, or JSON-RPC error payloads. Callers decide
    how failures reach the user.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 15.0,
        commitment: str = DEFAULT_COMMITMENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rpc_url = rpc_url
        self.commitment = commitment
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self):
        await self._client.aclose()

    # ── JSON-RPC ──────────────────────────────────────────────

    async def _call(self, method: str, params: list | None = None):
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            response = await self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise LedgerError(f"{method} failed: {e}") from e
        except ValueError as e:
            raise LedgerError(f"{method} returned invalid JSON") from e

        if not isinstance(body, dict):
            raise LedgerError(f"{method} returned an unexpected payload")
        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise LedgerError(f"{method} RPC error: {message}")
        if "result" not in body:
            raise LedgerError(f"{method} returned no result")
        return body["result"]

    # ── Queries ───────────────────────────────────────────────

    async def validate_address(self, address: str) -> bool:
        return is_valid_address(address)

    async def get_balance(self, address: str) -> int:
        """Balance in lamports."""
        result = await self._call("getBalance", [address, {"commitment": self.commitment}])
        # Newer nodes wrap scalar results as {"context": ..., "value": ...}.
        value = result.get("value") if isinstance(result, dict) else result
        if not isinstance(value, int):
            raise LedgerError(f"getBalance returned a non-integer value: {value!r}")
        return value

    async def get_transactions(self, address: str, limit: int = 10) -> list[dict]:
        """Most recent confirmed signatures for an address, newest first."""
        result = await self._call(
            "getSignaturesForAddress",
            [address, {"limit": int(limit), "commitment": self.commitment}],
        )
        if not isinstance(result, list):
            raise LedgerError("getSignaturesForAddress returned a non-list result")
        return result

    async def get_current_slot(self) -> int:
        result = await self._call("getSlot", [{"commitment": self.commitment}])
        if not isinstance(result, int):
            raise LedgerError(f"getSlot returned a non-integer value: {result!r}")
        return result

    async def get_block_time(self, slot: int) -> int | None:
        """Estimated production time (unix seconds) of a slot, None if unknown."""
        return await self._call("getBlockTime", [int(slot)])
