"""Failure kinds and the single chat reply each one maps to."""

from __future__ import annotations

from enum import Enum

from .constants import FALLBACK_REPLY


class FailureKind(str, Enum):
    NOT_ADDRESSED = "not_addressed"
    IDENTITY_NOT_READY = "identity_not_ready"
    MISSING_ARGUMENT = "missing_argument"
    INVALID_ADDRESS = "invalid_address"
    UNKNOWN_COMMAND = "unknown_command"
    LEDGER_UNAVAILABLE = "ledger_unavailable"
    COMPLETION_UNAVAILABLE = "completion_unavailable"


# None means the message is dropped without a reply.
_REPLIES: dict[FailureKind, str | None] = {
    FailureKind.NOT_ADDRESSED: None,
    FailureKind.IDENTITY_NOT_READY: None,
    FailureKind.MISSING_ARGUMENT: "Usage: /{prefix} {command} <wallet>",
    FailureKind.INVALID_ADDRESS: "❌ Invalid wallet address.",
    FailureKind.UNKNOWN_COMMAND: "Unknown command.",
    FailureKind.LEDGER_UNAVAILABLE: "RPC error, try again soon.",
    FailureKind.COMPLETION_UNAVAILABLE: FALLBACK_REPLY,
}


def failure_reply(kind: FailureKind, **fields: str) -> str | None:
    """Return the user-facing text for a failure kind.

    `fields` fill placeholders of templated replies (e.g. the usage hint).
    Internal error details are never part of the result.
    """
    template = _REPLIES[kind]
    if template is None:
        return None
    return template.format(**fields) if fields else template
