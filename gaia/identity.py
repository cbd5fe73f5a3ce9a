"""The bot's own handle, known only after an async lookup at startup."""

from __future__ import annotations


class AgentIdentity:
    """Lifecycle: uninitialized until `resolve()` is called with the bot's handle.

    Consumers must read `handle` / `is_ready` at the moment they need it;
    the value changes once during startup.
    """

    def __init__(self, handle: str | None = None):
        self._handle = handle or None

    @property
    def handle(self) -> str | None:
        return self._handle

    @property
    def is_ready(self) -> bool:
        return self._handle is not None

    def resolve(self, handle: str):
        handle = (handle or "").strip().lstrip("@")
        if not handle:
            raise ValueError("agent handle must be a non-empty string")
        self._handle = handle

    def __repr__(self) -> str:
        state = f"Ready(@{self._handle})" if self._handle else "Uninitialized"
        return f"AgentIdentity<{state}>"
