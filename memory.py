"""
Gaia — Conversation Memory
File-backed per-chat history: one human-readable JSON document per conversation.
"""

import asyncio
import hashlib
import json
import logging
import os
import tempfile
import weakref
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

log = logging.getLogger("gaia.memory")

ROLES = ("user", "assistant")
_MAX_ID_CHARS = 128


# ──────────────────────────────────────────────────────────────
# Turns
# ──────────────────────────────────────────────────────────────


@dataclass
class Turn:
    role: str
    text: str
    name: str | None = None
    ts: float | None = None

    def to_dict(self) -> dict:
        data = {"role": self.role}
        if self.name is not None:
            data["name"] = self.name
        data["text"] = self.text
        if self.ts is not None:
            data["ts"] = self.ts
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Turn":
        """Rebuild a turn from its stored form. Raises ValueError on bad shape."""
        if not isinstance(data, dict):
            raise ValueError(f"turn must be an object, got {type(data).__name__}")
        role = data.get("role")
        text = data.get("text")
        name = data.get("name")
        ts = data.get("ts")
        if role not in ROLES:
            raise ValueError(f"unknown role: {role!r}")
        if not isinstance(text, str):
            raise ValueError("turn text must be a string")
        if name is not None and not isinstance(name, str):
            raise ValueError("turn name must be a string")
        if ts is not None and not isinstance(ts, (int, float)):
            raise ValueError("turn ts must be a number")
        return cls(role=role, text=text, name=name, ts=ts)


def recent_window(turns: list[Turn], limit: int) -> list[Turn]:
    """Return the last `limit` turns in chronological order (a new list)."""
    if limit <= 0:
        return []
    return list(turns[-limit:])


# ──────────────────────────────────────────────────────────────
# Persistence helpers
# ──────────────────────────────────────────────────────────────


def _safe_conversation_id(conversation_id: int | str) -> str:
    # Percent-encoding is injective, so distinct ids never share a file or a lock.
    # Integer chat ids pass through unchanged ("-1001" stays "-1001").
    raw = str(conversation_id)
    if not raw:
        return "%"
    encoded = quote(raw, safe="-_@")
    if encoded.startswith("."):
        encoded = "%2E" + encoded[1:]
    if len(encoded) > _MAX_ID_CHARS:
        digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]
        encoded = f"{encoded[:_MAX_ID_CHARS - 17]}~{digest}"
    return encoded


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", delete=False, dir=str(path.parent), suffix=".tmp"
    )
    try:
        with tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        Path(tmp.name).unlink(missing_ok=True)
        raise


# ──────────────────────────────────────────────────────────────
# Memory Store
# ──────────────────────────────────────────────────────────────


class MemoryStore:
    """
    Per-conversation chat memory.

    Each conversation is stored as `<memory_dir>/<chat id>.json`, a JSON array
    of turns in chronological order. Saves go through a temp file and an
    atomic rename, so a reader never sees a half-written record.

    The store itself does not serialize callers; use `lock(conversation_id)`
    around a load → modify → save cycle.
    """

    def __init__(self, memory_dir: str = "memory"):
        self.root = Path(memory_dir)
        self.root.mkdir(parents=True, exist_ok=True)
        # Entries drop out once no caller holds or awaits the lock.
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def path_for(self, conversation_id: int | str) -> Path:
        return self.root / f"{_safe_conversation_id(conversation_id)}.json"

    def lock(self, conversation_id: int | str) -> asyncio.Lock:
        """Return the lock guarding one conversation's memory."""
        key = _safe_conversation_id(conversation_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    # ── Load / Save ───────────────────────────────────────────

    def load(self, conversation_id: int | str) -> list[Turn]:
        """Load a conversation's turns. Missing or unreadable records yield []."""
        path = self.path_for(conversation_id)
        if not path.exists():
            return []

        try:
            raw = json.loads(path.read_text(encoding="utf-8") or "[]")
            if not isinstance(raw, list):
                raise ValueError(f"expected a list of turns, got {type(raw).__name__}")
            return [Turn.from_dict(item) for item in raw]
        except (OSError, ValueError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors too.
            log.warning(f"[{conversation_id}] Ignoring unreadable memory at {path}: {e}")
            return []

    def save(self, conversation_id: int | str, turns: list[Turn]):
        """Persist the full turn sequence, replacing any previous record."""
        path = self.path_for(conversation_id)
        payload = json.dumps([t.to_dict() for t in turns], ensure_ascii=False, indent=2)
        _atomic_write_text(path, payload)
        log.info(f"[{conversation_id}] Memory saved ({len(turns)} turns)")

    # ── Stats ─────────────────────────────────────────────────

    def stats(self) -> dict:
        """Return memory statistics."""
        conversations = 0
        turns = 0
        for path in self.root.glob("*.json"):
            conversations += 1
            try:
                raw = json.loads(path.read_text(encoding="utf-8") or "[]")
            except (OSError, ValueError):
                continue
            if isinstance(raw, list):
                turns += len(raw)
        return {"conversations": conversations, "turns": turns}
