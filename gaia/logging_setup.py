"""Logging configuration for Gaia.

Human-readable lines go to stderr. Setting JSON_LOG_ENABLED adds a JSONL sink
where each line carries the chat id parsed from the "[<chat id>] ..." prefix
and a coarse operation label for filtering.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("gaia")

_TRUTHY = {"1", "true", "yes", "on"}
_NOISY_LOGGERS = ("httpx", "httpcore", "openai._base_client", "anthropic._base_client")

# GAIA_VERBOSE_HTTP=1 keeps per-request transport logs.
if os.getenv("GAIA_VERBOSE_HTTP", "").strip().lower() not in _TRUTHY:
    for _name in _NOISY_LOGGERS:
        logging.getLogger(_name).setLevel(logging.WARNING)

DEFAULT_JSON_LOG_NAME = "gaia.jsonl"

_CHAT_PREFIX_RE = re.compile(r"^\[(?P<chat>[^\]]+)\]\s*(?P<body>.*)$", re.DOTALL)

# First match wins: (operation, where, marker). `where` is "prefix" or "contains".
_OPERATION_MARKERS: tuple[tuple[str, str, str], ...] = (
    ("user_message", "prefix", "user:"),
    ("assistant_message", "prefix", "bot:"),
    ("command", "prefix", "command:"),
    ("not_addressed", "prefix", "ignoring:"),
    ("identity", "contains", "bot username"),
    ("memory_saved", "contains", "memory saved"),
    ("memory", "contains", "memory"),
    ("ledger", "contains", "rpc"),
    ("completion", "contains", "completion"),
    ("telegram", "contains", "telegram"),
)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "")
    if not raw:
        return default
    return raw.strip().lower() in _TRUTHY


def _infer_operation(text: str) -> str:
    lower = (text or "").lower()
    for operation, where, marker in _OPERATION_MARKERS:
        if where == "prefix" and lower.startswith(marker):
            return operation
        if where == "contains" and marker in lower:
            return operation
    return "general"


def _chat_kind(chat: str | None) -> str | None:
    """Telegram group and channel ids are negative; private chats are the user's id."""
    if chat is None:
        return None
    if chat.lstrip("-").isdigit():
        return "group" if chat.startswith("-") else "private"
    return None


class _JsonLogFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        chat: str | None = None
        body = message

        matched = _CHAT_PREFIX_RE.match(message or "")
        if matched:
            chat = matched.group("chat")
            body = matched.group("body")

        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "chat": chat,
            "chat_kind": _chat_kind(chat),
            "operation": _infer_operation(body),
            "message": body,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def _json_log_path(runtime_root: str | Path | None) -> Path:
    base = Path(runtime_root).expanduser().resolve() if runtime_root else Path.cwd().resolve()
    raw_path = os.getenv("JSON_LOG_PATH", "").strip()
    if not raw_path:
        return base / "logs" / DEFAULT_JSON_LOG_NAME
    path = Path(raw_path).expanduser()
    return (path if path.is_absolute() else base / path).resolve()


def configure_optional_json_logging(runtime_root: str | Path | None = None) -> Path | None:
    """Attach the JSONL sink to the "gaia" logger when JSON_LOG_ENABLED is set.

    JSON_LOG_PATH overrides the file (relative paths resolve against
    `runtime_root`); the default is <runtime_root>/logs/gaia.jsonl. Calling
    this twice with the same path attaches one handler. Returns the path, or
    None when disabled.
    """
    if not _env_flag("JSON_LOG_ENABLED"):
        return None

    path = _json_log_path(runtime_root)
    for handler in log.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename).resolve() == path:
            return path

    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(_JsonLogFormatter())
    log.addHandler(file_handler)
    log.info(f"Structured JSON logging enabled: {path.as_posix()}")
    return path
