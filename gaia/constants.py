"""Shared constants used by the Gaia bot."""

from __future__ import annotations

from pathlib import Path

# Project root for resolving runtime-relative paths reliably.
PROJECT_ROOT = Path(__file__).resolve().parent.parent

MENTION_SIGIL = "@"
PLACEHOLDER_SPEAKER = "Unknown"

# Solana amounts are integers in lamports; 1 SOL = 10^9 lamports.
LAMPORTS_PER_SOL = 1_000_000_000
TX_HISTORY_LIMIT = 5

FALLBACK_REPLY = "Oops — Gaia’s spark flickered. Try again!"

PERSONA = "You are GAI — the cheerful, whimsical companion AI of Gaia."

BEHAVIOR_RULES = """RULES:
- Address users personally by name.
- Be warm, positive, and whimsical.
- Stay inside the Gaia knowledge base.
- Do not invent lore.
- Provide clear and helpful replies."""

# Telegram rejects messages longer than 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 4096
