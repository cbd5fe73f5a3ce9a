"""Prompt construction: knowledge + recent memory + the new message."""

from __future__ import annotations

from memory import Turn, recent_window

from .constants import BEHAVIOR_RULES, PERSONA


def render_transcript(turns: list[Turn]) -> str:
    """Render turns as `ROLE(name): text` lines, oldest first."""
    lines = []
    for turn in turns:
        name_tag = f"({turn.name})" if turn.name else ""
        lines.append(f"{turn.role.upper()}{name_tag}: {turn.text}")
    return "\n".join(lines)


def build_system_prompt(knowledge: str, transcript: str, speaker_name: str = "") -> str:
    parts = [
        PERSONA,
        BEHAVIOR_RULES,
        f"KNOWLEDGE:\n{knowledge}",
    ]
    if speaker_name:
        parts.append(f"CURRENT SPEAKER:\n{speaker_name}")
    parts.append(f"RECENT MEMORY:\n{transcript}")
    return "\n\n".join(parts)


def build_prompt(
    user_text: str,
    history: list[Turn],
    speaker_name: str,
    *,
    knowledge: str,
    limit: int,
) -> list[dict]:
    """Build the two-unit request: system context, then the user's message verbatim."""
    transcript = render_transcript(recent_window(history, limit))
    return [
        {"role": "system", "content": build_system_prompt(knowledge, transcript, speaker_name)},
        {"role": "user", "content": user_text},
    ]
