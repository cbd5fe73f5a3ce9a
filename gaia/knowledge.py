"""Runtime path resolution and static knowledge loading."""

from __future__ import annotations

import os
from pathlib import Path

from config import DEFAULT_KNOWLEDGE_FILES

from .constants import PROJECT_ROOT
from .logging_setup import log


def resolve_runtime_path(path_value: str) -> Path:
    """Resolve configured paths relative to GAIA_HOME or project root."""
    runtime_home = os.getenv("GAIA_HOME", "").strip()
    base_dir = Path(runtime_home).expanduser().resolve() if runtime_home else PROJECT_ROOT
    path = Path(path_value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()


def load_knowledge(knowledge_dir: str | Path, files: list[str] | None = None) -> str:
    """Concatenate the knowledge files into one blob, each under a `### <name>` header.

    Files are read in the given order. Missing or unreadable files are skipped.
    """
    base = Path(knowledge_dir)
    names = list(files) if files else list(DEFAULT_KNOWLEDGE_FILES)
    log.info(f"📘 Loading knowledge files from {base}")

    content = ""
    loaded = 0
    for name in names:
        path = base / name
        if not path.is_file():
            log.warning(f"Missing knowledge file: {name}")
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Skipping unreadable knowledge file {name}: {e}")
            continue

        content += f"\n### {name}\n"
        content += text + "\n"
        loaded += 1
        log.info(f"✔ Loaded {name}")

    log.info(f"Knowledge loaded: {loaded}/{len(names)} files, {len(content):,} chars")
    return content
