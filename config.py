"""
Gaia — Configuration
Flat .env-based configuration system.
"""

import os
import re
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


LATEST_MODEL_DEFAULTS = {
    "openai": "gpt-4o-mini",
    "xai": "grok-4-latest",
    "claude": "claude-sonnet-4-5",
    "gemini": "gemini-2.5-flash",
}

DEFAULT_KNOWLEDGE_FILES = ["book0.txt", "book1.txt", "traits.txt", "rules.txt"]

_MODEL_DEFAULT_SENTINELS = {"", "latest", "auto", "default"}


def _strip_inline_comment(value: str) -> str:
    """Strip shell-style inline comments for unquoted env values."""
    if not value:
        return ""
    cleaned = value.strip()
    if not cleaned:
        return ""
    if cleaned.startswith("#"):
        return ""
    return re.sub(r"\s+#.*$", "", cleaned).strip()


def _parse_file_list(raw: str) -> list[str]:
    """Parse KNOWLEDGE_FILES as an ordered, comma-separated list of file names."""
    cleaned = _strip_inline_comment(raw)
    if not cleaned:
        return list(DEFAULT_KNOWLEDGE_FILES)
    files = [chunk.strip() for chunk in cleaned.split(",")]
    return [name for name in files if name] or list(DEFAULT_KNOWLEDGE_FILES)


def _int_env(name: str, default: int) -> int:
    raw = _strip_inline_comment(os.getenv(name, ""))
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Config:
    # LLM Provider
    llm_provider: str = ""
    llm_model: str = ""
    max_output_tokens: int = 1024

    # API Keys
    openai_api_key: str = ""
    xai_api_key: str = ""
    anthropic_api_key: str = ""
    gemini_api_key: str = ""

    # Telegram
    telegram_bot_token: str = ""

    # Memory
    memory_dir: str = "memory"
    memory_limit: int = 20

    # Knowledge
    knowledge_dir: str = "knowledge"
    knowledge_files: list[str] = field(default_factory=lambda: list(DEFAULT_KNOWLEDGE_FILES))

    # Solana
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    rpc_timeout_sec: int = 15
    command_prefix: str = "sol"


def _resolve_model(provider: str, model: str) -> str:
    """Resolve empty/default model values to provider-specific latest defaults."""
    provider_name = _strip_inline_comment(provider or "").lower()
    requested = _strip_inline_comment(model or "")
    if requested.lower() in _MODEL_DEFAULT_SENTINELS:
        return LATEST_MODEL_DEFAULTS.get(provider_name, LATEST_MODEL_DEFAULTS["openai"])
    return requested


def load_config() -> Config:
    """Load config from environment variables with auto-detection."""
    cfg = Config(
        llm_provider=_strip_inline_comment(os.getenv("LLM_PROVIDER", "")),
        llm_model=os.getenv("LLM_MODEL", ""),
        max_output_tokens=_int_env("MAX_OUTPUT_TOKENS", 1024),
        openai_api_key=_strip_inline_comment(os.getenv("OPENAI_API_KEY", "")),
        xai_api_key=_strip_inline_comment(os.getenv("XAI_API_KEY", "")),
        anthropic_api_key=_strip_inline_comment(os.getenv("ANTHROPIC_API_KEY", "")),
        gemini_api_key=_strip_inline_comment(os.getenv("GEMINI_API_KEY", "")),
        telegram_bot_token=_strip_inline_comment(os.getenv("TELEGRAM_BOT_TOKEN", "")),
        memory_dir=_strip_inline_comment(os.getenv("MEMORY_DIR", "")) or "memory",
        memory_limit=_int_env("MEMORY_LIMIT", 20),
        knowledge_dir=_strip_inline_comment(os.getenv("KNOWLEDGE_DIR", "")) or "knowledge",
        knowledge_files=_parse_file_list(os.getenv("KNOWLEDGE_FILES", "")),
        solana_rpc_url=(
            _strip_inline_comment(os.getenv("SOLANA_RPC_URL", ""))
            or "https://api.mainnet-beta.solana.com"
        ),
        rpc_timeout_sec=_int_env("RPC_TIMEOUT_SEC", 15),
        command_prefix=_strip_inline_comment(os.getenv("COMMAND_PREFIX", "")).lstrip("/") or "sol",
    )

    # Auto-detect provider from API keys if not explicitly set
    if not cfg.llm_provider:
        if cfg.openai_api_key:
            cfg.llm_provider = "openai"
        elif cfg.xai_api_key:
            cfg.llm_provider = "xai"
        elif cfg.anthropic_api_key:
            cfg.llm_provider = "claude"
        elif cfg.gemini_api_key:
            cfg.llm_provider = "gemini"

    cfg.llm_provider = cfg.llm_provider.strip().lower()
    cfg.llm_model = _resolve_model(cfg.llm_provider, cfg.llm_model)
    cfg.max_output_tokens = max(256, int(cfg.max_output_tokens))
    cfg.memory_limit = max(0, int(cfg.memory_limit))
    cfg.rpc_timeout_sec = max(1, int(cfg.rpc_timeout_sec))

    return cfg
