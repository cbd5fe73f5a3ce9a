"""Gaia core package."""

from .addressing import should_respond
from .app import main
from .bot import GaiaBot
from .constants import FALLBACK_REPLY, LAMPORTS_PER_SOL, PROJECT_ROOT
from .errors import FailureKind, failure_reply
from .identity import AgentIdentity
from .knowledge import load_knowledge, resolve_runtime_path
from .logging_setup import log
from .prompt import build_prompt, build_system_prompt, render_transcript
from .types import CommandInvocation, InboundMessage, MentionEntity, Sender

__all__ = [
    "AgentIdentity",
    "build_prompt",
    "build_system_prompt",
    "CommandInvocation",
    "FailureKind",
    "failure_reply",
    "FALLBACK_REPLY",
    "GaiaBot",
    "InboundMessage",
    "LAMPORTS_PER_SOL",
    "load_knowledge",
    "log",
    "main",
    "MentionEntity",
    "PROJECT_ROOT",
    "render_transcript",
    "resolve_runtime_path",
    "Sender",
    "should_respond",
]
