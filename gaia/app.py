"""Application entrypoint and Telegram handler registration."""

from __future__ import annotations

import asyncio
import contextlib

from telegram.ext import Application, MessageHandler, filters

from config import load_config

from .bot import GaiaBot
from .knowledge import resolve_runtime_path
from .logging_setup import configure_optional_json_logging, log


def build_message_handler(bot: GaiaBot) -> MessageHandler:
    """Text handler for new messages.

    Commands arrive as text too; the bot routes /sol itself. Edits of earlier
    messages are not conversation turns and never reach the bot.
    """
    return MessageHandler(filters.TEXT & filters.UpdateType.MESSAGE, bot.handle_message)


def main():
    """Start the Gaia Telegram bot."""
    config = load_config()

    # Resolve runtime paths relative to GAIA_HOME (if set) or project root.
    config.memory_dir = str(resolve_runtime_path(config.memory_dir))
    config.knowledge_dir = str(resolve_runtime_path(config.knowledge_dir))
    configure_optional_json_logging(resolve_runtime_path("."))

    # Validate required config
    if not config.telegram_bot_token:
        log.error("TELEGRAM_BOT_TOKEN is required. Set it in .env")
        return

    if not config.llm_provider:
        log.error(
            "No LLM provider configured. Set LLM_PROVIDER and the corresponding API key in .env"
        )
        return

    log.info("🌿 Gaia starting...")
    log.info(f"   Provider: {config.llm_provider} ({config.llm_model})")
    log.info(f"   Memory dir: {config.memory_dir} (window: {config.memory_limit} turns)")
    log.info(f"   Knowledge dir: {config.knowledge_dir}")
    log.info(f"   Solana RPC: {config.solana_rpc_url}")
    log.info(f"   Command prefix: /{config.command_prefix}")

    bot = GaiaBot(config)

    stats = bot.memory.stats()
    log.info(f"   Memory: {stats['conversations']} conversations, {stats['turns']} turns")

    identity_task: asyncio.Task | None = None

    async def _post_init(application: Application):
        nonlocal identity_task
        # Messages are dropped (not queued) until this lookup succeeds.
        identity_task = asyncio.create_task(bot.resolve_identity(application.bot))

    async def _post_shutdown(application: Application):
        if identity_task is not None and not identity_task.done():
            identity_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await identity_task
        await bot.close()

    # Build Telegram application; updates for different chats run concurrently.
    app = (
        Application.builder()
        .token(config.telegram_bot_token)
        .concurrent_updates(True)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )

    app.add_handler(build_message_handler(bot))
    app.add_error_handler(bot.on_error)

    log.info("🌿 Gaia is running! Press Ctrl+C to stop.")

    # Longer Telegram long-poll timeout reduces idle request churn.
    app.run_polling(timeout=30)


if __name__ == "__main__":
    main()
