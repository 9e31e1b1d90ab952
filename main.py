"""
main.py
-------
Entry point for the Tic Tac Toe Telegram bot.

Responsibilities:
    - Validate configuration and connect to Redis.
    - Wire the GameService into the Telegram application.
    - Register all handlers and run via long polling or a webhook.
"""

import sys
from urllib.parse import urlparse

from redis.exceptions import RedisError
from telegram import BotCommand, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    InlineQueryHandler,
    MessageHandler,
    filters,
)

from config import (
    REDIS_URL,
    TELEGRAM_BOT_TOKEN,
    WEBHOOK_LISTEN,
    WEBHOOK_PORT,
    WEBHOOK_SECRET,
    WEBHOOK_URL,
)
from db.redis_client import RedisClient
from handlers.game_handler import GAME_SERVICE_KEY, callback_query_handler, inline_query_handler
from handlers.start_handler import greeting_message, help_command, start_command
from repositories.game_repo import GameRepository
from services.game_service import GameService
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

REDIS_CLIENT_KEY = "redis_client"
ALLOWED_UPDATES = [Update.MESSAGE, Update.CALLBACK_QUERY, Update.INLINE_QUERY]
# Schemes accepted by redis.from_url
REDIS_URL_SCHEMES = ("redis", "rediss", "unix")


async def on_startup(application: Application) -> None:
    """Connect to Redis, inject the game service and register the command menu."""
    client = RedisClient(REDIS_URL)
    await client.init()
    application.bot_data[REDIS_CLIENT_KEY] = client
    application.bot_data[GAME_SERVICE_KEY] = GameService(GameRepository(client))

    await application.bot.set_my_commands([
        BotCommand("start", "🎮 Start a new game"),
        BotCommand("help", "📖 How to play"),
    ])
    logger.info("Bot commands menu registered successfully.")


async def on_shutdown(application: Application) -> None:
    client = application.bot_data.pop(REDIS_CLIENT_KEY, None)
    if client is not None:
        await client.close()


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log anything a handler did not handle itself; the bot keeps running."""
    logger.error(f"Unhandled error while processing update {update}", exc_info=context.error)


def build_application() -> Application:
    app = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(on_startup)
        .post_shutdown(on_shutdown)
        .build()
    )

    app.add_handler(CommandHandler("start", start_command, filters=filters.ChatType.PRIVATE))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND & filters.ChatType.PRIVATE, greeting_message))
    app.add_handler(InlineQueryHandler(inline_query_handler))
    app.add_handler(CallbackQueryHandler(callback_query_handler))
    app.add_error_handler(on_error)
    return app


def main() -> None:
    """Initialize and run the bot."""
    configure_logging()

    # ── 1. Configuration ──────────────────────────────────
    if not TELEGRAM_BOT_TOKEN:
        logger.critical("TELEGRAM_BOT_TOKEN env must be set")
        sys.exit(1)
    if not REDIS_URL:
        logger.critical("REDIS_URL env must be set")
        sys.exit(1)
    if urlparse(REDIS_URL).scheme not in REDIS_URL_SCHEMES:
        logger.critical("REDIS_URL must be a redis://, rediss:// or unix:// URL")
        sys.exit(1)

    # ── 2. Build the Telegram application ─────────────────
    app = build_application()

    # ── 3. Run ────────────────────────────────────────────
    try:
        if WEBHOOK_URL:
            logger.info(f"🚀 Bot is running with webhook on port {WEBHOOK_PORT}.")
            app.run_webhook(
                listen=WEBHOOK_LISTEN,
                port=WEBHOOK_PORT,
                webhook_url=WEBHOOK_URL,
                secret_token=WEBHOOK_SECRET or None,
                allowed_updates=ALLOWED_UPDATES,
            )
        else:
            logger.info("🚀 Bot is running! Press Ctrl+C to stop.")
            app.run_polling(allowed_updates=ALLOWED_UPDATES)
    except (RedisError, ValueError) as e:
        logger.critical(f"Cannot start without Redis: {e}")
        sys.exit(1)

    logger.info("Bot stopped.")


if __name__ == "__main__":
    main()
