"""Telegram bot initialization and runner."""

import logging
from typing import Any

from telegram import BotCommand
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from captainslog.config import (
    ALLOWED_CHAT_ID,
    TELEGRAM_BOT_TOKEN,
    setup_logging,
    validate_environment,
)
from captainslog.core.config import ConfigError, validate_core_environment
from captainslog.core.factory import build_store, build_summarizer
from captainslog.interfaces.telegram.handlers import (
    cmd_help,
    cmd_status,
    handle_message,
)
from captainslog.interfaces.telegram.handlers.utils import STORE_KEY, SUMMARIZER_KEY

logger = logging.getLogger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle errors in the telegram bot.

    Args:
        update: Telegram update that caused the error
        context: Telegram context containing error info
    """
    logger.error(f"Exception while handling an update: {context.error}")
    chat = getattr(update, "effective_chat", None)
    if chat:
        try:
            await chat.send_message("An error occurred while processing your request.")
        except Exception as exc:
            logger.warning("Failed to send Telegram error message: %s", exc)


def build_application(token: str, bot_data: dict[str, Any]) -> Application:
    """
    Build the Telegram application with all handlers registered.

    Args:
        token: Bot token
        bot_data: Shared objects (store, summarizer) for handlers
    """

    async def _post_init(application: Any) -> None:
        commands = [
            BotCommand("help", "Show help"),
            BotCommand("status", "Show log size and health"),
        ]
        try:
            await application.bot.set_my_commands(commands)
        except Exception as exc:
            logger.debug(f"Failed to set bot commands: {exc}")

    app = ApplicationBuilder().token(token).post_init(_post_init).build()
    app.bot_data.update(bot_data)

    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("start", cmd_help))
    app.add_handler(CommandHandler("status", cmd_status))
    app.add_handler(MessageHandler(~filters.COMMAND, handle_message))
    app.add_error_handler(error_handler)
    return app


def run_telegram_bot() -> None:
    """Run the Telegram bot."""
    setup_logging()

    is_valid, message = validate_environment()
    if not is_valid:
        print(f"ERROR: {message}")
        print("\nCopy .env.example to .env and fill in the values.")
        raise SystemExit(1)
    if message:
        print(f"WARNING: {message}")

    is_valid, message = validate_core_environment()
    if not is_valid:
        print(f"ERROR: {message}")
        raise SystemExit(1)
    if message:
        print(f"WARNING: {message}")

    bot_token = TELEGRAM_BOT_TOKEN
    if not bot_token:
        print("ERROR: Missing TELEGRAM_BOT_TOKEN.")
        raise SystemExit(1)

    try:
        store = build_store()
    except ConfigError as e:
        print(f"ERROR: {e}")
        raise SystemExit(1)

    app = build_application(
        bot_token,
        {STORE_KEY: store, SUMMARIZER_KEY: build_summarizer()},
    )

    logger.debug("Bot starting...")
    logger.debug(f"Log file: {store.path}")
    logger.debug(f"Chat ID: {ALLOWED_CHAT_ID or 'ALL (no filter)'}")
    print("Captain's log is ready. Waiting for messages...")

    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])


if __name__ == "__main__":
    run_telegram_bot()
