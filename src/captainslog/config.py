"""Configuration for the Telegram interface.

Core settings live in captainslog.core.config and are re-exported here.
"""

from captainslog.core.config import (  # noqa: F401
    get_env,
    get_env_int,
    setup_logging,
)

# Telegram-specific settings (not in core)
TELEGRAM_BOT_TOKEN = get_env("TELEGRAM_BOT_TOKEN")
ALLOWED_CHAT_ID = get_env_int("TELEGRAM_DEFAULT_CHAT_ID", 0)

# Messages containing this phrase request a summary instead of being logged
SUMMARY_TRIGGER = "summarize captain's log"


def validate_environment() -> tuple[bool, str]:
    """
    Validate required environment variables for the Telegram interface.

    Returns:
        (is_valid, message) - If not valid, message explains what's missing.
    """
    if not get_env("TELEGRAM_BOT_TOKEN"):
        return (
            False,
            "Missing required environment variable:\n"
            "  - TELEGRAM_BOT_TOKEN: Telegram bot token from @BotFather",
        )

    chat_id = get_env("TELEGRAM_DEFAULT_CHAT_ID", "")
    if not chat_id:
        return (
            True,
            "TELEGRAM_DEFAULT_CHAT_ID is not set - messages from any chat will be logged",
        )

    try:
        int(chat_id)
    except ValueError:
        return False, f"TELEGRAM_DEFAULT_CHAT_ID must be a number, got: {chat_id}"

    return True, ""
