"""User-facing interfaces (Telegram bot, CLI)."""
