"""Factories wiring the log components from configuration.

Both the Telegram bot and the CLI call these so they open the same file
with the same key.
"""

from captainslog.core.cipher import CipherEngine
from captainslog.core.config import StoreSettings, load_store_settings
from captainslog.core.store import MessageStore
from captainslog.core.summary import LogSummarizer


def build_store(settings: StoreSettings | None = None) -> MessageStore:
    """
    Build a MessageStore for the configured log file.

    Args:
        settings: Explicit settings (defaults to load_store_settings())

    Returns:
        MessageStore whose parent directory exists
    """
    settings = settings or load_store_settings()
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    cipher = CipherEngine.from_passphrase(settings.passphrase.get_secret_value())
    return MessageStore(settings.log_path, cipher)


def build_summarizer(model: str | None = None) -> LogSummarizer:
    return LogSummarizer(model=model)
