"""Shared test fixtures and configuration."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from captainslog.core.cipher import CipherEngine
from captainslog.core.kdf import derive_key
from captainslog.core.store import MessageStore

TEST_PASSPHRASE = "test-passphrase"


@pytest.fixture(scope="session")
def passphrase() -> str:
    return TEST_PASSPHRASE


@pytest.fixture(scope="session")
def key(passphrase) -> bytes:
    """Key derived once for the whole run (scrypt is deliberately slow)."""
    return derive_key(passphrase)


@pytest.fixture(scope="session")
def other_key() -> bytes:
    return derive_key("a-different-passphrase")


@pytest.fixture
def cipher(key):
    return CipherEngine(key)


@pytest.fixture
def log_path(tmp_path):
    """Path of the encrypted log inside a temp directory."""
    return tmp_path / "messages.json"


@pytest.fixture
def store(log_path, cipher):
    """MessageStore backed by a temp file."""
    return MessageStore(log_path, cipher)


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    """Set up mock environment variables."""
    env_vars = {
        "TELEGRAM_BOT_TOKEN": "test_token_12345",
        "TELEGRAM_DEFAULT_CHAT_ID": "12345",
        "ENCRYPTION_KEY": TEST_PASSPHRASE,
        "CAPTAINSLOG_DATA_DIR": str(tmp_path / "data"),
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("CAPTAINSLOG_LOG_FILE", raising=False)
    monkeypatch.delenv("CAPTAINSLOG_REQUIRE_PASSPHRASE", raising=False)
    return env_vars


@pytest.fixture
def make_processing_message():
    """Factory for a processing message with edit_text."""

    def _make_processing_message():
        message = MagicMock()
        message.edit_text = AsyncMock()
        return message

    return _make_processing_message


@pytest.fixture
def make_update(make_processing_message):
    """Factory for Telegram Update objects used in handlers tests."""

    def _make_update(
        *,
        user_id: int = 12345,
        chat_id: int = 12345,
        is_bot: bool = False,
        text: str | None = "Hello test",
        date: datetime = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC),
    ):
        update = MagicMock()
        update.effective_user.id = user_id
        update.effective_user.is_bot = is_bot
        update.effective_chat.id = chat_id
        update.effective_chat.send_message = AsyncMock()

        update.message.chat_id = chat_id
        update.message.text = text
        update.message.date = date
        update.message.reply_text = AsyncMock(return_value=make_processing_message())
        return update

    return _make_update


@pytest.fixture
def make_context(store):
    """Factory for a Telegram context carrying the store and a summarizer."""

    def _make_context(summarizer=None):
        context = MagicMock()
        context.args = []
        context.bot.send_chat_action = AsyncMock()
        context.bot_data = {
            "store": store,
            "summarizer": summarizer or MagicMock(),
        }
        return context

    return _make_context
