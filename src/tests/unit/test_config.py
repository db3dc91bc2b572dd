"""Tests for captainslog.core.config and captainslog.config modules."""

import logging
from pathlib import Path

import pytest

import captainslog.config as telegram_config
import captainslog.core.config as config


class TestEnvHelpers:
    """Tests for environment variable helpers."""

    def test_get_env_returns_value(self, monkeypatch):
        monkeypatch.setenv("TEST_VAR", "test_value")

        assert config.get_env("TEST_VAR") == "test_value"

    def test_get_env_returns_default(self, monkeypatch):
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)

        assert config.get_env("NONEXISTENT_VAR", "default") == "default"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("42", 42),
            ("not_a_number", 99),
            (None, 123),
        ],
    )
    def test_get_env_int(self, monkeypatch, value, expected):
        """get_env_int parses or falls back to default."""
        if value is None:
            monkeypatch.delenv("INT_VAR", raising=False)
        else:
            monkeypatch.setenv("INT_VAR", value)

        assert config.get_env_int("INT_VAR", expected) == expected

    def test_get_env_int_warns_for_invalid_value(self, monkeypatch, caplog):
        monkeypatch.setenv("INT_VAR", "nope")
        caplog.set_level(logging.WARNING, logger="captainslog.core.config")

        assert config.get_env_int("INT_VAR", 7) == 7
        assert "INT_VAR" in caplog.text

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("true", True),
            ("True", True),
            ("1", True),
            ("yes", True),
            ("false", False),
            ("False", False),
            ("0", False),
            ("no", False),
        ],
    )
    def test_get_env_bool_parses_known_values(self, monkeypatch, value, expected):
        monkeypatch.setenv("BOOL_VAR", value)

        assert config.get_env_bool("BOOL_VAR") is expected

    @pytest.mark.parametrize("default", [True, False])
    def test_get_env_bool_default(self, monkeypatch, default):
        """get_env_bool returns default for unknown values."""
        monkeypatch.setenv("BOOL_VAR", "maybe")

        assert config.get_env_bool("BOOL_VAR", default) is default


class TestLoadStoreSettings:
    """Tests for load_store_settings."""

    def test_uses_env_passphrase(self, mock_env):
        settings = config.load_store_settings()

        assert settings.passphrase.get_secret_value() == mock_env["ENCRYPTION_KEY"]
        assert settings.uses_default_passphrase is False

    def test_default_log_path_in_data_dir(self, mock_env):
        settings = config.load_store_settings()

        assert settings.log_path == Path(mock_env["CAPTAINSLOG_DATA_DIR"]) / "messages.json"

    def test_log_file_override(self, mock_env, monkeypatch, tmp_path):
        monkeypatch.setenv("CAPTAINSLOG_LOG_FILE", str(tmp_path / "custom.log"))

        settings = config.load_store_settings()

        assert settings.log_path == tmp_path / "custom.log"

    def test_missing_passphrase_falls_back_loudly(self, mock_env, monkeypatch, caplog):
        """The built-in passphrase is used, but never silently."""
        monkeypatch.delenv("ENCRYPTION_KEY")
        caplog.set_level(logging.WARNING, logger="captainslog.core.config")

        settings = config.load_store_settings()

        assert settings.passphrase.get_secret_value() == config.DEFAULT_PASSPHRASE
        assert settings.uses_default_passphrase is True
        assert "ENCRYPTION_KEY is not set" in caplog.text

    def test_empty_passphrase_counts_as_missing(self, mock_env, monkeypatch):
        monkeypatch.setenv("ENCRYPTION_KEY", "")

        assert config.load_store_settings().uses_default_passphrase is True

    def test_require_passphrase_refuses_default(self, mock_env, monkeypatch):
        monkeypatch.delenv("ENCRYPTION_KEY")
        monkeypatch.setenv("CAPTAINSLOG_REQUIRE_PASSPHRASE", "true")

        with pytest.raises(config.ConfigError, match="ENCRYPTION_KEY"):
            config.load_store_settings()

    def test_passphrase_hidden_in_repr(self, mock_env):
        settings = config.load_store_settings()

        assert mock_env["ENCRYPTION_KEY"] not in repr(settings)

    def test_settings_are_frozen(self, mock_env):
        settings = config.load_store_settings()

        with pytest.raises(Exception):
            settings.log_path = Path("/elsewhere")


class TestValidateCoreEnvironment:
    """Tests for validate_core_environment."""

    def test_valid_with_passphrase(self, mock_env):
        assert config.validate_core_environment() == (True, "")

    def test_warns_on_default_passphrase(self, mock_env, monkeypatch):
        monkeypatch.delenv("ENCRYPTION_KEY")

        is_valid, message = config.validate_core_environment()

        assert is_valid is True
        assert "insecure" in message

    def test_invalid_when_passphrase_required(self, mock_env, monkeypatch):
        monkeypatch.delenv("ENCRYPTION_KEY")
        monkeypatch.setenv("CAPTAINSLOG_REQUIRE_PASSPHRASE", "1")

        is_valid, message = config.validate_core_environment()

        assert is_valid is False
        assert "ENCRYPTION_KEY" in message


class TestSetupLogging:
    def test_returns_logger(self):
        assert isinstance(config.setup_logging(), logging.Logger)


class TestTelegramValidateEnvironment:
    """Tests for the Telegram validate_environment."""

    def test_valid(self, mock_env):
        assert telegram_config.validate_environment() == (True, "")

    def test_missing_token(self, mock_env, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN")

        is_valid, message = telegram_config.validate_environment()

        assert is_valid is False
        assert "TELEGRAM_BOT_TOKEN" in message

    def test_missing_chat_id_is_a_warning(self, mock_env, monkeypatch):
        monkeypatch.delenv("TELEGRAM_DEFAULT_CHAT_ID")

        is_valid, message = telegram_config.validate_environment()

        assert is_valid is True
        assert "any chat" in message

    def test_non_numeric_chat_id(self, mock_env, monkeypatch):
        monkeypatch.setenv("TELEGRAM_DEFAULT_CHAT_ID", "abc")

        is_valid, message = telegram_config.validate_environment()

        assert is_valid is False
        assert "must be a number" in message
