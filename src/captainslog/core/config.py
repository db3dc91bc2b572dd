"""Configuration management for the captain's log core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, SecretStr

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Used when ENCRYPTION_KEY is not set. Every deployment that falls back to it
# shares the same key, so it is reported loudly rather than accepted silently.
DEFAULT_PASSPHRASE = "default-encryption-key-32-char-long!"

DEFAULT_DATA_DIR = Path(os.path.expanduser("~/.captainslog"))
LOG_FILENAME = "messages.json"


class ConfigError(Exception):
    """Raised when the environment cannot produce a usable configuration."""


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(
            "%s=%r is not an integer, falling back to default value %s",
            key,
            value,
            default,
        )
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    if value:
        logger.warning(
            "%s=%r is not a boolean, falling back to default value %s",
            key,
            value,
            default,
        )
    return default


# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO") or "INFO"

# Summaries
SUMMARY_MODEL = get_env("SUMMARY_MODEL")


class StoreSettings(BaseModel):
    """Everything needed to open the encrypted log.

    Frozen so one instance can be handed to every component that needs it.
    """

    model_config = ConfigDict(frozen=True)

    log_path: Path
    passphrase: SecretStr
    uses_default_passphrase: bool = False


def load_store_settings() -> StoreSettings:
    """
    Build StoreSettings from the environment.

    Raises:
        ConfigError: If no passphrase is configured and
            CAPTAINSLOG_REQUIRE_PASSPHRASE is enabled.
    """
    data_dir = Path(
        get_env("CAPTAINSLOG_DATA_DIR") or DEFAULT_DATA_DIR
    ).expanduser()
    log_path = Path(
        get_env("CAPTAINSLOG_LOG_FILE") or data_dir / LOG_FILENAME
    ).expanduser()

    passphrase = get_env("ENCRYPTION_KEY")
    uses_default = not passphrase
    if uses_default:
        if get_env_bool("CAPTAINSLOG_REQUIRE_PASSPHRASE", False):
            raise ConfigError(
                "ENCRYPTION_KEY is not set and CAPTAINSLOG_REQUIRE_PASSPHRASE is enabled"
            )
        logger.warning(
            "ENCRYPTION_KEY is not set: the log at %s is encrypted with the "
            "built-in default passphrase, which anyone with this source can use "
            "to decrypt it",
            log_path,
        )
        passphrase = DEFAULT_PASSPHRASE

    return StoreSettings(
        log_path=log_path,
        passphrase=SecretStr(passphrase or ""),
        uses_default_passphrase=uses_default,
    )


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    )
    return logging.getLogger(__name__)


def validate_core_environment() -> tuple[bool, str]:
    """
    Validate environment variables for the encrypted log.

    Returns:
        (is_valid, message) - If not valid, message explains what's missing.
        A valid environment may still carry a warning message.
    """
    try:
        settings = load_store_settings()
    except ConfigError as e:
        return False, str(e)

    if settings.uses_default_passphrase:
        return (
            True,
            "ENCRYPTION_KEY is not set - using the insecure built-in default passphrase",
        )

    return True, ""
