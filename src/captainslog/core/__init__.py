"""Captain's log core library - encrypted log storage and analysis."""

from typing import TYPE_CHECKING

from captainslog.core.cipher import CipherEngine, CipherError, CryptoError, FormatError
from captainslog.core.types import LogSnapshot, LogStatus, MessageRecord

if TYPE_CHECKING:
    from captainslog.core.factory import build_store, build_summarizer
    from captainslog.core.store import (
        LogParseError,
        LogUnreadableError,
        MessageStore,
    )

__all__ = [
    # Cipher
    "CipherEngine",
    "CipherError",
    "CryptoError",
    "FormatError",
    # Types
    "LogSnapshot",
    "LogStatus",
    "MessageRecord",
    # Store
    "LogParseError",
    "LogUnreadableError",
    "MessageStore",
    # Factories
    "build_store",
    "build_summarizer",
]


def __getattr__(name: str):
    if name in ("LogParseError", "LogUnreadableError", "MessageStore"):
        from captainslog.core import store

        return getattr(store, name)
    if name in ("build_store", "build_summarizer"):
        from captainslog.core import factory

        return getattr(factory, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
