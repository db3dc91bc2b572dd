"""Shared types and data structures for the captain's log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

# Stored in place of the text when a message has none (stickers, photos, ...)
NO_TEXT_SENTINEL = "No text content"


def format_timestamp(value: datetime) -> str:
    """Render a datetime the way it is stored: UTC, milliseconds, ``Z`` suffix.

    >>> format_timestamp(datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC))
    '2023-11-14T22:13:20.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    rendered = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


class MessageRecord(BaseModel):
    """A single log entry as persisted in the encrypted file."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    message: str

    @field_validator("date")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_serializer("date")
    def _serialize_date(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_epoch(cls, epoch_seconds: int, text: str | None = None) -> MessageRecord:
        """Build a record from a transport timestamp (seconds since the epoch)."""
        return cls(
            date=datetime.fromtimestamp(epoch_seconds, tz=UTC),
            message=text or NO_TEXT_SENTINEL,
        )

    @property
    def timestamp(self) -> datetime:
        return self.date

    @property
    def text(self) -> str:
        return self.message


class LogStatus(StrEnum):
    """Outcome of loading the log from disk."""

    ABSENT = "absent"
    LOADED = "loaded"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class LogSnapshot:
    """Result of reading the log file.

    ``error`` is set only when ``status`` is UNREADABLE and holds the typed
    cause (FormatError, CryptoError, LogParseError or OSError).
    """

    status: LogStatus
    records: list[MessageRecord] = field(default_factory=list)
    error: Exception | None = None

    @property
    def readable(self) -> bool:
        return self.status is not LogStatus.UNREADABLE
