"""Encrypted, file-backed message log."""

import asyncio
import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from captainslog.core.cipher import CipherEngine, CipherError
from captainslog.core.types import LogSnapshot, LogStatus, MessageRecord

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[MessageRecord])


class LogParseError(Exception):
    """Raised when decrypted log content is not a list of records."""


class LogUnreadableError(Exception):
    """Raised when appending would overwrite a log that exists but can't be read."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(
            f"Refusing to write {path}: existing log is unreadable ({cause}). "
            "Restore the correct ENCRYPTION_KEY or move the file aside."
        )
        self.path = path
        self.cause = cause


def parse_records(plaintext: str) -> list[MessageRecord]:
    """Parse decrypted JSON into records, preserving order."""
    try:
        return _RECORDS.validate_json(plaintext)
    except ValidationError as e:
        raise LogParseError(f"Decrypted log is not a list of records: {e}") from e


def serialize_records(records: list[MessageRecord]) -> str:
    return json.dumps(
        [record.model_dump(mode="json") for record in records],
        indent=2,
        ensure_ascii=False,
    )


class MessageStore:
    """Owns one encrypted log file.

    Nothing is cached between calls: every read decrypts the file again and
    every append rewrites it completely. Appends are serialized in-process by
    an asyncio lock and across processes by an flock on a sidecar lock file.
    """

    def __init__(self, path: Path | str, cipher: CipherEngine):
        """
        Initialize the store.

        Args:
            path: Location of the encrypted log file
            cipher: Engine holding the derived key
        """
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._cipher = cipher
        self._write_lock = asyncio.Lock()

    # Reading

    def _load_sync(self) -> LogSnapshot:
        try:
            blob = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return LogSnapshot(status=LogStatus.ABSENT)
        except (OSError, UnicodeDecodeError) as e:
            return LogSnapshot(status=LogStatus.UNREADABLE, error=e)

        try:
            records = parse_records(self._cipher.decrypt(blob))
        except (CipherError, LogParseError) as e:
            return LogSnapshot(status=LogStatus.UNREADABLE, error=e)

        return LogSnapshot(status=LogStatus.LOADED, records=records)

    async def load(self) -> LogSnapshot:
        """
        Load the log and report what was found.

        Returns:
            LogSnapshot that tells an absent log apart from an unreadable one
        """
        snapshot = await asyncio.to_thread(self._load_sync)
        if snapshot.status is LogStatus.UNREADABLE:
            logger.error(
                "Error reading encrypted log %s: %s", self.path, snapshot.error
            )
        return snapshot

    async def read_all(self) -> list[MessageRecord]:
        """
        Return every record in insertion order.

        An absent log and an unreadable one both read as empty; use load()
        when the difference matters.
        """
        snapshot = await self.load()
        return list(snapshot.records)

    # Writing

    @contextmanager
    def _file_lock(self) -> Iterator[None]:
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.lock_path, "a") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _write_sync(self, records: list[MessageRecord]) -> None:
        blob = self._cipher.encrypt(serialize_records(records))
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_path = Path(handle.name)
            try:
                handle.write(blob)
                handle.flush()
                os.fsync(handle.fileno())
            except BaseException:
                handle.close()
                tmp_path.unlink(missing_ok=True)
                raise
        try:
            tmp_path.replace(self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def _append_sync(self, record: MessageRecord) -> int:
        with self._file_lock():
            snapshot = self._load_sync()
            if snapshot.status is LogStatus.UNREADABLE:
                assert snapshot.error is not None
                raise LogUnreadableError(self.path, snapshot.error)
            records = [*snapshot.records, record]
            self._write_sync(records)
            return len(records)

    async def append(self, epoch_seconds: int, text: str | None = None) -> MessageRecord:
        """
        Append one record to the end of the log.

        Args:
            epoch_seconds: Message time in seconds since the epoch
            text: Message text; missing text is stored as a sentinel

        Returns:
            The record that was written

        Raises:
            LogUnreadableError: The file exists but can't be decrypted or parsed
            OSError: Writing the new log failed; the previous file is intact
        """
        record = MessageRecord.from_epoch(epoch_seconds, text)
        async with self._write_lock:
            try:
                count = await asyncio.to_thread(self._append_sync, record)
            except LogUnreadableError as e:
                logger.error("Not saving message: %s", e)
                raise
            except Exception:
                logger.error("Error writing encrypted log %s", self.path, exc_info=True)
                raise
        logger.info("Message saved to log (%d records)", count)
        return record

    def __repr__(self) -> str:
        return f"MessageStore({self.path})"
