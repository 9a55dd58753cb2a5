"""Persistence helpers for remembering previously selected values."""

from __future__ import annotations

import json
import os
import re
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from wisshrd.errors import ConfigurationError, HistoryError, WisshrdError
from wisshrd.paths import history_path

__all__ = [
    "CATEGORIES",
    "HistoryStore",
    "StoredData",
    "StoredEntry",
    "add_or_update",
]

CATEGORIES = ("keys", "accounts", "hosts", "jumps")

# Fractional seconds beyond microseconds, as written by nanosecond clocks.
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def _utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(UTC)


def _parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw:
        msg = "Stored entry is missing a timestamp"
        raise ValueError(msg)
    timestamp = datetime.fromisoformat(_EXCESS_FRACTION.sub(r"\1", raw))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp


@dataclass(slots=True)
class StoredEntry:
    """A single remembered value together with its usage timestamps."""

    value: str
    created_at: datetime = field(default_factory=_utcnow)
    last_used: datetime = field(default_factory=_utcnow)

    @classmethod
    def fresh(cls, value: str, now: datetime | None = None) -> StoredEntry:
        """Create an entry first seen, and last used, at ``now``."""

        timestamp = now if now is not None else _utcnow()
        return cls(value=value, created_at=timestamp, last_used=timestamp)

    def to_payload(self) -> dict[str, Any]:
        """Serialize the entry into a JSON-compatible dictionary."""

        return {
            "value": self.value,
            "last_used": self.last_used.isoformat(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StoredEntry:
        """Reconstruct an entry instance from serialized data."""

        value = payload.get("value")
        if not isinstance(value, str) or not value:
            msg = "Stored entry is missing 'value'"
            raise ValueError(msg)
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            msg = "Stored entry value is not valid text"
            raise ValueError(msg) from exc

        return cls(
            value=value,
            created_at=_parse_timestamp(payload.get("created_at")),
            last_used=_parse_timestamp(payload.get("last_used")),
        )


@dataclass(slots=True)
class StoredData:
    """The full persisted document: one entry list per category."""

    keys: list[StoredEntry] = field(default_factory=list)
    accounts: list[StoredEntry] = field(default_factory=list)
    hosts: list[StoredEntry] = field(default_factory=list)
    jumps: list[StoredEntry] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Serialize every category into a JSON-compatible structure."""

        return {
            category: [entry.to_payload() for entry in getattr(self, category)]
            for category in CATEGORIES
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StoredData:
        """Create a document from serialized data, skipping malformed entries."""

        data = cls()
        for category in CATEGORIES:
            raw_entries = payload.get(category)
            if not isinstance(raw_entries, list):
                continue
            entries: list[StoredEntry] = getattr(data, category)
            for item in raw_entries:
                if not isinstance(item, dict):
                    continue
                try:
                    entries.append(StoredEntry.from_payload(item))
                except ValueError:
                    continue
        return data


def add_or_update(
    entries: list[StoredEntry],
    value: str,
    *,
    now: datetime | None = None,
) -> list[StoredEntry]:
    """Refresh ``last_used`` for ``value`` or append it as a new entry.

    The list is mutated in place and returned for convenience.
    """

    timestamp = now if now is not None else _utcnow()
    for entry in entries:
        if entry.value == value:
            entry.last_used = timestamp
            return entries
    entries.append(StoredEntry.fresh(value, timestamp))
    return entries


class HistoryStore:
    """Manage on-disk persistence of the selection history."""

    def __init__(
        self,
        path: Path | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._path = path
        self._clock = clock if clock is not None else _utcnow

    @property
    def path(self) -> Path:
        """Return the backing file path, resolving the default lazily."""

        if self._path is None:
            self._path = history_path()
        return self._path

    def now(self) -> datetime:
        """Return the current time according to the store's clock."""

        return self._clock()

    def load(self) -> tuple[StoredData, WisshrdError | None]:
        """Load the history document.

        A missing file yields empty data and no error. An unreadable or
        unparsable file yields empty data together with the error so the
        caller can report it and carry on.
        """

        try:
            path = self.path
        except ConfigurationError as exc:
            return StoredData(), exc

        if not path.exists():
            return StoredData(), None
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            return StoredData(), HistoryError(f"could not parse history file: {exc}")
        except OSError as exc:
            return StoredData(), HistoryError(f"could not read history file: {exc}")
        if not raw.strip():
            return StoredData(), None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            return StoredData(), HistoryError(f"could not parse history file: {exc}")
        if not isinstance(payload, dict):
            return StoredData(), HistoryError("could not parse history file: expected an object")
        return StoredData.from_payload(payload), None

    def save(self, data: StoredData) -> None:
        """Persist the document to disk atomically with owner-only permissions."""

        path = self.path
        text = json.dumps(data.to_payload(), indent=2)
        tmp_path = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.chmod(tmp_path, 0o600)
            tmp_path.replace(path)
        except OSError as exc:
            with suppress(OSError):
                tmp_path.unlink()
            raise HistoryError(f"could not write history file: {exc}") from exc

    def add_or_update(self, entries: list[StoredEntry], value: str) -> list[StoredEntry]:
        """Record a use of ``value`` at the store's current time."""

        return add_or_update(entries, value, now=self.now())
