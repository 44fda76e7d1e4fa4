"""In-memory session storage for uploaded diet logs."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from diet_insights.adapters.spreadsheet_reader import SpreadsheetReader
from diet_insights.domain.rows import ParsedDietLog
from diet_insights.services.normalizer import parse_diet_log

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetRecord:
    """A parsed diet log held for one session."""

    id: UUID
    filename: str
    loaded_at: datetime
    log: ParsedDietLog


class DatasetStore(Protocol):
    """Storage interface for parsed diet logs."""

    def get(self, dataset_id: UUID) -> DatasetRecord | None:
        """Return a dataset if present and not expired."""

    def put(self, record: DatasetRecord, ttl_seconds: int) -> None:
        """Store a dataset with a TTL in seconds."""


@dataclass
class _StoredDataset:
    record: DatasetRecord
    expires_at: datetime


@dataclass
class InMemoryDatasetStore(DatasetStore):
    """Process-local dataset store; nothing survives a restart."""

    _entries: dict[UUID, _StoredDataset]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, dataset_id: UUID) -> DatasetRecord | None:
        """Return a dataset if it hasn't expired."""
        entry = self._entries.get(dataset_id)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(dataset_id, None)
            return None
        return entry.record

    def put(self, record: DatasetRecord, ttl_seconds: int) -> None:
        """Store a dataset with a TTL, dropping every expired dataset first."""
        now = datetime.now(tz=UTC)
        self._evict_expired(now)
        expires_at = now + timedelta(seconds=ttl_seconds)
        self._entries[record.id] = _StoredDataset(record=record, expires_at=expires_at)

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self, now: datetime) -> None:
        expired = [
            dataset_id
            for dataset_id, entry in self._entries.items()
            if now >= entry.expires_at
        ]
        for dataset_id in expired:
            del self._entries[dataset_id]
        if expired:
            _logger.info("Evicted %s expired datasets", len(expired))


@dataclass
class DatasetService:
    """Service that parses uploaded diet plans and keeps them for a session."""

    reader: SpreadsheetReader
    store: DatasetStore
    ttl_seconds: int = 3600

    def load(self, content: bytes, filename: str) -> DatasetRecord:
        """Parse an uploaded file and store the resulting diet log."""
        records = self.reader.read(content, filename)
        log = parse_diet_log(records)
        record = DatasetRecord(
            id=uuid4(),
            filename=filename,
            loaded_at=datetime.now(tz=UTC),
            log=log,
        )
        self.store.put(record, ttl_seconds=self.ttl_seconds)
        _logger.info(
            "Loaded dataset %s from %s with %s rows", record.id, filename, len(log.rows)
        )
        return record

    def get(self, dataset_id: UUID) -> DatasetRecord | None:
        """Return a stored dataset by id."""
        return self.store.get(dataset_id)
