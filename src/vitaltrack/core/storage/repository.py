"""Health entry repository — append-only history over the encrypted store.

The repository mediates between ``HealthEntry`` objects and the SQLite
database, using FieldEncryptor to encrypt/decrypt the vitals payload.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from vitaltrack.core.storage.database import HealthDatabase
from vitaltrack.core.storage.encryption import EncryptionError, FieldEncryptor
from vitaltrack.core.storage.models import HealthEntry

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when repository operations fail."""


class HealthEntryRepository:
    """Stores and queries health entries, newest first.

    Usage::

        db = HealthDatabase(":memory:")
        db.initialize()
        repo = HealthEntryRepository(db, FieldEncryptor(key))

        saved = repo.add_entry(entry)
        history = repo.get_entries(limit=30)
    """

    def __init__(self, database: HealthDatabase, encryptor: FieldEncryptor) -> None:
        self._db = database
        self._enc = encryptor

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def add_entry(self, entry: HealthEntry) -> HealthEntry:
        """Persist an entry and return it with ``id``/``created_at`` filled in.

        Existing values are kept, so re-importing an exported entry preserves
        its identity (and therefore its alert ids).
        """
        saved = dataclasses.replace(
            entry,
            id=entry.id or self._new_id(),
            created_at=entry.created_at or self._now_iso(),
        )

        conn = self._db.connection
        conn.execute(
            """INSERT INTO health_entries (id, user_id, entry_date, payload_enc, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                saved.id,
                saved.user_id,
                saved.date,
                self._enc.encrypt(saved.vitals_payload()),
                saved.created_at,
            ),
        )
        conn.commit()
        logger.info("Saved health entry %s (date=%s)", saved.id, saved.date)
        return saved

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_entry(self, entry_id: str) -> HealthEntry | None:
        """Retrieve an entry by ID, or None if not found."""
        row = self._db.connection.execute(
            "SELECT * FROM health_entries WHERE id = ?", (entry_id,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    def get_entries(
        self,
        *,
        since: str | None = None,
        limit: int = 100,
    ) -> list[HealthEntry]:
        """Query entries, newest ``created_at`` first.

        Args:
            since: ISO 8601 timestamp lower bound (inclusive).
            limit: Maximum results to return.
        """
        query = "SELECT * FROM health_entries"
        params: list[Any] = []
        if since:
            query += " WHERE created_at >= ?"
            params.append(since)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(limit)

        rows = self._db.connection.execute(query, params).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get_entries_for_date(self, day: str) -> list[HealthEntry]:
        """All entries recorded for a ``YYYY-MM-DD`` day, newest first."""
        rows = self._db.connection.execute(
            """SELECT * FROM health_entries WHERE entry_date = ?
               ORDER BY created_at DESC, rowid DESC""",
            (day,),
        ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def count_entries(self) -> int:
        """Return total number of stored entries."""
        row = self._db.connection.execute("SELECT COUNT(*) FROM health_entries").fetchone()
        return row[0]

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_entry(self, entry_id: str) -> bool:
        """Delete one entry. Returns False if it did not exist."""
        conn = self._db.connection
        cursor = conn.execute("DELETE FROM health_entries WHERE id = ?", (entry_id,))
        conn.commit()
        if cursor.rowcount == 0:
            return False
        logger.info("Deleted health entry %s", entry_id)
        return True

    def purge_before(self, before_timestamp: str) -> int:
        """Delete entries created strictly before an ISO 8601 timestamp."""
        conn = self._db.connection
        cursor = conn.execute(
            "DELETE FROM health_entries WHERE created_at < ?", (before_timestamp,)
        )
        conn.commit()
        if cursor.rowcount:
            logger.info("Purged %d entries older than %s", cursor.rowcount, before_timestamp)
        return cursor.rowcount

    def purge_before_days(self, days: int) -> int:
        """Delete entries older than ``days`` days."""
        cutoff = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()
        return self.purge_before(cutoff)

    def clear_entries(self) -> int:
        """Delete the whole entry history. Returns the number of rows removed."""
        conn = self._db.connection
        count = self.count_entries()
        conn.execute("DELETE FROM health_entries")
        conn.commit()
        logger.warning("Cleared entry history: %d entries removed", count)
        return count

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _row_to_entry(self, row: Any) -> HealthEntry:
        try:
            payload = self._enc.decrypt(row["payload_enc"])
        except EncryptionError as exc:
            raise RepositoryError(f"Cannot read entry {row['id']}: {exc}") from exc
        if not isinstance(payload, dict):
            raise RepositoryError(f"Entry {row['id']} has no vitals payload")

        try:
            return HealthEntry.from_dict({
                **payload,
                "id": row["id"],
                "user_id": row["user_id"],
                "date": row["entry_date"],
                "created_at": row["created_at"],
            })
        except KeyError as exc:
            raise RepositoryError(f"Entry {row['id']} is missing field {exc}") from exc
