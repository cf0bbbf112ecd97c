"""SQLite-backed store for synced cursus users."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from cursus_sync.models.users import UserRecord


def _serialize_date(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class SQLiteUserStore:
    """Users keyed by login; a record needs an update when its email or flag date changed."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS cursus_users (
                    name TEXT PRIMARY KEY,
                    email TEXT NOT NULL,
                    flagged_at TEXT,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def filter_requiring_update(self, records: Iterable[UserRecord]) -> List[UserRecord]:
        """Return the records that are new or differ from what is stored."""
        latest: Dict[str, UserRecord] = {}
        for record in records:
            latest.pop(record.name, None)
            latest[record.name] = record
        if not latest:
            return []

        placeholders = ", ".join("?" for _ in latest)
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT name, email, flagged_at FROM cursus_users WHERE name IN ({placeholders})",
                tuple(latest),
            ).fetchall()
        stored = {row["name"]: (row["email"], row["flagged_at"]) for row in rows}

        return [
            record
            for name, record in latest.items()
            if stored.get(name) != (record.email, _serialize_date(record.flagged_at))
        ]

    def upsert(self, records: Iterable[UserRecord]) -> None:
        updated_at = datetime.now(timezone.utc).isoformat()
        rows = [
            (record.name, record.email, _serialize_date(record.flagged_at), updated_at)
            for record in records
        ]
        if not rows:
            return
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO cursus_users (name, email, flagged_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    email = excluded.email,
                    flagged_at = excluded.flagged_at,
                    updated_at = excluded.updated_at
                """,
                rows,
            )

    def get(self, name: str) -> Optional[UserRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT name, email, flagged_at FROM cursus_users WHERE name = ?",
                (name,),
            ).fetchone()
        if not row:
            return None
        flagged_at = row["flagged_at"]
        return UserRecord(
            name=row["name"],
            email=row["email"],
            flagged_at=datetime.fromisoformat(flagged_at) if flagged_at else None,
        )


__all__ = ["SQLiteUserStore"]
