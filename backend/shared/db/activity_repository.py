"""SQLite-backed activity repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

from shared.dal.activity_repository import ActivityRepository
from shared.dal.models import Activity

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteActivityRepository(ActivityRepository):
    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_activity(self, activity: Activity) -> None:
        """Insert an activity. Raises ValueError on duplicate id."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO activities (id, type, created_at, data) VALUES (?, ?, ?, ?)",
                    (
                        activity.id,
                        activity.type.value,
                        activity.created_at.isoformat(),
                        activity.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Activity with id '{activity.id}' already exists") from exc

    async def list_recent(self, limit: int = 20, offset: int = 0) -> list[Activity]:
        """Newest activities first, skipping the first offset entries."""
        rows = self._db.connection.execute(
            "SELECT data FROM activities ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
            (limit, offset),
        ).fetchall()
        return [Activity.model_validate(json.loads(row[0])) for row in rows]

    async def count(self) -> int:
        row = self._db.connection.execute("SELECT COUNT(*) FROM activities").fetchone()
        return row[0]
