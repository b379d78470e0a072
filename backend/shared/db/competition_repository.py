"""SQLite-backed competition repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.dal.competition_repository import CompetitionRepository
from shared.dal.models import Competition, CompetitionStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteCompetitionRepository(CompetitionRepository):
    """SQLite implementation of CompetitionRepository."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_competition(self, competition: Competition) -> None:
        """Insert a competition. Raises ValueError on duplicate id or unknown community."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO competitions (id, community_id, status, created_at, data) VALUES (?, ?, ?, ?, ?)",
                    (
                        competition.id,
                        competition.community_id,
                        competition.status.value,
                        competition.created_at.isoformat(),
                        competition.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Cannot create competition '{competition.id}': {exc}") from exc

    async def get_competition(self, competition_id: str) -> Competition | None:
        row = self._db.connection.execute(
            "SELECT data FROM competitions WHERE id = ?",
            (competition_id,),
        ).fetchone()
        if row is None:
            return None
        return Competition.model_validate(json.loads(row[0]))

    async def update_status(
        self,
        competition_id: str,
        status: CompetitionStatus,
        *,
        expected_status: CompetitionStatus,
    ) -> bool:
        """Move a competition from expected_status to status in one statement."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE competitions SET status = ?, data = json_set(data, '$.status', ?) "
                "WHERE id = ? AND status = ?",
                (status.value, status.value, competition_id, expected_status.value),
            )
            self._db.connection.commit()
            if cursor.rowcount == 0:
                logger.warning(
                    "conditional status update rejected",
                    competition_id=competition_id,
                    expected_status=expected_status,
                )
                return False
            return True

    async def list_by_communities(self, community_ids: Sequence[str]) -> list[Competition]:
        """Competitions of the given communities, newest first."""
        if not community_ids:
            return []
        placeholders = ", ".join("?" * len(community_ids))
        rows = self._db.connection.execute(
            f"SELECT data FROM competitions WHERE community_id IN ({placeholders}) "  # noqa: S608
            "ORDER BY created_at DESC",
            list(community_ids),
        ).fetchall()
        return [Competition.model_validate(json.loads(row[0])) for row in rows]

    async def add_member(self, competition_id: str, player_id: str) -> None:
        """Add a player to the roster. Adding an existing member is a no-op."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT OR IGNORE INTO competition_members (competition_id, player_id) VALUES (?, ?)",
                    (competition_id, player_id),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Competition '{competition_id}' does not exist") from exc

    async def remove_member(self, competition_id: str, player_id: str) -> None:
        async with self._lock:
            self._db.connection.execute(
                "DELETE FROM competition_members WHERE competition_id = ? AND player_id = ?",
                (competition_id, player_id),
            )
            self._db.connection.commit()

    async def list_member_ids(self, competition_id: str) -> list[str]:
        rows = self._db.connection.execute(
            "SELECT player_id FROM competition_members WHERE competition_id = ? ORDER BY rowid",
            (competition_id,),
        ).fetchall()
        return [row[0] for row in rows]

    async def list_member_ids_for_competitions(self, competition_ids: Sequence[str]) -> list[str]:
        """Unique roster player ids across several competitions."""
        if not competition_ids:
            return []
        placeholders = ", ".join("?" * len(competition_ids))
        rows = self._db.connection.execute(
            f"SELECT DISTINCT player_id FROM competition_members WHERE competition_id IN ({placeholders})",  # noqa: S608
            list(competition_ids),
        ).fetchall()
        return [row[0] for row in rows]
