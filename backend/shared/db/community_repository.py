"""SQLite-backed community repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

from shared.dal.community_repository import CommunityRepository
from shared.dal.models import Community

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteCommunityRepository(CommunityRepository):
    """SQLite implementation of CommunityRepository."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_community(self, community: Community) -> None:
        """Insert a community. Raises ValueError on duplicate id."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO communities (id, created_by, created_at, data) VALUES (?, ?, ?, ?)",
                    (
                        community.id,
                        community.created_by,
                        community.created_at.isoformat(),
                        community.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Community with id '{community.id}' already exists") from exc

    async def get_community(self, community_id: str) -> Community | None:
        row = self._db.connection.execute(
            "SELECT data FROM communities WHERE id = ?",
            (community_id,),
        ).fetchone()
        if row is None:
            return None
        return Community.model_validate(json.loads(row[0]))

    async def list_created_by(self, actor_id: str) -> list[Community]:
        """Communities created by the actor, newest first."""
        rows = self._db.connection.execute(
            "SELECT data FROM communities WHERE created_by = ? ORDER BY created_at DESC",
            (actor_id,),
        ).fetchall()
        return [Community.model_validate(json.loads(row[0])) for row in rows]

    async def add_member(self, community_id: str, player_id: str) -> None:
        """Add a player to a community. Adding an existing member is a no-op."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT OR IGNORE INTO community_members (community_id, player_id) VALUES (?, ?)",
                    (community_id, player_id),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Community '{community_id}' does not exist") from exc

    async def remove_member(self, community_id: str, player_id: str) -> None:
        async with self._lock:
            self._db.connection.execute(
                "DELETE FROM community_members WHERE community_id = ? AND player_id = ?",
                (community_id, player_id),
            )
            self._db.connection.commit()

    async def list_member_ids(self, community_id: str) -> list[str]:
        rows = self._db.connection.execute(
            "SELECT player_id FROM community_members WHERE community_id = ? ORDER BY rowid",
            (community_id,),
        ).fetchall()
        return [row[0] for row in rows]

    async def list_community_ids_for_player(self, player_id: str) -> list[str]:
        rows = self._db.connection.execute(
            "SELECT community_id FROM community_members WHERE player_id = ? ORDER BY rowid",
            (player_id,),
        ).fetchall()
        return [row[0] for row in rows]

    async def add_organizer(self, community_id: str, user_id: str, created_by: str) -> bool:
        async with self._lock:
            try:
                cursor = self._db.connection.execute(
                    "INSERT OR IGNORE INTO community_organizers (community_id, user_id, created_by) VALUES (?, ?, ?)",
                    (community_id, user_id, created_by),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Community '{community_id}' does not exist") from exc
            return cursor.rowcount == 1

    async def remove_organizer(self, community_id: str, user_id: str) -> None:
        async with self._lock:
            self._db.connection.execute(
                "DELETE FROM community_organizers WHERE community_id = ? AND user_id = ?",
                (community_id, user_id),
            )
            self._db.connection.commit()

    async def list_organizer_ids(self, community_id: str) -> list[str]:
        rows = self._db.connection.execute(
            "SELECT user_id FROM community_organizers WHERE community_id = ? ORDER BY rowid",
            (community_id,),
        ).fetchall()
        return [row[0] for row in rows]

    async def list_community_ids_for_organizer(self, user_id: str) -> list[str]:
        rows = self._db.connection.execute(
            "SELECT community_id FROM community_organizers WHERE user_id = ? ORDER BY rowid",
            (user_id,),
        ).fetchall()
        return [row[0] for row in rows]
