"""SQLite-backed player repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.dal.models import Player
from shared.dal.player_repository import DuplicatePhoneError, PlayerRepository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.db.connection import Database

logger = structlog.get_logger()


class SqlitePlayerRepository(PlayerRepository):
    """SQLite implementation of PlayerRepository.

    Writes run under an asyncio lock. Relies on database uniqueness
    constraints and maps IntegrityError to domain ValueError.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_player(self, player: Player) -> None:
        """Insert a player. Raises ValueError on duplicate id, DuplicatePhoneError on duplicate phone."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO players (id, created_by, phone, data) VALUES (?, ?, ?, ?)",
                    (player.id, player.created_by, player.phone, player.model_dump_json()),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                error_msg = str(exc).lower()
                if "players.id" in error_msg:
                    raise ValueError(f"Player with id '{player.id}' already exists") from exc
                if "players.phone" in error_msg or "idx_players_phone" in error_msg:
                    raise DuplicatePhoneError(f"Phone '{player.phone}' already registered") from exc
                raise ValueError(str(exc)) from exc  # pragma: no cover

    async def get_player(self, player_id: str) -> Player | None:
        row = self._db.connection.execute(
            "SELECT data FROM players WHERE id = ?",
            (player_id,),
        ).fetchone()
        if row is None:
            return None
        return Player.model_validate(json.loads(row[0]))

    async def get_by_phone(self, phone: str) -> Player | None:
        row = self._db.connection.execute(
            "SELECT data FROM players WHERE phone = ?",
            (phone,),
        ).fetchone()
        if row is None:
            return None
        return Player.model_validate(json.loads(row[0]))

    async def get_by_user_id(self, user_id: str) -> Player | None:
        """Player linked to a user account, if any."""
        row = self._db.connection.execute(
            "SELECT data FROM players WHERE json_extract(data, '$.user_id') = ?",
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return Player.model_validate(json.loads(row[0]))

    async def list_by_ids(self, player_ids: Sequence[str]) -> list[Player]:
        """Look up several players, preserving the order of player_ids and skipping unknown ids."""
        if not player_ids:
            return []
        placeholders = ", ".join("?" * len(player_ids))
        rows = self._db.connection.execute(
            f"SELECT id, data FROM players WHERE id IN ({placeholders})",  # noqa: S608
            list(player_ids),
        ).fetchall()
        by_id = {row[0]: Player.model_validate(json.loads(row[1])) for row in rows}
        return [by_id[pid] for pid in dict.fromkeys(player_ids) if pid in by_id]

    async def list_all(self) -> list[Player]:
        """All players ordered by name."""
        rows = self._db.connection.execute(
            "SELECT data FROM players ORDER BY json_extract(data, '$.name') COLLATE NOCASE, id",
        ).fetchall()
        return [Player.model_validate(json.loads(row[0])) for row in rows]

    async def update_player(self, player: Player) -> None:
        """Replace a player's stored record. Raises ValueError if the player does not exist."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE players SET phone = ?, data = ? WHERE id = ?",
                (player.phone, player.model_dump_json(), player.id),
            )
            self._db.connection.commit()
            if cursor.rowcount == 0:
                raise ValueError(f"Player with id '{player.id}' does not exist")

    async def delete_player(self, player_id: str) -> None:
        """Delete a player along with its community and competition memberships.

        Games keep the id in their teams; rankings skip it as an unknown player.
        """
        async with self._lock:
            conn = self._db.connection
            conn.execute("DELETE FROM community_members WHERE player_id = ?", (player_id,))
            conn.execute("DELETE FROM competition_members WHERE player_id = ?", (player_id,))
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            conn.commit()
            if cursor.rowcount == 0:
                logger.warning("delete_player had no effect (not found)", player_id=player_id)
