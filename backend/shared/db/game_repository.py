"""SQLite-backed game repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from typing import TYPE_CHECKING

import structlog

from game.logic.enums import GameStatus
from game.logic.state import Game
from shared.dal.game_repository import GameRepository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.db.connection import Database

logger = structlog.get_logger()


def _placeholders(count: int) -> str:
    return ", ".join("?" * count)


class SqliteGameRepository(GameRepository):
    """SQLite implementation of GameRepository.

    Stores full game snapshots as JSON with indexed columns for queries.
    The version column backs the conditional update used for round submission.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_game(self, game: Game) -> None:
        """Insert a game record. Raises ValueError on duplicate id."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO games (id, competition_id, status, version, created_at, data) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        game.id,
                        game.competition_id,
                        game.status.value,
                        game.version,
                        game.created_at.isoformat(),
                        game.model_dump_json(),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Game with id '{game.id}' already exists") from exc

    async def get_game(self, game_id: str) -> Game | None:
        """Retrieve a single game by its id."""
        row = self._db.connection.execute(
            "SELECT data FROM games WHERE id = ?",
            (game_id,),
        ).fetchone()
        if row is None:
            return None
        return Game.model_validate(json.loads(row[0]))

    async def update_game(self, game: Game, *, expected_version: int) -> bool:
        """Replace the stored game only if its version is still expected_version."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE games SET status = ?, version = ?, data = ? WHERE id = ? AND version = ?",
                (game.status.value, game.version, game.model_dump_json(), game.id, expected_version),
            )
            self._db.connection.commit()
            if cursor.rowcount == 0:
                logger.warning("conditional game update rejected", game_id=game.id, expected_version=expected_version)
                return False
            return True

    async def list_by_competition(self, competition_id: str) -> list[Game]:
        """Games of a competition, newest first."""
        rows = self._db.connection.execute(
            "SELECT data FROM games WHERE competition_id = ? ORDER BY created_at DESC, rowid DESC",
            (competition_id,),
        ).fetchall()
        return [Game.model_validate(json.loads(row[0])) for row in rows]

    async def list_by_competitions(
        self,
        competition_ids: Sequence[str],
        *,
        include_pending: bool = True,
    ) -> list[Game]:
        """Games of several competitions, oldest first."""
        if not competition_ids:
            return []
        query = f"SELECT data FROM games WHERE competition_id IN ({_placeholders(len(competition_ids))})"  # noqa: S608
        params: list[str] = list(competition_ids)
        if not include_pending:
            query += " AND status != ?"
            params.append(GameStatus.PENDING.value)
        query += " ORDER BY created_at, rowid"
        rows = self._db.connection.execute(query, params).fetchall()
        return [Game.model_validate(json.loads(row[0])) for row in rows]

    async def list_all(self, *, include_pending: bool = True) -> list[Game]:
        """All games, oldest first."""
        if include_pending:
            rows = self._db.connection.execute("SELECT data FROM games ORDER BY created_at, rowid").fetchall()
        else:
            rows = self._db.connection.execute(
                "SELECT data FROM games WHERE status != ? ORDER BY created_at, rowid",
                (GameStatus.PENDING.value,),
            ).fetchall()
        return [Game.model_validate(json.loads(row[0])) for row in rows]

    async def list_by_player(self, player_id: str) -> list[Game]:
        """Games with the player on either team, newest first."""
        rows = self._db.connection.execute(
            "SELECT data FROM games WHERE "
            "EXISTS (SELECT 1 FROM json_each(data, '$.team1') WHERE value = ?) "
            "OR EXISTS (SELECT 1 FROM json_each(data, '$.team2') WHERE value = ?) "
            "ORDER BY created_at DESC, rowid DESC",
            (player_id, player_id),
        ).fetchall()
        return [Game.model_validate(json.loads(row[0])) for row in rows]
