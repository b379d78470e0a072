"""Game service: game lifecycle and round submission over a GameRepository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.logic.enums import GameStatus, VictoryType
from game.logic.exceptions import GameNotFoundError, InvalidGameStateError, StaleGameError
from game.logic.resolver import resolve_round
from game.logic.state import new_game

if TYPE_CHECKING:
    from collections.abc import Sequence

    from activity.activity_service import ActivityService
    from game.logic.state import Game
    from shared.dal.game_repository import GameRepository

logger = structlog.get_logger()


class GameService:
    """
    Create games and record their rounds.

    register_round reads the stored game, resolves the round and writes the
    result back conditionally on the version it read. A concurrent writer
    makes the write fail with StaleGameError instead of silently overwriting.
    A round that finishes the game is also recorded in the activity feed
    when an ActivityService is given.
    """

    def __init__(self, games: GameRepository, activities: ActivityService | None = None) -> None:
        self._games = games
        self._activities = activities

    async def create_game(
        self,
        competition_id: str,
        team1: Sequence[str],
        team2: Sequence[str],
    ) -> Game:
        game = new_game(competition_id, tuple(team1), tuple(team2))
        await self._games.create_game(game)
        logger.info("game created", game_id=game.id, competition_id=competition_id, team1=game.team1, team2=game.team2)
        return game

    async def get_game(self, game_id: str) -> Game:
        game = await self._games.get_game(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    async def list_by_competition(self, competition_id: str) -> list[Game]:
        return await self._games.list_by_competition(competition_id)

    async def list_player_games(self, player_id: str) -> list[Game]:
        """Games the player took part in, newest first."""
        return await self._games.list_by_player(player_id)

    async def start_game(self, game_id: str) -> Game:
        """Move a pending game to in_progress without recording a round."""
        game = await self.get_game(game_id)
        if game.status != GameStatus.PENDING:
            raise InvalidGameStateError(f"game {game_id} is {game.status.value}, only pending games can be started")

        started = game.model_copy(update={"status": GameStatus.IN_PROGRESS, "version": game.version + 1})
        await self._write(started, expected_version=game.version)
        logger.info("game started", game_id=game_id)
        return started

    async def register_round(
        self,
        game_id: str,
        victory_type: VictoryType | str,
        winner_team: int | None,
        *,
        actor_id: str | None = None,
    ) -> Game:
        """
        Record one round outcome for a game and return the updated game.

        Raises:
            GameNotFoundError: If the game does not exist.
            InvalidRoundError: If the outcome is malformed.
            GameFinishedError: If the game already has a winner.
            StaleGameError: If the game changed since it was read (retryable).

        """
        game = await self.get_game(game_id)
        updated = resolve_round(game, victory_type, winner_team)
        await self._write(updated, expected_version=game.version)

        logger.info(
            "round registered",
            game_id=game_id,
            victory_type=updated.rounds[-1].type,
            winner_team=winner_team,
            has_bonus=updated.rounds[-1].has_bonus,
            team1_score=updated.team1_score,
            team2_score=updated.team2_score,
            status=updated.status,
        )
        if updated.is_finished and self._activities is not None:
            await self._activities.record_safely(
                self._activities.record_game_completion(updated, actor_id),
                game_id=game_id,
            )
        return updated

    async def _write(self, game: Game, *, expected_version: int) -> None:
        if not await self._games.update_game(game, expected_version=expected_version):
            raise StaleGameError(game_id=game.id, expected_version=expected_version)
