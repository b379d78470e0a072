"""
Game state models for domino matches.

All models are frozen; the resolver produces new instances with model_copy.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

from game.logic.enums import GameStatus, VictoryType
from game.logic.exceptions import InvalidTeamsError
from game.logic.rules import MAX_TEAM_SIZE, MIN_TEAM_SIZE

TeamNumber = Literal[1, 2]


class GameRound(BaseModel, frozen=True):
    """One recorded round outcome."""

    type: VictoryType
    winner_team: TeamNumber | None = None  # None only for empate
    has_bonus: bool = False  # previous round was a tie


class Game(BaseModel, frozen=True):
    """Head-to-head game between two fixed teams."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    competition_id: str
    team1: tuple[str, ...]
    team2: tuple[str, ...]
    team1_score: int = 0
    team2_score: int = 0
    status: GameStatus = GameStatus.PENDING
    rounds: tuple[GameRound, ...] = ()
    last_round_was_tie: bool = False
    # sticky: set once the team trailed 0-5, never cleared
    team1_was_losing_5_0: bool = False
    team2_was_losing_5_0: bool = False
    is_buchuda: bool = False
    is_buchuda_de_re: bool = False
    version: int = 0  # bumped on every resolved round; used for conditional writes
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED

    @property
    def winner_team(self) -> TeamNumber | None:
        """Team with the higher score once the game is finished."""
        if not self.is_finished or self.team1_score == self.team2_score:
            return None
        return 1 if self.team1_score > self.team2_score else 2

    def players(self) -> tuple[str, ...]:
        return (*self.team1, *self.team2)

    def team_of(self, player_id: str) -> TeamNumber | None:
        """Return which team the player is on, or None if not in this game."""
        if player_id in self.team1:
            return 1
        if player_id in self.team2:
            return 2
        return None

    def team_players(self, team: TeamNumber) -> tuple[str, ...]:
        return self.team1 if team == 1 else self.team2

    def score_of(self, team: TeamNumber) -> int:
        return self.team1_score if team == 1 else self.team2_score

    def opponent_score_of(self, team: TeamNumber) -> int:
        return self.team2_score if team == 1 else self.team1_score

    def team_won(self, team: TeamNumber) -> bool:
        """True when the team's score exceeds the opponent's (finished or not)."""
        return self.score_of(team) > self.opponent_score_of(team)


def new_game(
    competition_id: str,
    team1: list[str] | tuple[str, ...],
    team2: list[str] | tuple[str, ...],
    *,
    game_id: str | None = None,
) -> Game:
    """
    Create a pending game with zero scores and an empty round log.

    Raises:
        InvalidTeamsError: If a team is empty, larger than two players,
            lists a player twice, or shares a player with the other team.

    """
    for number, team in ((1, team1), (2, team2)):
        if not MIN_TEAM_SIZE <= len(team) <= MAX_TEAM_SIZE:
            raise InvalidTeamsError(
                f"team{number} must have {MIN_TEAM_SIZE}-{MAX_TEAM_SIZE} players, got {len(team)}",
            )
        if len(set(team)) != len(team):
            raise InvalidTeamsError(f"team{number} lists the same player twice")
    overlap = set(team1) & set(team2)
    if overlap:
        raise InvalidTeamsError(f"players on both teams: {', '.join(sorted(overlap))}")

    kwargs = {"id": game_id} if game_id is not None else {}
    return Game(competition_id=competition_id, team1=tuple(team1), team2=tuple(team2), **kwargs)
