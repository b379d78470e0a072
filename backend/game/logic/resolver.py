"""
Round resolution for domino games.

Turns the current game state plus one reported round outcome into the next
game state: running scores, status, tie bonus carry-over and the
buchuda / buchuda de ré flags. Pure: never mutates the input and performs
no I/O; persistence is the caller's concern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.logic.enums import GameStatus, VictoryType
from game.logic.exceptions import GameFinishedError, InvalidRoundError
from game.logic.rules import SHUTOUT_SCORE, TEAM_NUMBERS, TRAP_SCORE, WINNING_SCORE, round_points
from game.logic.state import GameRound

if TYPE_CHECKING:
    from game.logic.state import Game, TeamNumber

logger = structlog.get_logger()


def validate_round(victory_type: VictoryType | str, winner_team: int | None) -> VictoryType:
    """
    Check a round outcome and return the parsed victory type.

    A tie must not name a winner; every other type must name team 1 or 2.

    Raises:
        InvalidRoundError: If the outcome is malformed.

    """
    try:
        parsed = VictoryType(victory_type)
    except ValueError as exc:
        raise InvalidRoundError(f"unknown victory type {victory_type!r}") from exc

    if parsed == VictoryType.EMPATE:
        if winner_team is not None:
            raise InvalidRoundError(f"a tie round cannot have a winner (got team {winner_team})")
        return parsed

    if winner_team is None:
        raise InvalidRoundError(f"{parsed.value} round requires a winner team")
    # bool is an int subclass; reject True/False explicitly
    if isinstance(winner_team, bool) or winner_team not in TEAM_NUMBERS:
        raise InvalidRoundError(f"winner team must be 1 or 2, got {winner_team!r}")
    return parsed


def is_buchuda(team1_score: int, team2_score: int) -> bool:
    """A team reached the winning score while the opponent stayed at zero."""
    return (team1_score >= WINNING_SCORE and team2_score == SHUTOUT_SCORE) or (
        team2_score >= WINNING_SCORE and team1_score == SHUTOUT_SCORE
    )


def is_buchuda_de_re(
    team1_score: int,
    team2_score: int,
    *,
    team1_was_losing_5_0: bool,
    team2_was_losing_5_0: bool,
) -> bool:
    """The team reaching the winning score had trailed 0-5 earlier in the game."""
    return (team1_score >= WINNING_SCORE and team1_was_losing_5_0) or (
        team2_score >= WINNING_SCORE and team2_was_losing_5_0
    )


def resolve_round(
    game: Game,
    victory_type: VictoryType | str,
    winner_team: TeamNumber | int | None,
) -> Game:
    """
    Apply one round outcome to a game and return the updated game.

    The tie bonus only carries one round deep: a tie sets last_round_was_tie,
    and any following round (including another tie) overwrites it.
    The 5-0 flags are sticky and are never cleared once set.

    Raises:
        InvalidRoundError: If the victory type / winner combination is invalid.
        GameFinishedError: If the game already has a winner.

    """
    parsed = validate_round(victory_type, winner_team)
    if game.is_finished:
        raise GameFinishedError(f"game {game.id} is already finished")

    has_bonus = game.last_round_was_tie
    points = round_points(parsed, has_bonus=has_bonus)

    team1_score = game.team1_score
    team2_score = game.team2_score
    if winner_team == 1:
        team1_score += points
    elif winner_team == 2:
        team2_score += points

    team1_was_losing_5_0 = game.team1_was_losing_5_0
    team2_was_losing_5_0 = game.team2_was_losing_5_0
    if team1_score == SHUTOUT_SCORE and team2_score == TRAP_SCORE:
        team1_was_losing_5_0 = True
    if team2_score == SHUTOUT_SCORE and team1_score == TRAP_SCORE:
        team2_was_losing_5_0 = True

    finished = team1_score >= WINNING_SCORE or team2_score >= WINNING_SCORE
    buchuda = is_buchuda(team1_score, team2_score)
    buchuda_de_re = is_buchuda_de_re(
        team1_score,
        team2_score,
        team1_was_losing_5_0=team1_was_losing_5_0,
        team2_was_losing_5_0=team2_was_losing_5_0,
    )

    new_round = GameRound(type=parsed, winner_team=winner_team, has_bonus=has_bonus)
    updated = game.model_copy(
        update={
            "team1_score": team1_score,
            "team2_score": team2_score,
            "rounds": (*game.rounds, new_round),
            "last_round_was_tie": parsed == VictoryType.EMPATE,
            "status": GameStatus.FINISHED if finished else GameStatus.IN_PROGRESS,
            "team1_was_losing_5_0": team1_was_losing_5_0,
            "team2_was_losing_5_0": team2_was_losing_5_0,
            "is_buchuda": buchuda,
            "is_buchuda_de_re": buchuda_de_re,
            "version": game.version + 1,
        },
    )

    if buchuda:
        logger.info("buchuda", game_id=game.id, team1_score=team1_score, team2_score=team2_score)
    if buchuda_de_re:
        logger.info("buchuda de re", game_id=game.id, team1_score=team1_score, team2_score=team2_score)
    return updated
