"""Tests for round resolution: scoring, tie bonus, status, buchuda flags and validation."""

from __future__ import annotations

import pytest

from game.logic.enums import GameStatus, VictoryType
from game.logic.exceptions import GameFinishedError, InvalidRoundError
from game.logic.resolver import is_buchuda, is_buchuda_de_re, resolve_round, validate_round
from game.logic.state import Game, new_game


def _game() -> Game:
    return new_game("comp-1", ["p1", "p2"], ["p3", "p4"], game_id="g1")


def _play(game: Game, *rounds: tuple[str, int | None]) -> Game:
    for victory_type, winner in rounds:
        game = resolve_round(game, victory_type, winner)
    return game


class TestScoring:
    @pytest.mark.parametrize(
        ("victory_type", "points"),
        [
            (VictoryType.SIMPLE, 1),
            (VictoryType.CONTAGEM, 1),
            (VictoryType.CARROCA, 2),
            (VictoryType.LA_E_LO, 3),
            (VictoryType.CRUZADA, 4),
        ],
    )
    def test_base_points_credit_the_winner(self, victory_type: VictoryType, points: int) -> None:
        game = resolve_round(_game(), victory_type, 2)
        assert game.team2_score == points
        assert game.team1_score == 0

    def test_tie_changes_no_score(self) -> None:
        game = resolve_round(_game(), VictoryType.EMPATE, None)
        assert (game.team1_score, game.team2_score) == (0, 0)
        assert game.last_round_was_tie is True
        assert game.status == GameStatus.IN_PROGRESS

    def test_scores_sum_per_round_points_below_threshold(self) -> None:
        game = _play(_game(), ("simple", 1), ("carroca", 2), ("contagem", 1), ("la_e_lo", 2))
        assert (game.team1_score, game.team2_score) == (2, 5)
        assert game.status == GameStatus.IN_PROGRESS
        assert len(game.rounds) == 4

    def test_accepts_victory_type_as_string(self) -> None:
        game = resolve_round(_game(), "cruzada", 1)
        assert game.rounds[-1].type == VictoryType.CRUZADA


class TestTieBonus:
    def test_win_after_tie_gets_one_bonus_point(self) -> None:
        game = _play(_game(), ("empate", None), ("simple", 1))
        assert game.team1_score == 2
        assert game.rounds[-1].has_bonus is True
        assert game.last_round_was_tie is False

    def test_two_ties_do_not_stack_the_bonus(self) -> None:
        game = _play(_game(), ("empate", None), ("empate", None), ("simple", 2))
        assert game.team2_score == 2
        assert game.rounds[1].has_bonus is True
        assert game.rounds[1].type == VictoryType.EMPATE

    def test_bonus_applies_only_to_the_next_round(self) -> None:
        game = _play(_game(), ("empate", None), ("simple", 1), ("simple", 1))
        assert game.team1_score == 3
        assert game.rounds[-1].has_bonus is False


class TestStatus:
    def test_reaching_six_finishes_the_game(self) -> None:
        game = _play(_game(), ("cruzada", 1), ("carroca", 1))
        assert game.team1_score == 6
        assert game.status == GameStatus.FINISHED
        assert game.winner_team == 1

    def test_score_can_overshoot_six(self) -> None:
        game = _play(_game(), ("cruzada", 2), ("simple", 2), ("cruzada", 2))
        assert game.team2_score == 9
        assert game.status == GameStatus.FINISHED

    def test_finished_game_rejects_more_rounds(self) -> None:
        game = _play(_game(), ("cruzada", 1), ("carroca", 1))
        with pytest.raises(GameFinishedError):
            resolve_round(game, VictoryType.SIMPLE, 2)

    def test_version_increments_per_round(self) -> None:
        game = _play(_game(), ("simple", 1), ("empate", None))
        assert game.version == 2

    def test_input_game_is_not_modified(self) -> None:
        game = _game()
        resolve_round(game, VictoryType.CRUZADA, 1)
        assert game.team1_score == 0
        assert game.rounds == ()
        assert game.version == 0


class TestBuchuda:
    def test_straight_shutout_is_buchuda(self) -> None:
        game = _play(_game(), ("simple", 1), ("carroca", 1), ("la_e_lo", 1))
        assert (game.team1_score, game.team2_score) == (6, 0)
        assert game.is_buchuda is True
        assert game.is_buchuda_de_re is False

    def test_win_with_opponent_points_is_not_buchuda(self) -> None:
        game = _play(_game(), ("simple", 2), ("cruzada", 1), ("carroca", 1))
        assert game.status == GameStatus.FINISHED
        assert game.is_buchuda is False

    def test_comeback_from_zero_five_is_buchuda_de_re(self) -> None:
        game = _play(_game(), ("cruzada", 2), ("simple", 2))
        assert game.team1_was_losing_5_0 is True
        game = _play(game, ("cruzada", 1), ("carroca", 1))
        assert (game.team1_score, game.team2_score) == (6, 5)
        assert game.status == GameStatus.FINISHED
        assert game.is_buchuda_de_re is True
        assert game.is_buchuda is False

    def test_losing_five_zero_flag_is_sticky(self) -> None:
        game = _play(_game(), ("cruzada", 2), ("simple", 2), ("simple", 1))
        assert game.team1_was_losing_5_0 is True
        assert game.team1_score == 1

    def test_trailing_team_that_loses_is_not_buchuda_de_re(self) -> None:
        game = _play(_game(), ("cruzada", 2), ("simple", 2), ("simple", 2))
        assert game.team1_was_losing_5_0 is True
        assert game.team2_score == 6
        assert game.is_buchuda is True
        assert game.is_buchuda_de_re is False

    def test_flag_helpers(self) -> None:
        assert is_buchuda(6, 0)
        assert is_buchuda(0, 7)
        assert not is_buchuda(6, 1)
        assert not is_buchuda(5, 0)
        assert is_buchuda_de_re(6, 5, team1_was_losing_5_0=True, team2_was_losing_5_0=False)
        assert not is_buchuda_de_re(6, 5, team1_was_losing_5_0=False, team2_was_losing_5_0=True)


class TestScenarios:
    def test_carroca_tie_then_simple_with_bonus(self) -> None:
        game = _game()
        assert (game.team1_score, game.team2_score, game.status) == (0, 0, GameStatus.PENDING)

        game = resolve_round(game, VictoryType.CARROCA, 1)
        assert game.team1_score == 2
        assert game.status == GameStatus.IN_PROGRESS
        assert game.is_buchuda is False

        game = resolve_round(game, VictoryType.EMPATE, None)
        assert (game.team1_score, game.team2_score) == (2, 0)
        assert game.last_round_was_tie is True

        game = resolve_round(game, VictoryType.SIMPLE, 2)
        assert (game.team1_score, game.team2_score) == (2, 2)
        assert game.status == GameStatus.IN_PROGRESS

    def test_team_two_comes_back_from_zero_five(self) -> None:
        game = _play(_game(), ("cruzada", 1), ("simple", 1))
        assert (game.team1_score, game.team2_score) == (5, 0)
        assert game.team2_was_losing_5_0 is True

        game = resolve_round(game, VictoryType.CRUZADA, 2)
        assert game.team2_score == 4
        game = resolve_round(game, VictoryType.SIMPLE, 2)
        assert game.team2_score == 5
        assert game.status == GameStatus.IN_PROGRESS
        assert game.is_buchuda_de_re is False

        game = resolve_round(game, VictoryType.SIMPLE, 2)
        assert game.team2_score == 6
        assert game.status == GameStatus.FINISHED
        assert game.is_buchuda_de_re is True
        assert game.is_buchuda is False


class TestValidation:
    def test_unknown_victory_type(self) -> None:
        with pytest.raises(InvalidRoundError, match="unknown victory type"):
            resolve_round(_game(), "domino", 1)

    def test_tie_with_winner(self) -> None:
        with pytest.raises(InvalidRoundError, match="tie"):
            resolve_round(_game(), VictoryType.EMPATE, 1)

    def test_win_without_winner(self) -> None:
        with pytest.raises(InvalidRoundError, match="requires a winner"):
            resolve_round(_game(), VictoryType.SIMPLE, None)

    @pytest.mark.parametrize("winner", [0, 3, -1, True])
    def test_winner_must_be_team_one_or_two(self, winner: int) -> None:
        with pytest.raises(InvalidRoundError, match="1 or 2"):
            validate_round(VictoryType.SIMPLE, winner)

    def test_validation_runs_before_finished_check(self) -> None:
        game = _play(_game(), ("cruzada", 1), ("carroca", 1))
        with pytest.raises(InvalidRoundError):
            resolve_round(game, "bogus", 1)
