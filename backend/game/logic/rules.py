"""Fixed scoring rules for a domino game."""

from game.logic.enums import VictoryType

WINNING_SCORE = 6
TRAP_SCORE = 5  # opponent's score that marks a team as "losing 5-0"
SHUTOUT_SCORE = 0
TIE_BONUS_POINTS = 1
MIN_TEAM_SIZE = 1
MAX_TEAM_SIZE = 2
TEAM_NUMBERS = (1, 2)

ROUND_POINTS: dict[VictoryType, int] = {
    VictoryType.SIMPLE: 1,
    VictoryType.CONTAGEM: 1,
    VictoryType.CARROCA: 2,
    VictoryType.LA_E_LO: 3,
    VictoryType.CRUZADA: 4,
    VictoryType.EMPATE: 0,
}


def round_points(victory_type: VictoryType, *, has_bonus: bool) -> int:
    """Points credited to the round winner, including the tie carry-over bonus."""
    points = ROUND_POINTS[victory_type]
    if has_bonus and victory_type != VictoryType.EMPATE:
        points += TIE_BONUS_POINTS
    return points
