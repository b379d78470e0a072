from game.logic.enums import GameStatus
from game.logic.state import Game
from shared.dal.models import Player


def make_player(player_id: str, name: str | None = None) -> Player:
    return Player(id=player_id, name=name or player_id.upper(), created_by="actor-1")


def make_game(
    team1: tuple[str, ...],
    team2: tuple[str, ...],
    score: tuple[int, int],
    *,
    status: GameStatus = GameStatus.FINISHED,
    is_buchuda: bool = False,
    is_buchuda_de_re: bool = False,
    competition_id: str = "comp-1",
) -> Game:
    return Game(
        competition_id=competition_id,
        team1=team1,
        team2=team2,
        team1_score=score[0],
        team2_score=score[1],
        status=status,
        is_buchuda=is_buchuda,
        is_buchuda_de_re=is_buchuda_de_re,
    )
