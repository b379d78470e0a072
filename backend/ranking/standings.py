"""
Finished-game standings for competition results and community statistics.

Unlike the win-rate rankings, standings only look at finished games and also
track losses, points scored and buchudas taken.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from game.logic.rules import SHUTOUT_SCORE
from ranking.aggregator import pair_key, pair_members
from ranking.models import PairStanding, PlayerRef, PlayerStanding, Standings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from game.logic.state import Game, TeamNumber
    from shared.dal.models import Player

logger = structlog.get_logger()


@dataclass
class _Tally:
    games: int = 0
    wins: int = 0
    losses: int = 0
    score: int = 0
    buchudas_given: int = 0
    buchudas_taken: int = 0
    buchudas_de_re_given: int = 0
    buchudas_de_re_taken: int = 0

    def add(self, game: Game, team: TeamNumber) -> None:
        own = game.score_of(team)
        other = game.opponent_score_of(team)
        self.games += 1
        self.score += own
        if own > other:
            self.wins += 1
            if game.is_buchuda and other == SHUTOUT_SCORE:
                self.buchudas_given += 1
            if game.is_buchuda_de_re:
                self.buchudas_de_re_given += 1
        elif other > own:
            self.losses += 1
            if game.is_buchuda and own == SHUTOUT_SCORE:
                self.buchudas_taken += 1
            if game.is_buchuda_de_re:
                self.buchudas_de_re_taken += 1

    def as_fields(self) -> dict[str, int]:
        return {
            "games": self.games,
            "wins": self.wins,
            "losses": self.losses,
            "score": self.score,
            "buchudas_given": self.buchudas_given,
            "buchudas_taken": self.buchudas_taken,
            "buchudas_de_re_given": self.buchudas_de_re_given,
            "buchudas_de_re_taken": self.buchudas_de_re_taken,
        }


def _standing_order(standing: PlayerStanding | PairStanding) -> tuple[int, int]:
    return standing.wins, standing.score


def compute_standings(games: Sequence[Game], players: Sequence[Player]) -> Standings:
    """
    Tally finished games per player and per two-player pair.

    Every supplied player is listed, with zeros when they have no finished
    games. Pairs appear once they have a finished game and both members are
    among the supplied players. Both lists are ordered by wins, then points
    scored, highest first.
    """
    names = {player.id: player.name for player in players}
    finished = [game for game in games if game.is_finished]

    player_tallies = {player_id: _Tally() for player_id in names}
    pair_tallies: dict[tuple[str, ...], _Tally] = {}
    unknown: set[str] = set()

    for game in finished:
        for team in (1, 2):
            team_players = game.team_players(team)
            for player_id in team_players:
                tally = player_tallies.get(player_id)
                if tally is None:
                    unknown.add(player_id)
                    continue
                tally.add(game, team)

            if len(set(team_players)) != 2 or any(pid not in names for pid in team_players):  # noqa: PLR2004
                continue
            pair_tallies.setdefault(pair_members(team_players), _Tally()).add(game, team)

    if unknown:
        logger.warning("standings skipped unknown players", player_ids=sorted(unknown))

    player_standings = [
        PlayerStanding(player_id=player_id, name=names[player_id], **tally.as_fields())
        for player_id, tally in player_tallies.items()
    ]
    pair_standings = [
        PairStanding(
            pair_id=pair_key(ids),
            players=(PlayerRef(id=ids[0], name=names[ids[0]]), PlayerRef(id=ids[1], name=names[ids[1]])),
            **tally.as_fields(),
        )
        for ids, tally in pair_tallies.items()
    ]
    return Standings(
        players=sorted(player_standings, key=_standing_order, reverse=True),
        pairs=sorted(pair_standings, key=_standing_order, reverse=True),
    )
