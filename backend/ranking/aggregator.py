"""
Win-rate rankings for players and pairs.

Pure functions over an already-fetched set of games. Which games are in
scope (community, actor reachability, pending excluded) is decided by the
caller. Games are compared by final score: a team wins a game when its score
exceeds the opponent's.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from game.logic.rules import SHUTOUT_SCORE
from ranking.models import PairRanking, PlayerRanking, PlayerRef

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from game.logic.state import Game
    from shared.dal.models import Player

logger = structlog.get_logger()

PAIR_KEY_SEPARATOR = "-"


def win_rate(wins: int, total_games: int) -> float:
    """Percentage of games won; 0 when no games were played."""
    return (wins / total_games) * 100 if total_games > 0 else 0.0


def pair_members(player_ids: Iterable[str]) -> tuple[str, ...]:
    """Order-independent identity of a pair: its sorted ids."""
    return tuple(sorted(player_ids))


def pair_key(player_ids: Iterable[str]) -> str:
    """
    Display id of a pair: the sorted ids joined by '-'.

    Ids containing the separator can produce the same string for different
    pairs, so tallies are keyed on pair_members and only labelled with this.
    """
    return PAIR_KEY_SEPARATOR.join(pair_members(player_ids))


def _log_unknown_players(games: Sequence[Game], known_ids: set[str]) -> None:
    unknown = {pid for game in games for pid in game.players() if pid not in known_ids}
    if unknown:
        logger.warning("games reference unknown players, skipping them", player_ids=sorted(unknown))


def compute_player_rankings(games: Sequence[Game], players: Sequence[Player]) -> list[PlayerRanking]:
    """
    Rank players by win rate over the supplied games.

    Every supplied player gets an entry, including players with no games
    (win rate 0). Team entries that reference players outside the supplied
    set are skipped. Entries with equal win rates keep the order in which
    the players were supplied.
    """
    unique_players = list({player.id: player for player in players}.values())
    _log_unknown_players(games, {player.id for player in unique_players})

    rankings: list[PlayerRanking] = []
    for player in unique_players:
        total_games = wins = buchudas = buchudas_de_re = 0
        for game in games:
            team = game.team_of(player.id)
            if team is None:
                continue
            total_games += 1
            if game.team_won(team):
                wins += 1
                if game.is_buchuda:
                    buchudas += 1
                if game.is_buchuda_de_re:
                    buchudas_de_re += 1

        rankings.append(
            PlayerRanking(
                player_id=player.id,
                name=player.name,
                wins=wins,
                total_games=total_games,
                buchudas=buchudas,
                buchudas_de_re=buchudas_de_re,
                win_rate=win_rate(wins, total_games),
            ),
        )

    # sorted() is stable, also with reverse=True
    return sorted(rankings, key=lambda r: r.win_rate, reverse=True)


@dataclass
class _PairTally:
    player_ids: tuple[str, str]
    wins: int = 0
    total_games: int = 0
    buchudas: int = 0
    buchudas_de_re: int = 0


def compute_pair_rankings(
    games: Sequence[Game],
    players: Sequence[Player] | None = None,
) -> list[PairRanking]:
    """
    Rank two-player teams by win rate over the supplied games.

    Only teams of exactly two distinct players count. A pair is the same
    entry whichever order its players were listed in and whichever side
    of the game they played on. When players is given, pairs with a
    member outside it are skipped and names are filled in.
    """
    names = {player.id: player.name for player in players} if players is not None else None
    tallies: dict[tuple[str, ...], _PairTally] = {}
    skipped: set[str] = set()

    for game in games:
        for team in (1, 2):
            team_players = game.team_players(team)
            if len(set(team_players)) != 2:  # noqa: PLR2004
                continue
            members = pair_members(team_players)
            if names is not None and any(pid not in names for pid in members):
                skipped.add(pair_key(members))
                continue

            tally = tallies.get(members)
            if tally is None:
                first, second = members
                tally = tallies[members] = _PairTally(player_ids=(first, second))
            tally.total_games += 1
            if game.team_won(team):
                tally.wins += 1
                if game.is_buchuda and game.opponent_score_of(team) == SHUTOUT_SCORE:
                    tally.buchudas += 1
                if game.is_buchuda_de_re:
                    tally.buchudas_de_re += 1

    if skipped:
        logger.warning("pairs with unknown players skipped", pair_ids=sorted(skipped))

    rankings = [
        PairRanking(
            pair_id=pair_key(members),
            player1=PlayerRef(id=tally.player_ids[0], name=(names or {}).get(tally.player_ids[0], "")),
            player2=PlayerRef(id=tally.player_ids[1], name=(names or {}).get(tally.player_ids[1], "")),
            wins=tally.wins,
            total_games=tally.total_games,
            buchudas=tally.buchudas,
            buchudas_de_re=tally.buchudas_de_re,
            win_rate=win_rate(tally.wins, tally.total_games),
        )
        for members, tally in tallies.items()
        if tally.total_games > 0
    ]
    return sorted(rankings, key=lambda r: r.win_rate, reverse=True)
