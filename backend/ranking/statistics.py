"""Dashboard statistics for an actor."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from community.scope import reachable_community_ids
from ranking.exceptions import RankingDataError
from ranking.models import UserStatistics

if TYPE_CHECKING:
    from collections.abc import Sequence

    from game.logic.state import Game
    from shared.dal.community_repository import CommunityRepository
    from shared.dal.competition_repository import CompetitionRepository
    from shared.dal.game_repository import GameRepository
    from shared.dal.player_repository import PlayerRepository

logger = structlog.get_logger()


def compute_user_statistics(
    *,
    community_count: int,
    competition_count: int,
    games: Sequence[Game],
    member_ids: Sequence[str],
    player_id: str | None,
) -> UserStatistics:
    """
    Totals over the actor's communities.

    average_score is the mean team score of the finished games the actor's
    player took part in; 0 when there are none or the actor has no player.
    """
    scores = []
    if player_id is not None:
        for game in games:
            team = game.team_of(player_id)
            if team is not None and game.is_finished:
                scores.append(game.score_of(team))

    return UserStatistics(
        total_games=len(games),
        total_competitions=competition_count,
        total_players=len(set(member_ids)),
        average_score=sum(scores) / len(scores) if scores else 0.0,
        total_communities=community_count,
    )


class StatisticsService:
    def __init__(
        self,
        games: GameRepository,
        players: PlayerRepository,
        communities: CommunityRepository,
        competitions: CompetitionRepository,
    ) -> None:
        self._games = games
        self._players = players
        self._communities = communities
        self._competitions = competitions

    async def get_user_statistics(self, actor_id: str) -> UserStatistics:
        """Totals over the communities the actor created, organizes or plays in."""
        try:
            community_ids = await reachable_community_ids(self._communities, self._players, actor_id)
            if not community_ids:
                return UserStatistics()

            competition_ids = [c.id for c in await self._competitions.list_by_communities(community_ids)]
            games = await self._games.list_by_competitions(competition_ids)
            member_ids = await self._competitions.list_member_ids_for_competitions(competition_ids)
            player = await self._players.get_by_user_id(actor_id)
        except Exception as exc:
            logger.exception("statistics data fetch failed", actor_id=actor_id)
            raise RankingDataError("could not load data for user statistics") from exc

        return compute_user_statistics(
            community_count=len(community_ids),
            competition_count=len(competition_ids),
            games=games,
            member_ids=member_ids,
            player_id=player.id if player is not None else None,
        )
