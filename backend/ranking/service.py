"""
Ranking service: fetch a scoped snapshot of games and players, then aggregate.

Scope, from narrowest to widest:
- a community: its members, and the non-pending games of its competitions;
- an actor: the same over every community the actor reaches;
- nothing: every player and every non-pending game.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from community.exceptions import CommunityNotFoundError
from community.scope import reachable_community_ids
from ranking.aggregator import compute_pair_rankings, compute_player_rankings
from ranking.exceptions import RankingDataError
from ranking.standings import compute_standings

if TYPE_CHECKING:
    from game.logic.state import Game
    from ranking.models import PairRanking, PlayerRanking, Standings
    from shared.dal.community_repository import CommunityRepository
    from shared.dal.competition_repository import CompetitionRepository
    from shared.dal.game_repository import GameRepository
    from shared.dal.models import Player
    from shared.dal.player_repository import PlayerRepository

logger = structlog.get_logger()


class RankingService:
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

    async def get_player_rankings(
        self,
        community_id: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> list[PlayerRanking]:
        games, players = await self._load(community_id, actor_id, include_pending=False)
        rankings = compute_player_rankings(games, players)
        logger.debug("player rankings computed", community_id=community_id, games=len(games), players=len(rankings))
        return rankings

    async def get_pair_rankings(
        self,
        community_id: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> list[PairRanking]:
        games, players = await self._load(community_id, actor_id, include_pending=False)
        rankings = compute_pair_rankings(games, players)
        logger.debug("pair rankings computed", community_id=community_id, games=len(games), pairs=len(rankings))
        return rankings

    async def get_community_standings(self, community_id: str) -> Standings:
        """Finished-game standings of a community's members across all its competitions."""
        games, players = await self._load(community_id, None, include_pending=True)
        return compute_standings(games, players)

    async def _load(
        self,
        community_id: str | None,
        actor_id: str | None,
        *,
        include_pending: bool,
    ) -> tuple[list[Game], list[Player]]:
        try:
            if community_id is None and actor_id is None:
                return (
                    await self._games.list_all(include_pending=include_pending),
                    await self._players.list_all(),
                )

            if community_id is not None:
                if await self._communities.get_community(community_id) is None:
                    raise CommunityNotFoundError(community_id)
                community_ids = [community_id]
            else:
                community_ids = await reachable_community_ids(self._communities, self._players, actor_id)

            member_ids: list[str] = []
            for cid in community_ids:
                member_ids.extend(await self._communities.list_member_ids(cid))
            competitions = await self._competitions.list_by_communities(community_ids)
            games = await self._games.list_by_competitions(
                [competition.id for competition in competitions],
                include_pending=include_pending,
            )
            players = await self._players.list_by_ids(list(dict.fromkeys(member_ids)))
        except CommunityNotFoundError:
            raise
        except Exception as exc:
            logger.exception("ranking data fetch failed", community_id=community_id, actor_id=actor_id)
            raise RankingDataError("could not load games and players for ranking") from exc
        return games, players
