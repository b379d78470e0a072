"""
Competition lifecycle: roster, start, games, finish and results.

A competition moves pending -> in_progress -> finished. It starts once its
roster holds at least MIN_COMPETITION_MEMBERS players and can be finished
when it has games and all of them are finished. Results are the standings of
its finished games over its roster.

Status changes are conditional writes on the status that was checked, and
roster changes, game creation and status changes made through one service
instance run one at a time, so a game cannot be added to a competition that
is being finished.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from community.exceptions import (
    CommunityNotFoundError,
    CompetitionNotFoundError,
    CompetitionRuleError,
)
from community.scope import reachable_community_ids
from game.logic.game_service import GameService
from ranking.standings import compute_standings
from shared.dal.models import Competition, CompetitionStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from activity.activity_service import ActivityService
    from game.logic.state import Game
    from ranking.models import Standings
    from shared.dal.community_repository import CommunityRepository
    from shared.dal.competition_repository import CompetitionRepository
    from shared.dal.game_repository import GameRepository
    from shared.dal.models import Player
    from shared.dal.player_repository import PlayerRepository

logger = structlog.get_logger()

MIN_COMPETITION_MEMBERS = 4


class CompetitionService:
    def __init__(
        self,
        competitions: CompetitionRepository,
        communities: CommunityRepository,
        games: GameRepository,
        players: PlayerRepository,
        activities: ActivityService | None = None,
    ) -> None:
        self._competitions = competitions
        self._communities = communities
        self._games = games
        self._players = players
        self._activities = activities
        self._game_service = GameService(games, activities)
        self._lifecycle_lock = asyncio.Lock()

    async def create_competition(
        self,
        actor_id: str,
        community_id: str,
        name: str,
        start_date: date,
    ) -> Competition:
        if await self._communities.get_community(community_id) is None:
            raise CommunityNotFoundError(community_id)
        name = name.strip()
        if not name:
            raise ValueError("competition name must not be empty")

        competition = Competition(community_id=community_id, name=name, start_date=start_date, created_by=actor_id)
        await self._competitions.create_competition(competition)
        logger.info("competition created", competition_id=competition.id, community_id=community_id)
        if self._activities is not None:
            await self._activities.record_safely(
                self._activities.record_new_competition(competition),
                competition_id=competition.id,
            )
        return competition

    async def get_competition(self, competition_id: str) -> Competition:
        competition = await self._competitions.get_competition(competition_id)
        if competition is None:
            raise CompetitionNotFoundError(competition_id)
        return competition

    async def list_competitions(self, community_id: str) -> list[Competition]:
        return await self._competitions.list_by_communities([community_id])

    async def add_member(self, competition_id: str, player_id: str) -> None:
        """Add a community member to the roster of a competition that has not finished."""
        async with self._lifecycle_lock:
            competition = await self.get_competition(competition_id)
            if competition.status == CompetitionStatus.FINISHED:
                raise CompetitionRuleError(f"competition {competition_id} is finished")
            if player_id not in await self._communities.list_member_ids(competition.community_id):
                raise CompetitionRuleError(
                    f"player {player_id} is not a member of community {competition.community_id}",
                )
            await self._competitions.add_member(competition_id, player_id)
        logger.info("competition member added", competition_id=competition_id, player_id=player_id)

    async def remove_member(self, competition_id: str, player_id: str) -> None:
        async with self._lifecycle_lock:
            competition = await self.get_competition(competition_id)
            if competition.status != CompetitionStatus.PENDING:
                raise CompetitionRuleError(f"competition {competition_id} already started, roster is locked")
            await self._competitions.remove_member(competition_id, player_id)
        logger.info("competition member removed", competition_id=competition_id, player_id=player_id)

    async def list_members(self, competition_id: str) -> list[Player]:
        await self.get_competition(competition_id)
        return await self._players.list_by_ids(await self._competitions.list_member_ids(competition_id))

    async def _roster_ids(self, competition_id: str) -> list[str]:
        """Roster ids of players that still exist."""
        member_ids = await self._competitions.list_member_ids(competition_id)
        return [player.id for player in await self._players.list_by_ids(member_ids)]

    async def _transition(
        self,
        competition_id: str,
        status: CompetitionStatus,
        *,
        expected_status: CompetitionStatus,
    ) -> None:
        if not await self._competitions.update_status(competition_id, status, expected_status=expected_status):
            raise CompetitionRuleError(
                f"competition {competition_id} changed status concurrently, expected {expected_status.value}",
            )

    async def start_competition(self, competition_id: str) -> Competition:
        async with self._lifecycle_lock:
            competition = await self.get_competition(competition_id)
            if competition.status != CompetitionStatus.PENDING:
                raise CompetitionRuleError(
                    f"competition {competition_id} is {competition.status.value}, expected pending",
                )
            member_count = len(await self._roster_ids(competition_id))
            if member_count < MIN_COMPETITION_MEMBERS:
                raise CompetitionRuleError(
                    f"competition needs at least {MIN_COMPETITION_MEMBERS} members to start, has {member_count}",
                )
            await self._transition(
                competition_id,
                CompetitionStatus.IN_PROGRESS,
                expected_status=CompetitionStatus.PENDING,
            )

        logger.info("competition started", competition_id=competition_id, members=member_count)
        return competition.model_copy(update={"status": CompetitionStatus.IN_PROGRESS})

    async def create_game(
        self,
        competition_id: str,
        team1: Sequence[str],
        team2: Sequence[str],
    ) -> Game:
        """Create a game between roster members of a running competition."""
        async with self._lifecycle_lock:
            competition = await self.get_competition(competition_id)
            if competition.status != CompetitionStatus.IN_PROGRESS:
                raise CompetitionRuleError(
                    f"games can only be added to a running competition, {competition_id} is not",
                )
            roster = set(await self._roster_ids(competition_id))
            outsiders = sorted({*team1, *team2} - roster)
            if outsiders:
                raise CompetitionRuleError(f"players not in the competition roster: {', '.join(outsiders)}")
            return await self._game_service.create_game(competition_id, team1, team2)

    async def can_finish_competition(self, competition_id: str) -> bool:
        competition = await self.get_competition(competition_id)
        if competition.status != CompetitionStatus.IN_PROGRESS:
            return False
        games = await self._games.list_by_competition(competition_id)
        return bool(games) and all(game.is_finished for game in games)

    async def finish_competition(self, competition_id: str, *, actor_id: str | None = None) -> Standings:
        """Close a competition whose games are all finished and return its final standings."""
        async with self._lifecycle_lock:
            if not await self.can_finish_competition(competition_id):
                raise CompetitionRuleError(
                    f"competition {competition_id} cannot be finished: it must be running with all games finished",
                )
            await self._transition(
                competition_id,
                CompetitionStatus.FINISHED,
                expected_status=CompetitionStatus.IN_PROGRESS,
            )

        standings = await self.get_competition_results(competition_id)
        logger.info("competition finished", competition_id=competition_id, champions=standings.champions)
        if self._activities is not None:
            await self._activities.record_safely(
                self._activities.record_competition_completion(competition_id, standings.champions, actor_id),
                competition_id=competition_id,
            )
        return standings

    async def get_competition_results(self, competition_id: str) -> Standings:
        await self.get_competition(competition_id)
        games = await self._games.list_by_competition(competition_id)
        members = await self._players.list_by_ids(await self._competitions.list_member_ids(competition_id))
        return compute_standings(games, members)

    async def list_user_games(self, actor_id: str) -> list[Game]:
        """Games of every competition in the communities the actor reaches, newest first."""
        community_ids = await reachable_community_ids(self._communities, self._players, actor_id)
        competitions = await self._competitions.list_by_communities(community_ids)
        games = await self._games.list_by_competitions([competition.id for competition in competitions])
        return games[::-1]
