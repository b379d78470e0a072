"""
Activity feed: one-line records of finished games, finished competitions,
new communities and competitions, and player milestones.

Recording happens after the action it describes has been stored. The record_*
methods propagate storage errors; callers that must not fail because of the
feed use record_safely.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from shared.dal.models import Activity, ActivityMetadata, ActivityType

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from game.logic.state import Game
    from shared.dal.activity_repository import ActivityRepository
    from shared.dal.game_repository import GameRepository
    from shared.dal.models import Community, Competition, Player
    from shared.dal.player_repository import PlayerRepository

logger = structlog.get_logger()

RECENT_ACTIVITY_LIMIT = 10
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
PLAYER_MILESTONE_GAMES = 10  # a milestone every this many finished games


class ActivityPage(BaseModel, frozen=True):
    activities: list[Activity]
    total_count: int
    current_page: int
    page_size: int
    total_pages: int


def game_description(game: Game) -> str:
    description = f"Game finished {game.team1_score} x {game.team2_score}"
    if game.is_buchuda:
        description += " (Buchuda)"
    if game.is_buchuda_de_re:
        description += " (Buchuda de Ré)"
    return description


def champions_description(champion_names: Sequence[str]) -> str:
    if not champion_names:
        return "Competition finished!"
    verb = "is the champion" if len(champion_names) == 1 else "are the champions"
    return f"Competition finished! {' and '.join(champion_names)} {verb}!"


class ActivityService:
    def __init__(
        self,
        activities: ActivityRepository,
        games: GameRepository,
        players: PlayerRepository,
    ) -> None:
        self._activities = activities
        self._games = games
        self._players = players

    async def _create(
        self,
        activity_type: ActivityType,
        description: str,
        metadata: ActivityMetadata,
        actor_id: str | None,
    ) -> Activity:
        activity = Activity(type=activity_type, description=description, metadata=metadata, created_by=actor_id)
        await self._activities.create_activity(activity)
        logger.info("activity recorded", activity_type=activity_type, description=description)
        return activity

    async def record_game_completion(self, game: Game, actor_id: str | None = None) -> list[Activity]:
        """Record a finished game, plus a milestone for each player whose finished-game count hits one."""
        winner = game.winner_team
        recorded = [
            await self._create(
                ActivityType.GAME,
                game_description(game),
                ActivityMetadata(
                    game_id=game.id,
                    competition_id=game.competition_id,
                    score=(game.team1_score, game.team2_score),
                    winners=game.team_players(winner) if winner is not None else (),
                    is_buchuda=game.is_buchuda,
                    is_buchuda_de_re=game.is_buchuda_de_re,
                ),
                actor_id,
            ),
        ]

        for player in await self._players.list_by_ids(game.players()):
            finished = sum(1 for g in await self._games.list_by_player(player.id) if g.is_finished)
            if finished > 0 and finished % PLAYER_MILESTONE_GAMES == 0:
                recorded.append(await self.record_player_milestone(player, finished, actor_id))
        return recorded

    async def record_competition_completion(
        self,
        competition_id: str,
        champion_ids: Sequence[str],
        actor_id: str | None = None,
    ) -> Activity:
        names = {player.id: player.name for player in await self._players.list_by_ids(champion_ids)}
        return await self._create(
            ActivityType.COMPETITION,
            champions_description([names.get(pid, pid) for pid in champion_ids]),
            ActivityMetadata(competition_id=competition_id, winners=tuple(champion_ids)),
            actor_id,
        )

    async def record_new_community(self, community: Community) -> Activity:
        return await self._create(
            ActivityType.COMMUNITY,
            f'New community "{community.name}" created!',
            ActivityMetadata(community_id=community.id, name=community.name),
            community.created_by,
        )

    async def record_new_competition(self, competition: Competition) -> Activity:
        return await self._create(
            ActivityType.COMPETITION,
            f'New competition "{competition.name}" created!',
            ActivityMetadata(
                competition_id=competition.id,
                community_id=competition.community_id,
                name=competition.name,
            ),
            competition.created_by,
        )

    async def record_player_milestone(self, player: Player, games_count: int, actor_id: str | None = None) -> Activity:
        return await self._create(
            ActivityType.PLAYER,
            f"{player.name} completed {games_count} games!",
            ActivityMetadata(player_id=player.id, name=player.name, games_count=games_count),
            actor_id,
        )

    async def record_safely(self, recording: Awaitable[object], **context: object) -> None:
        """Await a record_* call, logging instead of raising when it fails."""
        try:
            await recording
        except Exception:
            logger.exception("failed to record activity", **context)

    async def list_recent(self, limit: int = RECENT_ACTIVITY_LIMIT) -> list[Activity]:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        return await self._activities.list_recent(min(limit, MAX_PAGE_SIZE))

    async def list_page(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> ActivityPage:
        """One page of the feed, newest first. Pages are numbered from 1."""
        if page < 1:
            raise ValueError(f"page must be 1 or greater, got {page}")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        total_count = await self._activities.count()
        activities = await self._activities.list_recent(page_size, offset=(page - 1) * page_size)
        return ActivityPage(
            activities=activities,
            total_count=total_count,
            current_page=page,
            page_size=page_size,
            total_pages=math.ceil(total_count / page_size),
        )
