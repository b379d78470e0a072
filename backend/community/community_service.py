"""Community lifecycle, membership and organizers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from community.exceptions import CommunityNotFoundError, DuplicateOrganizerError, PlayerNotFoundError
from community.scope import reachable_community_ids
from shared.dal.models import Community

if TYPE_CHECKING:
    from activity.activity_service import ActivityService
    from shared.dal.community_repository import CommunityRepository
    from shared.dal.models import Player
    from shared.dal.player_repository import PlayerRepository

logger = structlog.get_logger()


class CommunityService:
    """
    Create communities and manage who belongs to them.

    Members are players; a community ranking lists exactly the community's
    members. Organizers are user accounts that help run the community: like
    its creator, they reach it in rankings and statistics.
    """

    def __init__(
        self,
        communities: CommunityRepository,
        players: PlayerRepository,
        activities: ActivityService | None = None,
    ) -> None:
        self._communities = communities
        self._players = players
        self._activities = activities

    async def create_community(self, actor_id: str, name: str, description: str = "") -> Community:
        name = name.strip()
        if not name:
            raise ValueError("community name must not be empty")
        community = Community(name=name, description=description.strip(), created_by=actor_id)
        await self._communities.create_community(community)
        logger.info("community created", community_id=community.id, actor_id=actor_id)
        if self._activities is not None:
            await self._activities.record_safely(
                self._activities.record_new_community(community),
                community_id=community.id,
            )
        return community

    async def get_community(self, community_id: str) -> Community:
        community = await self._communities.get_community(community_id)
        if community is None:
            raise CommunityNotFoundError(community_id)
        return community

    async def add_member(self, community_id: str, player_id: str) -> None:
        await self.get_community(community_id)
        if await self._players.get_player(player_id) is None:
            raise PlayerNotFoundError(player_id)
        await self._communities.add_member(community_id, player_id)
        logger.info("community member added", community_id=community_id, player_id=player_id)

    async def remove_member(self, community_id: str, player_id: str) -> None:
        await self.get_community(community_id)
        await self._communities.remove_member(community_id, player_id)
        logger.info("community member removed", community_id=community_id, player_id=player_id)

    async def list_members(self, community_id: str) -> list[Player]:
        await self.get_community(community_id)
        return await self._players.list_by_ids(await self._communities.list_member_ids(community_id))

    async def add_organizer(self, community_id: str, user_id: str, actor_id: str) -> None:
        """Make a user account an organizer of the community."""
        user_id = user_id.strip()
        if not user_id:
            raise ValueError("organizer user id must not be empty")
        await self.get_community(community_id)
        if not await self._communities.add_organizer(community_id, user_id, actor_id):
            raise DuplicateOrganizerError(f"user {user_id} already organizes community {community_id}")
        logger.info("community organizer added", community_id=community_id, user_id=user_id, actor_id=actor_id)

    async def remove_organizer(self, community_id: str, user_id: str) -> None:
        await self.get_community(community_id)
        await self._communities.remove_organizer(community_id, user_id)
        logger.info("community organizer removed", community_id=community_id, user_id=user_id)

    async def list_organizers(self, community_id: str) -> list[str]:
        await self.get_community(community_id)
        return await self._communities.list_organizer_ids(community_id)

    async def reachable_community_ids(self, actor_id: str) -> list[str]:
        return await reachable_community_ids(self._communities, self._players, actor_id)
