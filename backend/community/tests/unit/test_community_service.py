"""CommunityService and PlayerService over SQLite repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest

from community.community_service import CommunityService
from community.exceptions import (
    CommunityNotFoundError,
    DuplicateOrganizerError,
    DuplicatePlayerError,
    PlayerNotFoundError,
)
from community.player_service import PlayerService

if TYPE_CHECKING:
    from shared.db import SqliteCommunityRepository, SqlitePlayerRepository


@pytest.fixture
def players(player_repo: SqlitePlayerRepository) -> PlayerService:
    return PlayerService(player_repo)


@pytest.fixture
def communities(community_repo: SqliteCommunityRepository, player_repo: SqlitePlayerRepository) -> CommunityService:
    return CommunityService(community_repo, player_repo)


class TestPlayerService:
    async def test_create_records_actor(self, players: PlayerService) -> None:
        player = await players.create_player("u-1", "  Ana  ", phone="5511999990000")
        assert player.name == "Ana"
        assert player.created_by == "u-1"
        assert await players.get_player(player.id) == player

    async def test_duplicate_phone(self, players: PlayerService) -> None:
        await players.create_player("u-1", "Ana", phone="5511999990000")
        with pytest.raises(DuplicatePlayerError):
            await players.create_player("u-2", "Bia", phone="5511999990000")

    async def test_duplicate_phone_registered_after_lookup(
        self,
        players: PlayerService,
        player_repo: SqlitePlayerRepository,
    ) -> None:
        await players.create_player("u-1", "Ana", phone="5511999990000")
        with (
            patch.object(player_repo, "get_by_phone", AsyncMock(return_value=None)),
            pytest.raises(DuplicatePlayerError, match="already registered"),
        ):
            await players.create_player("u-2", "Bia", phone="5511999990000")
        assert [p.name for p in await player_repo.list_all()] == ["Ana"]

    async def test_blank_name_rejected(self, players: PlayerService) -> None:
        with pytest.raises(ValueError, match="empty"):
            await players.create_player("u-1", "   ")

    async def test_list_players_for_actor(self, players: PlayerService) -> None:
        await players.create_player("u-1", "Zeca")
        await players.create_player("u-1", "Ana")
        await players.create_player("u-2", "Linked", user_id="u-1")
        await players.create_player("u-2", "Other")
        assert [p.name for p in await players.list_players("u-1")] == ["Ana", "Linked", "Zeca"]

    async def test_rename_and_delete(self, players: PlayerService) -> None:
        player = await players.create_player("u-1", "Ana")
        assert (await players.rename_player(player.id, "Ana Maria")).name == "Ana Maria"
        assert (await players.get_player(player.id)).name == "Ana Maria"
        await players.delete_player(player.id)
        with pytest.raises(PlayerNotFoundError):
            await players.get_player(player.id)


class TestCommunityService:
    async def test_create_and_get(self, communities: CommunityService) -> None:
        community = await communities.create_community("u-1", "Domino da Praça", "sábados")
        assert community.created_by == "u-1"
        assert await communities.get_community(community.id) == community

    async def test_get_unknown(self, communities: CommunityService) -> None:
        with pytest.raises(CommunityNotFoundError):
            await communities.get_community("missing")

    async def test_membership(self, communities: CommunityService, players: PlayerService) -> None:
        community = await communities.create_community("u-1", "Club")
        ana = await players.create_player("u-1", "Ana")
        bia = await players.create_player("u-1", "Bia")
        await communities.add_member(community.id, ana.id)
        await communities.add_member(community.id, bia.id)
        await communities.add_member(community.id, ana.id)
        assert [p.id for p in await communities.list_members(community.id)] == [ana.id, bia.id]

        await communities.remove_member(community.id, ana.id)
        assert [p.id for p in await communities.list_members(community.id)] == [bia.id]

    async def test_add_unknown_player(self, communities: CommunityService) -> None:
        community = await communities.create_community("u-1", "Club")
        with pytest.raises(PlayerNotFoundError):
            await communities.add_member(community.id, "ghost")

    async def test_add_member_to_unknown_community(self, communities: CommunityService, players: PlayerService) -> None:
        ana = await players.create_player("u-1", "Ana")
        with pytest.raises(CommunityNotFoundError):
            await communities.add_member("missing", ana.id)

    async def test_reachable_communities(self, communities: CommunityService, players: PlayerService) -> None:
        own = await communities.create_community("u-1", "Own")
        joined = await communities.create_community("u-2", "Joined")
        await communities.create_community("u-2", "Elsewhere")
        me = await players.create_player("u-2", "Me", user_id="u-1")
        await communities.add_member(joined.id, me.id)
        await communities.add_member(own.id, me.id)

        assert await communities.reachable_community_ids("u-1") == [own.id, joined.id]

    async def test_actor_without_player_reaches_only_own(self, communities: CommunityService) -> None:
        own = await communities.create_community("u-9", "Own")
        assert await communities.reachable_community_ids("u-9") == [own.id]

    async def test_organizers(self, communities: CommunityService) -> None:
        community = await communities.create_community("u-1", "Club")
        await communities.add_organizer(community.id, " u-7 ", "u-1")
        await communities.add_organizer(community.id, "u-8", "u-1")
        assert await communities.list_organizers(community.id) == ["u-7", "u-8"]

        await communities.remove_organizer(community.id, "u-7")
        assert await communities.list_organizers(community.id) == ["u-8"]

    async def test_duplicate_organizer(self, communities: CommunityService) -> None:
        community = await communities.create_community("u-1", "Club")
        await communities.add_organizer(community.id, "u-7", "u-1")
        with pytest.raises(DuplicateOrganizerError):
            await communities.add_organizer(community.id, "u-7", "u-1")

    async def test_organizer_rules(self, communities: CommunityService) -> None:
        community = await communities.create_community("u-1", "Club")
        with pytest.raises(ValueError, match="empty"):
            await communities.add_organizer(community.id, "  ", "u-1")
        with pytest.raises(CommunityNotFoundError):
            await communities.add_organizer("missing", "u-7", "u-1")
        with pytest.raises(CommunityNotFoundError):
            await communities.list_organizers("missing")

    async def test_organizer_reaches_community(self, communities: CommunityService, players: PlayerService) -> None:
        own = await communities.create_community("u-1", "Own")
        organized = await communities.create_community("u-2", "Organized")
        joined = await communities.create_community("u-3", "Joined")
        me = await players.create_player("u-3", "Me", user_id="u-1")
        await communities.add_member(joined.id, me.id)
        await communities.add_member(organized.id, me.id)
        await communities.add_organizer(organized.id, "u-1", "u-2")

        assert await communities.reachable_community_ids("u-1") == [own.id, organized.id, joined.id]

        await communities.remove_organizer(organized.id, "u-1")
        await communities.remove_member(organized.id, me.id)
        assert await communities.reachable_community_ids("u-1") == [own.id, joined.id]
