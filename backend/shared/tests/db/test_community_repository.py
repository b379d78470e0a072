"""Tests for the community and competition repositories."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest

from shared.dal.models import Community, Competition, CompetitionStatus

if TYPE_CHECKING:
    from shared.db import SqliteCommunityRepository, SqliteCompetitionRepository


def _community(community_id: str, created_by: str = "u-1", minute: int = 0) -> Community:
    return Community(
        id=community_id,
        name=community_id.title(),
        created_by=created_by,
        created_at=datetime(2024, 1, 1, 9, minute, tzinfo=UTC),
    )


def _competition(competition_id: str, community_id: str, minute: int = 0) -> Competition:
    return Competition(
        id=competition_id,
        community_id=community_id,
        name=competition_id,
        start_date=date(2024, 2, 1),
        created_by="u-1",
        created_at=datetime(2024, 1, 2, 9, minute, tzinfo=UTC),
    )


class TestCommunities:
    async def test_round_trip(self, community_repo: SqliteCommunityRepository) -> None:
        community = _community("club")
        await community_repo.create_community(community)
        assert await community_repo.get_community("club") == community
        assert await community_repo.get_community("nope") is None

    async def test_duplicate(self, community_repo: SqliteCommunityRepository) -> None:
        await community_repo.create_community(_community("club"))
        with pytest.raises(ValueError, match="already exists"):
            await community_repo.create_community(_community("club"))

    async def test_list_created_by_newest_first(self, community_repo: SqliteCommunityRepository) -> None:
        await community_repo.create_community(_community("old", minute=1))
        await community_repo.create_community(_community("new", minute=2))
        await community_repo.create_community(_community("theirs", created_by="u-2"))
        assert [c.id for c in await community_repo.list_created_by("u-1")] == ["new", "old"]

    async def test_membership(self, community_repo: SqliteCommunityRepository) -> None:
        await community_repo.create_community(_community("club"))
        await community_repo.create_community(_community("bar"))
        await community_repo.add_member("club", "p2")
        await community_repo.add_member("club", "p1")
        await community_repo.add_member("club", "p2")
        await community_repo.add_member("bar", "p1")
        assert await community_repo.list_member_ids("club") == ["p2", "p1"]
        assert await community_repo.list_community_ids_for_player("p1") == ["club", "bar"]

        await community_repo.remove_member("club", "p2")
        assert await community_repo.list_member_ids("club") == ["p1"]

    async def test_member_of_unknown_community(self, community_repo: SqliteCommunityRepository) -> None:
        with pytest.raises(ValueError, match="does not exist"):
            await community_repo.add_member("ghost", "p1")

    async def test_organizers(self, community_repo: SqliteCommunityRepository) -> None:
        await community_repo.create_community(_community("club"))
        await community_repo.create_community(_community("bar"))
        assert await community_repo.add_organizer("club", "u-7", "u-1")
        assert await community_repo.add_organizer("club", "u-8", "u-1")
        assert await community_repo.add_organizer("bar", "u-7", "u-1")
        assert not await community_repo.add_organizer("club", "u-7", "u-1")

        assert await community_repo.list_organizer_ids("club") == ["u-7", "u-8"]
        assert await community_repo.list_community_ids_for_organizer("u-7") == ["club", "bar"]

        await community_repo.remove_organizer("club", "u-7")
        assert await community_repo.list_organizer_ids("club") == ["u-8"]
        assert await community_repo.list_community_ids_for_organizer("u-7") == ["bar"]

    async def test_organizer_of_unknown_community(self, community_repo: SqliteCommunityRepository) -> None:
        with pytest.raises(ValueError, match="does not exist"):
            await community_repo.add_organizer("ghost", "u-7", "u-1")


class TestCompetitions:
    async def test_round_trip_and_status(
        self,
        community_repo: SqliteCommunityRepository,
        competition_repo: SqliteCompetitionRepository,
    ) -> None:
        await community_repo.create_community(_community("club"))
        competition = _competition("cup", "club")
        await competition_repo.create_competition(competition)
        assert await competition_repo.get_competition("cup") == competition

        assert await competition_repo.update_status(
            "cup",
            CompetitionStatus.IN_PROGRESS,
            expected_status=CompetitionStatus.PENDING,
        )
        stored = await competition_repo.get_competition("cup")
        assert stored is not None
        assert stored.status == CompetitionStatus.IN_PROGRESS

    async def test_status_update_is_conditional(
        self,
        community_repo: SqliteCommunityRepository,
        competition_repo: SqliteCompetitionRepository,
    ) -> None:
        await community_repo.create_community(_community("club"))
        await competition_repo.create_competition(_competition("cup", "club"))

        finished = await competition_repo.update_status(
            "cup",
            CompetitionStatus.FINISHED,
            expected_status=CompetitionStatus.IN_PROGRESS,
        )
        assert finished is False
        stored = await competition_repo.get_competition("cup")
        assert stored is not None
        assert stored.status == CompetitionStatus.PENDING
        assert not await competition_repo.update_status(
            "ghost",
            CompetitionStatus.IN_PROGRESS,
            expected_status=CompetitionStatus.PENDING,
        )

    async def test_requires_existing_community(self, competition_repo: SqliteCompetitionRepository) -> None:
        with pytest.raises(ValueError, match="Cannot create competition"):
            await competition_repo.create_competition(_competition("cup", "ghost"))

    async def test_list_by_communities(
        self,
        community_repo: SqliteCommunityRepository,
        competition_repo: SqliteCompetitionRepository,
    ) -> None:
        for community_id in ("a", "b", "c"):
            await community_repo.create_community(_community(community_id))
        await competition_repo.create_competition(_competition("a1", "a", minute=1))
        await competition_repo.create_competition(_competition("b1", "b", minute=2))
        await competition_repo.create_competition(_competition("c1", "c", minute=3))
        assert [c.id for c in await competition_repo.list_by_communities(["a", "b"])] == ["b1", "a1"]
        assert await competition_repo.list_by_communities([]) == []

    async def test_rosters(
        self,
        community_repo: SqliteCommunityRepository,
        competition_repo: SqliteCompetitionRepository,
    ) -> None:
        await community_repo.create_community(_community("club"))
        await competition_repo.create_competition(_competition("cup1", "club"))
        await competition_repo.create_competition(_competition("cup2", "club"))
        for competition_id, player_id in (("cup1", "p1"), ("cup1", "p2"), ("cup2", "p2"), ("cup2", "p3")):
            await competition_repo.add_member(competition_id, player_id)

        assert await competition_repo.list_member_ids("cup1") == ["p1", "p2"]
        assert sorted(await competition_repo.list_member_ids_for_competitions(["cup1", "cup2"])) == ["p1", "p2", "p3"]

        await competition_repo.remove_member("cup1", "p1")
        assert await competition_repo.list_member_ids("cup1") == ["p2"]
        with pytest.raises(ValueError, match="does not exist"):
            await competition_repo.add_member("ghost", "p1")
