"""Abstract interface for competition and roster persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.dal.models import Competition, CompetitionStatus


class CompetitionRepository(ABC):
    """Abstract interface for competitions and their member rosters."""

    @abstractmethod
    async def create_competition(self, competition: Competition) -> None: ...

    @abstractmethod
    async def get_competition(self, competition_id: str) -> Competition | None: ...

    @abstractmethod
    async def update_status(
        self,
        competition_id: str,
        status: CompetitionStatus,
        *,
        expected_status: CompetitionStatus,
    ) -> bool:
        """Set the status if the stored one is still expected_status. Returns False otherwise."""
        ...

    @abstractmethod
    async def list_by_communities(self, community_ids: Sequence[str]) -> list[Competition]: ...

    @abstractmethod
    async def add_member(self, competition_id: str, player_id: str) -> None: ...

    @abstractmethod
    async def remove_member(self, competition_id: str, player_id: str) -> None: ...

    @abstractmethod
    async def list_member_ids(self, competition_id: str) -> list[str]: ...

    @abstractmethod
    async def list_member_ids_for_competitions(self, competition_ids: Sequence[str]) -> list[str]: ...
