"""Abstract interface for community and membership persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Community


class CommunityRepository(ABC):
    """Abstract interface for communities, their player memberships and their organizers."""

    @abstractmethod
    async def create_community(self, community: Community) -> None: ...

    @abstractmethod
    async def get_community(self, community_id: str) -> Community | None: ...

    @abstractmethod
    async def list_created_by(self, actor_id: str) -> list[Community]: ...

    @abstractmethod
    async def add_member(self, community_id: str, player_id: str) -> None: ...

    @abstractmethod
    async def remove_member(self, community_id: str, player_id: str) -> None: ...

    @abstractmethod
    async def list_member_ids(self, community_id: str) -> list[str]: ...

    @abstractmethod
    async def list_community_ids_for_player(self, player_id: str) -> list[str]: ...

    @abstractmethod
    async def add_organizer(self, community_id: str, user_id: str, created_by: str) -> bool:
        """Grant organizer rights to a user account. Returns False if it already had them."""
        ...

    @abstractmethod
    async def remove_organizer(self, community_id: str, user_id: str) -> None: ...

    @abstractmethod
    async def list_organizer_ids(self, community_id: str) -> list[str]: ...

    @abstractmethod
    async def list_community_ids_for_organizer(self, user_id: str) -> list[str]: ...
