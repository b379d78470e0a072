"""Abstract interface for player persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shared.dal.models import Player


class DuplicatePhoneError(ValueError):
    """Another player already holds the phone number."""


class PlayerRepository(ABC):
    """Abstract interface for player persistence.

    Implementations can use SQLite, PostgreSQL, etc.
    """

    @abstractmethod
    async def create_player(self, player: Player) -> None: ...

    @abstractmethod
    async def get_player(self, player_id: str) -> Player | None: ...

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Player | None: ...

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> Player | None: ...

    @abstractmethod
    async def list_by_ids(self, player_ids: Sequence[str]) -> list[Player]: ...

    @abstractmethod
    async def list_all(self) -> list[Player]: ...

    @abstractmethod
    async def update_player(self, player: Player) -> None: ...

    @abstractmethod
    async def delete_player(self, player_id: str) -> None: ...
