"""Abstract interface for game persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from game.logic.state import Game


class GameRepository(ABC):
    """Abstract interface for game persistence.

    update_game is a conditional write: it only succeeds when the stored
    version still equals expected_version.
    """

    @abstractmethod
    async def create_game(self, game: Game) -> None: ...

    @abstractmethod
    async def get_game(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def update_game(self, game: Game, *, expected_version: int) -> bool:
        """Store the game if the stored version is expected_version. Returns False otherwise."""
        ...

    @abstractmethod
    async def list_by_competition(self, competition_id: str) -> list[Game]: ...

    @abstractmethod
    async def list_by_competitions(
        self,
        competition_ids: Sequence[str],
        *,
        include_pending: bool = True,
    ) -> list[Game]: ...

    @abstractmethod
    async def list_all(self, *, include_pending: bool = True) -> list[Game]: ...

    @abstractmethod
    async def list_by_player(self, player_id: str) -> list[Game]:
        """Games with the player on either team, newest first."""
        ...
