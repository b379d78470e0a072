"""Player registry: players created by an actor, optionally linked to a user account."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from community.exceptions import DuplicatePlayerError, PlayerNotFoundError
from shared.dal.models import Player
from shared.dal.player_repository import DuplicatePhoneError

if TYPE_CHECKING:
    from shared.dal.player_repository import PlayerRepository

logger = structlog.get_logger()


class PlayerService:
    def __init__(self, players: PlayerRepository) -> None:
        self._players = players

    async def create_player(
        self,
        actor_id: str,
        name: str,
        *,
        phone: str | None = None,
        user_id: str | None = None,
    ) -> Player:
        """Register a player. Phone numbers are unique across players."""
        name = name.strip()
        if not name:
            raise ValueError("player name must not be empty")
        if phone is not None and await self._players.get_by_phone(phone) is not None:
            raise DuplicatePlayerError(f"phone {phone} is already registered")

        player = Player(name=name, created_by=actor_id, phone=phone, user_id=user_id)
        try:
            await self._players.create_player(player)
        except DuplicatePhoneError as exc:
            # another request registered the phone after the lookup above
            raise DuplicatePlayerError(f"phone {phone} is already registered") from exc
        logger.info("player created", player_id=player.id, actor_id=actor_id)
        return player

    async def get_player(self, player_id: str) -> Player:
        player = await self._players.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    async def list_players(self, actor_id: str) -> list[Player]:
        """Players the actor created plus the player linked to the actor's account, by name."""
        return [
            player for player in await self._players.list_all() if actor_id in (player.created_by, player.user_id)
        ]

    async def rename_player(self, player_id: str, name: str) -> Player:
        name = name.strip()
        if not name:
            raise ValueError("player name must not be empty")
        player = await self.get_player(player_id)
        renamed = player.model_copy(update={"name": name})
        await self._players.update_player(renamed)
        return renamed

    async def delete_player(self, player_id: str) -> None:
        await self._players.delete_player(player_id)
        logger.info("player deleted", player_id=player_id)
