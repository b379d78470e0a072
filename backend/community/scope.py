"""Which communities an actor can see."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.community_repository import CommunityRepository
    from shared.dal.player_repository import PlayerRepository


async def reachable_community_ids(
    communities: CommunityRepository,
    players: PlayerRepository,
    actor_id: str,
) -> list[str]:
    """
    Communities the actor created, then the ones it organizes, then the ones its linked player belongs to.

    An actor without a linked player reaches only the communities it created or organizes.
    """
    ids = [community.id for community in await communities.list_created_by(actor_id)]
    ids.extend(await communities.list_community_ids_for_organizer(actor_id))
    player = await players.get_by_user_id(actor_id)
    if player is not None:
        ids.extend(await communities.list_community_ids_for_player(player.id))
    return list(dict.fromkeys(ids))
