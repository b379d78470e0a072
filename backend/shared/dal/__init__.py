"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.activity_repository import ActivityRepository
from shared.dal.community_repository import CommunityRepository
from shared.dal.competition_repository import CompetitionRepository
from shared.dal.game_repository import GameRepository
from shared.dal.models import (
    Activity,
    ActivityMetadata,
    ActivityType,
    Community,
    Competition,
    CompetitionStatus,
    Player,
)
from shared.dal.player_repository import DuplicatePhoneError, PlayerRepository

__all__ = [
    "Activity",
    "ActivityMetadata",
    "ActivityRepository",
    "ActivityType",
    "Community",
    "CommunityRepository",
    "Competition",
    "CompetitionRepository",
    "CompetitionStatus",
    "DuplicatePhoneError",
    "GameRepository",
    "Player",
    "PlayerRepository",
]
