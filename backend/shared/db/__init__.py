"""SQLite database layer: connection management and repository implementations."""

from shared.db.activity_repository import SqliteActivityRepository
from shared.db.community_repository import SqliteCommunityRepository
from shared.db.competition_repository import SqliteCompetitionRepository
from shared.db.connection import Database
from shared.db.game_repository import SqliteGameRepository
from shared.db.player_repository import SqlitePlayerRepository

__all__ = [
    "Database",
    "SqliteActivityRepository",
    "SqliteCommunityRepository",
    "SqliteCompetitionRepository",
    "SqliteGameRepository",
    "SqlitePlayerRepository",
]
