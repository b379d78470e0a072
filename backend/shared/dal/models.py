"""Persistence models for the data access layer."""

import uuid
from datetime import UTC, date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(tz=UTC)


class CompetitionStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Player(BaseModel, frozen=True):
    """A person who plays games; owned by the account that created it."""

    id: str = Field(default_factory=_new_id)
    name: str
    created_by: str  # actor (user account) id
    phone: str | None = None
    user_id: str | None = None  # linked user account, if the player has one


class Community(BaseModel, frozen=True):
    """Group of players that run competitions together."""

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    created_by: str
    created_at: datetime = Field(default_factory=_now)


class Competition(BaseModel, frozen=True):
    """Named, timed container of games within a community."""

    id: str = Field(default_factory=_new_id)
    community_id: str
    name: str
    start_date: date
    status: CompetitionStatus = CompetitionStatus.PENDING
    created_by: str
    created_at: datetime = Field(default_factory=_now)


class ActivityType(StrEnum):
    GAME = "game"
    COMPETITION = "competition"
    COMMUNITY = "community"
    PLAYER = "player"


class ActivityMetadata(BaseModel, frozen=True):
    """Ids and figures behind an activity line; which fields are set depends on the type."""

    game_id: str | None = None
    competition_id: str | None = None
    community_id: str | None = None
    player_id: str | None = None
    score: tuple[int, int] | None = None  # (team1, team2)
    winners: tuple[str, ...] = ()  # player ids
    name: str | None = None
    games_count: int | None = None
    is_buchuda: bool = False
    is_buchuda_de_re: bool = False


class Activity(BaseModel, frozen=True):
    """Entry of the activity feed: something that happened, in one line."""

    id: str = Field(default_factory=_new_id)
    type: ActivityType
    description: str
    metadata: ActivityMetadata = Field(default_factory=ActivityMetadata)
    created_by: str | None = None  # actor id, when the action had one
    created_at: datetime = Field(default_factory=_now)
