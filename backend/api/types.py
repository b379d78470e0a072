from datetime import date
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

_ID = Field(min_length=1, max_length=100)


class CreatePlayerRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    phone: str | None = Field(default=None, min_length=8, max_length=20, pattern=r"^\+?[0-9]+$")
    user_id: str | None = None


class CreateCommunityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)


class MemberRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player_id: str = _ID


class CreateCompetitionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    start_date: date


class CreateGameRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    team1: list[str] = Field(min_length=1, max_length=2)
    team2: list[str] = Field(min_length=1, max_length=2)

    @model_validator(mode="after")
    def _validate_teams(self) -> Self:
        if set(self.team1) & set(self.team2):
            raise ValueError("A player cannot be on both teams")
        return self


class RegisterRoundRequest(BaseModel):
    """Round outcome. Cross-field rules (tie vs winner) are checked by the resolver."""

    model_config = ConfigDict(extra="forbid")

    victory_type: str = Field(min_length=1, max_length=20)
    winner_team: int | None = Field(default=None, strict=True)


class OrganizerRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str = _ID
