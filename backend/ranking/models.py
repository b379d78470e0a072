"""Derived ranking and standings models. Recomputed on demand, never persisted."""

from pydantic import BaseModel, Field


class PlayerRef(BaseModel, frozen=True):
    id: str
    name: str = ""


class PlayerRanking(BaseModel, frozen=True):
    """Win-rate ranking entry for a single player."""

    player_id: str
    name: str
    wins: int = 0
    total_games: int = 0
    buchudas: int = 0  # buchuda wins
    buchudas_de_re: int = 0  # buchuda de ré wins
    win_rate: float = 0.0  # percentage, 0-100


class PairRanking(BaseModel, frozen=True):
    """Win-rate ranking entry for an unordered pair of players."""

    pair_id: str  # sorted player ids joined by "-"
    player1: PlayerRef  # lower id
    player2: PlayerRef
    wins: int = 0
    total_games: int = 0
    buchudas: int = 0
    buchudas_de_re: int = 0
    win_rate: float = 0.0


class StandingLine(BaseModel, frozen=True):
    """Finished-game tallies shared by player and pair standings."""

    games: int = 0
    wins: int = 0
    losses: int = 0
    score: int = 0  # points scored across games
    buchudas_given: int = 0
    buchudas_taken: int = 0
    buchudas_de_re_given: int = 0
    buchudas_de_re_taken: int = 0


class PlayerStanding(StandingLine, frozen=True):
    player_id: str
    name: str


class PairStanding(StandingLine, frozen=True):
    pair_id: str
    players: tuple[PlayerRef, PlayerRef]


class Standings(BaseModel, frozen=True):
    """Competition results / community statistics over finished games."""

    players: list[PlayerStanding] = Field(default_factory=list)
    pairs: list[PairStanding] = Field(default_factory=list)

    @property
    def champions(self) -> tuple[str, ...]:
        """Player ids of the leading pair, or the leading player when no pair has won."""
        if self.pairs and self.pairs[0].wins > 0:
            return tuple(p.id for p in self.pairs[0].players)
        if self.players and self.players[0].wins > 0:
            return (self.players[0].player_id,)
        return ()


class UserStatistics(BaseModel, frozen=True):
    """Dashboard totals over the communities an actor can reach."""

    total_games: int = 0
    total_competitions: int = 0
    total_players: int = 0
    average_score: float = 0.0  # mean team score of the actor's finished games
    total_communities: int = 0
