"""Typed domain exceptions for game rule violations.

All domain-level rule violations use subclasses of GameRuleError
rather than raw ValueError. This enables consistent catch-and-convert
at the service boundary (request handlers turn them into 4xx responses).
"""


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidRoundError(GameRuleError):
    """Round outcome is malformed (unknown victory type or winner/tie mismatch)."""


class GameFinishedError(GameRuleError):
    """A round was submitted for a game that already has a winner."""


class InvalidTeamsError(GameRuleError):
    """Team composition is invalid (empty, too large, or overlapping)."""


class InvalidGameStateError(GameRuleError):
    """Operation is not valid for the game's current status."""


class GameNotFoundError(Exception):
    """No game exists with the requested id."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game {game_id} not found")


class StaleGameError(Exception):
    """Raised when a game was modified between read and conditional write.

    The caller may re-read the game and retry the submission.

    Attributes:
        game_id: The game that was being updated.
        expected_version: The version the writer read before resolving the round.

    """

    def __init__(self, *, game_id: str, expected_version: int) -> None:
        self.game_id = game_id
        self.expected_version = expected_version
        super().__init__(f"game {game_id} changed since version {expected_version}, retry")
