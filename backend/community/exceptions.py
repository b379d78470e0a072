"""Community, competition and player errors raised by the community services."""


class CommunityNotFoundError(Exception):
    def __init__(self, community_id: str) -> None:
        self.community_id = community_id
        super().__init__(f"community {community_id} not found")


class CompetitionNotFoundError(Exception):
    def __init__(self, competition_id: str) -> None:
        self.competition_id = competition_id
        super().__init__(f"competition {competition_id} not found")


class PlayerNotFoundError(Exception):
    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"player {player_id} not found")


class CompetitionRuleError(Exception):
    """Competition lifecycle or roster rule violated (status, member count, membership)."""


class DuplicatePlayerError(Exception):
    """A player with the same phone number is already registered."""


class DuplicateOrganizerError(Exception):
    """The user already organizes the community."""
