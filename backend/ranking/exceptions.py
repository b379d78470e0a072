"""Exceptions raised while building rankings and statistics."""


class RankingDataError(Exception):
    """Fetching the games or players for a ranking failed.

    Wraps the underlying storage error (available as __cause__). No partial
    ranking is ever returned alongside it.
    """
