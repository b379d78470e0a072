"""Abstract interface for activity feed persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Activity


class ActivityRepository(ABC):
    """Append-only store of feed entries, read newest first."""

    @abstractmethod
    async def create_activity(self, activity: Activity) -> None: ...

    @abstractmethod
    async def list_recent(self, limit: int = 20, offset: int = 0) -> list[Activity]: ...

    @abstractmethod
    async def count(self) -> int: ...
