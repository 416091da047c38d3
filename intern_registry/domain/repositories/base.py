"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import List, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic persistence operations."""

    def list_all(self) -> List[T]:
        """List entities in insertion order."""
        ...

    def add(self, obj: T) -> T:
        """Persist a new entity."""
        ...

    def delete(self, obj: T) -> None:
        """Delete an entity."""
        ...
