"""
User Repository Interface.
Defines the magic link and session operations on Users.

Every token transition is a single conditional statement so that two
concurrent requests can never both observe the same token as valid.
"""

from datetime import datetime
from typing import Optional

from intern_registry.domain.models.user import User
from intern_registry.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by (lower-cased) email."""
        ...

    def get_by_department(self, department: str) -> Optional[User]:
        """Get the first user registered for an exact department name."""
        ...

    def set_department(self, email: str, department: Optional[str]) -> Optional[User]:
        """Change a user's department. Returns None for an unknown email."""
        ...

    def store_magic_link(self, user_id: int, token: str, expires: datetime) -> None:
        """Overwrite the user's pending magic link token."""
        ...

    def consume_magic_link(
        self, token: str, now: datetime, session_token: str, session_expires: datetime
    ) -> Optional[User]:
        """Atomically clear a live magic link token and install a new session.

        Returns the user when ``token`` matched an unexpired pending token,
        otherwise None and nothing is changed.
        """
        ...

    def discard_magic_link(self, token: str) -> int:
        """Clear ``token`` wherever it is still stored. Returns affected rows."""
        ...

    def get_by_session(self, session_token: str, now: datetime) -> Optional[User]:
        """Get the user owning an unexpired session."""
        ...

    def clear_session(self, session_token: str) -> int:
        """Invalidate a session server-side. Returns affected rows."""
        ...
