"""
Intern Repository Interface.
Defines specific data access operations for Interns.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from intern_registry.domain.models.intern import Intern
from intern_registry.domain.repositories.base import BaseRepository


class InternRepository(BaseRepository[Intern]):
    """Interface for Intern-specific operations."""

    def get_by_id_number(self, id_number: str) -> Optional[Intern]:
        """Get an intern by its unique ID number."""
        ...

    def list_by_department(self, department: Optional[str] = None) -> List[Intern]:
        """List all interns, or only those of one department."""
        ...

    def create(self, values: Dict[str, Any], attachments: List[str]) -> Intern:
        """Insert an intern with its initial attachments.

        Raises ConflictException when the ID number is already taken.
        """
        ...

    def apply_update(self, intern_id: int, values: Dict[str, Any], new_attachments: List[str]) -> None:
        """Update scalar columns and append attachments in one transaction.

        Scalars are written with a single UPDATE statement and attachments are
        INSERTed, so existing attachments are never read back and rewritten.
        """
        ...

    def append_comment(
        self, intern_id: int, text: str, author: str, author_email: str, timestamp: datetime
    ) -> None:
        """Append one comment row."""
        ...

    def count_by_department(self, department: Optional[str] = None) -> Dict[str, int]:
        """Intern count grouped by department."""
        ...

    def count_by_status(self, department: Optional[str] = None) -> Dict[str, int]:
        """Intern count grouped by status."""
        ...
