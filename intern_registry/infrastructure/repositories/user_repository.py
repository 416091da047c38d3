"""
SQLAlchemy Implementation of User Repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import update

from intern_registry.domain.models.user import User
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def get_by_department(self, department: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.department == department)
            .order_by(User.id)
            .first()
        )

    def set_department(self, email: str, department: Optional[str]) -> Optional[User]:
        user = self.get_by_email(email)
        if user is None:
            return None
        user.department = department
        self.db.commit()
        self.db.refresh(user)
        return user

    def store_magic_link(self, user_id: int, token: str, expires: datetime) -> None:
        self._execute(
            update(User)
            .where(User.id == user_id)
            .values(magic_link_token=token, magic_link_token_expires=expires)
        )

    def consume_magic_link(
        self, token: str, now: datetime, session_token: str, session_expires: datetime
    ) -> Optional[User]:
        # Clearing the link and installing the session in one UPDATE makes the
        # token single-use even under concurrent verification requests.
        affected = self._execute(
            update(User)
            .where(User.magic_link_token == token, User.magic_link_token_expires > now)
            .values(
                magic_link_token=None,
                magic_link_token_expires=None,
                session_token=session_token,
                session_expires=session_expires,
            )
        )
        if affected != 1:
            return None
        return self.db.query(User).filter(User.session_token == session_token).first()

    def discard_magic_link(self, token: str) -> int:
        return self._execute(
            update(User)
            .where(User.magic_link_token == token)
            .values(magic_link_token=None, magic_link_token_expires=None)
        )

    def get_by_session(self, session_token: str, now: datetime) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.session_token == session_token, User.session_expires > now)
            .first()
        )

    def clear_session(self, session_token: str) -> int:
        return self._execute(
            update(User)
            .where(User.session_token == session_token)
            .values(session_token=None, session_expires=None)
        )
