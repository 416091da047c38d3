"""User service — account administration."""

from typing import List, Optional

import structlog
from pydantic import ValidationError

from intern_registry.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    RecordValidationException,
)
from intern_registry.domain.models.user import ROLE_HR, ROLE_STAFF, User
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.domain.schemas.auth import UserCreate, normalize_email

logger = structlog.get_logger(__name__)

HR_DEPARTMENT = "Human Resources"


def list_users(repo: UserRepository) -> List[User]:
    return repo.list_all()


def create_user(repo: UserRepository, email: str, role: str, department: Optional[str] = None) -> User:
    try:
        data = UserCreate(email=email, role=role, department=department)
    except ValidationError as e:
        raise RecordValidationException.from_pydantic(e)

    if repo.get_by_email(data.email):
        raise ConflictException("Email already registered", {"email": data.email})

    user = repo.add(User(email=data.email, role=data.role, department=data.department))
    logger.info("User created", email=user.email, role=user.role, department=user.department)
    return user


def update_department(repo: UserRepository, email: str, department: Optional[str]) -> User:
    email = normalize_email(email or "")
    department = (department or "").strip() or None

    user = repo.get_by_email(email)
    if user is None:
        raise EntityNotFoundException("User not found", {"email": email})
    if user.role == ROLE_STAFF and department is None:
        raise RecordValidationException(
            [{"field": "department", "message": "department is required for Staff users"}]
        )

    user = repo.set_department(email, department)
    logger.info("User department updated", email=email, department=department)
    return user


def ensure_bootstrap_user(repo: UserRepository, email: str) -> Optional[User]:
    """Create the first HR account if it does not exist yet."""
    if not email:
        return None
    existing = repo.get_by_email(email)
    if existing:
        return existing
    return create_user(repo, email=email, role=ROLE_HR, department=HR_DEPARTMENT)
