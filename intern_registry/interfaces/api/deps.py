"""FastAPI dependency — cookie session auth and role gates."""

from fastapi import Depends, Request

from intern_registry.application.services.auth_service import resolve_session
from intern_registry.config import Settings
from intern_registry.core.exceptions import ForbiddenException
from intern_registry.domain.models.user import ROLE_HR, ROLE_STAFF
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.domain.schemas.auth import Identity
from intern_registry.interfaces.deps import get_settings, get_user_repository


def get_current_identity(
    request: Request,
    repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Resolve the session cookie to an identity (401 and cookie cleared otherwise)."""
    return resolve_session(repo, request.cookies.get(settings.SESSION_COOKIE_NAME))


def require_staff(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Require Staff role."""
    if identity.role != ROLE_STAFF:
        raise ForbiddenException("Only Staff users can access this resource")
    return identity


def require_hr(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Require HR role."""
    if identity.role != ROLE_HR:
        raise ForbiddenException("Only HR users can access this resource")
    return identity
