"""Auth service — magic link issuance and cookie session lifecycle.

Per user the auth sub-state moves LoggedOut → LinkPending (request_login) →
LoggedIn (consume_login_token) → LoggedOut (logout or session expiry).
A user holds at most one pending link and at most one session; each new
link or login overwrites the previous one.
"""

import secrets
from datetime import datetime, timedelta
from typing import Optional

import structlog

from intern_registry.config import Settings
from intern_registry.core.exceptions import (
    EntityNotFoundException,
    InvalidOrExpiredTokenException,
    InvalidSessionException,
    NoSessionException,
    RecordValidationException,
)
from intern_registry.domain.gateways import Notifier
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.domain.schemas.auth import Identity, LoginResult
from intern_registry.infrastructure.database import utcnow

logger = structlog.get_logger(__name__)

TOKEN_BYTES = 32  # 256 bits

LOGIN_EMAIL_SUBJECT = "Your Intern Management login link"


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def build_magic_link(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/?token={token}"


def format_login_email(department: str, link: str, ttl_minutes: int) -> str:
    return "\n".join([
        f"Hello {department} Staff,",
        "",
        "You recently requested a login link for the Intern Management System.",
        "",
        f"Log in here: {link}",
        "",
        f"This link is valid for {ttl_minutes} minutes and can be used once.",
        "If you did not request this, please ignore this email.",
    ])


async def request_login(
    repo: UserRepository,
    notifier: Notifier,
    settings: Settings,
    department: str,
    now: Optional[datetime] = None,
) -> str:
    """Issue a magic link for the user registered to ``department``.

    Returns the recipient email, never the token. The token is persisted
    before delivery, so a notifier failure does not roll it back.
    """
    # Matched exactly as stored; only a blank value is rejected up front
    if not department or not department.strip():
        raise RecordValidationException([{"field": "department", "message": "Department is required"}])

    user = repo.get_by_department(department)
    if user is None:
        logger.info("Magic link requested for unknown department", department=department)
        raise EntityNotFoundException(
            "No user found for this department", {"department": department}
        )

    now = now or utcnow()
    token = generate_token()
    expires = now + timedelta(minutes=settings.MAGIC_LINK_TTL_MINUTES)
    repo.store_magic_link(user.id, token, expires)

    link = build_magic_link(settings.FRONTEND_URL, token)
    await notifier.send(
        user.email,
        LOGIN_EMAIL_SUBJECT,
        format_login_email(department, link, settings.MAGIC_LINK_TTL_MINUTES),
    )
    logger.info("Magic link sent", email=user.email, department=department)
    return user.email


def consume_login_token(
    repo: UserRepository,
    settings: Settings,
    token: str,
    now: Optional[datetime] = None,
) -> LoginResult:
    """Exchange a live magic link token for a new session."""
    if not token:
        raise InvalidOrExpiredTokenException()

    now = now or utcnow()
    session_token = generate_token()
    session_expires = now + timedelta(hours=settings.SESSION_TTL_HOURS)

    user = repo.consume_magic_link(token, now, session_token, session_expires)
    if user is None:
        # An expired token may still be stored; make sure it can never be replayed
        discarded = repo.discard_magic_link(token)
        logger.info("Magic link rejected", stale_tokens_cleared=discarded)
        raise InvalidOrExpiredTokenException()

    logger.info("Login successful", email=user.email, role=user.role)
    return LoginResult(
        identity=Identity.model_validate(user),
        session_token=session_token,
        session_expires=session_expires,
    )


def resolve_session(
    repo: UserRepository,
    credential: Optional[str],
    now: Optional[datetime] = None,
) -> Identity:
    """Return the identity behind a session credential."""
    if not credential:
        raise NoSessionException()

    user = repo.get_by_session(credential, now or utcnow())
    if user is None:
        raise InvalidSessionException()
    return Identity.model_validate(user)


def logout(repo: UserRepository, credential: Optional[str]) -> None:
    """Invalidate the session server-side. Succeeds for unknown or absent credentials."""
    if not credential:
        return
    if repo.clear_session(credential):
        logger.info("Logged out")
