"""Auth API routes — magic link request/verify, session check, logout."""

from fastapi import APIRouter, Depends, Request, Response

from intern_registry.application.services.auth_service import (
    consume_login_token,
    logout,
    request_login,
)
from intern_registry.config import Settings
from intern_registry.domain.gateways import Notifier
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.domain.schemas.auth import (
    Identity,
    LoginResponse,
    MagicLinkRequest,
    MagicLinkSent,
    VerifyRequest,
)
from intern_registry.interfaces.api.deps import get_current_identity
from intern_registry.interfaces.deps import get_notifier, get_settings, get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _cookie_options(settings: Settings) -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "strict",
        "path": "/",
    }


@router.post("/magic-link", response_model=MagicLinkSent)
async def request_magic_link(
    body: MagicLinkRequest,
    repo: UserRepository = Depends(get_user_repository),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
):
    email = await request_login(repo, notifier, settings, body.department)
    return MagicLinkSent(message="Magic link sent successfully.", email=email)


@router.post("/verify", response_model=LoginResponse)
def verify_magic_link(
    body: VerifyRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
):
    result = consume_login_token(repo, settings, body.token)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result.session_token,
        max_age=settings.SESSION_TTL_HOURS * 60 * 60,
        **_cookie_options(settings),
    )
    return LoginResponse(message="Login successful!", user=result.identity)


@router.get("/session", response_model=Identity)
def check_session(identity: Identity = Depends(get_current_identity)):
    return identity


@router.post("/logout")
def logout_session(
    request: Request,
    response: Response,
    repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
):
    logout(repo, request.cookies.get(settings.SESSION_COOKIE_NAME))
    response.delete_cookie(settings.SESSION_COOKIE_NAME, **_cookie_options(settings))
    return {"success": True}
