"""FastAPI application — factory entry point.

Run with: uvicorn intern_registry.main:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine

from intern_registry.config import Settings
from intern_registry.core.exceptions import AppError, global_exception_handler
from intern_registry.core.logging import configure_logging
from intern_registry.core.middleware import setup_middleware
from intern_registry.domain.gateways import BlobStore, Notifier
from intern_registry.infrastructure.blob_store import LocalBlobStore
from intern_registry.infrastructure.database import Base, create_db_engine, create_session_factory
from intern_registry.infrastructure.mailers import build_notifier

# Import all models so SQLAlchemy knows about them
from intern_registry.domain.models.intern import Intern, InternAttachment, InternComment  # noqa: F401
from intern_registry.domain.models.user import User

# Import routers
from intern_registry.interfaces.api.auth import router as auth_router
from intern_registry.interfaces.api.interns import router as interns_router
from intern_registry.interfaces.api.reports import router as reports_router
from intern_registry.interfaces.api.users import router as users_router

logger = structlog.get_logger(__name__)

APP_NAME = "Intern Registry"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    from intern_registry.application.services.user_service import ensure_bootstrap_user
    from intern_registry.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    settings: Settings = app.state.settings
    logger.info("Starting Intern Registry...", env=settings.ENVIRONMENT)

    # Create DB tables (no migration tooling)
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Database tables created/verified")

    if settings.BOOTSTRAP_HR_EMAIL:
        db = app.state.session_factory()
        try:
            user = ensure_bootstrap_user(SQLAlchemyUserRepository(db, User), settings.BOOTSTRAP_HR_EMAIL)
            logger.info("Bootstrap HR user ready", email=user.email)
        finally:
            db.close()

    yield

    app.state.engine.dispose()
    logger.info("Intern Registry stopped")


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    notifier: Optional[Notifier] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """Build the application. Collaborators are created once here and kept on app.state."""
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title=APP_NAME,
        description="API Backend — intern records, documents and magic-link sign-in",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    engine = engine or create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.notifier = notifier or build_notifier(settings)
    app.state.blob_store = blob_store or LocalBlobStore(settings.UPLOAD_DIR)

    # Setup Middleware (Correlation ID, Logging)
    setup_middleware(app)

    # Global Exception Handling
    app.add_exception_handler(AppError, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # The session cookie needs an explicit origin, "*" is not allowed with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth_router)
    app.include_router(interns_router)
    app.include_router(users_router)
    app.include_router(reports_router)

    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

    @app.get("/")
    def root():
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app
