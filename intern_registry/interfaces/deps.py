"""
API Dependencies — collaborators built once in create_app and kept on app.state.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from intern_registry.config import Settings
from intern_registry.domain.gateways import BlobStore, Notifier
from intern_registry.domain.models.intern import Intern
from intern_registry.domain.models.user import User
from intern_registry.domain.repositories.intern_repository import InternRepository
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.infrastructure.database import get_db
from intern_registry.infrastructure.repositories.intern_repository import SQLAlchemyInternRepository
from intern_registry.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_intern_repository(db: Session = Depends(get_db)) -> InternRepository:
    """Get intern repository instance."""
    return SQLAlchemyInternRepository(db, Intern)
