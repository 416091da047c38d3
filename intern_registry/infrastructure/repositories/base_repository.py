"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Generic, List, Type, TypeVar

from sqlalchemy.orm import Session

from intern_registry.domain.repositories.base import BaseRepository
from intern_registry.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def list_all(self) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id).all()

    def add(self, obj: ModelType) -> ModelType:
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: ModelType) -> None:
        self.db.delete(obj)
        self.db.commit()

    def _execute(self, stmt) -> int:
        """Run a bulk statement, commit, and return the affected row count."""
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount
