"""
SQLAlchemy Implementation of Intern Repository.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from intern_registry.core.exceptions import ConflictException
from intern_registry.domain.models.intern import Intern, InternAttachment, InternComment
from intern_registry.domain.repositories.intern_repository import InternRepository
from intern_registry.infrastructure.database import utcnow
from intern_registry.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyInternRepository(SQLAlchemyRepository[Intern], InternRepository):
    """Intern repository implementation using SQLAlchemy."""

    def get_by_id_number(self, id_number: str) -> Optional[Intern]:
        return self.db.query(Intern).filter(Intern.id_number == id_number).first()

    def list_by_department(self, department: Optional[str] = None) -> List[Intern]:
        query = self.db.query(Intern)
        if department:
            query = query.filter(Intern.department == department)
        return query.order_by(Intern.id).all()

    def create(self, values: Dict[str, Any], attachments: List[str]) -> Intern:
        intern = Intern(**values)
        intern.attachment_rows = [InternAttachment(path=path) for path in attachments]
        self.db.add(intern)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictException(
                f"Intern with ID number {values.get('id_number')} already exists",
                {"id_number": values.get("id_number")},
            )
        self.db.refresh(intern)
        return intern

    def apply_update(self, intern_id: int, values: Dict[str, Any], new_attachments: List[str]) -> None:
        try:
            if values:
                self.db.execute(
                    update(Intern)
                    .where(Intern.id == intern_id)
                    .values(**values, updated_at=utcnow())
                    .execution_options(synchronize_session=False)
                )
            self.db.add_all(
                [InternAttachment(intern_id=intern_id, path=path) for path in new_attachments]
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()

    def append_comment(
        self, intern_id: int, text: str, author: str, author_email: str, timestamp: datetime
    ) -> None:
        self.db.add(
            InternComment(
                intern_id=intern_id,
                text=text,
                author=author,
                author_email=author_email,
                timestamp=timestamp,
            )
        )
        self.db.commit()
        self.db.expire_all()

    def count_by_department(self, department: Optional[str] = None) -> Dict[str, int]:
        query = self.db.query(Intern.department, func.count(Intern.id))
        if department:
            query = query.filter(Intern.department == department)
        return {dept: count for dept, count in query.group_by(Intern.department).all()}

    def count_by_status(self, department: Optional[str] = None) -> Dict[str, int]:
        query = self.db.query(Intern.status, func.count(Intern.id))
        if department:
            query = query.filter(Intern.department == department)
        return {status: count for status, count in query.group_by(Intern.status).all()}
