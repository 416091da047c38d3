"""Intern domain model — maps to the 'interns' table and its child tables.

Attachments and comments are child rows so that appending one is a single
INSERT; concurrent updates can never drop each other's files or comments.
"""

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from intern_registry.infrastructure.database import Base, UTCDateTime, utcnow

STATUS_ACTIVE = "Active"
STATUSES = ("Active", "Suspended", "Expelled", "Completed")

# Upload slots stored as attachments, in attachment order
ATTACHMENT_SLOTS = ("letter", "id_copy", "acceptance_letter", "receipt_copy")
PROFILE_PICTURE_SLOT = "profile_picture"


class Intern(Base):
    __tablename__ = "interns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_number = Column(String(100), unique=True, nullable=False, index=True)

    # Profile
    full_name = Column(String(300), nullable=False)
    institution = Column(String(300), nullable=False, index=True)
    department = Column(String(200), nullable=False, index=True)
    month_joined = Column(String(50), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    phone_number = Column(String(50), nullable=False)
    amount_paid = Column(Float, nullable=False)
    receipt_number = Column(String(100), nullable=False)
    institution_supervisor = Column(String(300), nullable=False)

    profile_picture = Column(String(500), nullable=False, default="")
    status = Column(String(20), nullable=False, default=STATUS_ACTIVE, index=True)

    # Audit
    added_by_staff_email = Column(String(255), nullable=True)
    updated_by_staff_email = Column(String(255), nullable=True)
    status_changed_by_hr_email = Column(String(255), nullable=True)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    attachment_rows = relationship(
        "InternAttachment",
        order_by="InternAttachment.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    comments = relationship(
        "InternComment",
        order_by="InternComment.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def attachments(self) -> list[str]:
        return [row.path for row in self.attachment_rows]

    def __repr__(self):
        return f"<Intern {self.id_number} - {self.full_name}>"


class InternAttachment(Base):
    __tablename__ = "intern_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    intern_id = Column(Integer, ForeignKey("interns.id", ondelete="CASCADE"), nullable=False, index=True)
    path = Column(String(500), nullable=False)
    created_at = Column(UTCDateTime, default=utcnow)

    def __repr__(self):
        return f"<InternAttachment {self.path}>"


class InternComment(Base):
    __tablename__ = "intern_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    intern_id = Column(Integer, ForeignKey("interns.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    author = Column(String(200), nullable=False)
    author_email = Column(String(255), nullable=False)
    timestamp = Column(UTCDateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<InternComment by {self.author_email}>"
