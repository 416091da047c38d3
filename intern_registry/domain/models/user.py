"""User domain model — maps to the 'users' table."""

from sqlalchemy import Column, Integer, String

from intern_registry.infrastructure.database import Base, UTCDateTime, utcnow

ROLE_STAFF = "Staff"
ROLE_HR = "HR"
ROLES = (ROLE_STAFF, ROLE_HR)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)  # stored lower-cased
    role = Column(String(20), nullable=False)  # Staff, HR
    department = Column(String(200), nullable=True, index=True)

    # Magic link: at most one pending token
    magic_link_token = Column(String(128), nullable=True, unique=True, index=True)
    magic_link_token_expires = Column(UTCDateTime, nullable=True)

    # Session: at most one active session
    session_token = Column(String(128), nullable=True, unique=True, index=True)
    session_expires = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
