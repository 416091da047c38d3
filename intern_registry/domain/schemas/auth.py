"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from intern_registry.domain.models.user import ROLE_STAFF, ROLES


def normalize_email(value: str) -> str:
    return value.strip().lower()


class Identity(BaseModel):
    """Who is behind a session."""
    email: str
    role: str
    department: Optional[str] = None

    model_config = {"from_attributes": True}

    @property
    def is_staff(self) -> bool:
        return self.role == ROLE_STAFF


class UserCreate(BaseModel):
    email: str
    role: str
    department: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = normalize_email(v)
        if not v or "@" not in v:
            raise ValueError("a valid email address is required")
        return v

    @field_validator("role")
    @classmethod
    def check_role(cls, v: str) -> str:
        if v not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}")
        return v

    @field_validator("department")
    @classmethod
    def strip_department(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def staff_needs_department(self):
        if self.role == ROLE_STAFF and not self.department:
            raise ValueError("department is required for Staff users")
        return self


class UserRead(BaseModel):
    id: int
    email: str
    role: str
    department: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DepartmentUpdate(BaseModel):
    email: str
    department: Optional[str] = None


class MagicLinkRequest(BaseModel):
    department: str


class MagicLinkSent(BaseModel):
    message: str
    email: str


class VerifyRequest(BaseModel):
    token: str


class LoginResponse(BaseModel):
    message: str
    user: Identity


class LoginResult(BaseModel):
    """Outcome of consuming a magic link: identity plus the new session credential."""
    identity: Identity
    session_token: str
    session_expires: datetime
