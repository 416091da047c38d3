"""Pydantic schemas for the Intern domain."""

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, ValidationInfo, field_validator

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class InternFields(BaseModel):
    """Complete set of required profile fields.

    Used to validate a create payload as-is and an update payload after it has
    been merged onto the stored record, so a partial update can never leave a
    required field blank.
    """

    id_number: RequiredText
    full_name: RequiredText
    institution: RequiredText
    department: RequiredText
    month_joined: RequiredText
    start_date: date
    end_date: date
    phone_number: RequiredText
    amount_paid: float = Field(ge=0)
    receipt_number: RequiredText
    institution_supervisor: RequiredText

    model_config = {"extra": "forbid"}

    @field_validator("end_date")
    @classmethod
    def check_end_date(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("end_date must not precede start_date")
        return v


PROFILE_FIELDS = tuple(InternFields.model_fields)


class CommentCreate(BaseModel):
    text: RequiredText
    author: RequiredText
    author_email: RequiredText


class CommentBody(BaseModel):
    """HTTP body for adding a comment; author fields default to the session user."""
    text: str
    author: Optional[str] = None
    author_email: Optional[str] = None


class CommentRead(BaseModel):
    text: str
    author: str
    author_email: str
    timestamp: datetime

    model_config = {"from_attributes": True}


class StatusUpdate(BaseModel):
    status: str


class InternRead(BaseModel):
    id_number: str
    full_name: str
    institution: str
    department: str
    month_joined: str
    start_date: date
    end_date: date
    phone_number: str
    amount_paid: float
    receipt_number: str
    institution_supervisor: str
    attachments: list[str] = []
    profile_picture: str = ""
    comments: list[CommentRead] = []
    status: str
    added_by_staff_email: Optional[str] = None
    updated_by_staff_email: Optional[str] = None
    status_changed_by_hr_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InternSummary(BaseModel):
    total_interns: int
    by_department: dict[str, int]
    by_status: dict[str, int]
