"""Pydantic schemas for intern reports."""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

# Column key → header, in report order
REPORT_COLUMNS = {
    "profile_picture": "Photo",
    "full_name": "Full Name",
    "id_number": "ID Number",
    "institution": "Institution",
    "department": "Department",
    "month_joined": "Month Joined",
    "start_date": "Start Date",
    "end_date": "End Date",
    "phone_number": "Phone",
    "amount_paid": "Amount Paid",
    "receipt_number": "Receipt",
    "institution_supervisor": "Supervisor",
    "status": "Status",
    "progress": "Progress",
    "documents": "Documents",
    "comments": "Comments",
}


class ReportRequest(BaseModel):
    columns: list[str] = list(REPORT_COLUMNS)
    department: Optional[str] = None
    status: Optional[str] = None
    institution: Optional[str] = None
    id_number: Optional[str] = None
    format: Literal["csv", "xlsx"] = "csv"

    @field_validator("columns")
    @classmethod
    def check_columns(cls, v: list[str]) -> list[str]:
        unknown = [f for f in v if f not in REPORT_COLUMNS]
        if unknown:
            raise ValueError(f"unknown report columns: {', '.join(unknown)}")
        if not v:
            raise ValueError("at least one report column is required")
        # keep the canonical column order
        return [key for key in REPORT_COLUMNS if key in v]
