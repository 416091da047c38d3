"""Report service — intern summaries and tabular exports (CSV / XLSX)."""

import io
import os
from datetime import date, datetime
from typing import List, Optional, Tuple

import pandas as pd
import pytz

from intern_registry.domain.models.intern import Intern
from intern_registry.domain.repositories.intern_repository import InternRepository
from intern_registry.domain.schemas.auth import Identity
from intern_registry.domain.schemas.intern import InternSummary
from intern_registry.domain.schemas.report import REPORT_COLUMNS, ReportRequest
from intern_registry.application.services.intern_service import intern_counts, list_interns

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_today(timezone: str) -> date:
    """Get current date in the configured timezone."""
    return datetime.now(pytz.timezone(timezone)).date()


def calculate_progress(start: Optional[date], end: Optional[date], today: date) -> str:
    """Internship progress as shown on reports.

    "N/A" without dates or for a non-positive duration, "Not Started" before
    the start, "COMPLETED" after the end, otherwise the elapsed share, e.g. "40%".
    """
    if not start or not end:
        return "N/A"
    if today < start:
        return "Not Started"
    if today > end:
        return "COMPLETED"

    total = (end - start).days
    if total <= 0:
        return "N/A"
    elapsed = (today - start).days
    percent = min(100.0, max(0.0, elapsed / total * 100))
    return f"{int(percent + 0.5)}%"


def _format_comments(intern: Intern) -> str:
    return " | ".join(
        f"{c.author} ({c.timestamp.date().isoformat()}): {c.text}" for c in intern.comments
    )


def _format_documents(intern: Intern) -> str:
    return "; ".join(os.path.basename(path) for path in intern.attachments)


def _row(intern: Intern, columns: List[str], today: date) -> dict:
    row = {}
    for key in columns:
        if key == "profile_picture":
            value = "Photo" if intern.profile_picture else "N/A"
        elif key == "progress":
            value = calculate_progress(intern.start_date, intern.end_date, today)
        elif key == "documents":
            value = _format_documents(intern)
        elif key == "comments":
            value = _format_comments(intern)
        elif key in ("start_date", "end_date"):
            value = getattr(intern, key).isoformat()
        else:
            value = getattr(intern, key)
        row[REPORT_COLUMNS[key]] = value
    return row


def select_interns(repo: InternRepository, actor: Identity, request: ReportRequest) -> List[Intern]:
    """Apply report filters on top of the actor's visible records."""
    interns = list_interns(repo, actor, request.department)
    if request.id_number:
        return [i for i in interns if i.id_number == request.id_number]
    if request.status:
        interns = [i for i in interns if i.status == request.status]
    if request.institution:
        interns = [i for i in interns if i.institution == request.institution]
    return interns


def build_report_frame(interns: List[Intern], columns: List[str], today: date) -> pd.DataFrame:
    headers = [REPORT_COLUMNS[key] for key in columns]
    return pd.DataFrame([_row(i, columns, today) for i in interns], columns=headers)


def export_report(
    repo: InternRepository,
    actor: Identity,
    request: ReportRequest,
    today: date,
) -> Tuple[bytes, str, str]:
    """Render the report. Returns (content, media type, file name)."""
    frame = build_report_frame(select_interns(repo, actor, request), request.columns, today)
    stamp = today.strftime("%Y%m%d")

    if request.format == "xlsx":
        buffer = io.BytesIO()
        frame.to_excel(buffer, index=False, sheet_name="Interns", engine="openpyxl")
        return buffer.getvalue(), XLSX_MEDIA_TYPE, f"interns_report_{stamp}.xlsx"

    return frame.to_csv(index=False).encode("utf-8"), "text/csv", f"interns_report_{stamp}.csv"


def get_intern_summary(repo: InternRepository, actor: Identity) -> InternSummary:
    """Totals per department and per status, scoped like listing."""
    counts = intern_counts(repo, actor)
    return InternSummary(
        total_interns=sum(counts["by_department"].values()),
        by_department=counts["by_department"],
        by_status=counts["by_status"],
    )
