"""Report API routes — intern summary counters and CSV/XLSX exports."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import ValidationError

from intern_registry.application.services.report_service import (
    export_report,
    get_intern_summary,
    get_today,
)
from intern_registry.config import Settings
from intern_registry.core.exceptions import RecordValidationException
from intern_registry.domain.repositories.intern_repository import InternRepository
from intern_registry.domain.schemas.auth import Identity
from intern_registry.domain.schemas.intern import InternSummary
from intern_registry.domain.schemas.report import REPORT_COLUMNS, ReportRequest
from intern_registry.interfaces.api.deps import get_current_identity
from intern_registry.interfaces.deps import get_intern_repository, get_settings

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/summary", response_model=InternSummary)
def intern_summary(
    repo: InternRepository = Depends(get_intern_repository),
    identity: Identity = Depends(get_current_identity),
):
    """Intern totals per department and per status."""
    return get_intern_summary(repo, identity)


@router.get("/interns")
def intern_report(
    columns: List[str] = Query(default=list(REPORT_COLUMNS)),
    department: Optional[str] = None,
    status: Optional[str] = None,
    institution: Optional[str] = None,
    id_number: Optional[str] = None,
    format: str = "csv",
    repo: InternRepository = Depends(get_intern_repository),
    settings: Settings = Depends(get_settings),
    identity: Identity = Depends(get_current_identity),
):
    """Download a report of the selected columns as CSV or XLSX."""
    try:
        request = ReportRequest(
            columns=columns,
            department=department,
            status=status,
            institution=institution,
            id_number=id_number,
            format=format,
        )
    except ValidationError as e:
        raise RecordValidationException.from_pydantic(e)

    content, media_type, filename = export_report(
        repo, identity, request, get_today(settings.TIMEZONE)
    )
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
