"""Intern API routes — records, documents, status and comments."""

from typing import Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import UploadFile

from intern_registry.application.services.intern_service import (
    add_comment,
    create_intern,
    delete_intern,
    get_intern,
    list_interns,
    set_status,
    update_intern,
)
from intern_registry.config import Settings
from intern_registry.core.exceptions import RecordValidationException, UnsupportedMediaTypeException
from intern_registry.domain.gateways import BlobStore, UploadedFile
from intern_registry.domain.repositories.intern_repository import InternRepository
from intern_registry.domain.schemas.auth import Identity
from intern_registry.domain.schemas.intern import CommentBody, InternRead, StatusUpdate
from intern_registry.interfaces.api.deps import get_current_identity, require_hr, require_staff
from intern_registry.interfaces.deps import get_blob_store, get_intern_repository, get_settings

router = APIRouter(prefix="/api/interns", tags=["Interns"])

FORM_MEDIA_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _read_multipart(
    request: Request, max_bytes: int
) -> Tuple[Dict[str, str], Dict[str, UploadedFile]]:
    """Split a multipart form into text fields and uploaded files.

    Anything other than a form body is refused; only a request without any
    body counts as an empty form.
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type not in FORM_MEDIA_TYPES:
        if media_type or await request.body():
            raise UnsupportedMediaTypeException(
                "Expected a multipart/form-data or url-encoded form",
                {"content_type": media_type or None},
            )
        return {}, {}

    form = await request.form()
    fields: Dict[str, str] = {}
    files: Dict[str, UploadedFile] = {}
    errors = []

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if not value.filename:
                continue  # empty file input
            content = await value.read()
            if len(content) > max_bytes:
                errors.append({"field": key, "message": f"File exceeds {max_bytes} bytes"})
                continue
            files[key] = UploadedFile(filename=value.filename, content=content)
        else:
            fields[key] = value

    if errors:
        raise RecordValidationException(errors)
    return fields, files


@router.get("", response_model=list[InternRead])
def list_all_interns(
    department: Optional[str] = None,
    repo: InternRepository = Depends(get_intern_repository),
    identity: Identity = Depends(get_current_identity),
):
    """List interns; Staff only see their own department."""
    return [InternRead.model_validate(i) for i in list_interns(repo, identity, department)]


@router.get("/{id_number}", response_model=InternRead)
def get_one_intern(
    id_number: str,
    repo: InternRepository = Depends(get_intern_repository),
    identity: Identity = Depends(get_current_identity),
):
    return InternRead.model_validate(get_intern(repo, identity, id_number))


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_intern(
    request: Request,
    repo: InternRepository = Depends(get_intern_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
    identity: Identity = Depends(require_staff),
):
    """Create an intern from a multipart form (profile fields + documents)."""
    fields, files = await _read_multipart(request, settings.MAX_UPLOAD_BYTES)
    intern = create_intern(repo, blob_store, identity, fields, files)
    return {"message": "Intern added successfully", "intern": InternRead.model_validate(intern)}


@router.put("/{id_number}")
async def edit_intern(
    id_number: str,
    request: Request,
    repo: InternRepository = Depends(get_intern_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
    identity: Identity = Depends(require_staff),
):
    """Update profile fields; new documents are appended to the existing ones."""
    fields, files = await _read_multipart(request, settings.MAX_UPLOAD_BYTES)
    intern = update_intern(repo, blob_store, identity, id_number, fields, files)
    return {"message": "Intern updated successfully", "intern": InternRead.model_validate(intern)}


@router.patch("/{id_number}/status")
def change_status(
    id_number: str,
    body: StatusUpdate,
    repo: InternRepository = Depends(get_intern_repository),
    identity: Identity = Depends(require_hr),
):
    intern = set_status(repo, identity, id_number, body.status)
    return {
        "message": f"Intern status updated to {intern.status} successfully",
        "intern": InternRead.model_validate(intern),
    }


@router.post("/{id_number}/comments")
def comment_on_intern(
    id_number: str,
    body: CommentBody,
    repo: InternRepository = Depends(get_intern_repository),
    identity: Identity = Depends(get_current_identity),
):
    intern = add_comment(
        repo,
        identity,
        id_number,
        text=body.text,
        author=body.author or identity.role,
        author_email=body.author_email or identity.email,
    )
    return {"message": "Comment added successfully", "intern": InternRead.model_validate(intern)}


@router.delete("/{id_number}")
def remove_intern(
    id_number: str,
    repo: InternRepository = Depends(get_intern_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    identity: Identity = Depends(require_staff),
):
    delete_intern(repo, blob_store, identity, id_number)
    return {"message": "Intern deleted successfully"}
