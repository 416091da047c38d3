"""Intern service — create, update, status, comments and deletion of intern records.

Merge policy on update:
- attachments are appended, never replaced
- the profile picture is replaced only when a new one is uploaded
- comments are untouched (they change only through add_comment)
- id_number is immutable; a supplied value is ignored

Role rules: Staff creates, updates and deletes records of their own
department; HR changes status; both comment and read.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog
from pydantic import ValidationError

from intern_registry.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
    RecordValidationException,
)
from intern_registry.domain.gateways import BlobReleaseError, BlobStore, UploadedFile
from intern_registry.domain.models.intern import (
    ATTACHMENT_SLOTS,
    PROFILE_PICTURE_SLOT,
    STATUSES,
    Intern,
)
from intern_registry.domain.models.user import ROLE_HR, ROLE_STAFF
from intern_registry.domain.repositories.intern_repository import InternRepository
from intern_registry.domain.schemas.auth import Identity
from intern_registry.domain.schemas.intern import PROFILE_FIELDS, CommentCreate, InternFields
from intern_registry.infrastructure.database import utcnow

logger = structlog.get_logger(__name__)

UPLOAD_SLOTS = ATTACHMENT_SLOTS + (PROFILE_PICTURE_SLOT,)


def _require_role(actor: Identity, role: str, action: str) -> None:
    if actor.role != role:
        raise ForbiddenException(
            f"Only {role} users may {action}", {"role": actor.role}
        )


def _check_scope(actor: Identity, department: str) -> None:
    """Staff may only touch records of their own department."""
    if actor.is_staff and department != actor.department:
        raise ForbiddenException(
            "Record belongs to another department",
            {"department": department},
        )


def _validate_fields(values: Mapping[str, Any], files: Mapping[str, UploadedFile]) -> InternFields:
    """Validate profile fields and upload slots together, reporting every bad field."""
    errors = [
        {"field": slot, "message": "Unknown upload field"}
        for slot in files
        if slot not in UPLOAD_SLOTS
    ]
    data = None
    try:
        data = InternFields.model_validate(dict(values))
    except ValidationError as e:
        errors.extend(RecordValidationException.from_pydantic(e).errors)
    if errors:
        raise RecordValidationException(errors)
    return data


def _release_quietly(blob_store: BlobStore, paths: List[str]) -> None:
    for path in paths:
        try:
            blob_store.release(path)
        except BlobReleaseError as e:
            logger.warning("Blob release failed", path=path, error=str(e))


def _store_uploads(
    blob_store: BlobStore, files: Mapping[str, UploadedFile]
) -> Tuple[List[str], Optional[str]]:
    """Store uploads; returns (attachments in slot order, profile picture path)."""
    stored: List[str] = []
    try:
        for slot in ATTACHMENT_SLOTS:
            if slot in files:
                stored.append(blob_store.store(files[slot].filename, files[slot].content))
        picture = None
        if PROFILE_PICTURE_SLOT in files:
            upload = files[PROFILE_PICTURE_SLOT]
            picture = blob_store.store(upload.filename, upload.content)
    except Exception:
        _release_quietly(blob_store, stored)
        raise
    return stored, picture


def get_intern(repo: InternRepository, actor: Identity, id_number: str) -> Intern:
    intern = repo.get_by_id_number(id_number)
    if intern is None:
        raise EntityNotFoundException("Intern not found", {"id_number": id_number})
    _check_scope(actor, intern.department)
    return intern


def list_interns(
    repo: InternRepository, actor: Identity, department: Optional[str] = None
) -> List[Intern]:
    """All interns, or one department's. Staff always see only their own department."""
    if actor.is_staff:
        department = actor.department
    return repo.list_by_department(department)


def create_intern(
    repo: InternRepository,
    blob_store: BlobStore,
    actor: Identity,
    fields: Mapping[str, Any],
    files: Optional[Mapping[str, UploadedFile]] = None,
) -> Intern:
    _require_role(actor, ROLE_STAFF, "add interns")
    files = files or {}
    data = _validate_fields(fields, files)
    _check_scope(actor, data.department)

    if repo.get_by_id_number(data.id_number):
        raise ConflictException(
            f"Intern with ID number {data.id_number} already exists",
            {"id_number": data.id_number},
        )

    attachments, picture = _store_uploads(blob_store, files)
    values = data.model_dump()
    values.update(
        profile_picture=picture or "",
        added_by_staff_email=actor.email,
    )
    try:
        intern = repo.create(values, attachments)
    except Exception:
        _release_quietly(blob_store, attachments + ([picture] if picture else []))
        raise

    logger.info(
        "Intern created",
        id_number=intern.id_number,
        department=intern.department,
        attachments=len(attachments),
        by=actor.email,
    )
    return intern


def update_intern(
    repo: InternRepository,
    blob_store: BlobStore,
    actor: Identity,
    id_number: str,
    fields: Mapping[str, Any],
    files: Optional[Mapping[str, UploadedFile]] = None,
) -> Intern:
    _require_role(actor, ROLE_STAFF, "update interns")
    files = files or {}
    intern = repo.get_by_id_number(id_number)
    if intern is None:
        raise EntityNotFoundException("Intern not found", {"id_number": id_number})
    _check_scope(actor, intern.department)

    changes = dict(fields)
    changes.pop("id_number", None)

    # Validate the record as it would look after the update
    merged = {name: getattr(intern, name) for name in PROFILE_FIELDS}
    merged.update(changes)
    data = _validate_fields(merged, files)
    _check_scope(actor, data.department)

    validated = data.model_dump()
    values = {name: validated[name] for name in changes}

    new_attachments, new_picture = _store_uploads(blob_store, files)
    old_picture = intern.profile_picture
    if new_picture:
        values["profile_picture"] = new_picture
    values["updated_by_staff_email"] = actor.email

    try:
        repo.apply_update(intern.id, values, new_attachments)
    except Exception:
        _release_quietly(blob_store, new_attachments + ([new_picture] if new_picture else []))
        raise

    if new_picture and old_picture:
        _release_quietly(blob_store, [old_picture])

    logger.info(
        "Intern updated",
        id_number=id_number,
        fields=sorted(values),
        new_attachments=len(new_attachments),
        by=actor.email,
    )
    return repo.get_by_id_number(id_number)


def set_status(repo: InternRepository, actor: Identity, id_number: str, new_status: str) -> Intern:
    _require_role(actor, ROLE_HR, "change intern status")
    if new_status not in STATUSES:
        raise RecordValidationException(
            [{"field": "status", "message": f"status must be one of {', '.join(STATUSES)}"}]
        )

    intern = repo.get_by_id_number(id_number)
    if intern is None:
        raise EntityNotFoundException("Intern not found", {"id_number": id_number})

    old_status = intern.status
    repo.apply_update(
        intern.id,
        {"status": new_status, "status_changed_by_hr_email": actor.email},
        [],
    )
    logger.info(
        "Intern status changed",
        id_number=id_number,
        old_status=old_status,
        new_status=new_status,
        by=actor.email,
    )
    return repo.get_by_id_number(id_number)


def add_comment(
    repo: InternRepository,
    actor: Identity,
    id_number: str,
    text: str,
    author: str,
    author_email: str,
) -> Intern:
    try:
        comment = CommentCreate(text=text, author=author, author_email=author_email)
    except ValidationError as e:
        raise RecordValidationException.from_pydantic(e)

    intern = get_intern(repo, actor, id_number)
    repo.append_comment(intern.id, comment.text, comment.author, comment.author_email, utcnow())
    logger.info("Comment added", id_number=id_number, author_email=comment.author_email)
    return repo.get_by_id_number(id_number)


def delete_intern(repo: InternRepository, blob_store: BlobStore, actor: Identity, id_number: str) -> None:
    """Delete a record. Its files are released best-effort; the row is authoritative."""
    _require_role(actor, ROLE_STAFF, "delete interns")
    intern = get_intern(repo, actor, id_number)

    paths = list(intern.attachments)
    if intern.profile_picture:
        paths.append(intern.profile_picture)
    _release_quietly(blob_store, paths)

    repo.delete(intern)
    logger.info("Intern deleted", id_number=id_number, files=len(paths), by=actor.email)


def intern_counts(repo: InternRepository, actor: Identity) -> Dict[str, Dict[str, int]]:
    department = actor.department if actor.is_staff else None
    return {
        "by_department": repo.count_by_department(department),
        "by_status": repo.count_by_status(department),
    }
