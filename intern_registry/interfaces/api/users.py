"""User administration API routes — HR only."""

from fastapi import APIRouter, Depends, status

from intern_registry.application.services.user_service import (
    create_user,
    list_users,
    update_department,
)
from intern_registry.domain.repositories.user_repository import UserRepository
from intern_registry.domain.schemas.auth import DepartmentUpdate, Identity, UserCreate, UserRead
from intern_registry.interfaces.api.deps import require_hr
from intern_registry.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserRead])
def list_all_users(
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_hr),
):
    return [UserRead.model_validate(u) for u in list_users(repo)]


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(
    body: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_hr),
):
    user = create_user(repo, email=body.email, role=body.role, department=body.department)
    return UserRead.model_validate(user)


@router.patch("/department", response_model=UserRead)
def change_department(
    body: DepartmentUpdate,
    repo: UserRepository = Depends(get_user_repository),
    identity: Identity = Depends(require_hr),
):
    user = update_department(repo, body.email, body.department)
    return UserRead.model_validate(user)
