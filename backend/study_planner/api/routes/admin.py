"""User administration routes (admin only)."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from study_planner.api.deps import ensure_not_self, require_role
from study_planner.api.routes.auth import serialize_user
from study_planner.api.schemas.auth import PasswordResetRequest, StatusResponse, UserCreateRequest, UserResponse
from study_planner.db.deps import get_db
from study_planner.db.models.user import User, UserRole
from study_planner.observability.metrics import log_metric
from study_planner.observability.tracing import trace
from study_planner.services import user_service

router = APIRouter(prefix="/admin/users", tags=["admin"])

require_admin = require_role(UserRole.ADMIN)


@router.get("", response_model=List[UserResponse])
def list_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[UserResponse]:
    return [serialize_user(user) for user in user_service.list_users(db)]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    http_request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserResponse:
    with trace("admin.user.create", metadata={"role": payload.role}, request_id=http_request.state.request_id):
        user = user_service.create_user(
            db,
            username=payload.username,
            password=payload.password,
            display_name=payload.display_name,
            role=UserRole(payload.role),
        )
    log_metric("admin.user.created", 1, metadata={"role": payload.role})
    return serialize_user(user)


@router.delete("/{user_id}", response_model=StatusResponse)
def delete_user(
    user_id: int,
    http_request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> StatusResponse:
    ensure_not_self(admin, user_id)
    with trace("admin.user.delete", metadata={"target_user_id": str(user_id)}, request_id=http_request.state.request_id):
        user_service.delete_user(db, user_id)
    return StatusResponse(request_id=http_request.state.request_id)


@router.post("/{user_id}/password", response_model=StatusResponse)
def reset_password(
    user_id: int,
    payload: PasswordResetRequest,
    http_request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> StatusResponse:
    user_service.reset_user_password(db, user_id, payload.new_password)
    return StatusResponse(request_id=http_request.state.request_id)
