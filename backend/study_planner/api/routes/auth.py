"""Login, logout and self-service account routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user, get_session_token
from study_planner.api.schemas.auth import (
    DisplayNameUpdateRequest,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    StatusResponse,
    UserResponse,
)
from study_planner.db.deps import get_db
from study_planner.db.models.user import User
from study_planner.observability.metrics import log_metric
from study_planner.observability.tracing import trace
from study_planner.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def serialize_user(user: User) -> UserResponse:
    role = user.user_role
    return UserResponse(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        role=role.value,
        role_label=role.label,
        created_at=user.created_at,
    )


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, http_request: Request, db: Session = Depends(get_db)) -> LoginResponse:
    """Exchange credentials for a session token."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("auth.login", metadata={"route": "/auth/login"}, request_id=request_id):
        try:
            result = auth_service.login(db, payload.username, payload.password)
        except Exception:
            log_metric("auth.login.failure", 1)
            raise
    log_metric("auth.login.success", 1, metadata={"user_id": str(result.user.id)})
    return LoginResponse(user=serialize_user(result.user), session_token=result.session_token)


@router.post("/logout", response_model=StatusResponse)
def logout(
    http_request: Request,
    token: str = Depends(get_session_token),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatusResponse:
    auth_service.logout(db, token)
    return StatusResponse(request_id=http_request.state.request_id)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return serialize_user(current_user)


@router.post("/password", response_model=StatusResponse)
def change_password(
    payload: PasswordChangeRequest,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatusResponse:
    auth_service.change_password(db, current_user, payload.current_password, payload.new_password)
    return StatusResponse(request_id=http_request.state.request_id)


@router.patch("/display-name", response_model=UserResponse)
def change_display_name(
    payload: DisplayNameUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    return serialize_user(auth_service.change_display_name(db, current_user, payload.display_name))
