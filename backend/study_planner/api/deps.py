"""Authorization gate dependencies shared by the routers."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from study_planner.core.context import user_id_ctx_var
from study_planner.core.errors import InsufficientRole, SelfActionForbidden, Unauthenticated
from study_planner.db.deps import get_db
from study_planner.db.models.user import User, UserRole
from study_planner.services.session_store import validate_session

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return credentials.credentials


async def get_current_user(
    request: Request,
    token: str = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to its user and bind the id to the request context."""
    user = await run_in_threadpool(validate_session, db, token)
    user_id_ctx_var.set(user.id)
    request.state.user_id = user.id
    return user


def require_role(role: UserRole) -> Callable[..., User]:
    """Build a dependency that admits only users holding role."""

    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.user_role is not role:
            logger.info("User %s denied: requires role %s", current_user.id, role.value)
            raise InsufficientRole()
        return current_user

    return _dependency


def ensure_not_self(current_user: User, target_user_id: int) -> None:
    if current_user.id == target_user_id:
        raise SelfActionForbidden()
