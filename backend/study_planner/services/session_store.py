"""Session lifecycle: issue, validate and revoke opaque bearer tokens.

Validation always reads the database, so a committed revoke is observed by
every later validate regardless of which worker thread serves it. Expired rows
never authenticate; a read that finds one deletes it.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from study_planner.core.clock import ensure_utc, utcnow
from study_planner.core.config import settings
from study_planner.core.errors import Unauthenticated
from study_planner.core.security import new_session_token
from study_planner.db.models.user import User
from study_planner.db.models.user_session import UserSession

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(days=settings.session_ttl_days)


def create_session(db: Session, user_id: int, *, now: datetime | None = None) -> str:
    """Record a new session for user_id and return its token."""
    issued_at = now or utcnow()
    token = new_session_token()
    session_row = UserSession(
        user_id=user_id,
        session_token=token,
        expires_at=issued_at + SESSION_TTL,
        created_at=issued_at,
    )
    db.add(session_row)
    db.commit()
    logger.info("Session issued for user %s", user_id)
    return token


def validate_session(db: Session, token: str | None, *, now: datetime | None = None) -> User:
    """Resolve token to its user or raise Unauthenticated.

    Absent and expired tokens are rejected with the same message.
    """
    if not token:
        raise Unauthenticated()

    current = now or utcnow()
    session_row = db.query(UserSession).filter(UserSession.session_token == token).first()
    if session_row is None:
        raise Unauthenticated()

    if ensure_utc(session_row.expires_at) <= current:
        db.delete(session_row)
        db.commit()
        logger.debug("Reaped expired session for user %s", session_row.user_id)
        raise Unauthenticated()

    user = db.get(User, session_row.user_id)
    if user is None:
        raise Unauthenticated()
    return user


def revoke_session(db: Session, token: str) -> None:
    """Delete the session for token; unknown tokens are ignored."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.session_token == token)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Session revoked")


def revoke_user_sessions(db: Session, user_id: int) -> int:
    """Delete every session held by user_id and return how many were removed."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def purge_expired_sessions(db: Session, *, now: datetime | None = None) -> int:
    """Bulk delete sessions whose expiry has passed."""
    current = now or utcnow()
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= current)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
