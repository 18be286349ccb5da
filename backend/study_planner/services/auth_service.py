"""Credential checks and self-service account changes."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import bcrypt
from sqlalchemy.orm import Session

from study_planner.core.errors import Unauthenticated, ValidationError
from study_planner.core.security import hash_password, verify_password
from study_planner.db.models.user import User
from study_planner.services.session_store import create_session, revoke_session
from study_planner.services.user_service import find_user_by_username, normalize_display_name

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"

# Checked for unknown usernames so a miss costs the same bcrypt round as a wrong password.
_UNKNOWN_USER_HASH = bcrypt.hashpw(b"unknown-user", bcrypt.gensalt()).decode("utf-8")


@dataclass
class LoginResult:
    user: User
    session_token: str


def login(db: Session, username: str, password: str) -> LoginResult:
    """Verify credentials and open a new session."""
    user = find_user_by_username(db, username.strip())
    password_hash = user.password_hash if user is not None else _UNKNOWN_USER_HASH
    password_ok = verify_password(password, password_hash)
    if user is None or not password_ok:
        logger.info("Failed login attempt")
        raise Unauthenticated(INVALID_CREDENTIALS)

    token = create_session(db, user.id)
    return LoginResult(user=user, session_token=token)


def logout(db: Session, token: str) -> None:
    revoke_session(db, token)


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.add(user)
    db.commit()
    logger.info("Password changed for user %s", user.id)


def change_display_name(db: Session, user: User, new_display_name: str) -> User:
    user.display_name = normalize_display_name(new_display_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
