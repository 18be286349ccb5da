"""Countdown records and remaining-time arithmetic."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List

from sqlalchemy import asc
from sqlalchemy.orm import Session

from study_planner.core.clock import ensure_utc, utcnow
from study_planner.core.errors import NotFound, ValidationError
from study_planner.db.models.countdown import Countdown


@dataclass(frozen=True)
class Remaining:
    days: int
    hours: int
    minutes: int
    is_expired: bool


def remaining_until(target_time: datetime, *, now: datetime | None = None) -> Remaining:
    """Split the time left before target_time into whole days, hours and minutes."""
    delta = ensure_utc(target_time) - (now or utcnow())
    total_seconds = int(delta.total_seconds())
    if total_seconds <= 0:
        return Remaining(days=0, hours=0, minutes=0, is_expired=True)
    days, rest = divmod(total_seconds, 86400)
    hours, rest = divmod(rest, 3600)
    return Remaining(days=days, hours=hours, minutes=rest // 60, is_expired=False)


def list_countdowns(db: Session, user_id: int) -> List[Countdown]:
    return (
        db.query(Countdown)
        .filter(Countdown.user_id == user_id)
        .order_by(asc(Countdown.target_time), asc(Countdown.id))
        .all()
    )


def create_countdown(
    db: Session,
    user_id: int,
    *,
    name: str,
    target_time: datetime,
    notify_enabled: bool = True,
) -> Countdown:
    name = name.strip()
    if not name:
        raise ValidationError("Countdown name must not be empty")
    countdown = Countdown(
        user_id=user_id,
        name=name,
        target_time=ensure_utc(target_time),
        notify_enabled=notify_enabled,
    )
    db.add(countdown)
    db.commit()
    db.refresh(countdown)
    return countdown


def delete_countdown(db: Session, user_id: int, countdown_id: int) -> None:
    deleted = (
        db.query(Countdown)
        .filter(Countdown.id == countdown_id, Countdown.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if not deleted:
        raise NotFound("Countdown not found")
