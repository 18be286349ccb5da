"""Countdown routes."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.auth import StatusResponse
from study_planner.api.schemas.countdown import CountdownCreateRequest, CountdownResponse
from study_planner.core.clock import ensure_utc, utcnow
from study_planner.db.deps import get_db
from study_planner.db.models.countdown import Countdown
from study_planner.db.models.user import User
from study_planner.services import countdown_service

router = APIRouter(prefix="/countdowns", tags=["countdowns"])


def _serialize_countdown(countdown: Countdown, now) -> CountdownResponse:
    remaining = countdown_service.remaining_until(countdown.target_time, now=now)
    return CountdownResponse(
        id=countdown.id,
        name=countdown.name,
        target_time=ensure_utc(countdown.target_time),
        notify_enabled=bool(countdown.notify_enabled),
        remaining_days=remaining.days,
        remaining_hours=remaining.hours,
        remaining_minutes=remaining.minutes,
        is_expired=remaining.is_expired,
        created_at=countdown.created_at,
    )


@router.get("", response_model=List[CountdownResponse])
def list_countdowns(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[CountdownResponse]:
    now = utcnow()
    return [_serialize_countdown(item, now) for item in countdown_service.list_countdowns(db, current_user.id)]


@router.post("", response_model=CountdownResponse, status_code=status.HTTP_201_CREATED)
def create_countdown(
    payload: CountdownCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CountdownResponse:
    countdown = countdown_service.create_countdown(
        db,
        current_user.id,
        name=payload.name,
        target_time=payload.target_time,
        notify_enabled=payload.notify_enabled,
    )
    return _serialize_countdown(countdown, utcnow())


@router.delete("/{countdown_id}", response_model=StatusResponse)
def delete_countdown(
    countdown_id: int,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatusResponse:
    countdown_service.delete_countdown(db, current_user.id, countdown_id)
    return StatusResponse(request_id=http_request.state.request_id)
