"""Focus session (pomodoro) routes."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.pomodoro import PomodoroFinishRequest, PomodoroResponse, PomodoroStartRequest
from study_planner.core.clock import ensure_utc
from study_planner.db.deps import get_db
from study_planner.db.models.user import User
from study_planner.observability.metrics import log_metric
from study_planner.services import pomodoro_service
from study_planner.services.pomodoro_service import PomodoroRecord

router = APIRouter(prefix="/pomodoros", tags=["pomodoro"])


def _serialize_pomodoro(record: PomodoroRecord) -> PomodoroResponse:
    session_row = record.session
    return PomodoroResponse(
        id=session_row.id,
        subject_id=session_row.subject_id,
        subject_name=record.subject_name,
        task_id=session_row.task_id,
        start_time=ensure_utc(session_row.start_time),
        end_time=ensure_utc(session_row.end_time) if session_row.end_time else None,
        duration_minutes=session_row.duration_minutes,
        status=session_row.status,
    )


@router.post("", response_model=PomodoroResponse, status_code=status.HTTP_201_CREATED)
def start_pomodoro(
    payload: PomodoroStartRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PomodoroResponse:
    record = pomodoro_service.start_pomodoro(
        db, current_user.id, subject_id=payload.subject_id, task_id=payload.task_id
    )
    return _serialize_pomodoro(record)


@router.post("/{pomodoro_id}/complete", response_model=PomodoroResponse)
def complete_pomodoro(
    pomodoro_id: int,
    payload: PomodoroFinishRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PomodoroResponse:
    record = pomodoro_service.complete_pomodoro(db, current_user.id, pomodoro_id, payload.duration_minutes)
    log_metric("pomodoro.completed.minutes", payload.duration_minutes, metadata={"user_id": str(current_user.id)})
    return _serialize_pomodoro(record)


@router.post("/{pomodoro_id}/cancel", response_model=PomodoroResponse)
def cancel_pomodoro(
    pomodoro_id: int,
    payload: PomodoroFinishRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PomodoroResponse:
    record = pomodoro_service.cancel_pomodoro(db, current_user.id, pomodoro_id, payload.duration_minutes)
    return _serialize_pomodoro(record)


@router.get("", response_model=List[PomodoroResponse])
def pomodoro_history(
    limit: int = Query(pomodoro_service.DEFAULT_HISTORY_LIMIT, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[PomodoroResponse]:
    return [_serialize_pomodoro(record) for record in pomodoro_service.pomodoro_history(db, current_user.id, limit)]
