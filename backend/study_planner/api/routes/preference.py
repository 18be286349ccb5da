"""Study preference routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.preference import PreferenceResponse, PreferenceSaveRequest
from study_planner.core.clock import local_today
from study_planner.db.deps import get_db
from study_planner.db.models.user import User
from study_planner.services import preference_service
from study_planner.services.preference_service import PreferenceView

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _serialize_preference(view: PreferenceView) -> PreferenceResponse:
    return PreferenceResponse(
        id=view.id,
        daily_hours=view.daily_hours,
        start_time=view.start_time.strftime("%H:%M"),
        end_time=view.end_time.strftime("%H:%M"),
        lunch_break_start=view.lunch_break_start.strftime("%H:%M"),
        lunch_break_end=view.lunch_break_end.strftime("%H:%M"),
        study_phase=view.study_phase.value,
        study_phase_label=view.study_phase.label,
        focus_subjects=view.focus_subjects,
        weak_subjects=view.weak_subjects,
        exam_date=view.exam_date.isoformat() if view.exam_date else None,
        days_until_exam=view.days_until_exam(local_today()),
        notes=view.notes,
    )


@router.get("", response_model=PreferenceResponse)
def get_preference(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PreferenceResponse:
    return _serialize_preference(preference_service.get_preference(db, current_user.id))


@router.put("", response_model=PreferenceResponse)
def save_preference(
    payload: PreferenceSaveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PreferenceResponse:
    view = preference_service.save_preference(db, current_user.id, **payload.model_dump())
    return _serialize_preference(view)
