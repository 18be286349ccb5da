"""Study statistics routes."""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.stats import DailyCompletionPayload, StatisticsResponse, SubjectStudyTimePayload
from study_planner.core.clock import local_today
from study_planner.db.deps import get_db
from study_planner.db.models.user import User
from study_planner.services import stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatisticsResponse)
def get_stats(
    start_date: date = Query(...),
    end_date: Optional[date] = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatisticsResponse:
    """Totals between start_date and end_date inclusive; end_date defaults to today."""
    end = end_date or local_today()
    stats = stats_service.get_stats(db, current_user.id, start_date, end)
    return StatisticsResponse(
        start_date=start_date,
        end_date=end,
        total_study_minutes=stats.total_study_minutes,
        total_tasks=stats.total_tasks,
        completed_tasks=stats.completed_tasks,
        completion_rate=stats.completion_rate,
        subject_distribution=[
            SubjectStudyTimePayload(**vars(item)) for item in stats.subject_distribution
        ],
        daily_trend=[DailyCompletionPayload(**vars(item)) for item in stats.daily_trend],
    )
