"""Daily review routes."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.review import ReviewResponse, ReviewSaveRequest
from study_planner.db.deps import get_db
from study_planner.db.models.daily_review import DailyReview
from study_planner.db.models.user import User
from study_planner.services import review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _serialize_review(review: DailyReview) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        review_date=review.review_date,
        feelings=review.feelings,
        difficulties=review.difficulties,
        ai_suggestions=review.ai_suggestions,
        created_at=review.created_at,
    )


@router.get("/history", response_model=List[ReviewResponse])
def review_history(
    limit: int = Query(review_service.DEFAULT_HISTORY_LIMIT, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[ReviewResponse]:
    return [_serialize_review(review) for review in review_service.review_history(db, current_user.id, limit)]


@router.get("/{review_date}", response_model=Optional[ReviewResponse])
def get_review(
    review_date: date,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Optional[ReviewResponse]:
    """Return the review for the day, or null when none was written."""
    review = review_service.get_review(db, current_user.id, review_date)
    return _serialize_review(review) if review else None


@router.put("", response_model=ReviewResponse)
def save_review(
    payload: ReviewSaveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    review = review_service.save_review(
        db,
        current_user.id,
        payload.review_date,
        feelings=payload.feelings,
        difficulties=payload.difficulties,
    )
    return _serialize_review(review)
