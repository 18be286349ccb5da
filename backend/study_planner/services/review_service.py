"""Daily review records."""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from study_planner.db.models.daily_review import DailyReview

DEFAULT_HISTORY_LIMIT = 30


def get_review(db: Session, user_id: int, review_date: date) -> Optional[DailyReview]:
    return (
        db.query(DailyReview)
        .filter(DailyReview.user_id == user_id, DailyReview.review_date == review_date)
        .first()
    )


def save_review(
    db: Session,
    user_id: int,
    review_date: date,
    *,
    feelings: Optional[str] = None,
    difficulties: Optional[str] = None,
) -> DailyReview:
    """Create the review for review_date or overwrite its feelings and difficulties."""
    review = get_review(db, user_id, review_date)
    if review is None:
        review = DailyReview(user_id=user_id, review_date=review_date)
    review.feelings = feelings
    review.difficulties = difficulties
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def review_history(db: Session, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> List[DailyReview]:
    return (
        db.query(DailyReview)
        .filter(DailyReview.user_id == user_id)
        .order_by(desc(DailyReview.review_date))
        .limit(limit)
        .all()
    )
