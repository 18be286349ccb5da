"""Schemas for daily reviews."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class ReviewResponse(BaseModel):
    id: int
    review_date: date
    feelings: Optional[str]
    difficulties: Optional[str]
    ai_suggestions: Optional[str]
    created_at: datetime


class ReviewSaveRequest(BaseModel):
    review_date: date
    feelings: Optional[str] = None
    difficulties: Optional[str] = None
