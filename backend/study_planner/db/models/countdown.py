"""Countdown ORM model."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, func, text as sa_text

from study_planner.db.base import Base


class Countdown(Base):
    __tablename__ = "countdowns"
    __table_args__ = (Index("ix_countdowns_user_id", "user_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(length=100), nullable=False)
    target_time = Column(DateTime(timezone=True), nullable=False)
    notify_enabled = Column(Boolean, nullable=False, server_default=sa_text("true"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
