"""Subject ORM model."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, func, text as sa_text

from study_planner.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"
    __table_args__ = (Index("ix_subjects_user_id", "user_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(length=50), nullable=False)
    color = Column(String(length=20), nullable=False, server_default=sa_text("'#3B82F6'"))
    is_default = Column(Boolean, nullable=False, server_default=sa_text("false"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
