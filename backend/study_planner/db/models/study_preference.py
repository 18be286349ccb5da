"""Study preference ORM model."""
from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, Time, func, text as sa_text

from study_planner.db.base import Base
from study_planner.db.types import JSONStringList


class StudyPhase(str, Enum):
    FOUNDATION = "foundation"
    STRENGTHEN = "strengthen"
    SPRINT = "sprint"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]

    @classmethod
    def coerce(cls, value: str | None) -> "StudyPhase":
        """Unknown or missing phases read back as foundation."""
        try:
            return cls(value)
        except ValueError:
            return cls.FOUNDATION


_PHASE_LABELS = {
    StudyPhase.FOUNDATION: "基础阶段",
    StudyPhase.STRENGTHEN: "强化阶段",
    StudyPhase.SPRINT: "冲刺阶段",
}


class StudyPreference(Base):
    __tablename__ = "study_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    daily_hours = Column(Integer, nullable=False, server_default=sa_text("8"))
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    lunch_break_start = Column(Time, nullable=False)
    lunch_break_end = Column(Time, nullable=False)
    study_phase = Column(String(length=20), nullable=False, server_default=sa_text("'foundation'"))
    focus_subjects = Column(JSONStringList, nullable=False, default=list)
    weak_subjects = Column(JSONStringList, nullable=False, default=list)
    exam_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def phase(self) -> StudyPhase:
        return StudyPhase.coerce(self.study_phase)
