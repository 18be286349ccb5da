"""Task ORM model."""
from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text, Time, func, text as sa_text

from study_planner.db.base import Base


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    def next(self) -> "TaskStatus":
        """Cycle pending -> completed -> failed -> pending."""
        order = [TaskStatus.PENDING, TaskStatus.COMPLETED, TaskStatus.FAILED]
        return order[(order.index(self) + 1) % len(order)]


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_id_task_date", "user_id", "task_date"),
        Index("ix_tasks_status", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True)
    task_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    content = Column(Text, nullable=False)
    status = Column(String(length=20), nullable=False, server_default=sa_text("'pending'"))
    alarm_enabled = Column(Boolean, nullable=False, server_default=sa_text("false"))
    alarm_time = Column(Time, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def task_status(self) -> TaskStatus:
        try:
            return TaskStatus(self.status)
        except ValueError:
            return TaskStatus.PENDING
