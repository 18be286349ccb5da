"""User ORM model."""
from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, Text, func, text as sa_text

from study_planner.db.base import Base


class UserRole(str, Enum):
    """Closed set of account roles."""

    USER = "user"
    ADMIN = "admin"

    @property
    def label(self) -> str:
        return "管理员" if self is UserRole.ADMIN else "普通用户"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(length=50), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    display_name = Column(String(length=50), nullable=False)
    role = Column(String(length=20), nullable=False, server_default=sa_text("'user'"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def user_role(self) -> UserRole:
        try:
            return UserRole(self.role)
        except ValueError:
            return UserRole.USER
