"""Database utilities and models."""

from study_planner.db.base import Base
from study_planner.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
