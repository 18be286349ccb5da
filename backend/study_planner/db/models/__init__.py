"""ORM models exposed for metadata discovery."""
from study_planner.db.models.ai_config import AIConfig
from study_planner.db.models.countdown import Countdown
from study_planner.db.models.daily_review import DailyReview
from study_planner.db.models.pomodoro_session import PomodoroSession, PomodoroStatus
from study_planner.db.models.study_preference import StudyPhase, StudyPreference
from study_planner.db.models.subject import Subject
from study_planner.db.models.task import Task, TaskStatus
from study_planner.db.models.user import User, UserRole
from study_planner.db.models.user_session import UserSession

__all__ = [
    "AIConfig",
    "Countdown",
    "DailyReview",
    "PomodoroSession",
    "PomodoroStatus",
    "StudyPhase",
    "StudyPreference",
    "Subject",
    "Task",
    "TaskStatus",
    "User",
    "UserRole",
    "UserSession",
]
