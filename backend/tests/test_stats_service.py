from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from study_planner.core.errors import ValidationError
from study_planner.db.models.pomodoro_session import PomodoroSession
from study_planner.db.models.subject import Subject
from study_planner.db.models.task import Task
from study_planner.db.models.user import User
from study_planner.services.stats_service import get_stats


def _seed(db) -> tuple[int, int, int]:
    user = User(username="stats", password_hash="x", display_name="stats", role="user")
    db.add(user)
    db.commit()
    math = Subject(user_id=user.id, name="数学", color="#3B82F6", is_default=True)
    english = Subject(user_id=user.id, name="英语", color="#10B981", is_default=True)
    db.add_all([math, english])
    db.commit()

    def focus(subject_id, day, minutes, status="completed"):
        return PomodoroSession(
            user_id=user.id,
            subject_id=subject_id,
            start_time=datetime(2026, 5, day, 9, 0, tzinfo=timezone.utc),
            duration_minutes=minutes,
            status=status,
        )

    db.add_all(
        [
            focus(math.id, 10, 50),
            focus(math.id, 11, 25),
            focus(english.id, 11, 30),
            focus(english.id, 11, 45, status="cancelled"),
            focus(math.id, 20, 100),
        ]
    )

    def task(day, status):
        return Task(
            user_id=user.id,
            task_date=date(2026, 5, day),
            start_time=time(8, 0),
            end_time=time(9, 0),
            content="x",
            status=status,
            alarm_enabled=False,
        )

    db.add_all([task(10, "completed"), task(10, "pending"), task(11, "completed"), task(11, "failed"), task(25, "completed")])
    db.commit()
    return user.id, math.id, english.id


def test_stats_over_range(db) -> None:
    user_id, math_id, english_id = _seed(db)

    stats = get_stats(db, user_id, date(2026, 5, 10), date(2026, 5, 11))

    assert stats.total_study_minutes == 105
    assert stats.total_tasks == 4
    assert stats.completed_tasks == 2
    assert stats.completion_rate == pytest.approx(50.0)
    assert [(item.subject_id, item.total_minutes) for item in stats.subject_distribution] == [
        (math_id, 75),
        (english_id, 30),
    ]
    assert [(item.date, item.total_tasks, item.completed_tasks) for item in stats.daily_trend] == [
        (date(2026, 5, 10), 2, 1),
        (date(2026, 5, 11), 2, 1),
    ]
    assert all(item.completion_rate == pytest.approx(50.0) for item in stats.daily_trend)


def test_empty_range_has_zero_rate(db) -> None:
    user_id, _, _ = _seed(db)

    stats = get_stats(db, user_id, date(2026, 1, 1), date(2026, 1, 31))

    assert stats.total_study_minutes == 0
    assert stats.total_tasks == 0
    assert stats.completion_rate == 0.0
    assert stats.subject_distribution == []
    assert stats.daily_trend == []


def test_inverted_range_is_rejected(db) -> None:
    with pytest.raises(ValidationError):
        get_stats(db, 1, date(2026, 5, 2), date(2026, 5, 1))


def test_stats_endpoint(client, make_user, auth_headers) -> None:
    _, token = make_user()

    response = client.get(
        "/stats",
        params={"start_date": "2026-05-01", "end_date": "2026-05-31"},
        headers=auth_headers(token),
    )

    assert response.status_code == 200
    assert response.json()["total_tasks"] == 0
    assert response.json()["completion_rate"] == 0.0
