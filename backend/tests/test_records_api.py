from __future__ import annotations

from datetime import datetime, timedelta, timezone


def test_subjects_defaults_first_and_protected(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)

    created = client.post("/subjects", json={"name": "408计算机"}, headers=headers)
    assert created.status_code == 201
    assert created.json()["color"] == "#3B82F6"
    assert created.json()["is_default"] is False

    listing = client.get("/subjects", headers=headers).json()
    assert [item["is_default"] for item in listing] == [True, True, True, True, False]
    assert listing[-1]["name"] == "408计算机"

    default_id = listing[0]["id"]
    assert client.delete(f"/subjects/{default_id}", headers=headers).status_code == 404
    assert client.delete(f"/subjects/{created.json()['id']}", headers=headers).status_code == 200
    assert len(client.get("/subjects", headers=headers).json()) == 4


def test_countdown_remaining_time(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    target = datetime.now(timezone.utc) + timedelta(days=3, hours=5, minutes=30)

    response = client.post(
        "/countdowns",
        json={"name": "考研初试", "target_time": target.isoformat()},
        headers=headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["notify_enabled"] is True
    assert body["is_expired"] is False
    assert body["remaining_days"] == 3
    assert body["remaining_hours"] == 5
    assert body["remaining_minutes"] in (29, 30)

    past = client.post(
        "/countdowns",
        json={"name": "报名截止", "target_time": "2020-01-01T00:00:00Z", "notify_enabled": False},
        headers=headers,
    ).json()
    assert past["is_expired"] is True
    assert past["remaining_days"] == 0

    names = [item["name"] for item in client.get("/countdowns", headers=headers).json()]
    assert names == ["报名截止", "考研初试"]

    assert client.delete(f"/countdowns/{past['id']}", headers=headers).status_code == 200
    assert client.delete(f"/countdowns/{past['id']}", headers=headers).status_code == 404


def test_pomodoro_lifecycle(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    subject_id = client.get("/subjects", headers=headers).json()[0]["id"]

    started = client.post("/pomodoros", json={"subject_id": subject_id}, headers=headers)
    assert started.status_code == 201
    assert started.json()["status"] == "running"
    assert started.json()["subject_name"]

    completed = client.post(
        f"/pomodoros/{started.json()['id']}/complete", json={"duration_minutes": 25}, headers=headers
    )
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert completed.json()["duration_minutes"] == 25
    assert completed.json()["end_time"] is not None

    second = client.post("/pomodoros", json={}, headers=headers).json()
    cancelled = client.post(f"/pomodoros/{second['id']}/cancel", json={"duration_minutes": 4}, headers=headers)
    assert cancelled.json()["status"] == "cancelled"

    history = client.get("/pomodoros", headers=headers).json()
    assert {item["status"] for item in history} == {"completed", "cancelled"}


def test_pomodoro_of_other_user_is_not_found(client, make_user, auth_headers) -> None:
    _, owner_token = make_user("owner")
    _, other_token = make_user("other")
    started = client.post("/pomodoros", json={}, headers=auth_headers(owner_token)).json()

    response = client.post(
        f"/pomodoros/{started['id']}/complete", json={"duration_minutes": 25}, headers=auth_headers(other_token)
    )

    assert response.status_code == 404


def test_review_upsert_and_history(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)

    assert client.get("/reviews/2026-05-20", headers=headers).json() is None

    first = client.put(
        "/reviews", json={"review_date": "2026-05-20", "feelings": "状态不错"}, headers=headers
    ).json()
    second = client.put(
        "/reviews",
        json={"review_date": "2026-05-20", "feelings": "有点累", "difficulties": "极限"},
        headers=headers,
    ).json()
    assert first["id"] == second["id"]
    assert second["feelings"] == "有点累"
    assert second["difficulties"] == "极限"

    client.put("/reviews", json={"review_date": "2026-05-21", "feelings": "好"}, headers=headers)
    history = client.get("/reviews/history", headers=headers).json()
    assert [item["review_date"] for item in history] == ["2026-05-21", "2026-05-20"]


def test_preferences_default_then_saved(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)

    defaults = client.get("/preferences", headers=headers).json()
    assert defaults["id"] is None
    assert defaults["daily_hours"] == 8
    assert (defaults["start_time"], defaults["end_time"]) == ("07:00", "22:00")
    assert (defaults["lunch_break_start"], defaults["lunch_break_end"]) == ("12:00", "14:00")
    assert defaults["study_phase"] == "foundation"
    assert defaults["study_phase_label"] == "基础阶段"

    saved = client.put(
        "/preferences",
        json={
            "daily_hours": 10,
            "start_time": "06:30",
            "end_time": "23:00",
            "lunch_break_start": "12:00",
            "lunch_break_end": "13:00",
            "study_phase": "sprint",
            "focus_subjects": ["数学"],
            "weak_subjects": ["英语"],
            "exam_date": "2026-12-20",
            "notes": "晚上效率高",
        },
        headers=headers,
    )
    assert saved.status_code == 200
    body = saved.json()
    assert body["id"] is not None
    assert body["study_phase_label"] == "冲刺阶段"
    assert body["focus_subjects"] == ["数学"]
    assert body["exam_date"] == "2026-12-20"
    assert isinstance(body["days_until_exam"], int)

    assert client.get("/preferences", headers=headers).json() == body


def test_preferences_reject_malformed_times(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)

    bad_clock = client.put("/preferences", json={"start_time": "25:00"}, headers=headers)
    bad_date = client.put("/preferences", json={"exam_date": "20/12/2026"}, headers=headers)
    bad_phase = client.put("/preferences", json={"study_phase": "cramming"}, headers=headers)

    assert bad_clock.status_code == 422
    assert bad_clock.json() == {"detail": "start_time must be in HH:MM format"}
    assert bad_date.status_code == 422
    assert bad_phase.status_code == 422
