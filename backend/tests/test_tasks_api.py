from __future__ import annotations

from study_planner.db.models.subject import Subject

DAY = "2026-05-20"


def _math_subject_id(session_factory, user_id: int) -> int:
    db = session_factory()
    try:
        return db.query(Subject.id).filter(Subject.user_id == user_id, Subject.name == "数学").scalar()
    finally:
        db.close()


def _create(client, headers, content: str, start: str, end: str, **extra) -> dict:
    response = client.post(
        "/tasks",
        json={"task_date": DAY, "start_time": start, "end_time": end, "content": content, **extra},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list_tasks_by_day(client, make_user, auth_headers, session_factory) -> None:
    user, token = make_user()
    headers = auth_headers(token)
    subject_id = _math_subject_id(session_factory, user.id)

    _create(client, headers, "做政治选择题50道", "14:00", "15:30")
    created = _create(client, headers, "复习高数第二章", "08:00", "09:30", subject_id=subject_id)

    assert created["status"] == "pending"
    assert created["subject_name"] == "数学"
    assert created["subject_color"] == "#3B82F6"

    response = client.get("/tasks", params={"task_date": DAY}, headers=headers)
    assert response.status_code == 200
    assert [task["content"] for task in response.json()] == ["复习高数第二章", "做政治选择题50道"]

    other_day = client.get("/tasks", params={"task_date": "2026-05-21"}, headers=headers)
    assert other_day.json() == []


def test_create_rejects_inverted_times(client, make_user, auth_headers) -> None:
    _, token = make_user()

    response = client.post(
        "/tasks",
        json={"task_date": DAY, "start_time": "10:00", "end_time": "09:00", "content": "背单词"},
        headers=auth_headers(token),
    )

    assert response.status_code == 422


def test_sparse_update_only_touches_supplied_fields(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    task = _create(client, headers, "背诵英语单词", "07:00", "08:00", alarm_enabled=True, alarm_time="06:55")

    response = client.patch(f"/tasks/{task['id']}", json={"content": "背诵英语单词200个"}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["content"] == "背诵英语单词200个"
    assert body["start_time"] == "07:00:00"
    assert body["end_time"] == "08:00:00"
    assert body["alarm_enabled"] is True
    assert body["alarm_time"] == "06:55:00"


def test_update_rejects_null_for_required_fields(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    task = _create(client, headers, "背诵英语单词", "07:00", "08:00")

    response = client.patch(f"/tasks/{task['id']}", json={"start_time": None}, headers=headers)

    assert response.status_code == 422
    assert "start_time" in response.json()["detail"]


def test_update_can_clear_subject(client, make_user, auth_headers, session_factory) -> None:
    user, token = make_user()
    headers = auth_headers(token)
    task = _create(
        client, headers, "复习高数", "08:00", "09:00", subject_id=_math_subject_id(session_factory, user.id)
    )

    response = client.patch(f"/tasks/{task['id']}", json={"subject_id": None}, headers=headers)

    assert response.status_code == 200
    assert response.json()["subject_id"] is None
    assert response.json()["subject_name"] is None


def test_toggle_cycles_status(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    task = _create(client, headers, "做真题", "19:00", "21:00")

    seen = [client.post(f"/tasks/{task['id']}/toggle", headers=headers).json()["status"] for _ in range(3)]

    assert seen == ["completed", "failed", "pending"]


def test_tasks_are_private_to_owner(client, make_user, auth_headers) -> None:
    _, owner_token = make_user("owner")
    _, other_token = make_user("other")
    task = _create(client, auth_headers(owner_token), "政治背诵", "10:00", "11:00")
    other = auth_headers(other_token)

    assert client.patch(f"/tasks/{task['id']}", json={"content": "hijack"}, headers=other).status_code == 404
    assert client.post(f"/tasks/{task['id']}/toggle", headers=other).status_code == 404
    assert client.delete(f"/tasks/{task['id']}", headers=other).status_code == 404
    assert client.get("/tasks", params={"task_date": DAY}, headers=other).json() == []


def test_subject_from_another_user_is_rejected(client, make_user, auth_headers, session_factory) -> None:
    owner, _ = make_user("owner")
    _, other_token = make_user("other")

    response = client.post(
        "/tasks",
        json={
            "task_date": DAY,
            "start_time": "08:00",
            "end_time": "09:00",
            "content": "复习",
            "subject_id": _math_subject_id(session_factory, owner.id),
        },
        headers=auth_headers(other_token),
    )

    assert response.status_code == 404


def test_delete_task(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    task = _create(client, headers, "整理错题本", "20:00", "21:00")

    assert client.delete(f"/tasks/{task['id']}", headers=headers).status_code == 200
    assert client.delete(f"/tasks/{task['id']}", headers=headers).status_code == 404


def test_check_content_endpoint(client, make_user, auth_headers) -> None:
    _, token = make_user()
    headers = auth_headers(token)
    task = _create(client, headers, "学习数学", "08:00", "10:00")
    _create(client, headers, "看电影", "20:00", "22:00")

    response = client.post(
        "/tasks/check-content",
        json={"task_date": DAY, "content": "学数学"},
        headers={**headers, "X-Request-Id": "check-1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["request_id"] == "check-1"
    assert [item["id"] for item in body["matched"]] == [task["id"]]
    assert body["matched"][0]["status"] == "completed"


def test_task_routes_require_session(client) -> None:
    assert client.get("/tasks", params={"task_date": DAY}).status_code == 401
    assert client.post("/tasks/check-content", json={"task_date": DAY, "content": "x"}).status_code == 401
