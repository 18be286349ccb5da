from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from study_planner.core import clock


class _FrozenDatetime(datetime):
    @classmethod
    def now(cls, tz=None):
        return datetime(2026, 5, 19, 20, 30, tzinfo=timezone.utc).astimezone(tz)


@pytest.mark.parametrize(
    "zone, expected",
    [("Asia/Shanghai", date(2026, 5, 20)), ("UTC", date(2026, 5, 19))],
)
def test_local_today_follows_configured_timezone(monkeypatch, zone: str, expected: date) -> None:
    monkeypatch.setattr(clock, "datetime", _FrozenDatetime)
    monkeypatch.setattr(clock.settings, "local_timezone", zone)

    assert clock.local_today() == expected


def test_ensure_utc_tags_naive_values() -> None:
    naive = datetime(2026, 5, 19, 8, 0)

    assert clock.ensure_utc(naive) == datetime(2026, 5, 19, 8, 0, tzinfo=timezone.utc)
