from __future__ import annotations

import json
from datetime import date, time

import pytest

from study_planner.api.schemas.ai import PlanRequest
from study_planner.core.errors import MalformedSuggestions
from study_planner.db.models.study_preference import StudyPhase
from study_planner.services.plan_prompt import PlanContext, parse_suggestions, render_plan_prompt
from study_planner.services.preference_service import PreferenceView

TODAY = date(2026, 10, 17)


def _context(**overrides) -> PlanContext:
    values = dict(
        request=PlanRequest(subjects=["数学", "英语", "政治"], incomplete_tasks=["背单词"]),
        preference=PreferenceView(
            id=1,
            daily_hours=9,
            start_time=time(6, 30),
            end_time=time(22, 30),
            study_phase=StudyPhase.SPRINT,
            focus_subjects=["数学"],
            weak_subjects=["英语"],
            exam_date=date(2026, 12, 20),
        ),
        recent_reviews=["2026-10-16: 感受-还行 困难-阅读"],
        recent_tasks=["2026-10-16: [数学] 复习极限"],
    )
    values.update(overrides)
    return PlanContext(**values)


def test_prompt_includes_phase_label_and_subjects() -> None:
    prompt = render_plan_prompt(_context(), today=TODAY)

    assert "当前阶段: 冲刺阶段" in prompt
    for subject in ("数学", "英语", "政治"):
        assert subject in prompt
    assert "学习时间: 06:30 - 22:30" in prompt
    assert "距离考试: 64天 (2026-12-20)" in prompt
    assert "重点科目(多安排时间): 数学" in prompt
    assert "薄弱科目(需要加强): 英语" in prompt


@pytest.mark.parametrize(
    "phase, label",
    [(StudyPhase.FOUNDATION, "基础阶段"), (StudyPhase.STRENGTHEN, "强化阶段"), (StudyPhase.SPRINT, "冲刺阶段")],
)
def test_each_phase_renders_its_label(phase: StudyPhase, label: str) -> None:
    prompt = render_plan_prompt(_context(preference=PreferenceView(study_phase=phase)), today=TODAY)

    assert f"当前阶段: {label}" in prompt


def test_missing_preferences_fall_back_to_default_hours() -> None:
    prompt = render_plan_prompt(_context(preference=None), today=TODAY)

    assert "学习时间: 07:00 - 22:00" in prompt
    assert "午休时间: 12:00 - 14:00" in prompt
    assert "当前阶段" not in prompt


def test_sections_render_in_fixed_order() -> None:
    context = _context(request=PlanRequest(subjects=["数学"], incomplete_tasks=["背单词"], review_content="多练题"))
    prompt = render_plan_prompt(context, today=TODAY)

    markers = [
        "## 考研复习阶段说明",
        "## 规划原则",
        "## 用户学习偏好",
        "学习科目: 数学",
        "昨日未完成任务",
        "最近复盘反馈",
        "最近完成的任务",
        "用户额外说明: 多练题",
        "## 输出要求",
    ]
    positions = [prompt.index(marker) for marker in markers]
    assert positions == sorted(positions)


def test_rendering_is_deterministic() -> None:
    assert render_plan_prompt(_context(), today=TODAY) == render_plan_prompt(_context(), today=TODAY)


def test_empty_sections_are_omitted() -> None:
    prompt = render_plan_prompt(
        _context(request=PlanRequest(), recent_reviews=[], recent_tasks=[]), today=TODAY
    )

    assert "学习科目" not in prompt
    assert "最近复盘反馈" not in prompt
    assert "最近完成的任务" not in prompt


def test_parse_valid_batch_preserves_order() -> None:
    raw = json.dumps(
        [
            {"start_time": "07:00", "end_time": "08:30", "content": "复习高数", "subject": "数学"},
            {"start_time": "08:45", "end_time": "10:00", "content": "英语阅读", "subject": "英语"},
        ],
        ensure_ascii=False,
    )

    suggestions = parse_suggestions(raw)

    assert [item.content for item in suggestions] == ["复习高数", "英语阅读"]
    assert suggestions[0].start_time == "07:00"


@pytest.mark.parametrize(
    "raw",
    [
        '{"not":"an array"}',
        "here is your plan",
        "",
        '[{"start_time": "07:00", "end_time": "08:00", "content": "复习"}]',
        '[{"start_time": "07:00", "end_time": "08:00", "content": "复习", "subject": "数学", "extra": 1}]',
        '[{"start_time": "07:00", "end_time": "08:00", "content": 5, "subject": "数学"}]',
        '[{"start_time": "09:00", "end_time": "08:00", "content": "复习", "subject": "数学"}]',
        '[{"start_time": "7am", "end_time": "08:00", "content": "复习", "subject": "数学"}]',
        '[{"start_time": "07:00", "end_time": "08:00", "content": "  ", "subject": "数学"}]',
    ],
)
def test_malformed_replies_are_rejected_whole(raw: str) -> None:
    with pytest.raises(MalformedSuggestions) as excinfo:
        parse_suggestions(raw)

    assert excinfo.value.raw_text == raw
    assert raw in str(excinfo.value)


def test_one_bad_entry_rejects_the_batch() -> None:
    raw = json.dumps(
        [
            {"start_time": "07:00", "end_time": "08:00", "content": "复习", "subject": "数学"},
            {"start_time": "08:00", "end_time": "09:00", "content": "背诵"},
        ],
        ensure_ascii=False,
    )

    with pytest.raises(MalformedSuggestions):
        parse_suggestions(raw)
