"""Prompt rendering and reply validation for daily plan generation.

Rendering is pure: the same context and date always produce the same prompt.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from study_planner.api.schemas.ai import PlanRequest, TaskSuggestion
from study_planner.core.errors import MalformedSuggestions
from study_planner.db.models.study_preference import StudyPhase
from study_planner.services.preference_service import (
    DEFAULT_END_TIME,
    DEFAULT_LUNCH_END,
    DEFAULT_LUNCH_START,
    DEFAULT_START_TIME,
    PreferenceView,
)

_SUGGESTIONS = TypeAdapter(List[TaskSuggestion])

PHASE_FOCUS = {
    StudyPhase.FOUNDATION: "重点打牢基础知识",
    StudyPhase.STRENGTHEN: "重点做题和总结方法",
    StudyPhase.SPRINT: "查漏补缺和模拟考试",
}

FRAMING = """你是一个专业的考研学习规划助手。请根据用户的学习偏好、历史学习情况和复盘反馈，生成一份科学合理、个性化的全天学习计划。

## 考研复习阶段说明：
- 基础阶段(3-6月)：重点打牢基础，系统学习各科目知识点，数学重视概念理解和基础题型
- 强化阶段(7-10月)：强化训练，大量做题，总结题型和方法，英语重点阅读和写作
- 冲刺阶段(11-12月)：查漏补缺，模拟考试，政治背诵，真题演练
"""

PRINCIPLES = """
## 规划原则：
1. 根据用户设定的学习时间安排任务
2. 不同科目交替学习，避免长时间学习同一科目导致疲劳
3. 上午安排需要高度集中注意力的科目（如数学、专业课）
4. 下午可安排英语阅读、政治等
5. 晚上适合复习巩固和做题
6. 每个学习时段1-2小时，中间安排10-15分钟休息
7. 重点科目和薄弱科目要多安排时间
8. 参考用户最近的学习进度和复盘反馈调整计划
9. 任务内容要具体，如"复习高数第X章极限与连续"、"背诵英语单词200个"、"做政治选择题50道"
"""

OUTPUT_INSTRUCTIONS = """
## 输出要求：
根据用户的学习时间和偏好，生成8-15个学习任务，覆盖全天有效学习时间，科目交替安排。
严格按照以下JSON数组格式返回，不要包含任何其他文字：
[{"start_time": "07:00", "end_time": "08:30", "content": "具体任务内容", "subject": "科目名"}]

注意：
1. subject字段必须是用户提供的科目之一
2. 时间安排要符合用户设定的学习时间和午休时间
3. 重点科目和薄弱科目要多安排时间
4. 任务内容要具体、可执行
"""


@dataclass
class PlanContext:
    request: PlanRequest
    preference: Optional[PreferenceView] = None
    recent_reviews: List[str] = field(default_factory=list)
    recent_tasks: List[str] = field(default_factory=list)


def _clock(value) -> str:
    return value.strftime("%H:%M")


def _preference_lines(preference: Optional[PreferenceView], today: date) -> List[str]:
    if preference is None:
        return [
            f"学习时间: {_clock(DEFAULT_START_TIME)} - {_clock(DEFAULT_END_TIME)}",
            f"午休时间: {_clock(DEFAULT_LUNCH_START)} - {_clock(DEFAULT_LUNCH_END)}",
        ]

    lines = [
        f"每日学习时长: {preference.daily_hours}小时",
        f"学习时间: {_clock(preference.start_time)} - {_clock(preference.end_time)}",
        f"午休时间: {_clock(preference.lunch_break_start)} - {_clock(preference.lunch_break_end)}",
        f"当前阶段: {preference.study_phase.label} - {PHASE_FOCUS[preference.study_phase]}",
    ]
    if preference.focus_subjects:
        lines.append(f"重点科目(多安排时间): {', '.join(preference.focus_subjects)}")
    if preference.weak_subjects:
        lines.append(f"薄弱科目(需要加强): {', '.join(preference.weak_subjects)}")
    if preference.exam_date is not None:
        days_left = preference.days_until_exam(today)
        lines.append(f"距离考试: {days_left}天 ({preference.exam_date.isoformat()})")
    if preference.notes:
        lines.append(f"用户备注: {preference.notes}")
    return lines


def render_plan_prompt(context: PlanContext, *, today: date) -> str:
    """Render the single user message sent to the text-generation service."""
    request = context.request
    parts = [FRAMING, PRINCIPLES, "\n## 用户学习偏好：\n"]
    parts.extend(f"{line}\n" for line in _preference_lines(context.preference, today))

    if request.exam_date:
        parts.append(f"考试日期: {request.exam_date}\n")
    if request.subjects:
        parts.append(f"\n学习科目: {', '.join(request.subjects)}\n")
        parts.append("（请确保每个科目都有安排，科目之间交替进行）\n")
    if request.incomplete_tasks:
        parts.append("\n昨日未完成任务（优先安排）:\n" + "\n".join(request.incomplete_tasks) + "\n")
    if context.recent_reviews:
        parts.append("\n最近复盘反馈（参考调整计划）:\n" + "\n".join(context.recent_reviews) + "\n")
    if context.recent_tasks:
        parts.append("\n最近完成的任务（参考学习进度）:\n" + "\n".join(context.recent_tasks) + "\n")
    if request.review_content:
        parts.append(f"\n用户额外说明: {request.review_content}\n")

    parts.append(OUTPUT_INSTRUCTIONS)
    return "".join(parts)


def parse_suggestions(raw_text: str) -> List[TaskSuggestion]:
    """Validate the service reply as a JSON array of suggestions, all or nothing."""
    try:
        payload = json.loads(raw_text)
    except (TypeError, ValueError) as exc:
        raise MalformedSuggestions(f"Failed to parse plan: {exc}; raw content: {raw_text}", raw_text=raw_text) from exc

    if not isinstance(payload, list):
        raise MalformedSuggestions(
            f"Failed to parse plan: expected a JSON array; raw content: {raw_text}",
            raw_text=raw_text,
        )

    try:
        return _SUGGESTIONS.validate_python(payload)
    except PydanticValidationError as exc:
        raise MalformedSuggestions(
            f"Failed to parse plan: {exc.error_count()} invalid field(s); raw content: {raw_text}",
            raw_text=raw_text,
        ) from exc
