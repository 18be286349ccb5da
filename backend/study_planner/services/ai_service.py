"""AI configuration, daily plan generation and the chat relay."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from sqlalchemy import desc
from sqlalchemy.orm import Session

from study_planner.api.schemas.ai import ChatMessage, PlanRequest, TaskSuggestion
from study_planner.core.clock import local_today
from study_planner.core.config import settings
from study_planner.core.errors import NotConfigured, ValidationError
from study_planner.db.models.ai_config import AIConfig
from study_planner.db.models.daily_review import DailyReview
from study_planner.db.models.subject import Subject
from study_planner.db.models.task import Task, TaskStatus
from study_planner.observability.tracing import trace
from study_planner.services.llm_client import ChatCompletionClient
from study_planner.services.plan_prompt import PlanContext, parse_suggestions, render_plan_prompt
from study_planner.services.preference_service import PreferenceView, find_preference

logger = logging.getLogger(__name__)

RECENT_REVIEW_LIMIT = 3
RECENT_TASK_DAYS = 7
RECENT_TASK_LIMIT = 20
CHAT_HISTORY_LIMIT = 10

PLAN_MAX_TOKENS = 1000
CHAT_MAX_TOKENS = 2000
TEST_MAX_TOKENS = 10
TEMPERATURE = 0.7

CHAT_FALLBACK_REPLY = "抱歉，我暂时无法回答这个问题。"

CHAT_SYSTEM_PROMPT = """你是一个专业的考研学习助手，专门帮助考研学生解答学习问题。你的特点：

1. 专业知识：精通考研各科目（政治、英语、数学、专业课）的知识点和考试技巧
2. 学习方法：熟悉各种高效学习方法、记忆技巧、时间管理方法
3. 心理辅导：能够帮助学生缓解考研压力，调整心态
4. 经验分享：了解考研流程、院校选择、复试准备等

回答要求：
- 回答要简洁明了，重点突出
- 给出具体可操作的建议
- 适当使用emoji让回答更生动
- 如果是学科问题，要给出详细的解题思路
- 鼓励学生，保持积极正面的态度"""


@dataclass
class AIConfigView:
    api_key_masked: str
    model_name: str
    api_endpoint: str
    is_configured: bool


def mask_api_key(api_key: str) -> str:
    if len(api_key) > 8:
        return f"{api_key[:4]}****{api_key[-4:]}"
    return "****"


def find_config(db: Session, user_id: int) -> Optional[AIConfig]:
    return db.query(AIConfig).filter(AIConfig.user_id == user_id).first()


def get_config(db: Session, user_id: int) -> AIConfigView:
    config = find_config(db, user_id)
    if config is None:
        return AIConfigView(
            api_key_masked="",
            model_name=settings.default_model_name,
            api_endpoint=settings.default_api_endpoint,
            is_configured=False,
        )
    return AIConfigView(
        api_key_masked=mask_api_key(config.api_key),
        model_name=config.model_name,
        api_endpoint=config.api_endpoint,
        is_configured=True,
    )


def save_config(
    db: Session,
    user_id: int,
    *,
    api_key: str,
    model_name: Optional[str] = None,
    api_endpoint: Optional[str] = None,
) -> AIConfigView:
    api_key = api_key.strip()
    if not api_key:
        raise ValidationError("api_key must not be empty")
    config = find_config(db, user_id)
    if config is None:
        config = AIConfig(user_id=user_id)
    config.api_key = api_key
    config.model_name = (model_name or "").strip() or settings.default_model_name
    config.api_endpoint = (api_endpoint or "").strip() or settings.default_api_endpoint
    db.add(config)
    db.commit()
    logger.info("AI config saved for user %s (model=%s)", user_id, config.model_name)
    return get_config(db, user_id)


def _require_config(db: Session, user_id: int) -> AIConfig:
    config = find_config(db, user_id)
    if config is None:
        raise NotConfigured()
    return config


def _client_for(config: AIConfig) -> ChatCompletionClient:
    return ChatCompletionClient(
        api_key=config.api_key,
        model_name=config.model_name,
        api_endpoint=config.api_endpoint,
    )


def _release_connection(db: Session) -> None:
    """End the read transaction so no pooled connection is held during the external call."""
    db.commit()


def check_connection(db: Session, user_id: int) -> bool:
    """Send a tiny request; failures raise ExternalServiceError."""
    config = _require_config(db, user_id)
    client = _client_for(config)
    _release_connection(db)
    with trace("ai.test_connection", metadata={"model": client.model_name}):
        client.complete([{"role": "user", "content": "你好"}], max_tokens=TEST_MAX_TOKENS)
    return True


def recent_reviews(db: Session, user_id: int, limit: int = RECENT_REVIEW_LIMIT) -> List[str]:
    reviews = (
        db.query(DailyReview)
        .filter(DailyReview.user_id == user_id)
        .order_by(desc(DailyReview.review_date))
        .limit(limit)
        .all()
    )
    lines = []
    for review in reviews:
        line = f"{review.review_date.isoformat()}:"
        if review.feelings is not None:
            line += f" 感受-{review.feelings}"
        if review.difficulties is not None:
            line += f" 困难-{review.difficulties}"
        lines.append(line)
    return lines


def recent_completed_tasks(
    db: Session,
    user_id: int,
    *,
    today: date,
    days: int = RECENT_TASK_DAYS,
    limit: int = RECENT_TASK_LIMIT,
) -> List[str]:
    rows = (
        db.query(Task.task_date, Task.content, Subject.name)
        .outerjoin(Subject, Subject.id == Task.subject_id)
        .filter(
            Task.user_id == user_id,
            Task.status == TaskStatus.COMPLETED.value,
            Task.task_date >= today - timedelta(days=days),
        )
        .order_by(desc(Task.task_date), Task.start_time)
        .limit(limit)
        .all()
    )
    return [f"{task_date.isoformat()}: [{subject or ''}] {content}" for task_date, content, subject in rows]


def build_plan_context(db: Session, user_id: int, request: PlanRequest, *, today: date) -> PlanContext:
    preference_row = find_preference(db, user_id)
    return PlanContext(
        request=request,
        preference=PreferenceView.from_row(preference_row) if preference_row else None,
        recent_reviews=recent_reviews(db, user_id),
        recent_tasks=recent_completed_tasks(db, user_id, today=today),
    )


def generate_plan(
    db: Session,
    user_id: int,
    request: PlanRequest,
    *,
    today: date | None = None,
) -> List[TaskSuggestion]:
    """Draft a day schedule; the reply is accepted whole or rejected whole."""
    config = _require_config(db, user_id)
    today = today or local_today()
    prompt = render_plan_prompt(build_plan_context(db, user_id, request, today=today), today=today)
    client = _client_for(config)
    _release_connection(db)

    with trace(
        "ai.generate_plan",
        metadata={"model": client.model_name, "subjects": len(request.subjects)},
    ) as plan_trace:
        raw_text = client.complete(
            [{"role": "user", "content": prompt}],
            max_tokens=PLAN_MAX_TOKENS,
            temperature=TEMPERATURE,
        )
        suggestions = parse_suggestions(raw_text or "")
        if plan_trace:
            plan_trace.update(output={"suggestions": len(suggestions)})

    logger.info("Generated %d plan suggestions for user %s", len(suggestions), user_id)
    return suggestions


def build_chat_messages(message: str, history: Sequence[ChatMessage]) -> List[dict]:
    """Persona first, then the most recent history turns, then the new message."""
    messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in history[-CHAT_HISTORY_LIMIT:])
    messages.append({"role": "user", "content": message})
    return messages


def chat(db: Session, user_id: int, message: str, history: Sequence[ChatMessage] = ()) -> str:
    client = _client_for(_require_config(db, user_id))
    _release_connection(db)
    with trace("ai.chat", metadata={"model": client.model_name, "history": len(history)}):
        reply = client.complete(
            build_chat_messages(message, list(history)),
            max_tokens=CHAT_MAX_TOKENS,
            temperature=TEMPERATURE,
        )
    if not reply or not reply.strip():
        return CHAT_FALLBACK_REPLY
    return reply
