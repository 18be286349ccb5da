"""AI configuration, plan generation and chat routes."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.ai import (
    AIConfigResponse,
    AIConfigSaveRequest,
    ChatRequest,
    ChatResponse,
    ConnectionTestResponse,
    PlanRequest,
    PlanResponse,
)
from study_planner.db.deps import get_db
from study_planner.db.models.user import User
from study_planner.observability.metrics import log_metric
from study_planner.observability.tracing import trace
from study_planner.services import ai_service

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/config", response_model=AIConfigResponse)
def get_config(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AIConfigResponse:
    return AIConfigResponse(**vars(ai_service.get_config(db, current_user.id)))


@router.put("/config", response_model=AIConfigResponse)
def save_config(
    payload: AIConfigSaveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AIConfigResponse:
    view = ai_service.save_config(
        db,
        current_user.id,
        api_key=payload.api_key,
        model_name=payload.model_name,
        api_endpoint=payload.api_endpoint,
    )
    return AIConfigResponse(**vars(view))


@router.post("/config/test", response_model=ConnectionTestResponse)
def check_connection(
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ConnectionTestResponse:
    ok = ai_service.check_connection(db, current_user.id)
    return ConnectionTestResponse(ok=ok, request_id=http_request.state.request_id)


@router.post("/plan", response_model=PlanResponse)
def generate_plan(
    payload: PlanRequest,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlanResponse:
    """Ask the configured service for a day schedule and return the validated suggestions."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {"route": "/ai/plan", "subjects": len(payload.subjects)}
    with trace("ai.plan.request", metadata=metadata, request_id=request_id):
        try:
            suggestions = ai_service.generate_plan(db, current_user.id, payload)
        except Exception as exc:
            log_metric("ai.plan.failure", 1, metadata={"error": type(exc).__name__})
            raise

    log_metric("ai.plan.suggestions", len(suggestions), metadata={"user_id": str(current_user.id)})
    return PlanResponse(suggestions=suggestions, request_id=request_id)


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ChatResponse:
    reply = ai_service.chat(db, current_user.id, payload.message, payload.history)
    log_metric("ai.chat.reply", 1, metadata={"user_id": str(current_user.id)})
    return ChatResponse(reply=reply, request_id=http_request.state.request_id)
