"""Daily task routes, including free-text auto-completion."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.auth import StatusResponse
from study_planner.api.schemas.task import (
    CheckContentRequest,
    CheckContentResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from study_planner.db.deps import get_db
from study_planner.db.models.user import User
from study_planner.observability.metrics import log_metric
from study_planner.observability.tracing import trace
from study_planner.services import task_service
from study_planner.services.task_service import TaskRecord

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    http_request: Request,
    task_date: date = Query(..., description="Day to list tasks for"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[TaskResponse]:
    """List the caller's tasks for one day, ordered by start time."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {"route": "/tasks", "task_date": task_date.isoformat()}
    with trace("task.list", metadata=metadata, request_id=request_id):
        records = task_service.list_tasks_by_date(db, current_user.id, task_date)

    log_metric("task.list.count", len(records), metadata={"user_id": str(current_user.id)})
    return [_serialize_task(record) for record in records]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    record = task_service.create_task(
        db,
        current_user.id,
        task_date=payload.task_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        content=payload.content,
        subject_id=payload.subject_id,
        alarm_enabled=payload.alarm_enabled,
        alarm_time=payload.alarm_time,
    )
    log_metric("task.created", 1, metadata={"user_id": str(current_user.id)})
    return _serialize_task(record)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    payload: TaskUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Apply only the fields present in the request body."""
    changes = payload.model_dump(exclude_unset=True)
    record = task_service.update_task(db, current_user.id, task_id, changes)
    return _serialize_task(record)


@router.delete("/{task_id}", response_model=StatusResponse)
def delete_task(
    task_id: int,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatusResponse:
    task_service.delete_task(db, current_user.id, task_id)
    return StatusResponse(request_id=http_request.state.request_id)


@router.post("/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    record = task_service.toggle_task_status(db, current_user.id, task_id)
    log_metric("task.toggled", 1, metadata={"status": record.task.status})
    return _serialize_task(record)


@router.post("/check-content", response_model=CheckContentResponse)
def check_content(
    payload: CheckContentRequest,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CheckContentResponse:
    """Complete every pending task on the day whose content matches the input."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {"route": "/tasks/check-content", "task_date": payload.task_date.isoformat()}
    with trace("task.check_content", metadata=metadata, request_id=request_id) as check_trace:
        matched = task_service.check_content(db, current_user.id, payload.task_date, payload.content)
        if check_trace:
            check_trace.update(output={"matched": len(matched)})

    log_metric("task.check_content.matched", len(matched), metadata={"user_id": str(current_user.id)})
    return CheckContentResponse(
        matched=[_serialize_task(record) for record in matched],
        request_id=request_id,
    )


def _serialize_task(record: TaskRecord) -> TaskResponse:
    task = record.task
    subject = record.subject
    return TaskResponse(
        id=task.id,
        subject_id=task.subject_id,
        subject_name=subject.name if subject else None,
        subject_color=subject.color if subject else None,
        task_date=task.task_date,
        start_time=task.start_time,
        end_time=task.end_time,
        content=task.content,
        status=task.task_status.value,
        alarm_enabled=bool(task.alarm_enabled),
        alarm_time=task.alarm_time,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
