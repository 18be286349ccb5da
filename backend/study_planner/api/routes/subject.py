"""Subject routes."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from study_planner.api.deps import get_current_user
from study_planner.api.schemas.auth import StatusResponse
from study_planner.api.schemas.subject import SubjectCreateRequest, SubjectResponse
from study_planner.db.deps import get_db
from study_planner.db.models.subject import Subject
from study_planner.db.models.user import User
from study_planner.services import subject_service

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _serialize_subject(subject: Subject) -> SubjectResponse:
    return SubjectResponse(
        id=subject.id,
        name=subject.name,
        color=subject.color,
        is_default=bool(subject.is_default),
        created_at=subject.created_at,
    )


@router.get("", response_model=List[SubjectResponse])
def list_subjects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[SubjectResponse]:
    return [_serialize_subject(subject) for subject in subject_service.list_subjects(db, current_user.id)]


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
def create_subject(
    payload: SubjectCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubjectResponse:
    subject = subject_service.create_subject(db, current_user.id, payload.name, payload.color)
    return _serialize_subject(subject)


@router.delete("/{subject_id}", response_model=StatusResponse)
def delete_subject(
    subject_id: int,
    http_request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatusResponse:
    subject_service.delete_subject(db, current_user.id, subject_id)
    return StatusResponse(request_id=http_request.state.request_id)
