"""Schemas for AI configuration, plan generation and chat."""
from __future__ import annotations

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator

_CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class AIConfigResponse(BaseModel):
    api_key_masked: str
    model_name: str
    api_endpoint: str
    is_configured: bool


class AIConfigSaveRequest(BaseModel):
    api_key: str = Field(..., min_length=1)
    model_name: Optional[str] = None
    api_endpoint: Optional[str] = None


class ConnectionTestResponse(BaseModel):
    ok: bool
    request_id: str


class PlanRequest(BaseModel):
    """Caller-supplied planning context."""

    exam_date: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    incomplete_tasks: List[str] = Field(default_factory=list)
    review_content: Optional[str] = None


class TaskSuggestion(BaseModel):
    """One schedule entry proposed by the text-generation service."""

    model_config = ConfigDict(extra="forbid")

    start_time: StrictStr
    end_time: StrictStr
    content: StrictStr
    subject: StrictStr

    @field_validator("start_time", "end_time")
    @classmethod
    def _clock_format(cls, value: str) -> str:
        if not _CLOCK_PATTERN.match(value):
            raise ValueError("must be HH:MM")
        return value

    @field_validator("content", "subject")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="after")
    def _ordered(self) -> "TaskSuggestion":
        # Zero-padded HH:MM strings order the same way as the times they encode.
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be earlier than end_time")
        return self


class PlanResponse(BaseModel):
    suggestions: List[TaskSuggestion]
    request_id: str


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
    request_id: str
