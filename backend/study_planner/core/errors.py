"""Domain error taxonomy surfaced to API callers as a single message."""
from __future__ import annotations

from fastapi import status


class PlannerError(Exception):
    """Base class for errors that map onto a caller-visible message and status."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class Unauthenticated(PlannerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Session is invalid or expired"


class InsufficientRole(PlannerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class SelfActionForbidden(PlannerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "This action cannot be applied to your own account"


class NotFound(PlannerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(PlannerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class NotConfigured(PlannerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "AI API is not configured; save an API key first"


class ExternalServiceError(PlannerError):
    """Non-success, transport failure or timeout from the text-generation service."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Text-generation service request failed"

    def __init__(self, message: str | None = None, *, payload: str | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class MalformedSuggestions(PlannerError):
    """The service replied, but not with a valid suggestion batch."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to parse plan"

    def __init__(self, message: str | None = None, *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ValidationError(PlannerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid input"
