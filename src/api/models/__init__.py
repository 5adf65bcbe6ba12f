"""API Pydantic models."""

from .requests import AttendeeRequest, EventRequest
from .responses import AuthResponse, ErrorCodes, ErrorResponse, HealthResponse, TokenSet

__all__ = [
    "AttendeeRequest",
    "AuthResponse",
    "ErrorCodes",
    "ErrorResponse",
    "EventRequest",
    "HealthResponse",
    "TokenSet",
]
