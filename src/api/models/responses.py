"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy"
    version: str
    authenticated: bool
    token_status: str  # "valid", "expired" or "no_token"
    timestamp: str  # ISO 8601 UTC


class TokenSet(BaseModel):
    """OAuth tokens returned after a successful code exchange."""

    access_token: str | None = None
    refresh_token: str | None = None
    scope: str = ""
    token_type: str = "Bearer"
    expiry_date: int | None = None  # epoch milliseconds


class AuthResponse(BaseModel):
    """Response of GET /redirect."""

    message: str
    tokens: TokenSet


class ErrorResponse(BaseModel):
    """Standard error response."""

    message: str
    error: str | None = None
    code: str
    details: list[str] = []
    upstream_status: int | None = None


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    AUTH_EXPIRED = "AUTH_EXPIRED"
    AUTH_EXCHANGE_FAILED = "AUTH_EXCHANGE_FAILED"
    INVALID_EVENT = "INVALID_EVENT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
