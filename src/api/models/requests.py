"""Pydantic request models for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class AttendeeRequest(BaseModel):
    """Event attendee; fields besides email are forwarded to Google as given."""

    model_config = ConfigDict(extra="allow")

    email: str


class EventRequest(BaseModel):
    """Body of POST /create.

    start and end keep the caller's original string; they are only checked
    for being ISO 8601 datetimes. Ordering is left to Google.
    """

    summary: str
    start: str
    end: str
    description: str | None = None
    attendees: list[AttendeeRequest] | None = None

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("summary must not be empty")
        return v

    @field_validator("start", "end")
    @classmethod
    def is_iso_datetime(cls, v: str) -> str:
        if "T" not in v:
            raise ValueError("expected an ISO 8601 datetime with a time component")
        try:
            datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"invalid ISO 8601 datetime: {v!r}")
        return v
