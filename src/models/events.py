"""
Data models for Google Calendar event payloads.

Events returned by Google are passed through as plain dicts; these TypedDicts
only describe the insert body this service builds.
"""

from typing import NotRequired, TypedDict


class EventDateTime(TypedDict):
    """Start or end of a timed event."""
    dateTime: str
    timeZone: str


class Attendee(TypedDict):
    email: str


class EventBody(TypedDict):
    """Request body for events.insert."""
    summary: str
    description: NotRequired[str | None]
    start: EventDateTime
    end: EventDateTime
    attendees: NotRequired[list[Attendee]]
