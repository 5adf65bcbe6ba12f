"""
Pytest configuration and shared fixtures.
"""

import json
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Configuration is read at import time
os.environ["REQUEST_LOG_ENABLED"] = "false"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["GOOGLE_REDIRECT_URI"] = "http://localhost:8000/redirect"
os.environ["GOOGLE_OAUTH_ACCESS_TOKEN"] = ""
os.environ["GOOGLE_OAUTH_REFRESH_TOKEN"] = ""
os.environ["CALENDAR_TIMEZONE"] = ""

import httplib2  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from googleapiclient.errors import HttpError  # noqa: E402

from api.dependencies import calendar_service, oauth_session  # noqa: E402
from api.main import app  # noqa: E402
from core.config import GOOGLE_SCOPES  # noqa: E402
from core.oauth_client import OAuthSession  # noqa: E402
from models.credentials import Credential  # noqa: E402
from services.calendar import CalendarService, get_week_window  # noqa: E402

UTC = timezone.utc


def make_http_error(status: int, message: str = "Upstream failure") -> HttpError:
    """HttpError as raised by googleapiclient for a failed request."""
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode()
    return HttpError(resp, content)


class FakeRequest:
    """Stands in for googleapiclient's HttpRequest."""

    def __init__(self, result=None, error: Exception | None = None):
        self.result = result
        self.error = error

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.result


class FakeCalendarApi:
    """
    Stub Calendar v3 resource.

    events.list honours timeMin/timeMax/orderBy/maxResults over the stored
    events; events.insert echoes the body with a server-assigned id.
    """

    def __init__(self, events: list[dict] | None = None):
        self.stored_events = events or []
        self.list_calls: list[dict] = []
        self.insert_calls: list[dict] = []
        self.error: Exception | None = None

    def events(self):
        return self

    def list(self, **kwargs):
        self.list_calls.append(kwargs)
        if self.error is not None:
            return FakeRequest(error=self.error)

        time_min = datetime.fromisoformat(kwargs["timeMin"])
        time_max = datetime.fromisoformat(kwargs["timeMax"])
        items = [
            event
            for event in self.stored_events
            if time_min <= datetime.fromisoformat(event["start"]["dateTime"]) <= time_max
        ]
        if kwargs.get("orderBy") == "startTime":
            items.sort(key=lambda event: datetime.fromisoformat(event["start"]["dateTime"]))
        items = items[: kwargs.get("maxResults", 250)]
        return FakeRequest({"kind": "calendar#events", "items": items})

    def insert(self, calendarId: str, body: dict):
        self.insert_calls.append({"calendarId": calendarId, "body": body})
        if self.error is not None:
            return FakeRequest(error=self.error)
        created = {
            "kind": "calendar#event",
            "id": f"evt{len(self.insert_calls):04d}",
            "status": "confirmed",
            "htmlLink": "https://www.google.com/calendar/event?eid=test",
            **body,
        }
        return FakeRequest(created)


class FakeApiBuilder:
    """Counts how often the calendar resource is built (one per network call)."""

    def __init__(self, api: FakeCalendarApi):
        self.api = api
        self.calls = 0

    def __call__(self, creds):
        self.calls += 1
        return self.api


def make_event(event_id: str, start: datetime, hours: int = 1) -> dict:
    return {
        "id": event_id,
        "summary": f"Event {event_id}",
        "start": {"dateTime": start.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": (start + timedelta(hours=hours)).isoformat(), "timeZone": "UTC"},
    }


@pytest.fixture
def credential():
    """Credential holding a valid, unexpired token set."""
    expiry = datetime.now(UTC) + timedelta(hours=1)
    return Credential(
        client_id="test-client-id.apps.googleusercontent.com",
        client_secret="test-client-secret",
        redirect_uri="http://localhost:8000/redirect",
        access_token="ya29.test-access-token",
        refresh_token="1//test-refresh-token",
        scopes=list(GOOGLE_SCOPES),
        expiry_date=int(expiry.timestamp() * 1000),
    )


@pytest.fixture
def oauth(credential):
    return OAuthSession(credential)


@pytest.fixture
def unauthenticated_oauth():
    return OAuthSession(
        Credential(
            client_id="test-client-id.apps.googleusercontent.com",
            client_secret="test-client-secret",
            redirect_uri="http://localhost:8000/redirect",
            scopes=list(GOOGLE_SCOPES),
        )
    )


@pytest.fixture
def week_events():
    """Twelve events inside the current UTC week (shuffled) and three outside it."""
    start, end = get_week_window(datetime.now(UTC))
    inside = [
        make_event(f"in{i:02d}", start + timedelta(hours=10 * i + 1)) for i in range(12)
    ]
    inside = inside[::2] + inside[1::2]
    outside = [
        make_event("before", start - timedelta(days=2)),
        make_event("after", end + timedelta(hours=1)),
        make_event("next-week", end + timedelta(days=3)),
    ]
    return inside + outside


@pytest.fixture
def fake_api(week_events):
    return FakeCalendarApi(week_events)


@pytest.fixture
def api_builder(fake_api):
    return FakeApiBuilder(fake_api)


@pytest.fixture
def service(oauth, api_builder):
    return CalendarService(oauth, build_api=api_builder, tz=UTC)


@pytest.fixture
def unauthenticated_service(unauthenticated_oauth, api_builder):
    return CalendarService(unauthenticated_oauth, build_api=api_builder, tz=UTC)


@pytest.fixture
def make_client():
    """Build a TestClient wired to the given OAuth holder and calendar service."""

    def _make(oauth_holder: OAuthSession, calendar: CalendarService) -> TestClient:
        app.dependency_overrides[oauth_session] = lambda: oauth_holder
        app.dependency_overrides[calendar_service] = lambda: calendar
        return TestClient(app, raise_server_exceptions=False)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, oauth, service):
    return make_client(oauth, service)


@pytest.fixture
def unauthenticated_client(make_client, unauthenticated_oauth, unauthenticated_service):
    return make_client(unauthenticated_oauth, unauthenticated_service)
