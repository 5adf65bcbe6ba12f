"""
Current-week event listing and event creation against Google Calendar.
"""

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Any, Callable
from zoneinfo import ZoneInfo

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.config import CALENDAR_ID, CALENDAR_TIMEZONE, EVENT_TIMEZONE, WEEK_MAX_RESULTS
from core.exceptions import (
    AdapterError,
    AuthExpiredError,
    CalendarBridgeError,
    InvalidEventError,
)
from core.oauth_client import OAuthSession, get_oauth_session
from models.events import EventBody

logger = logging.getLogger(__name__)


def get_calendar_timezone(name: str = CALENDAR_TIMEZONE) -> tzinfo | None:
    """Resolve the configured IANA timezone; None means the process-local clock."""
    if name:
        return ZoneInfo(name)
    return None


def get_week_window(now: datetime) -> tuple[datetime, datetime]:
    """
    Calculate the Sunday-to-Saturday week containing now.

    Returns:
        Tuple of (Sunday 00:00:00.000, Saturday 23:59:59.999) in now's timezone
    """
    days_since_sunday = (now.weekday() + 1) % 7
    start = (now - timedelta(days=days_since_sunday)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    end = start + timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)
    return start, end


def build_event_body(
    summary: str,
    start: str,
    end: str,
    description: str | None = None,
    attendees: list[dict] | None = None,
) -> EventBody:
    """Map an event request onto the events.insert body."""
    body: EventBody = {
        "summary": summary,
        "start": {"dateTime": start, "timeZone": EVENT_TIMEZONE},
        "end": {"dateTime": end, "timeZone": EVENT_TIMEZONE},
    }
    if description is not None:
        body["description"] = description
    if attendees is not None:
        body["attendees"] = attendees
    return body


def _build_calendar_api(creds: GoogleCredentials) -> Any:
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


class CalendarService:
    """Google Calendar operations for the single held credential.

    Args:
        oauth: Session holder supplying (and receiving refreshed) tokens.
        build_api: Factory turning credentials into a Calendar v3 resource.
        calendar_id: Calendar to read the week from.
        tz: Timezone the week window is computed in. None uses the local
            clock, resolving the UTC offset of each window bound separately.
    """

    def __init__(
        self,
        oauth: OAuthSession,
        build_api: Callable[[GoogleCredentials], Any] = _build_calendar_api,
        calendar_id: str = CALENDAR_ID,
        tz: tzinfo | None = None,
    ):
        self.oauth = oauth
        self.build_api = build_api
        self.calendar_id = calendar_id
        self.tz = tz if tz is not None else get_calendar_timezone()

    def list_current_week_events(self, now: datetime | None = None) -> list[dict]:
        """
        Fetch up to WEEK_MAX_RESULTS events of the current week, ordered by start.

        Raises:
            NotAuthenticatedError: No token set held (no request is made)
            AuthExpiredError: Google rejected the token
            AdapterError: Any other failure
        """
        creds = self.oauth.get_credentials()
        start, end = get_week_window(now or datetime.now(self.tz))
        if self.tz is None:
            # Local wall-clock bounds; DST may give start and end different offsets
            start, end = start.astimezone(), end.astimezone()

        try:
            api = self.build_api(creds)
            response = api.events().list(
                calendarId=self.calendar_id,
                timeMin=start.isoformat(timespec="milliseconds"),
                timeMax=end.isoformat(timespec="milliseconds"),
                singleEvents=True,
                orderBy="startTime",
                maxResults=WEEK_MAX_RESULTS,
            ).execute()
        except Exception as e:
            raise self._map_error(e, "fetch events", allow_invalid_event=False) from e
        finally:
            self.oauth.sync_credentials(creds)

        items = response.get("items", [])
        logger.info(f"Fetched {len(items)} events for week starting {start.date()}")
        return items

    def create_event(self, body: EventBody) -> dict:
        """
        Insert an event into the primary calendar.

        Returns:
            The created event as reported by Google, including its id

        Raises:
            NotAuthenticatedError: No token set held (no request is made)
            AuthExpiredError: Google rejected the token
            InvalidEventError: Google rejected the event body
            AdapterError: Any other failure
        """
        creds = self.oauth.get_credentials()

        try:
            api = self.build_api(creds)
            event = api.events().insert(calendarId="primary", body=body).execute()
        except Exception as e:
            raise self._map_error(e, "create event", allow_invalid_event=True) from e
        finally:
            self.oauth.sync_credentials(creds)

        logger.info(f"Created event {event.get('id')}")
        return event

    def _map_error(
        self, error: Exception, action: str, allow_invalid_event: bool
    ) -> CalendarBridgeError:
        """Translate a Google client failure into the service's error taxonomy."""
        logger.error(f"Failed to {action}: {error}")

        if isinstance(error, RefreshError):
            return AuthExpiredError("Authentication token expired", reason=str(error))

        if isinstance(error, HttpError):
            status = error.resp.status
            reason = error.reason
            if status == 401:
                return AuthExpiredError(
                    "Authentication token expired", upstream_status=status, reason=reason
                )
            if status == 400 and allow_invalid_event:
                return InvalidEventError(
                    f"Invalid event data: {reason}", upstream_status=status, reason=reason
                )
            return AdapterError(
                f"Failed to {action}: {reason}", upstream_status=status, reason=reason
            )

        return AdapterError(f"Failed to {action}: {error}", reason=str(error))


_calendar_service: CalendarService | None = None


def get_calendar_service() -> CalendarService:
    """Get or create the process-wide calendar service (lazy initialization)."""
    global _calendar_service
    if _calendar_service is None:
        _calendar_service = CalendarService(get_oauth_session())
    return _calendar_service
