"""FastAPI dependencies for shared resources."""

from core.oauth_client import OAuthSession, get_oauth_session
from services.calendar import CalendarService, get_calendar_service


async def oauth_session() -> OAuthSession:
    """Process-wide OAuth session holder."""
    return get_oauth_session()


async def calendar_service() -> CalendarService:
    """Process-wide calendar service bound to the OAuth session holder."""
    return get_calendar_service()
