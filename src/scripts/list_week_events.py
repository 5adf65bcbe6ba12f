#!/usr/bin/env python3
"""
List this week's Google Calendar events using the configured tokens.

Prints the consent URL instead when no tokens are configured.

Usage:
    uv run python src/scripts/list_week_events.py
"""

import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import CalendarBridgeError
from core.oauth_client import get_oauth_session
from services.calendar import get_calendar_service, get_week_window


def main() -> int:
    """List this week's events."""
    oauth = get_oauth_session()
    if not oauth.has_tokens():
        print("Not authenticated. Visit this URL to grant access:\n")
        print(oauth.get_auth_url())
        return 1

    calendar = get_calendar_service()
    start, end = get_week_window(datetime.now(calendar.tz))
    print(f"Events from {start:%a %Y-%m-%d} to {end:%a %Y-%m-%d}\n")
    print("=" * 80)

    try:
        events = calendar.list_current_week_events()
    except CalendarBridgeError as e:
        print(f"Error fetching events: {e}")
        return 1

    if not events:
        print("No events this week")

    for event in events:
        start_info = event.get("start", {})
        when = start_info.get("dateTime") or start_info.get("date", "")
        print(f"\n{when}  {event.get('summary', '(no title)')}")
        print(f"  ID: {event.get('id')}")
        if event.get("htmlLink"):
            print(f"  Link: {event['htmlLink']}")

    print("-" * 80)
    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
