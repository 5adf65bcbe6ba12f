"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / "data" / "db" / "calendar-bridge.db"

# =============================================================================
# GOOGLE OAUTH CREDENTIALS (from environment)
# =============================================================================

GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET", "")
GOOGLE_REDIRECT_URI = os.environ.get("GOOGLE_REDIRECT_URI", "")
GOOGLE_OAUTH_ACCESS_TOKEN = os.environ.get("GOOGLE_OAUTH_ACCESS_TOKEN", "")
GOOGLE_OAUTH_REFRESH_TOKEN = os.environ.get("GOOGLE_OAUTH_REFRESH_TOKEN", "")

# Epoch milliseconds. The fallback is a fixed timestamp, not a computed expiry.
DEFAULT_TOKEN_EXPIRY_MS = 1752096182165
GOOGLE_OAUTH_EXPIRY_DATE = int(
    os.environ.get("GOOGLE_OAUTH_EXPIRY_DATE", str(DEFAULT_TOKEN_EXPIRY_MS))
)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.readonly",
]

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

CALENDAR_ID = os.environ.get("CALENDAR_ID", "primary")
CALENDAR_TIMEZONE = os.environ.get("CALENDAR_TIMEZONE", "")  # IANA name, "" = local
EVENT_TIMEZONE = "UTC"  # timeZone attached to created event start/end
WEEK_MAX_RESULTS = 10

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
REQUEST_LOG_ENABLED = os.environ.get("REQUEST_LOG_ENABLED", "true").lower() == "true"
API_VERSION = "1.0.0"
