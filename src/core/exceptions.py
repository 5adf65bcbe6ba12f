"""Calendar bridge exceptions."""


class CalendarBridgeError(Exception):
    """Base exception for OAuth and calendar failures.

    Attributes:
        upstream_status: HTTP status reported by Google, if any.
        reason: Upstream error reason or OAuth error code, if any.
    """

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        reason: str | None = None,
    ):
        self.message = message
        self.upstream_status = upstream_status
        self.reason = reason
        super().__init__(message)


class NotAuthenticatedError(CalendarBridgeError):
    """Raised when no token set is held, before any network call."""

    def __init__(self, message: str = "Not authenticated with Google Calendar"):
        super().__init__(message)


class AuthExpiredError(CalendarBridgeError):
    """Raised when Google rejects the held token (401 or failed refresh)."""

    pass


class AuthExchangeError(CalendarBridgeError):
    """Raised when Google rejects an authorization code."""

    pass


class InvalidEventError(CalendarBridgeError):
    """Raised when Google rejects an event payload (400)."""

    pass


class AdapterError(CalendarBridgeError):
    """Raised for any other upstream failure."""

    pass
