"""
Google OAuth session holder with lazy initialization.

One credential set lives for the lifetime of the process. It is seeded from
the environment, replaced by every successful code exchange, and updated
whenever google-auth refreshes the access token.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri
from google.oauth2.credentials import Credentials as GoogleCredentials

from core.config import (
    GOOGLE_AUTHORIZE_URL,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_OAUTH_ACCESS_TOKEN,
    GOOGLE_OAUTH_EXPIRY_DATE,
    GOOGLE_OAUTH_REFRESH_TOKEN,
    GOOGLE_REDIRECT_URI,
    GOOGLE_SCOPES,
    GOOGLE_TOKEN_URL,
)
from core.exceptions import AdapterError, AuthExchangeError, NotAuthenticatedError
from models.credentials import Credential

logger = logging.getLogger(__name__)


def _ms_to_utc_naive(expiry_ms: int | None) -> datetime | None:
    """Convert epoch milliseconds to the naive UTC datetime google-auth expects."""
    if expiry_ms is None:
        return None
    return datetime.fromtimestamp(expiry_ms / 1000, tz=timezone.utc).replace(tzinfo=None)


def _utc_naive_to_ms(expiry: datetime | None) -> int | None:
    if expiry is None:
        return None
    return int(expiry.replace(tzinfo=timezone.utc).timestamp() * 1000)


class OAuthSession:
    """Single-user Google OAuth credential holder.

    Example:
        >>> oauth = get_oauth_session()
        >>> url = oauth.get_auth_url()
        >>> tokens = oauth.exchange_code(code_from_redirect)
    """

    def __init__(self, credential: Credential):
        self.credential = credential

    @classmethod
    def from_config(cls) -> "OAuthSession":
        """Build the holder from environment configuration."""
        return cls(
            Credential(
                client_id=GOOGLE_CLIENT_ID,
                client_secret=GOOGLE_CLIENT_SECRET,
                redirect_uri=GOOGLE_REDIRECT_URI,
                access_token=GOOGLE_OAUTH_ACCESS_TOKEN,
                refresh_token=GOOGLE_OAUTH_REFRESH_TOKEN,
                scopes=list(GOOGLE_SCOPES),
                token_type="Bearer",
                expiry_date=GOOGLE_OAUTH_EXPIRY_DATE,
            )
        )

    def has_tokens(self) -> bool:
        return self.credential.has_tokens()

    def get_auth_url(self) -> str:
        """Build the consent-screen URL requesting offline access.

        Returns:
            URL to redirect the user to. Same output for the same configuration.
        """
        return prepare_grant_uri(
            GOOGLE_AUTHORIZE_URL,
            client_id=self.credential.client_id,
            response_type="code",
            redirect_uri=self.credential.redirect_uri,
            scope=GOOGLE_SCOPES,
            access_type="offline",
        )

    def _session(self) -> OAuth2Session:
        return OAuth2Session(
            client_id=self.credential.client_id,
            client_secret=self.credential.client_secret,
            redirect_uri=self.credential.redirect_uri,
            scope=" ".join(GOOGLE_SCOPES),
            token_endpoint_auth_method="client_secret_post",
        )

    def exchange_code(self, code: str) -> dict[str, Any]:
        """Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the OAuth redirect.

        Returns:
            The new token set.

        Raises:
            AuthExchangeError: If Google rejects the code.
            AdapterError: If the token endpoint cannot be reached.
        """
        try:
            token = self._session().fetch_token(
                GOOGLE_TOKEN_URL,
                grant_type="authorization_code",
                code=code,
            )
        except AuthlibBaseError as e:
            logger.error(f"Token exchange rejected: {e}")
            raise AuthExchangeError(
                "Failed to authenticate with Google",
                reason=getattr(e, "error", None),
            ) from e
        except requests.RequestException as e:
            logger.error(f"Token endpoint request failed: {e}")
            raise AdapterError(f"Token exchange failed: {e}") from e

        cred = self.credential
        cred.access_token = token.get("access_token") or ""
        # Google only issues a refresh token on first consent
        cred.refresh_token = token.get("refresh_token") or cred.refresh_token
        if token.get("scope"):
            cred.scopes = token["scope"].split()
        cred.token_type = token.get("token_type", "Bearer")
        expires_at = token.get("expires_at")
        cred.expiry_date = int(expires_at * 1000) if expires_at else None

        logger.info(f"Token exchange succeeded with scopes: {cred.scopes}")
        return cred.token_set()

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for the calendar client.

        Raises:
            NotAuthenticatedError: If no token set is held.
        """
        if not self.has_tokens():
            raise NotAuthenticatedError()

        cred = self.credential
        return GoogleCredentials(
            token=cred.access_token or None,
            refresh_token=cred.refresh_token or None,
            token_uri=GOOGLE_TOKEN_URL,
            client_id=cred.client_id,
            client_secret=cred.client_secret,
            scopes=cred.scopes,
            expiry=_ms_to_utc_naive(cred.expiry_date),
        )

    def sync_credentials(self, creds: GoogleCredentials) -> None:
        """Copy tokens refreshed by google-auth back into the held credential."""
        cred = self.credential
        if creds.token and creds.token != cred.access_token:
            cred.access_token = creds.token
            cred.expiry_date = _utc_naive_to_ms(creds.expiry)
            logger.info("Access token refreshed")
        if creds.refresh_token and creds.refresh_token != cred.refresh_token:
            cred.refresh_token = creds.refresh_token

    def token_info(self) -> dict[str, Any]:
        """Get token status without exposing the tokens themselves."""
        cred = self.credential
        if not cred.has_tokens():
            return {"status": "no_token"}

        now_ms = datetime.now(timezone.utc).timestamp() * 1000
        is_expired = cred.expiry_date is not None and cred.expiry_date < now_ms
        return {
            "status": "expired" if is_expired else "valid",
            "scopes": cred.scopes,
            "expiry_date": cred.expiry_date,
            "has_refresh_token": bool(cred.refresh_token),
        }


_oauth_session: OAuthSession | None = None


def get_oauth_session() -> OAuthSession:
    """Get or create the process-wide OAuth session (lazy initialization)."""
    global _oauth_session
    if _oauth_session is None:
        _oauth_session = OAuthSession.from_config()
    return _oauth_session
