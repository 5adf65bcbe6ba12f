"""
Tests for the Google OAuth session holder.
"""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from authlib.integrations.base_client import OAuthError

import core.oauth_client as oauth_client
from core.config import GOOGLE_SCOPES
from core.exceptions import AdapterError, AuthExchangeError, NotAuthenticatedError


class FakeOAuth2Session:
    """Replaces authlib's OAuth2Session; fetch_token returns or raises `outcome`."""

    outcome = None
    calls: list[dict] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def fetch_token(self, url, **kwargs):
        FakeOAuth2Session.calls.append({"url": url, **kwargs})
        if isinstance(FakeOAuth2Session.outcome, Exception):
            raise FakeOAuth2Session.outcome
        return FakeOAuth2Session.outcome


@pytest.fixture
def fake_session(monkeypatch):
    FakeOAuth2Session.outcome = None
    FakeOAuth2Session.calls = []
    monkeypatch.setattr(oauth_client, "OAuth2Session", FakeOAuth2Session)
    return FakeOAuth2Session


def test_auth_url_requests_offline_access_and_calendar_scopes(oauth):
    url = oauth.get_auth_url()
    parts = urlsplit(url)
    query = parse_qs(parts.query)

    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == oauth_client.GOOGLE_AUTHORIZE_URL
    assert query["access_type"] == ["offline"]
    assert query["response_type"] == ["code"]
    assert query["client_id"] == ["test-client-id.apps.googleusercontent.com"]
    assert query["redirect_uri"] == ["http://localhost:8000/redirect"]
    assert query["scope"][0].split() == [
        "https://www.googleapis.com/auth/calendar",
        "https://www.googleapis.com/auth/calendar.events",
        "https://www.googleapis.com/auth/calendar.readonly",
    ]


def test_auth_url_is_deterministic(oauth):
    assert oauth.get_auth_url() == oauth.get_auth_url()
    assert "state=" not in oauth.get_auth_url()


def test_exchange_code_overwrites_tokens(oauth, fake_session):
    expires_at = int(datetime.now(timezone.utc).timestamp()) + 3599
    fake_session.outcome = {
        "access_token": "ya29.new-access",
        "refresh_token": "1//new-refresh",
        "scope": " ".join(GOOGLE_SCOPES),
        "token_type": "Bearer",
        "expires_in": 3599,
        "expires_at": expires_at,
    }

    tokens = oauth.exchange_code("4/0Adeu5B-code")

    assert fake_session.calls[0]["code"] == "4/0Adeu5B-code"
    assert fake_session.calls[0]["grant_type"] == "authorization_code"
    assert tokens["access_token"] == "ya29.new-access"
    assert tokens["refresh_token"] == "1//new-refresh"
    assert tokens["expiry_date"] == expires_at * 1000
    assert oauth.credential.access_token == "ya29.new-access"
    assert oauth.credential.refresh_token == "1//new-refresh"


def test_exchange_code_keeps_refresh_token_when_not_reissued(oauth, fake_session):
    fake_session.outcome = {"access_token": "ya29.second", "token_type": "Bearer"}

    tokens = oauth.exchange_code("code")

    assert tokens["refresh_token"] == "1//test-refresh-token"
    assert oauth.credential.access_token == "ya29.second"


def test_exchange_code_authenticates_holder(unauthenticated_oauth, fake_session):
    fake_session.outcome = {"access_token": "ya29.first", "refresh_token": "1//r"}
    assert not unauthenticated_oauth.has_tokens()

    unauthenticated_oauth.exchange_code("code")

    assert unauthenticated_oauth.has_tokens()


def test_rejected_code_raises_auth_exchange_error(oauth, fake_session):
    fake_session.outcome = OAuthError(error="invalid_grant", description="Bad Request")

    with pytest.raises(AuthExchangeError) as exc_info:
        oauth.exchange_code("used-code")

    assert exc_info.value.reason == "invalid_grant"
    assert oauth.credential.access_token == "ya29.test-access-token"


def test_unreachable_token_endpoint_raises_adapter_error(oauth, fake_session):
    fake_session.outcome = requests.ConnectionError("connection refused")

    with pytest.raises(AdapterError):
        oauth.exchange_code("code")


def test_get_credentials_requires_tokens(unauthenticated_oauth):
    with pytest.raises(NotAuthenticatedError):
        unauthenticated_oauth.get_credentials()


def test_get_credentials_carries_expiry_as_naive_utc(oauth):
    creds = oauth.get_credentials()

    expected = datetime.fromtimestamp(
        oauth.credential.expiry_date / 1000, tz=timezone.utc
    ).replace(tzinfo=None)
    assert creds.token == "ya29.test-access-token"
    assert creds.refresh_token == "1//test-refresh-token"
    assert creds.expiry == expected
    assert creds.valid


def test_sync_credentials_copies_refreshed_token(oauth):
    creds = oauth.get_credentials()
    new_expiry = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0) + timedelta(hours=1)
    creds.token = "ya29.refreshed"
    creds.expiry = new_expiry

    oauth.sync_credentials(creds)

    assert oauth.credential.access_token == "ya29.refreshed"
    assert oauth.credential.expiry_date == int(
        new_expiry.replace(tzinfo=timezone.utc).timestamp() * 1000
    )


def test_token_info_hides_tokens(oauth, unauthenticated_oauth):
    info = oauth.token_info()

    assert info["status"] == "valid"
    assert info["has_refresh_token"] is True
    assert "access_token" not in info
    assert unauthenticated_oauth.token_info() == {"status": "no_token"}


def test_token_info_reports_expired_token(oauth):
    oauth.credential.expiry_date = 1752096182165

    assert oauth.token_info()["status"] == "expired"
