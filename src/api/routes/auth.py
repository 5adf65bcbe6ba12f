"""Google OAuth consent and callback endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from api.dependencies import oauth_session
from api.errors import http_error, to_http_exception
from api.logging import RequestLog, safe_log_request
from api.models.responses import AuthResponse, ErrorCodes, TokenSet
from core.exceptions import CalendarBridgeError
from core.oauth_client import OAuthSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.get("/authenticate", status_code=status.HTTP_302_FOUND)
async def authenticate(
    request: Request,
    oauth: OAuthSession = Depends(oauth_session),
):
    """Redirect the user to the Google OAuth consent screen."""
    request_log = RequestLog.for_request(request)

    try:
        auth_url = oauth.get_auth_url()
        request_log.status_code = status.HTTP_302_FOUND
        return RedirectResponse(auth_url, status_code=status.HTTP_302_FOUND)

    except Exception as e:
        logger.error(f"Authentication redirect failed: {e}", exc_info=True)
        http_exc = http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to generate authentication URL",
            ErrorCodes.INTERNAL_ERROR,
            error=str(e),
        )
        request_log.record_http_error(http_exc)
        raise http_exc

    finally:
        safe_log_request(request_log)


@router.get("/redirect", response_model=AuthResponse)
async def handle_redirect(
    request: Request,
    code: str | None = Query(None, description="Authorization code from Google"),
    oauth: OAuthSession = Depends(oauth_session),
):
    """
    Handle the OAuth callback from Google.

    Exchanges the authorization code for tokens and returns them.
    """
    request_log = RequestLog.for_request(request)

    try:
        if not code:
            raise http_error(
                status.HTTP_400_BAD_REQUEST,
                "Authorization code is required",
                ErrorCodes.INVALID_REQUEST,
            )

        tokens = await asyncio.to_thread(oauth.exchange_code, code)

        request_log.status_code = status.HTTP_200_OK
        return AuthResponse(message="Authentication successful", tokens=TokenSet(**tokens))

    except HTTPException as e:
        request_log.record_http_error(e)
        raise

    except CalendarBridgeError as e:
        logger.error(f"OAuth callback failed: {e}")
        http_exc = to_http_exception(e)
        http_exc.detail["message"] = "Authentication failed"
        request_log.record_http_error(http_exc)
        request_log.upstream_status = e.upstream_status
        raise http_exc from e

    except Exception as e:
        logger.error(f"OAuth callback failed: {e}", exc_info=True)
        http_exc = http_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Authentication failed",
            ErrorCodes.INTERNAL_ERROR,
            error=str(e),
        )
        request_log.record_http_error(http_exc)
        raise http_exc from e

    finally:
        safe_log_request(request_log)
