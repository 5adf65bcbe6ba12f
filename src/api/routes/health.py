"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.dependencies import oauth_session
from api.models.responses import HealthResponse
from core.config import API_VERSION
from core.oauth_client import OAuthSession

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(oauth: OAuthSession = Depends(oauth_session)):
    """
    Health check endpoint for monitoring.

    Always 200; reports whether a Google token set is held.
    """
    token_info = oauth.token_info()
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        authenticated=oauth.has_tokens(),
        token_status=token_info["status"],
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
