"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.logging import RequestLog, safe_log_request
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import auth_router, calendar_router, health_router
from core.config import API_DEBUG, API_VERSION, LOG_LEVEL, REQUEST_LOG_ENABLED
from core.database import init_request_log_db
from core.oauth_client import get_oauth_session

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    if REQUEST_LOG_ENABLED:
        init_request_log_db()

    if not get_oauth_session().has_tokens():
        logger.warning("No Google tokens configured; visit /authenticate to sign in")

    yield


app = FastAPI(
    title="Calendar Bridge API",
    description="Google OAuth sign-in, current-week event listing and event creation",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Return dict details as the top-level error body."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = ErrorResponse(
            message=str(exc.detail),
            code=ErrorCodes.INVALID_REQUEST,
        ).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed requests with 400 before any handler runs."""
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]

    request_log = RequestLog.for_request(request)
    request_log.status_code = 400
    request_log.error_code = ErrorCodes.VALIDATION_ERROR
    request_log.error_message = "Request validation failed"
    request_log.details = [("validation_error", detail) for detail in details]
    safe_log_request(request_log)

    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            message="Request validation failed",
            error="; ".join(details),
            code=ErrorCodes.VALIDATION_ERROR,
            details=details,
        ).model_dump(),
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    request_log = RequestLog.for_request(request)
    request_log.status_code = 500
    request_log.error_code = ErrorCodes.INTERNAL_ERROR
    request_log.error_message = str(exc)
    safe_log_request(request_log)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            message="Internal server error",
            error=str(exc) if API_DEBUG else None,
            code=ErrorCodes.INTERNAL_ERROR,
        ).model_dump(),
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(calendar_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
        log_level=LOG_LEVEL.lower(),
    )
