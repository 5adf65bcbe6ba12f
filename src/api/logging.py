"""SQLite request logging for API."""

import logging
import sqlite3
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from fastapi import HTTPException, Request

from core.config import DB_PATH, REQUEST_LOG_ENABLED

logger = logging.getLogger(__name__)


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    upstream_status: int | None = None
    processing_time_ms: int = 0
    events_returned: int | None = None
    event_id: str | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)
    started_at: float = field(default_factory=time.time, repr=False)

    @classmethod
    def for_request(cls, request: Request) -> "RequestLog":
        return cls(
            endpoint=request.url.path,
            method=request.method,
            client_ip=get_client_ip(request),
        )

    def record_http_error(self, e: HTTPException) -> None:
        """Copy status and error detail from an HTTPException."""
        self.status_code = e.status_code
        if isinstance(e.detail, dict):
            self.error_code = e.detail.get("code")
            self.error_message = e.detail.get("error") or e.detail.get("message")
            for detail in e.detail.get("details", []):
                self.details.append(("validation_error", detail))
        else:
            self.error_message = str(e.detail)

    def finish(self) -> None:
        self.processing_time_ms = int((time.time() - self.started_at) * 1000)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def log_request(log: RequestLog, db_path: Path | None = None) -> None:
    """Write request log to SQLite database."""
    if not REQUEST_LOG_ENABLED and db_path is None:
        return

    conn = sqlite3.connect(db_path or DB_PATH)
    try:
        cursor = conn.cursor()

        cursor.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip,
                status_code, error_code, error_message, upstream_status,
                processing_time_ms, events_returned, event_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.status_code,
                log.error_code,
                log.error_message,
                log.upstream_status,
                log.processing_time_ms,
                log.events_returned,
                log.event_id,
            ),
        )

        for detail_type, message in log.details:
            cursor.execute(
                """
                INSERT INTO api_request_details (request_id, detail_type, message)
                VALUES (?, ?, ?)
            """,
                (log.request_id, detail_type, message),
            )

        conn.commit()
    finally:
        conn.close()


def safe_log_request(log: RequestLog) -> None:
    """Log the request; a logging failure never fails the request."""
    log.finish()
    try:
        log_request(log)
    except sqlite3.Error as e:
        logger.warning(f"Failed to write request log {log.request_id}: {e}")
