"""Current-week listing and event creation endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import calendar_service
from api.errors import http_error, to_http_exception
from api.logging import RequestLog, safe_log_request
from api.models.requests import EventRequest
from api.models.responses import ErrorCodes
from core.exceptions import CalendarBridgeError
from services.calendar import CalendarService, build_event_body

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Calendar"])


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    return http_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"Failed to {action}",
        ErrorCodes.INTERNAL_ERROR,
        error=str(e),
    )


@router.get("/week")
async def get_week_events(
    request: Request,
    calendar: CalendarService = Depends(calendar_service),
) -> list[dict]:
    """
    Get events for the current week (Sunday to Saturday).

    Returns at most 10 events, ordered by start time, exactly as Google
    reports them.
    """
    request_log = RequestLog.for_request(request)

    try:
        events = await asyncio.to_thread(calendar.list_current_week_events)

        request_log.status_code = status.HTTP_200_OK
        request_log.events_returned = len(events)
        return events

    except CalendarBridgeError as e:
        http_exc = to_http_exception(e)
        request_log.record_http_error(http_exc)
        request_log.upstream_status = e.upstream_status
        raise http_exc from e

    except Exception as e:
        http_exc = _internal_error("fetch events", e)
        request_log.record_http_error(http_exc)
        raise http_exc from e

    finally:
        safe_log_request(request_log)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    event_request: EventRequest,
    calendar: CalendarService = Depends(calendar_service),
) -> dict:
    """
    Create a new event in the user's primary calendar.

    start and end are sent to Google as UTC datetimes.
    """
    request_log = RequestLog.for_request(request)

    try:
        body = build_event_body(**event_request.model_dump())
        event = await asyncio.to_thread(calendar.create_event, body)

        request_log.status_code = status.HTTP_201_CREATED
        request_log.event_id = event.get("id")
        return event

    except CalendarBridgeError as e:
        http_exc = to_http_exception(e)
        request_log.record_http_error(http_exc)
        request_log.upstream_status = e.upstream_status
        raise http_exc from e

    except Exception as e:
        http_exc = _internal_error("create event", e)
        request_log.record_http_error(http_exc)
        raise http_exc from e

    finally:
        safe_log_request(request_log)
