"""
FastAPI facade over the meeting detection engine.

Endpoints:
    GET  /health                          Health check
    POST /api/v1/meetings/detect          Detect meetings in a batch of events
    POST /api/v1/meetings/detect-one      Detect a single event
    GET  /api/v1/meetings/upcoming        Upcoming meetings from connected calendars
    GET  /api/v1/meetings/search          Meetings matching a text query
    GET  /api/v1/detection/stats          Running detection statistics
    PUT  /api/v1/detection/rules          Replace the detection rules
"""

from datetime import timedelta
from fastapi import FastAPI, status, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import uvicorn

from shared_utils.config_loader import get_settings
from shared_utils.logging_utils import ContextualLogger, configure_logging
from shared_utils.constants import LogScope, APIEndpoints
from shared_utils.error_handler import (
    AppException, ValidationError, handle_error
)
from shared_utils.validation import InputValidator
from shared_utils.di_container import get_di_container


# ---------------------------------------------------------------------------
# Application bootstrap
# ---------------------------------------------------------------------------

settings = get_settings()
configure_logging(environment=settings.environment, level=settings.log_level)
logger = ContextualLogger(scope=LogScope.API)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=settings.app_description,
)

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Build the engine once at startup so bad detection settings fail fast
try:
    _container = get_di_container()
    _container.get_calendar_service()
    logger.info(
        "api_initialized",
        environment=settings.environment,
        threshold=_container.get_detection_service().rules.minimum_confidence_threshold,
    )
except Exception as e:
    logger.error("api_initialization_failed", error=str(e))
    raise


def _error_response(e: Exception) -> JSONResponse:
    if isinstance(e, AppException):
        logger.warning("request_failed", error_code=e.error_code, message=e.message)
        return JSONResponse(status_code=e.http_status, content=e.to_dict())
    error_response = handle_error(e, scope=LogScope.API)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get(APIEndpoints.HEALTH)
def health_check() -> dict:
    """Health check endpoint."""
    logger.debug("health_check_requested")
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": settings.app_version,
    }


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

@app.post(APIEndpoints.DETECT)
@limiter.limit(settings.rate_limit)
async def detect_meetings(
    request: Request,
    body: dict,
) -> JSONResponse:
    """Run detection over a batch of calendar events.

    Body JSON:
        events (list[object]): Calendar event records. Records that fail
            validation are skipped and counted as processed.
    """
    try:
        events = body.get("events")
        if not isinstance(events, list):
            raise ValidationError("events must be a list", context={"keys": sorted(body)})

        detection = get_di_container().get_detection_service()
        meetings = detection.detect_meetings(events)

        return JSONResponse(
            content={
                "count": len(meetings),
                "meetings": [m.model_dump(mode="json") for m in meetings],
            }
        )
    except Exception as e:
        return _error_response(e)


@app.post(APIEndpoints.DETECT_ONE)
@limiter.limit(settings.rate_limit)
async def detect_meeting(
    request: Request,
    body: dict,
) -> JSONResponse:
    """Detect a single calendar event; ``meeting`` is null below threshold."""
    try:
        event = InputValidator.coerce_event(body)
        if event is None:
            raise ValidationError("Malformed calendar event", context={"event_id": body.get("id")})

        defects = InputValidator.event_defects(event)
        if defects:
            raise ValidationError(
                "Calendar event cannot be scored",
                context={"event_id": event.id, "defects": defects},
            )

        detection = get_di_container().get_detection_service()
        context = detection.detect_meeting(event)

        return JSONResponse(
            content={
                "meeting": context.model_dump(mode="json") if context else None,
                "confidence": detection.scorer.score(event, detection.rules),
            }
        )
    except Exception as e:
        return _error_response(e)


@app.get(APIEndpoints.UPCOMING)
async def upcoming_meetings(days: int = 7) -> JSONResponse:
    """Meetings across connected calendars within the next ``days`` days."""
    try:
        InputValidator.validate_positive_int(days, "days")
        calendar = get_di_container().get_calendar_service()
        meetings = calendar.get_upcoming_meetings(time_window=timedelta(days=days))
        return JSONResponse(
            content={
                "count": len(meetings),
                "meetings": [m.model_dump(mode="json") for m in meetings],
            }
        )
    except Exception as e:
        return _error_response(e)


@app.get(APIEndpoints.SEARCH)
async def search_meetings(q: str = "") -> JSONResponse:
    try:
        query = InputValidator.validate_non_empty_string(q, "q")
        calendar = get_di_container().get_calendar_service()
        meetings = calendar.search_meetings(query)
        return JSONResponse(
            content={
                "count": len(meetings),
                "meetings": [m.model_dump(mode="json") for m in meetings],
            }
        )
    except Exception as e:
        return _error_response(e)


# ---------------------------------------------------------------------------
# Configuration & statistics
# ---------------------------------------------------------------------------

@app.get(APIEndpoints.STATS)
async def detection_stats() -> JSONResponse:
    try:
        stats = get_di_container().get_detection_service().get_detection_stats()
        content = stats.model_dump(mode="json")
        content["detection_rate"] = stats.detection_rate
        return JSONResponse(content=content)
    except Exception as e:
        return _error_response(e)


@app.put(APIEndpoints.RULES)
async def configure_rules(body: dict) -> JSONResponse:
    """Replace the active detection rules.

    Invalid rules are rejected with INVALID_CONFIG and the previous rules
    stay active.
    """
    try:
        detection = get_di_container().get_detection_service()
        installed = detection.configure_meeting_rules(body)
        return JSONResponse(content=installed.model_dump(mode="json"))
    except Exception as e:
        return _error_response(e)


if __name__ == "__main__":
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.api_port,
        log_level=settings.log_level.lower()
    )
