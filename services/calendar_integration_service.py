"""
CalendarIntegrationService: fans out over connected calendars and feeds the
fetched events to the detection engine.

A provider that is unauthenticated is skipped; one that raises is logged and
skipped. Neither fails the call.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from domain.models import (
    CalendarEvent,
    CalendarProvider,
    MeetingContext,
    MeetingDetectionRules,
    MeetingDetectionStats,
)
from ports.calendar_provider import CalendarProviderPort
from ports.meeting_detection import MeetingDetectionPort
from services.meeting_detection_service import utc_now
from shared_utils.error_handler import AppException, ExternalServiceError, log_exception
from shared_utils.logging_utils import ContextualLogger, log_execution
from shared_utils.constants import LogScope


logger = ContextualLogger(scope=LogScope.CALENDAR)

DEFAULT_UPCOMING_WINDOW = timedelta(days=7)


class CalendarIntegrationService:
    """Aggregates calendar providers in front of a MeetingDetectionPort."""

    def __init__(
        self,
        *,
        detection: MeetingDetectionPort,
        providers: Optional[List[CalendarProviderPort]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._detection = detection
        self._providers: Dict[CalendarProvider, CalendarProviderPort] = {}
        self._clock = clock
        for provider in providers or []:
            self.register_provider(provider)

    # ------------------------------------------------------------------
    # Provider registry
    # ------------------------------------------------------------------

    def register_provider(self, provider: CalendarProviderPort) -> None:
        self._providers[provider.provider] = provider
        logger.info("calendar_provider_registered", provider=provider.provider.value)

    def disconnect_provider(self, provider: CalendarProvider) -> None:
        if self._providers.pop(provider, None) is not None:
            logger.info("calendar_provider_disconnected", provider=provider.value)

    def get_authentication_status(self) -> Dict[CalendarProvider, bool]:
        """Authentication state for every known provider kind."""
        return {
            kind: (kind in self._providers and self._providers[kind].is_authenticated)
            for kind in CalendarProvider
        }

    # ------------------------------------------------------------------
    # Meetings
    # ------------------------------------------------------------------

    @log_execution(scope=LogScope.CALENDAR)
    def get_upcoming_meetings(
        self, time_window: Optional[timedelta] = None
    ) -> List[MeetingContext]:
        """Meetings starting between now and now + time_window (default 7 days)."""
        start = self._clock()
        end = start + (time_window or DEFAULT_UPCOMING_WINDOW)

        events = self._collect(
            "get_events",
            lambda provider: provider.get_events(start, end),
        )
        meetings = self._detection.detect_meetings(events)
        logger.info("upcoming_meetings_found", count=len(meetings), window_end=end.isoformat())
        return meetings

    def get_todays_meetings(self) -> List[MeetingContext]:
        return self.get_upcoming_meetings(time_window=timedelta(days=1))

    def get_meeting_context(self, event: CalendarEvent) -> Optional[MeetingContext]:
        """Context for a single event, or None if it is not a meeting or extraction fails."""
        try:
            return self._detection.detect_meeting(event)
        except AppException as exc:
            log_exception(exc, scope=LogScope.CALENDAR)
            return None

    @log_execution(scope=LogScope.CALENDAR)
    def search_meetings(
        self,
        query: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[MeetingContext]:
        events = self._collect(
            "search_events",
            lambda provider: provider.search_events(query, start, end),
        )
        meetings = self._detection.detect_meetings(events)
        logger.info("meeting_search_completed", query=query, count=len(meetings))
        return meetings

    # ------------------------------------------------------------------
    # Detection passthrough
    # ------------------------------------------------------------------

    def configure_meeting_detection(self, rules: MeetingDetectionRules) -> MeetingDetectionRules:
        """Raises ConfigurationError if the rules are invalid."""
        installed = self._detection.configure_meeting_rules(rules)
        logger.info("meeting_detection_configured")
        return installed

    def get_meeting_detection_stats(self) -> MeetingDetectionStats:
        return self._detection.get_detection_stats()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _collect(
        self,
        operation: str,
        fetch: Callable[[CalendarProviderPort], List[CalendarEvent]],
    ) -> List[CalendarEvent]:
        events: List[CalendarEvent] = []
        for kind, provider in self._providers.items():
            if not provider.is_authenticated:
                logger.debug("calendar_provider_skipped", provider=kind.value, reason="unauthenticated")
                continue
            try:
                events.extend(fetch(provider))
            except Exception as exc:
                error = exc if isinstance(exc, ExternalServiceError) else ExternalServiceError(
                    f"{kind.value}_calendar",
                    f"{type(exc).__name__}: {exc}",
                    context={"operation": operation},
                )
                log_exception(error, scope=LogScope.CALENDAR)
        return events
