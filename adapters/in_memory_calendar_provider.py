"""
In-memory calendar provider adapter for local development.

Implements CalendarProviderPort over a plain dict of CalendarEvent keyed by
id. Used by the API in development and throughout the test suite.

NOT for production: no provider sync, no persistence across restarts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from domain.models import CalendarEvent, CalendarProvider
from shared_utils.logging_utils import get_scoped_logger
from shared_utils.constants import LogScope


logger = get_scoped_logger(LogScope.ADAPTER)


class InMemoryCalendarProviderAdapter:
    """Dict-backed implementation of CalendarProviderPort."""

    def __init__(
        self,
        provider: CalendarProvider = CalendarProvider.DEVICE,
        events: Optional[Iterable[CalendarEvent]] = None,
        authenticated: bool = True,
    ) -> None:
        self._provider = provider
        self._authenticated = authenticated
        self._events: Dict[str, CalendarEvent] = {}
        for event in events or ():
            self.add_event(event)

    # ------------------------------------------------------------------
    # CalendarProviderPort implementation
    # ------------------------------------------------------------------

    @property
    def provider(self) -> CalendarProvider:
        return self._provider

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def get_events(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        """Events overlapping the window, ordered by start time."""
        results = [
            e for e in self._events.values()
            if e.start_time < end and e.end_time > start
        ]
        results.sort(key=lambda e: e.start_time)
        logger.info(
            "inmemory_calendar_events_listed",
            provider=self._provider.value,
            count=len(results),
        )
        return results

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        return self._events.get(event_id)

    def search_events(
        self,
        query: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """Case-insensitive substring search over title, description and location."""
        needle = query.lower()
        results = []
        for e in self._events.values():
            if start is not None and e.end_time <= start:
                continue
            if end is not None and e.start_time >= end:
                continue
            haystack = " ".join(filter(None, (e.title, e.description, e.location))).lower()
            if needle in haystack:
                results.append(e)
        results.sort(key=lambda e: e.start_time)
        logger.info(
            "inmemory_calendar_search",
            provider=self._provider.value,
            query=query,
            count=len(results),
        )
        return results

    # ------------------------------------------------------------------
    # Local helpers (not part of the port)
    # ------------------------------------------------------------------

    def add_event(self, event: CalendarEvent) -> None:
        self._events[event.id] = event.model_copy(update={"provider": self._provider})

    def remove_event(self, event_id: str) -> None:
        self._events.pop(event_id, None)

    def set_authenticated(self, authenticated: bool) -> None:
        self._authenticated = authenticated
