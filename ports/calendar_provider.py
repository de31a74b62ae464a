"""
Port interface for calendar sources.

Implementations: InMemoryCalendarProviderAdapter (adapters/)
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from domain.models import CalendarEvent, CalendarProvider


@runtime_checkable
class CalendarProviderPort(Protocol):
    """Read access to one connected calendar."""

    @property
    def provider(self) -> CalendarProvider:
        ...

    @property
    def is_authenticated(self) -> bool:
        ...

    def get_events(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        """Events overlapping ``[start, end)``.

        Raises:
            ExternalServiceError: If the calendar is unreachable.
        """
        ...

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        """Single event by id, or None."""
        ...

    def search_events(
        self,
        query: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """Events whose title, description or location contains ``query``."""
        ...
