"""
Port interface for meeting detection.

Implementations: MeetingDetectionService (services/)
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from domain.models import (
    CalendarEvent,
    MeetingContext,
    MeetingDetectionRules,
    MeetingDetectionStats,
)


@runtime_checkable
class MeetingDetectionPort(Protocol):
    """Turns calendar events into meeting contexts."""

    def detect_meetings(
        self, events: Sequence[Union[CalendarEvent, Mapping[str, Any]]]
    ) -> List[MeetingContext]:
        """Detect meetings across a batch.

        Events that fail extraction are logged and omitted; they still count
        as processed in the statistics.

        Returns:
            Contexts for the qualifying events, in input order.
        """
        ...

    def detect_meeting(self, event: CalendarEvent) -> Optional[MeetingContext]:
        """Detect a single event.

        Returns:
            MeetingContext, or None when confidence is below the threshold.

        Raises:
            ExtractionError: If context extraction fails.
        """
        ...

    def configure_meeting_rules(
        self, rules: Union[MeetingDetectionRules, Mapping[str, Any]]
    ) -> MeetingDetectionRules:
        """Replace the active rules.

        Raises:
            ConfigurationError: If the rules fail validation. The previous
                rules stay active.
        """
        ...

    def get_detection_stats(self) -> MeetingDetectionStats:
        """Current statistics snapshot."""
        ...
