"""
Meeting policy: priority, auto-record decision, recording preferences and
summary distribution.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from core_detection.patterns.library import DEFAULT_PATTERN_LIBRARY, PatternLibrary
from domain.models import (
    CalendarEvent,
    MeetingDetectionRules,
    MeetingParticipant,
    MeetingPriority,
    MeetingType,
    ParticipantRole,
    RecordingPreferences,
    SummaryDistribution,
)
from shared_utils.constants import Defaults


def _content(event: CalendarEvent) -> str:
    return f"{event.title} {event.description or ''}".lower()


class PolicyEngine:
    """Rule chains deciding how a detected meeting should be handled."""

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns

    def priority(self, event: CalendarEvent, participant_count: int) -> MeetingPriority:
        content = _content(event)
        duration = event.duration

        if self._patterns.urgent_priority_rule.matches(content):
            return MeetingPriority.URGENT

        if (
            self._patterns.high_priority_rule.matches(content)
            or participant_count > Defaults.HIGH_PRIORITY_ATTENDEES
            or duration >= timedelta(minutes=Defaults.HIGH_PRIORITY_MINUTES)
        ):
            return MeetingPriority.HIGH

        if (
            self._patterns.low_priority_rule.matches(content)
            or duration <= timedelta(minutes=Defaults.LOW_PRIORITY_MINUTES)
        ):
            return MeetingPriority.LOW

        return MeetingPriority.NORMAL

    def should_auto_record(
        self, event: CalendarEvent, confidence: float, meeting_type: MeetingType
    ) -> bool:
        if confidence >= Defaults.AUTO_RECORD_CONFIDENCE:
            return True
        if meeting_type in self._patterns.auto_record_types:
            return True
        return self._patterns.record_request_rule.matches(_content(event))

    def recording_preferences(self, event: CalendarEvent) -> Optional[RecordingPreferences]:
        content = _content(event)
        if not self._patterns.recording_mention_rule.matches(content):
            return None

        return RecordingPreferences(
            auto_start=self._patterns.auto_record_rule.matches(content),
            auto_stop=True,
            record_audio=True,
            record_video=self._patterns.video_rule.matches(content),
            audio_quality=Defaults.AUDIO_QUALITY,
            enhance_audio=True,
        )

    def summary_distribution(
        self,
        event: CalendarEvent,
        participants: List[MeetingParticipant],
        rules: MeetingDetectionRules,
    ) -> Optional[SummaryDistribution]:
        content = _content(event)
        if not self._patterns.summary_request_rule.matches(content):
            return None

        recipients = [
            p.email
            for p in participants
            if p.email and p.role != ParticipantRole.RESOURCE
        ]
        return SummaryDistribution(
            enabled=True,
            recipients=recipients,
            include_transcript=not self._patterns.no_transcript_rule.matches(content),
            include_action_items=True,
            delivery_method=Defaults.DELIVERY_METHOD,
            delay_after_meeting=rules.summary_delay_after_meeting,
        )
