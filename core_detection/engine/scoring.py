"""
Confidence scoring for calendar events.

Five independent signals (title, duration, attendees, description, virtual
indicators) are scored in [0, 1], weighted by ``rules.scoring_weights`` and
clamped to a single meeting-likelihood value.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

from core_detection.patterns.library import DEFAULT_PATTERN_LIBRARY, PatternLibrary
from domain.models import (
    CalendarEvent,
    ConfidenceBreakdown,
    EventAttendee,
    MeetingDetectionRules,
)
from shared_utils.constants import Defaults, LogScope
from shared_utils.logging_utils import get_scoped_logger
from shared_utils.validation import InputValidator

logger = get_scoped_logger(LogScope.SCORING)


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return min(upper, max(lower, value))


class ConfidenceScorer:
    """Weighted multi-signal meeting-likelihood scorer.

    Pure: the result depends only on the event, the rules and the pattern
    library handed in.
    """

    KEYWORD_HIT: float = 0.3
    EXCLUDE_PENALTY: float = -0.5

    DURATION_TOO_SHORT: float = 0.1
    DURATION_TOO_LONG: float = 0.3
    DURATION_COMMON: float = 0.8
    DURATION_REASONABLE: float = 0.6
    DURATION_OTHER: float = 0.4
    REASONABLE_MAX_MINUTES: int = 120

    ATTENDEES_NEUTRAL: float = 0.5
    ATTENDEES_TOO_FEW: float = 0.2
    ATTENDEES_PAIR: float = 0.8
    ATTENDEES_SMALL_TEAM: float = 0.9
    ATTENDEES_LARGE: float = 0.7
    ATTENDEES_VERY_LARGE: float = 0.5
    ATTENDEES_OTHER: float = 0.6

    DESCRIPTION_NEUTRAL: float = 0.5

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns

    def score(self, event: CalendarEvent, rules: MeetingDetectionRules) -> float:
        """Meeting confidence in [0, 1]."""
        return self.score_breakdown(event, rules).total

    def score_breakdown(
        self, event: CalendarEvent, rules: MeetingDetectionRules
    ) -> ConfidenceBreakdown:
        """Score every signal and keep the parts for explanation."""
        weights = rules.scoring_weights

        defects = InputValidator.event_defects(event)
        if defects:
            logger.debug("malformed_event_scored_zero", event_id=event.id, defects=defects)
            return ConfidenceBreakdown(weights=weights, total=0.0, malformed=True)

        title = self.title_score(event.title, rules)
        duration = self.duration_score(event.duration, rules)
        attendees = self.attendee_score(event.attendees, rules)
        description = self.description_score(event.description)
        virtual = self.virtual_score(event, rules)

        total = clamp(
            title * weights.title
            + duration * weights.duration
            + attendees * weights.attendees
            + description * weights.description
            + virtual * weights.virtual
        )

        logger.debug(
            "event_scored",
            event_id=event.id,
            title=title,
            duration=duration,
            attendees=attendees,
            description=description,
            virtual=virtual,
            total=total,
        )
        return ConfidenceBreakdown(
            title=title,
            duration=duration,
            attendees=attendees,
            description=description,
            virtual=virtual,
            weights=weights,
            total=total,
        )

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def title_score(self, title: str, rules: MeetingDetectionRules) -> float:
        title_lower = title.lower()
        score = 0.0

        if _contains_any(title_lower, rules.meeting_keywords):
            score += self.KEYWORD_HIT
        if _contains_any(title_lower, rules.exclude_keywords):
            score += self.EXCLUDE_PENALTY

        for rule in self._patterns.title_rules:
            if rule.matches(title):
                score += rule.score

        return clamp(score)

    def duration_score(self, duration: timedelta, rules: MeetingDetectionRules) -> float:
        minutes = int(duration.total_seconds() // 60)

        if duration < rules.minimum_meeting_duration:
            return self.DURATION_TOO_SHORT
        if duration > rules.maximum_meeting_duration:
            return self.DURATION_TOO_LONG
        if minutes in Defaults.COMMON_MEETING_MINUTES:
            return self.DURATION_COMMON
        if Defaults.MIN_MEETING_MINUTES <= minutes <= self.REASONABLE_MAX_MINUTES:
            return self.DURATION_REASONABLE
        return self.DURATION_OTHER

    def attendee_score(
        self, attendees: List[EventAttendee], rules: MeetingDetectionRules
    ) -> float:
        count = len(attendees)

        if not rules.require_attendees:
            return self.ATTENDEES_NEUTRAL
        if count < rules.minimum_attendee_count:
            return self.ATTENDEES_TOO_FEW
        if count == 2:
            return self.ATTENDEES_PAIR
        if 3 <= count <= 8:
            return self.ATTENDEES_SMALL_TEAM
        if 8 < count <= Defaults.HIGH_PRIORITY_ATTENDEES:
            return self.ATTENDEES_LARGE
        if count > Defaults.HIGH_PRIORITY_ATTENDEES:
            return self.ATTENDEES_VERY_LARGE
        return self.ATTENDEES_OTHER

    def description_score(self, description: Optional[str]) -> float:
        if not description:
            return self.DESCRIPTION_NEUTRAL

        score = self.DESCRIPTION_NEUTRAL
        for rule in self._patterns.description_rules:
            if rule.matches(description):
                score += rule.score
        return clamp(score)

    def virtual_score(self, event: CalendarEvent, rules: MeetingDetectionRules) -> float:
        if not rules.detect_virtual_meetings:
            return 0.0

        description = event.description or ""
        location = event.location or ""

        for rule in self._patterns.conferencing_url_rules:
            if rule.matches(description) or rule.matches(location):
                return rule.score

        generic = self._patterns.generic_virtual_rule
        if generic.matches(f"{description} {location}"):
            return generic.score
        return 0.0


def _contains_any(text_lower: str, keywords: List[str]) -> bool:
    return any(keyword.lower() in text_lower for keyword in keywords if keyword)
