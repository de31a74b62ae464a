"""
Meeting type classification as an explicit ordered rule chain.

Rules are evaluated top to bottom over the lower-cased title + description;
the first rule whose predicate holds decides the type. Keyword sets overlap
across categories, so the order is the precedence policy.
"""

from __future__ import annotations

from typing import Callable, NamedTuple, Tuple

from core_detection.patterns.library import DEFAULT_PATTERN_LIBRARY, PatternLibrary
from domain.models import CalendarEvent, MeetingType


class ClassificationInput(NamedTuple):
    text: str
    attendee_count: int


class ClassificationRule(NamedTuple):
    name: str
    meeting_type: MeetingType
    predicate: Callable[[ClassificationInput], bool]


def _keyword_predicate(pattern) -> Callable[[ClassificationInput], bool]:
    return lambda item: pattern.search(item.text) is not None


class MeetingTypeClassifier:
    """First-match-wins classifier over the pattern library's type rules."""

    DEFAULT_TYPE = MeetingType.TEAM_MEETING

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns
        self._rules = self._build_rules(patterns)

    @property
    def rules(self) -> Tuple[ClassificationRule, ...]:
        """The chain in evaluation order."""
        return self._rules

    def classify(self, event: CalendarEvent) -> MeetingType:
        item = ClassificationInput(
            text=f"{event.title} {event.description or ''}".lower(),
            attendee_count=len(event.attendees),
        )
        for rule in self._rules:
            if rule.predicate(item):
                return rule.meeting_type
        return self.DEFAULT_TYPE

    @staticmethod
    def _build_rules(patterns: PatternLibrary) -> Tuple[ClassificationRule, ...]:
        chain = []
        for type_rule in patterns.meeting_type_rules:
            predicate = _keyword_predicate(type_rule.pattern)
            if type_rule.meeting_type is MeetingType.ONE_ON_ONE:
                predicate = _one_on_one_predicate(type_rule.pattern, patterns.team_marker)
            chain.append(
                ClassificationRule(
                    name=type_rule.meeting_type.value,
                    meeting_type=type_rule.meeting_type,
                    predicate=predicate,
                )
            )
        return tuple(chain)


def _one_on_one_predicate(pattern, team_marker: str) -> Callable[[ClassificationInput], bool]:
    def predicate(item: ClassificationInput) -> bool:
        if pattern.search(item.text):
            return True
        # Two people and no mention of a team reads as a 1:1
        return item.attendee_count == 2 and team_marker not in item.text

    return predicate
