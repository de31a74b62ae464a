"""
Agenda, tag and note extraction from event text.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable, List, Optional

from core_detection.patterns.library import (
    DEFAULT_PATTERN_LIBRARY,
    LIST_MARKER,
    PatternLibrary,
)
from domain.models import CalendarEvent
from shared_utils.constants import LogScope
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.EXTRACTION)


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeats, keeping first-seen order."""
    seen = set()
    unique: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def _has_word(word: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


class AgendaExtractor:
    """Pulls agenda items out of an event description.

    Strategies are tried in order and the first non-empty one wins:
    an explicit ``Agenda:`` section, numbered lines, bulleted lines,
    then topic phrases such as "discuss X".
    """

    SECTION_NAME = "agenda"

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns
        self._agenda_section = patterns.section_pattern(self.SECTION_NAME)
        self._strategies = (
            self._from_section,
            self._from_numbered_items,
            self._from_bulleted_items,
            self._from_topics,
        )

    def extract(self, event: CalendarEvent) -> List[str]:
        description = event.description
        if not description:
            return []

        for strategy in self._strategies:
            items = dedupe(strategy(description))
            if items:
                logger.debug(
                    "agenda_extracted",
                    event_id=event.id,
                    strategy=strategy.__name__.lstrip("_"),
                    item_count=len(items),
                )
                return items
        return []

    def _from_section(self, description: str) -> List[str]:
        match = self._agenda_section.search(description)
        if not match:
            return []

        items = []
        for line in match.group(1).splitlines():
            cleaned = line.strip()
            if not cleaned or cleaned.startswith("---"):
                continue
            item = LIST_MARKER.sub("", cleaned).strip()
            if item:
                items.append(item)
        return items

    def _from_numbered_items(self, description: str) -> List[str]:
        return _captured(self._patterns.numbered_item_rule.pattern.finditer(description))

    def _from_bulleted_items(self, description: str) -> List[str]:
        return _captured(self._patterns.bulleted_item_rule.pattern.finditer(description))

    def _from_topics(self, description: str) -> List[str]:
        items = []
        for rule in self._patterns.topic_rules:
            for topic in _captured(rule.pattern.finditer(description)):
                items.append(f"{self._patterns.topic_prefix} {topic}")
        return items


def _captured(matches: Iterable[re.Match]) -> List[str]:
    items = []
    for match in matches:
        value = (match.group(1) or "").strip()
        if value:
            items.append(value)
    return items


class TagExtractor:
    """Lower-cased tag set built from the title and description."""

    URGENT_TAG = "urgent"
    QUARTERLY_TAG = "quarterly"

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns

    def extract(self, event: CalendarEvent) -> FrozenSet[str]:
        content = f"{event.title} {event.description or ''}".lower()
        patterns = self._patterns
        tags = set()

        tags.update(_captured(patterns.bracket_tag_rule.pattern.finditer(content)))
        tags.update(_captured(patterns.hashtag_rule.pattern.finditer(content)))
        tags.update(dept for dept in patterns.department_tags if _has_word(dept, content))
        tags.update(kind for kind in patterns.meeting_type_tags if _has_word(kind, content))

        if patterns.urgent_tag_rule.matches(content):
            tags.add(self.URGENT_TAG)
        if patterns.quarterly_tag_rule.matches(content):
            tags.add(self.QUARTERLY_TAG)

        return frozenset(tags)


class NotesExtractor:
    """Preparation notes and links to earlier meetings."""

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns
        self._preparation_sections = tuple(
            patterns.section_pattern(name) for name in patterns.preparation_sections
        )

    def preparation_notes(self, event: CalendarEvent) -> Optional[str]:
        description = event.description
        if not description:
            return None

        for section in self._preparation_sections:
            match = section.search(description)
            if match and match.group(1).strip():
                return match.group(1).strip()
        return None

    def previous_meeting_ids(self, event: CalendarEvent) -> List[str]:
        description = event.description
        if not description:
            return []

        ids = []
        for rule in self._patterns.previous_meeting_rules:
            ids.extend(match.group(1).lower() for match in rule.pattern.finditer(description))
        return dedupe(ids)
