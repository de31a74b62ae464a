"""
Venue resolution: conferencing links and physical locations.
"""

from __future__ import annotations

import re
from typing import Optional

from core_detection.patterns.library import (
    DEFAULT_PATTERN_LIBRARY,
    PatternLibrary,
    PlatformRule,
)
from domain.models import (
    CalendarEvent,
    LocationType,
    MeetingLocation,
    VirtualMeetingInfo,
)

# Sentence punctuation that commonly trails a pasted link
_TRAILING_PUNCTUATION = ".,;:!?)]}>'\""
_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def normalize_join_url(url: str) -> str:
    """Strip trailing punctuation and make sure the URL carries a scheme."""
    url = url.rstrip(_TRAILING_PUNCTUATION)
    if _SCHEME.match(url):
        return url
    return f"https://{url}"


class VirtualMeetingResolver:
    """Finds the first conferencing link in the description or location."""

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns

    def resolve(self, event: CalendarEvent) -> Optional[VirtualMeetingInfo]:
        content = f"{event.description or ''} {event.location or ''}"

        for rule in self._patterns.platform_rules:
            match = rule.pattern.search(content)
            if match is None:
                continue

            groups = match.groupdict()
            join_url = normalize_join_url(match.group(0))
            return VirtualMeetingInfo(
                platform=rule.platform,
                meeting_id=self._meeting_id(rule, match, join_url),
                join_url=join_url,
                password=groups.get("pwd"),
                dial_in_number=self._first_group(self._patterns.dial_in_rule.pattern, content),
                access_code=self._first_group(self._patterns.access_code_rule.pattern, content),
            )
        return None

    @staticmethod
    def _meeting_id(rule: PlatformRule, match: re.Match, join_url: str) -> str:
        meeting_id = match.groupdict().get("id")
        if meeting_id:
            return meeting_id

        if rule.id_pattern is not None:
            id_match = rule.id_pattern.search(join_url)
            if id_match:
                found = next((g for g in id_match.groups() if g), None)
                if found:
                    return found
        return rule.default_meeting_id

    @staticmethod
    def _first_group(pattern: re.Pattern, content: str) -> Optional[str]:
        match = pattern.search(content)
        if match is None:
            return None
        return match.group(1).strip()


class LocationResolver:
    """Classifies the free-text location field."""

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns

    def resolve(self, event: CalendarEvent) -> Optional[MeetingLocation]:
        location = (event.location or "").strip()
        if not location:
            return None

        if self._patterns.virtual_location_rule.matches(location):
            return MeetingLocation(name=location, type=LocationType.VIRTUAL)

        for rule in self._patterns.conference_location_rules:
            match = rule.search(location)
            if match:
                groups = match.groupdict()
                return MeetingLocation(
                    name=location,
                    type=LocationType.CONFERENCE,
                    building=_clean(groups.get("building")),
                    room=_clean(groups.get("room")),
                )

        if self._patterns.street_address_rule.matches(location):
            return MeetingLocation(name=location, type=LocationType.EXTERNAL, address=location)

        return MeetingLocation(name=location, type=LocationType.OFFICE)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
