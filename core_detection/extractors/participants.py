"""
Participant role resolution.

Maps provider attendees to role-tagged meeting participants using ordered
checks: organizer, presenter, optional, resource, then plain attendee.
"""

from __future__ import annotations

import re
from typing import List

from core_detection.patterns.library import (
    DEFAULT_PATTERN_LIBRARY,
    EMAIL_NAME_SEPARATORS,
    PatternLibrary,
)
from domain.models import (
    AttendeeStatus,
    AttendeeType,
    CalendarEvent,
    EventAttendee,
    MeetingParticipant,
    ParticipantRole,
)


def name_from_email(email: str) -> str:
    """Synthesize a display name from an email's local part.

    ``jane.doe@example.com`` -> ``Jane Doe``; input without ``@`` is
    returned unchanged.
    """
    if not email:
        return ""

    at_index = email.find("@")
    if at_index <= 0:
        return email

    local_part = email[:at_index]
    tokens = [t for t in EMAIL_NAME_SEPARATORS.split(local_part) if t]
    return " ".join(t[0].upper() + t[1:] for t in tokens)


def display_name(attendee: EventAttendee) -> str:
    """Provider name, or one synthesized from the email."""
    return attendee.name or name_from_email(attendee.email or "")


class ParticipantResolver:
    """Resolve each attendee of an event to a MeetingParticipant."""

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY) -> None:
        self._patterns = patterns

    def resolve(self, event: CalendarEvent) -> List[MeetingParticipant]:
        return [self._to_participant(attendee, event) for attendee in event.attendees]

    def _to_participant(self, attendee: EventAttendee, event: CalendarEvent) -> MeetingParticipant:
        return MeetingParticipant(
            name=display_name(attendee),
            email=attendee.email or "",
            role=self.resolve_role(attendee, event),
            is_optional=attendee.type == AttendeeType.OPTIONAL,
            has_accepted=attendee.response_status == AttendeeStatus.ACCEPTED,
        )

    def resolve_role(self, attendee: EventAttendee, event: CalendarEvent) -> ParticipantRole:
        if attendee.is_organizer:
            return ParticipantRole.ORGANIZER

        if self._is_presenter(attendee, event):
            return ParticipantRole.PRESENTER

        if attendee.type == AttendeeType.OPTIONAL:
            return ParticipantRole.OPTIONAL

        if attendee.type == AttendeeType.RESOURCE or self._looks_like_resource(attendee):
            return ParticipantRole.RESOURCE

        return ParticipantRole.ATTENDEE

    def _is_presenter(self, attendee: EventAttendee, event: CalendarEvent) -> bool:
        name = display_name(attendee).strip().lower()
        if not name:
            return False

        title = event.title.lower()
        description = (event.description or "").lower()

        if self._patterns.presentation_title_rule.matches(title):
            first_name = name.split()[0]
            if re.search(rf"\b{re.escape(first_name)}\b", title):
                return True

        for match in self._patterns.presenter_marker_rule.pattern.finditer(description):
            if name in match.group(1):
                return True

        return False

    def _looks_like_resource(self, attendee: EventAttendee) -> bool:
        name = (attendee.name or "").lower()
        email = (attendee.email or "").lower()
        return any(
            keyword in name or keyword in email
            for keyword in self._patterns.resource_keywords
        )
