"""
Root conftest.py: shared fixtures for the entire test suite.

Guidelines:
    • No __init__.py in test sub-directories (avoids shadowing root packages).
    • pytest.ini_options lives in pyproject.toml with pythonpath=["."].
    • Markers: integration.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from domain.models import (
    AttendeeStatus,
    AttendeeType,
    CalendarEvent,
    EventAttendee,
    MeetingDetectionRules,
)
from services.meeting_detection_service import MeetingDetectionService
from services.stats_aggregator import DetectionStatsAggregator


# ---------------------------------------------------------------------------
# Marker registration
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ---------------------------------------------------------------------------
# Fixed clock
# ---------------------------------------------------------------------------

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


# ---------------------------------------------------------------------------
# Domain object factories
# ---------------------------------------------------------------------------

def make_attendee(
    name: Optional[str] = None,
    email: Optional[str] = None,
    *,
    organizer: bool = False,
    status: AttendeeStatus = AttendeeStatus.ACCEPTED,
    kind: AttendeeType = AttendeeType.REQUIRED,
) -> EventAttendee:
    return EventAttendee(
        name=name,
        email=email,
        is_organizer=organizer,
        response_status=status,
        type=kind,
    )


def make_attendees(count: int) -> List[EventAttendee]:
    """``count`` attendees, the first one organizing."""
    return [
        make_attendee(
            name=f"Person {i}",
            email=f"person{i}@example.com",
            organizer=(i == 0),
        )
        for i in range(count)
    ]


def make_event(
    event_id: str = "evt-1",
    title: str = "Weekly Standup",
    *,
    minutes: int = 15,
    attendees: Optional[List[EventAttendee]] = None,
    attendee_count: int = 3,
    description: Optional[str] = None,
    location: Optional[str] = None,
    start: datetime = FIXED_NOW + timedelta(hours=1),
    recurrence_rule: Optional[str] = None,
) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        title=title,
        description=description,
        location=location,
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        attendees=attendees if attendees is not None else make_attendees(attendee_count),
        recurrence_rule=recurrence_rule,
    )


@pytest.fixture()
def standup_event() -> CalendarEvent:
    """3 attendees, 15 minutes, clearly a meeting."""
    return make_event()


@pytest.fixture()
def one_on_one_event() -> CalendarEvent:
    return make_event(
        event_id="evt-1on1",
        title="1:1 with Sam",
        minutes=30,
        attendees=[
            make_attendee("Alex Kim", "alex@example.com", organizer=True),
            make_attendee("Sam Lee", "sam@example.com"),
        ],
    )


@pytest.fixture()
def default_rules() -> MeetingDetectionRules:
    return MeetingDetectionRules()


@pytest.fixture()
def stats_aggregator() -> DetectionStatsAggregator:
    return DetectionStatsAggregator()


@pytest.fixture()
def detection_service(stats_aggregator) -> MeetingDetectionService:
    """Sequential service with a fixed clock and its own aggregator."""
    return MeetingDetectionService(stats_aggregator=stats_aggregator, clock=fixed_clock)


# ---------------------------------------------------------------------------
# Factories exposed as fixtures (tests never import conftest directly)
# ---------------------------------------------------------------------------

@pytest.fixture()
def event_factory():
    return make_event


@pytest.fixture()
def attendee_factory():
    return make_attendee


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW
