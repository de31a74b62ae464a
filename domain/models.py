"""
Pure domain models for the meeting detection engine.

Calendar events come in from provider collaborators; meeting contexts and
detection statistics flow out to recording / distribution consumers.
All models are frozen: a change means building a new instance with
``model_copy(update=...)``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shared_utils.constants import (
    DEFAULT_EXCLUDE_KEYWORDS,
    DEFAULT_MEETING_KEYWORDS,
    Defaults,
)


# ---------------------------------------------------------------------------
# Calendar input (owned by provider collaborators)
# ---------------------------------------------------------------------------


class CalendarProvider(str, Enum):
    """Calendar source an event was fetched from."""

    GOOGLE = "google"
    OUTLOOK = "outlook"
    APPLE = "apple"
    DEVICE = "device"


class EventStatus(str, Enum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class AttendeeStatus(str, Enum):
    """Attendee response status."""

    NEEDS_ACTION = "needs_action"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"


class AttendeeType(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    RESOURCE = "resource"


class EventAttendee(BaseModel):
    """Attendee as reported by the calendar provider."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    email: Optional[str] = None
    is_organizer: bool = False
    response_status: AttendeeStatus = AttendeeStatus.NEEDS_ACTION
    type: AttendeeType = AttendeeType.REQUIRED


class CalendarEvent(BaseModel):
    """Calendar event normalized across providers."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    attendees: List[EventAttendee] = []
    is_all_day: bool = False
    provider: Optional[CalendarProvider] = None
    recurrence_rule: Optional[str] = None
    status: EventStatus = EventStatus.CONFIRMED

    @model_validator(mode="after")
    def _check_timezone_awareness(self) -> "CalendarEvent":
        # Naive and aware datetimes cannot be compared or subtracted
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("start_time and end_time must both be timezone-aware or both naive")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


# ---------------------------------------------------------------------------
# Detection configuration
# ---------------------------------------------------------------------------


class ScoringWeights(BaseModel):
    """Weights applied to the five confidence sub-scores."""

    model_config = ConfigDict(frozen=True)

    title: float = Field(default=Defaults.TITLE_WEIGHT, ge=0.0, le=1.0)
    duration: float = Field(default=Defaults.DURATION_WEIGHT, ge=0.0, le=1.0)
    attendees: float = Field(default=Defaults.ATTENDEE_WEIGHT, ge=0.0, le=1.0)
    description: float = Field(default=Defaults.DESCRIPTION_WEIGHT, ge=0.0, le=1.0)
    virtual: float = Field(default=Defaults.VIRTUAL_WEIGHT, ge=0.0, le=1.0)


class MeetingDetectionRules(BaseModel):
    """Detection rule set. Replaced wholesale, never edited in place."""

    model_config = ConfigDict(frozen=True)

    meeting_keywords: List[str] = list(DEFAULT_MEETING_KEYWORDS)
    exclude_keywords: List[str] = list(DEFAULT_EXCLUDE_KEYWORDS)
    minimum_confidence_threshold: float = Field(
        default=Defaults.MIN_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0
    )
    minimum_meeting_duration: timedelta = timedelta(minutes=Defaults.MIN_MEETING_MINUTES)
    maximum_meeting_duration: timedelta = timedelta(minutes=Defaults.MAX_MEETING_MINUTES)
    require_attendees: bool = True
    minimum_attendee_count: int = Field(default=Defaults.MIN_ATTENDEE_COUNT, ge=0)
    detect_virtual_meetings: bool = True
    scoring_weights: ScoringWeights = ScoringWeights()
    summary_delay_after_meeting: timedelta = timedelta(minutes=Defaults.SUMMARY_DELAY_MINUTES)

    @model_validator(mode="after")
    def _check_duration_bounds(self) -> "MeetingDetectionRules":
        if self.minimum_meeting_duration < timedelta(0):
            raise ValueError("minimum_meeting_duration must not be negative")
        if self.minimum_meeting_duration > self.maximum_meeting_duration:
            raise ValueError(
                "minimum_meeting_duration must not exceed maximum_meeting_duration"
            )
        if self.summary_delay_after_meeting < timedelta(0):
            raise ValueError("summary_delay_after_meeting must not be negative")
        return self


# ---------------------------------------------------------------------------
# Meeting context output
# ---------------------------------------------------------------------------


class MeetingType(str, Enum):
    STANDUP = "standup"
    ONE_ON_ONE = "one_on_one"
    TEAM_MEETING = "team_meeting"
    PRESENTATION = "presentation"
    INTERVIEW = "interview"
    TRAINING = "training"
    BRAINSTORMING = "brainstorming"
    RETROSPECTIVE = "retrospective"
    PLANNING = "planning"
    REVIEW = "review"


class MeetingPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class ParticipantRole(str, Enum):
    ORGANIZER = "organizer"
    PRESENTER = "presenter"
    ATTENDEE = "attendee"
    OPTIONAL = "optional"
    RESOURCE = "resource"


class VirtualPlatform(str, Enum):
    ZOOM = "zoom"
    MEET = "meet"
    TEAMS = "teams"
    WEBEX = "webex"


class LocationType(str, Enum):
    VIRTUAL = "virtual"
    CONFERENCE = "conference"
    OFFICE = "office"
    EXTERNAL = "external"


class MeetingParticipant(BaseModel):
    """Attendee with a resolved meeting role."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str = ""
    role: ParticipantRole = ParticipantRole.ATTENDEE
    is_optional: bool = False
    has_accepted: bool = False


class VirtualMeetingInfo(BaseModel):
    """Conferencing details parsed from a join link."""

    model_config = ConfigDict(frozen=True)

    platform: VirtualPlatform
    meeting_id: str
    join_url: str
    password: Optional[str] = None
    dial_in_number: Optional[str] = None
    access_code: Optional[str] = None


class MeetingLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: LocationType = LocationType.OFFICE
    building: Optional[str] = None
    room: Optional[str] = None
    address: Optional[str] = None


class RecordingPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    auto_start: bool = False
    auto_stop: bool = True
    record_audio: bool = True
    record_video: bool = False
    audio_quality: str = Defaults.AUDIO_QUALITY
    enhance_audio: bool = True


class SummaryDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    recipients: List[str] = []
    include_transcript: bool = True
    include_action_items: bool = True
    delivery_method: str = Defaults.DELIVERY_METHOD
    delay_after_meeting: timedelta = timedelta(minutes=Defaults.SUMMARY_DELAY_MINUTES)


class MeetingContext(BaseModel):
    """Structured extraction result for one event that qualified as a meeting.

    ``event`` is the caller's event instance, held by reference. When dumped,
    it is embedded as a plain snapshot with no back-reference, so the
    structure stays acyclic.
    """

    model_config = ConfigDict(frozen=True)

    event: CalendarEvent
    type: MeetingType
    participants: List[MeetingParticipant] = []
    agenda_items: List[str] = []
    tags: FrozenSet[str] = frozenset()
    expected_duration: timedelta
    priority: MeetingPriority = MeetingPriority.NORMAL
    should_auto_record: bool = False
    virtual_meeting_info: Optional[VirtualMeetingInfo] = None
    location: Optional[MeetingLocation] = None
    recording_preferences: Optional[RecordingPreferences] = None
    summary_distribution: Optional[SummaryDistribution] = None
    preparation_notes: Optional[str] = None
    previous_meeting_ids: List[str] = []
    detection_confidence: float = Field(ge=0.0, le=1.0)
    extracted_at: datetime

    @property
    def is_high_confidence(self) -> bool:
        return self.detection_confidence >= Defaults.HIGH_CONFIDENCE

    @property
    def is_recurring(self) -> bool:
        return self.event.recurrence_rule is not None

    @property
    def attendee_count(self) -> int:
        return len(self.participants)

    @property
    def is_large_meeting(self) -> bool:
        return self.attendee_count > Defaults.LARGE_MEETING_ATTENDEES

    @property
    def attendee_emails(self) -> List[str]:
        return [p.email for p in self.participants if p.email]


# ---------------------------------------------------------------------------
# Scoring explanation and statistics
# ---------------------------------------------------------------------------


class ConfidenceBreakdown(BaseModel):
    """Per-signal sub-scores behind a confidence value."""

    model_config = ConfigDict(frozen=True)

    title: float = 0.0
    duration: float = 0.0
    attendees: float = 0.0
    description: float = 0.0
    virtual: float = 0.0
    weights: ScoringWeights = ScoringWeights()
    total: float = Field(default=0.0, ge=0.0, le=1.0)
    malformed: bool = False


class BatchDetectionSummary(BaseModel):
    """Partial detection outcome for one batch (or one slice of a batch).

    Summaries merge associatively, so parallel workers can each produce one
    and the owner reduces them before touching the running statistics.
    """

    model_config = ConfigDict(frozen=True)

    events_processed: int = 0
    meetings_detected: int = 0
    confidence_sum: float = 0.0
    type_histogram: Dict[MeetingType, int] = {}
    failed_event_ids: List[str] = []

    @classmethod
    def from_contexts(
        cls,
        contexts: List[MeetingContext],
        events_processed: int,
        failed_event_ids: Optional[List[str]] = None,
    ) -> "BatchDetectionSummary":
        histogram: Dict[MeetingType, int] = {}
        for ctx in contexts:
            histogram[ctx.type] = histogram.get(ctx.type, 0) + 1
        return cls(
            events_processed=events_processed,
            meetings_detected=len(contexts),
            confidence_sum=sum(ctx.detection_confidence for ctx in contexts),
            type_histogram=histogram,
            failed_event_ids=list(failed_event_ids or []),
        )

    def merge(self, other: "BatchDetectionSummary") -> "BatchDetectionSummary":
        histogram = dict(self.type_histogram)
        for meeting_type, count in other.type_histogram.items():
            histogram[meeting_type] = histogram.get(meeting_type, 0) + count
        return BatchDetectionSummary(
            events_processed=self.events_processed + other.events_processed,
            meetings_detected=self.meetings_detected + other.meetings_detected,
            confidence_sum=self.confidence_sum + other.confidence_sum,
            type_histogram=histogram,
            failed_event_ids=self.failed_event_ids + other.failed_event_ids,
        )


class MeetingDetectionStats(BaseModel):
    """Snapshot of the running detection statistics."""

    model_config = ConfigDict(frozen=True)

    total_events_processed: int = 0
    meetings_detected: int = 0
    average_confidence: float = 0.0
    # Histogram of the most recent batch only; not cumulative.
    meeting_type_distribution: Dict[MeetingType, int] = {}
    last_processed_at: Optional[datetime] = None

    @property
    def detection_rate(self) -> float:
        if self.total_events_processed == 0:
            return 0.0
        return self.meetings_detected / self.total_events_processed
