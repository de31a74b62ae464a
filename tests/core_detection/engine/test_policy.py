"""
Tests for core_detection.engine.policy.
"""

from datetime import timedelta

import pytest

from core_detection.engine.policy import PolicyEngine
from domain.models import (
    MeetingDetectionRules,
    MeetingParticipant,
    MeetingPriority,
    MeetingType,
    ParticipantRole,
)


@pytest.fixture()
def policy() -> PolicyEngine:
    return PolicyEngine()


# ---------------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------------


class TestPriority:
    def test_urgent_wins(self, policy, event_factory) -> None:
        event = event_factory(title="URGENT: board review", minutes=180)
        assert policy.priority(event, 3) == MeetingPriority.URGENT

    def test_high_by_keyword(self, policy, event_factory) -> None:
        event = event_factory(title="Board update", minutes=30)
        assert policy.priority(event, 3) == MeetingPriority.HIGH

    def test_high_by_participant_count(self, policy, event_factory) -> None:
        assert policy.priority(event_factory(title="All hands", minutes=30), 21) == MeetingPriority.HIGH

    def test_twenty_participants_is_not_high(self, policy, event_factory) -> None:
        assert policy.priority(event_factory(title="All hands", minutes=30), 20) == MeetingPriority.NORMAL

    def test_high_by_duration(self, policy, event_factory) -> None:
        assert policy.priority(event_factory(title="Workshop", minutes=120), 3) == MeetingPriority.HIGH

    def test_low_by_keyword(self, policy, event_factory) -> None:
        assert policy.priority(event_factory(title="Coffee chat", minutes=30), 2) == MeetingPriority.LOW

    def test_low_by_short_duration(self, policy, standup_event) -> None:
        assert policy.priority(standup_event, 3) == MeetingPriority.LOW

    def test_normal(self, policy, event_factory) -> None:
        assert policy.priority(event_factory(title="Weekly sync", minutes=30), 3) == MeetingPriority.NORMAL


# ---------------------------------------------------------------------------
# Auto-record
# ---------------------------------------------------------------------------


class TestShouldAutoRecord:
    def test_high_confidence(self, policy, event_factory) -> None:
        assert policy.should_auto_record(event_factory(title="Sync"), 0.9, MeetingType.TEAM_MEETING)

    @pytest.mark.parametrize(
        "meeting_type",
        [MeetingType.INTERVIEW, MeetingType.PRESENTATION, MeetingType.TRAINING, MeetingType.REVIEW],
    )
    def test_recorded_types(self, policy, event_factory, meeting_type) -> None:
        assert policy.should_auto_record(event_factory(title="Sync"), 0.6, meeting_type)

    def test_notes_requested(self, policy, event_factory) -> None:
        event = event_factory(title="Sync", description="Someone take notes please")
        assert policy.should_auto_record(event, 0.6, MeetingType.TEAM_MEETING)

    def test_plain_meeting(self, policy, event_factory) -> None:
        assert not policy.should_auto_record(event_factory(title="Sync"), 0.6, MeetingType.STANDUP)


# ---------------------------------------------------------------------------
# Recording preferences
# ---------------------------------------------------------------------------


class TestRecordingPreferences:
    def test_absent_without_mention(self, policy, event_factory) -> None:
        assert policy.recording_preferences(event_factory(description="Take notes")) is None

    def test_defaults_on_mention(self, policy, event_factory) -> None:
        prefs = policy.recording_preferences(event_factory(description="We will record this"))
        assert prefs is not None
        assert prefs.auto_start is False
        assert prefs.auto_stop is True
        assert prefs.record_audio is True
        assert prefs.record_video is False
        assert prefs.audio_quality == "high"
        assert prefs.enhance_audio is True

    def test_auto_start_and_video(self, policy, event_factory) -> None:
        event = event_factory(description="Auto-record enabled; I will share my screen. Transcript to follow.")
        prefs = policy.recording_preferences(event)
        assert prefs.auto_start is True
        assert prefs.record_video is True


# ---------------------------------------------------------------------------
# Summary distribution
# ---------------------------------------------------------------------------


def _participants():
    return [
        MeetingParticipant(name="Alex", email="alex@example.com", role=ParticipantRole.ORGANIZER),
        MeetingParticipant(name="Sam", email="sam@example.com"),
        MeetingParticipant(name="No Email"),
        MeetingParticipant(name="Room 4", email="room4@example.com", role=ParticipantRole.RESOURCE),
    ]


class TestSummaryDistribution:
    def test_absent_without_request(self, policy, event_factory, default_rules) -> None:
        assert policy.summary_distribution(event_factory(), _participants(), default_rules) is None

    def test_recipients_exclude_resources_and_missing_email(self, policy, event_factory, default_rules) -> None:
        event = event_factory(description="Please share notes afterwards")
        dist = policy.summary_distribution(event, _participants(), default_rules)
        assert dist.recipients == ["alex@example.com", "sam@example.com"]
        assert dist.enabled is True
        assert dist.include_transcript is True
        assert dist.include_action_items is True
        assert dist.delivery_method == "email"
        assert dist.delay_after_meeting == timedelta(minutes=15)

    def test_summary_only_drops_transcript(self, policy, event_factory, default_rules) -> None:
        event = event_factory(description="Summary only, no recording needed")
        dist = policy.summary_distribution(event, _participants(), default_rules)
        assert dist.include_transcript is False

    def test_delay_from_rules(self, policy, event_factory) -> None:
        rules = MeetingDetectionRules(summary_delay_after_meeting=timedelta(minutes=45))
        event = event_factory(description="Action items will be sent out")
        dist = policy.summary_distribution(event, _participants(), rules)
        assert dist.delay_after_meeting == timedelta(minutes=45)
