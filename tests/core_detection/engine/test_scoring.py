"""
Tests for core_detection.engine.scoring.

Covers every sub-score band, weight application, clamping, and the
zero score given to malformed events.
"""

from datetime import timedelta

import pytest

from core_detection.engine.scoring import ConfidenceScorer, clamp
from domain.models import MeetingDetectionRules, ScoringWeights


@pytest.fixture()
def scorer() -> ConfidenceScorer:
    return ConfidenceScorer()


# ---------------------------------------------------------------------------
# Reference events
# ---------------------------------------------------------------------------


class TestReferenceEvents:
    def test_weekly_standup_scores_above_threshold(self, scorer, standup_event, default_rules) -> None:
        breakdown = scorer.score_breakdown(standup_event, default_rules)
        assert breakdown.title == pytest.approx(0.7)
        assert breakdown.duration == pytest.approx(0.8)
        assert breakdown.attendees == pytest.approx(0.9)
        assert breakdown.description == pytest.approx(0.5)
        assert breakdown.virtual == 0.0
        assert breakdown.total == pytest.approx(0.715)
        assert breakdown.total >= 0.5

    def test_one_on_one_scores_above_threshold(self, scorer, one_on_one_event, default_rules) -> None:
        assert scorer.score(one_on_one_event, default_rules) == pytest.approx(0.53)

    def test_lunch_scores_below_threshold(self, scorer, event_factory, default_rules) -> None:
        event = event_factory(title="Lunch", minutes=60, attendee_count=1)
        assert scorer.score(event, default_rules) == pytest.approx(0.36)


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------


class TestMalformedEvents:
    def test_blank_title_scores_zero(self, scorer, event_factory, default_rules) -> None:
        breakdown = scorer.score_breakdown(event_factory(title="   "), default_rules)
        assert breakdown.malformed is True
        assert breakdown.total == 0.0

    def test_blank_id_scores_zero(self, scorer, event_factory, default_rules) -> None:
        assert scorer.score(event_factory(event_id=""), default_rules) == 0.0

    def test_end_before_start_scores_zero(self, scorer, event_factory, default_rules) -> None:
        event = event_factory(minutes=-30)
        assert scorer.score(event, default_rules) == 0.0


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


class TestTitleScore:
    def test_keyword_and_ceremony(self, scorer, default_rules) -> None:
        assert scorer.title_score("Design review", default_rules) == pytest.approx(0.7)

    def test_exclude_keyword_clamps_to_zero(self, scorer, default_rules) -> None:
        assert scorer.title_score("Vacation", default_rules) == 0.0

    def test_team_word(self, scorer, default_rules) -> None:
        assert scorer.title_score("Squad lunch", default_rules) == 0.0
        assert scorer.title_score("Project kickoff", default_rules) == pytest.approx(0.2)

    def test_never_exceeds_one(self, scorer, default_rules) -> None:
        title = "Team sync meeting: standup review 1:1"
        assert scorer.title_score(title, default_rules) == 1.0


class TestDurationScore:
    @pytest.mark.parametrize(
        "minutes, expected",
        [
            (10, 0.1),
            (15, 0.8),
            (30, 0.8),
            (45, 0.6),
            (90, 0.8),
            (120, 0.6),
            (150, 0.4),
            (9 * 60, 0.3),
        ],
    )
    def test_bands(self, scorer, default_rules, minutes, expected) -> None:
        assert scorer.duration_score(timedelta(minutes=minutes), default_rules) == expected

    def test_uses_rule_bounds(self, scorer) -> None:
        rules = MeetingDetectionRules(minimum_meeting_duration=timedelta(minutes=45))
        assert scorer.duration_score(timedelta(minutes=30), rules) == 0.1


class TestAttendeeScore:
    @pytest.mark.parametrize(
        "count, expected",
        [(0, 0.2), (1, 0.6), (2, 0.8), (5, 0.9), (8, 0.9), (10, 0.7), (20, 0.7), (25, 0.5)],
    )
    def test_bands(self, scorer, default_rules, attendee_factory, count, expected) -> None:
        attendees = [attendee_factory(f"P{i}", f"p{i}@example.com") for i in range(count)]
        assert scorer.attendee_score(attendees, default_rules) == expected

    def test_neutral_when_not_required(self, scorer) -> None:
        rules = MeetingDetectionRules(require_attendees=False)
        assert scorer.attendee_score([], rules) == 0.5


class TestDescriptionScore:
    def test_missing_is_neutral(self, scorer) -> None:
        assert scorer.description_score(None) == 0.5
        assert scorer.description_score("") == 0.5

    def test_agenda_language(self, scorer) -> None:
        assert scorer.description_score("We will discuss the roadmap") == pytest.approx(0.8)

    def test_clamped(self, scorer) -> None:
        text = "Agenda: review. Action items and next steps. Dial-in on Zoom."
        assert scorer.description_score(text) == 1.0


class TestVirtualScore:
    def test_conferencing_url(self, scorer, event_factory, default_rules) -> None:
        event = event_factory(description="Join https://zoom.us/j/123456")
        assert scorer.virtual_score(event, default_rules) == 0.8

    def test_url_in_location(self, scorer, event_factory, default_rules) -> None:
        event = event_factory(location="meet.google.com/abc-defg-hij")
        assert scorer.virtual_score(event, default_rules) == 0.8

    def test_generic_virtual_wording(self, scorer, event_factory, default_rules) -> None:
        event = event_factory(description="This is a remote session")
        assert scorer.virtual_score(event, default_rules) == 0.6

    def test_nothing_virtual(self, scorer, event_factory, default_rules) -> None:
        assert scorer.virtual_score(event_factory(location="Room 4"), default_rules) == 0.0

    def test_disabled_by_rules(self, scorer, event_factory) -> None:
        rules = MeetingDetectionRules(detect_virtual_meetings=False)
        event = event_factory(description="https://zoom.us/j/123456")
        assert scorer.virtual_score(event, rules) == 0.0


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------


class TestWeights:
    def test_custom_weights_change_total(self, scorer, standup_event) -> None:
        rules = MeetingDetectionRules(
            scoring_weights=ScoringWeights(title=1.0, duration=0.0, attendees=0.0, description=0.0, virtual=0.0)
        )
        assert scorer.score(standup_event, rules) == pytest.approx(0.7)

    def test_total_clamped_to_one(self, scorer, event_factory) -> None:
        rules = MeetingDetectionRules(
            scoring_weights=ScoringWeights(title=1.0, duration=1.0, attendees=1.0, description=1.0, virtual=1.0)
        )
        assert scorer.score(event_factory(), rules) == 1.0

    def test_breakdown_carries_weights(self, scorer, standup_event, default_rules) -> None:
        breakdown = scorer.score_breakdown(standup_event, default_rules)
        assert breakdown.weights == default_rules.scoring_weights


class TestClamp:
    def test_bounds(self) -> None:
        assert clamp(-0.2) == 0.0
        assert clamp(1.7) == 1.0
        assert clamp(0.42) == 0.42
