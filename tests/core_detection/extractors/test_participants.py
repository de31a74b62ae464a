"""
Tests for core_detection.extractors.participants.
"""

import pytest

from core_detection.extractors.participants import ParticipantResolver, name_from_email
from domain.models import AttendeeStatus, AttendeeType, ParticipantRole


@pytest.fixture()
def resolver() -> ParticipantResolver:
    return ParticipantResolver()


# ---------------------------------------------------------------------------
# Role chain
# ---------------------------------------------------------------------------


class TestResolveRole:
    def test_organizer(self, resolver, event_factory, attendee_factory) -> None:
        alex = attendee_factory("Alex Kim", "alex@example.com", organizer=True)
        assert resolver.resolve_role(alex, event_factory(attendees=[alex])) == ParticipantRole.ORGANIZER

    def test_organizer_beats_presenter(self, resolver, event_factory, attendee_factory) -> None:
        alex = attendee_factory("Alex Kim", organizer=True)
        event = event_factory(title="Demo by Alex", attendees=[alex])
        assert resolver.resolve_role(alex, event) == ParticipantRole.ORGANIZER

    def test_presenter_named_in_title(self, resolver, event_factory, attendee_factory) -> None:
        sam = attendee_factory("Sam Lee", "sam@example.com")
        event = event_factory(title="Product demo by Sam", attendees=[sam])
        assert resolver.resolve_role(sam, event) == ParticipantRole.PRESENTER

    def test_first_name_must_be_whole_word(self, resolver, event_factory, attendee_factory) -> None:
        al = attendee_factory("Al Smith")
        event = event_factory(title="Alpha demo", attendees=[al])
        assert resolver.resolve_role(al, event) == ParticipantRole.ATTENDEE

    def test_presenter_marker_in_description(self, resolver, event_factory, attendee_factory) -> None:
        jordan = attendee_factory("Jordan Park")
        event = event_factory(
            title="Quarterly results",
            description="Presented by Jordan Park\nQ&A afterwards",
            attendees=[jordan],
        )
        assert resolver.resolve_role(jordan, event) == ParticipantRole.PRESENTER

    def test_presenter_matched_by_email_name(self, resolver, event_factory, attendee_factory) -> None:
        jane = attendee_factory(None, "jane.doe@example.com")
        event = event_factory(
            title="Quarterly results",
            description="Presented by Jane Doe",
            attendees=[jane],
        )
        assert resolver.resolve_role(jane, event) == ParticipantRole.PRESENTER
        assert resolver.resolve(event)[0].name == "Jane Doe"

    def test_optional(self, resolver, event_factory, attendee_factory) -> None:
        kim = attendee_factory("Kim", kind=AttendeeType.OPTIONAL)
        assert resolver.resolve_role(kim, event_factory(attendees=[kim])) == ParticipantRole.OPTIONAL

    @pytest.mark.parametrize(
        "name, email, kind",
        [
            ("Conference Room 4A", None, AttendeeType.REQUIRED),
            (None, "room-4a@example.com", AttendeeType.REQUIRED),
            ("Projector", "projector@example.com", AttendeeType.RESOURCE),
        ],
    )
    def test_resource(self, resolver, event_factory, attendee_factory, name, email, kind) -> None:
        attendee = attendee_factory(name, email, kind=kind)
        assert resolver.resolve_role(attendee, event_factory(attendees=[attendee])) == ParticipantRole.RESOURCE

    def test_plain_attendee(self, resolver, one_on_one_event) -> None:
        sam = one_on_one_event.attendees[1]
        assert resolver.resolve_role(sam, one_on_one_event) == ParticipantRole.ATTENDEE


# ---------------------------------------------------------------------------
# resolve()
# ---------------------------------------------------------------------------


class TestResolve:
    def test_one_per_attendee(self, resolver, one_on_one_event) -> None:
        participants = resolver.resolve(one_on_one_event)
        assert [p.role for p in participants] == [ParticipantRole.ORGANIZER, ParticipantRole.ATTENDEE]
        assert [p.email for p in participants] == ["alex@example.com", "sam@example.com"]

    def test_flags(self, resolver, event_factory, attendee_factory) -> None:
        attendees = [
            attendee_factory("A", "a@example.com", status=AttendeeStatus.ACCEPTED),
            attendee_factory("B", "b@example.com", status=AttendeeStatus.TENTATIVE, kind=AttendeeType.OPTIONAL),
        ]
        first, second = resolver.resolve(event_factory(attendees=attendees))
        assert first.has_accepted is True
        assert first.is_optional is False
        assert second.has_accepted is False
        assert second.is_optional is True

    def test_name_synthesized_from_email(self, resolver, event_factory, attendee_factory) -> None:
        attendee = attendee_factory(None, "jane.doe@example.com")
        (participant,) = resolver.resolve(event_factory(attendees=[attendee]))
        assert participant.name == "Jane Doe"

    def test_no_name_no_email(self, resolver, event_factory, attendee_factory) -> None:
        (participant,) = resolver.resolve(event_factory(attendees=[attendee_factory()]))
        assert participant.name == ""
        assert participant.email == ""


class TestNameFromEmail:
    @pytest.mark.parametrize(
        "email, expected",
        [
            ("jane.doe@example.com", "Jane Doe"),
            ("j_smith-jr@example.com", "J Smith Jr"),
            ("sam@example.com", "Sam"),
            ("not-an-email", "not-an-email"),
            ("", ""),
        ],
    )
    def test_cases(self, email, expected) -> None:
        assert name_from_email(email) == expected
