"""
Pattern library: every textual rule the detection engine consults.

Rules are data, not inline literals. Each one has a name, a compiled regex
and (where relevant) the score or outcome it implies, so the full rule set
can be listed, tested on its own, and swapped per locale by building a
different ``PatternLibrary``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from domain.models import MeetingType, VirtualPlatform


class PatternRule(BaseModel):
    """Named regex with the score it contributes when it matches."""

    model_config = ConfigDict(frozen=True)

    name: str
    pattern: re.Pattern
    score: float = 0.0

    def search(self, text: str) -> Optional[re.Match]:
        return self.pattern.search(text)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


class MeetingTypeRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    meeting_type: MeetingType
    pattern: re.Pattern


class PlatformRule(BaseModel):
    """Join-link shape for one conferencing platform."""

    model_config = ConfigDict(frozen=True)

    platform: VirtualPlatform
    pattern: re.Pattern
    # Pulls the meeting id out of the matched URL when `pattern` has no "id" group
    id_pattern: Optional[re.Pattern] = None
    # Fallback when the URL carries no usable identifier
    default_meeting_id: str = ""


def _rx(expression: str, flags: int = re.IGNORECASE) -> re.Pattern:
    return re.compile(expression, flags)


def _rule(name: str, expression: str, score: float = 0.0) -> PatternRule:
    return PatternRule(name=name, pattern=_rx(expression), score=score)


# ---------------------------------------------------------------------------
# Confidence scoring
# ---------------------------------------------------------------------------

TITLE_RULES: Tuple[PatternRule, ...] = (
    _rule("recurring_ceremony", r"\b(sync|standup|retro|planning|review|demo)\b", 0.4),
    _rule("team_or_project", r"\b(team|project|squad|group)\b", 0.2),
    _rule("one_on_one", r"\b(1:1|one.?on.?one|1.?on.?1)\b", 0.3),
)

DESCRIPTION_RULES: Tuple[PatternRule, ...] = (
    _rule("agenda_language", r"\b(agenda|discuss|review|update|planning)\b", 0.3),
    _rule("action_items", r"\b(action.?items?|follow.?up|next.?steps?)\b", 0.2),
    _rule("dial_in", r"\b(dial.?in|phone|call|zoom|teams|meet)\b", 0.3),
)

CONFERENCING_URL_RULES: Tuple[PatternRule, ...] = (
    _rule("zoom", r"zoom\.us", 0.8),
    _rule("teams", r"teams\.microsoft\.com", 0.8),
    _rule("meet", r"meet\.google\.com", 0.8),
    _rule("webex", r"webex\.com", 0.8),
    _rule("gotomeeting", r"gotomeeting\.com", 0.8),
    _rule("skype", r"skype\.com", 0.8),
)

GENERIC_VIRTUAL_RULE = _rule("generic_virtual", r"\b(virtual|online|remote|video.?call)\b", 0.6)


# ---------------------------------------------------------------------------
# Type classification (order is precedence)
# ---------------------------------------------------------------------------

MEETING_TYPE_RULES: Tuple[MeetingTypeRule, ...] = (
    MeetingTypeRule(meeting_type=MeetingType.ONE_ON_ONE, pattern=_rx(r"\b(1:1|one.?on.?one|1.?on.?1)\b")),
    MeetingTypeRule(meeting_type=MeetingType.STANDUP, pattern=_rx(r"\b(standup|stand.?up|daily|scrum)\b")),
    MeetingTypeRule(
        meeting_type=MeetingType.INTERVIEW,
        pattern=_rx(r"\b(interview|candidate|hiring|screening)\b"),
    ),
    MeetingTypeRule(
        meeting_type=MeetingType.PRESENTATION,
        pattern=_rx(r"\b(presentation|demo|showcase|pitch|show.?and.?tell)\b"),
    ),
    MeetingTypeRule(
        meeting_type=MeetingType.TRAINING,
        pattern=_rx(r"\b(training|workshop|learning|tutorial|onboarding)\b"),
    ),
    MeetingTypeRule(
        meeting_type=MeetingType.BRAINSTORMING,
        pattern=_rx(r"\b(brainstorm\w*|ideation|creative|innovation|whiteboard)\b"),
    ),
    MeetingTypeRule(
        meeting_type=MeetingType.RETROSPECTIVE,
        pattern=_rx(r"\b(retro|retrospective|postmortem|post.?mortem|lessons.?learned)\b"),
    ),
    MeetingTypeRule(
        meeting_type=MeetingType.PLANNING,
        pattern=_rx(r"\b(planning|roadmap|strategy|sprint.?planning|milestone)\b"),
    ),
    MeetingTypeRule(
        meeting_type=MeetingType.REVIEW,
        pattern=_rx(r"\b(review|feedback|evaluation|assessment|code.?review)\b"),
    ),
)

# Two attendees only count as a 1:1 when the text does not mention this
TEAM_MARKER = "team"


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------

PRESENTATION_TITLE_RULE = _rule("presentation_title", r"\b(presentation|demo)\b")
PRESENTER_MARKER_RULE = _rule("presenter_marker", r"(?:presented\s+by|presenter\s*:)\s*([^\n]*)")
RESOURCE_KEYWORDS: Tuple[str, ...] = ("room", "resource", "conference")
EMAIL_NAME_SEPARATORS = _rx(r"[._-]")


# ---------------------------------------------------------------------------
# Agenda / tags / notes
# ---------------------------------------------------------------------------

SECTION_TEMPLATE = r"(?:^|\n)[^\S\n]*{name}[^\S\n]*:?[^\S\n]*\n(.*?)(?=\n[^\S\n]*[A-Za-z][\w ]*:|\Z)"
NUMBERED_ITEM_RULE = PatternRule(
    name="numbered_item", pattern=re.compile(r"^\s*\d+[.)]\s+(.+?)\s*$", re.MULTILINE)
)
BULLETED_ITEM_RULE = PatternRule(
    name="bulleted_item", pattern=re.compile(r"^\s*[•\-\*]\s+(.+?)\s*$", re.MULTILINE)
)
LIST_MARKER = re.compile(r"^(?:\d+[.)]|[•\-\*])\s*")

TOPIC_RULES: Tuple[PatternRule, ...] = (
    _rule("discuss", r"\bdiscuss\s+(.+?)(?=[.;\n]|$)"),
    _rule("review", r"\breview\s+(.+?)(?=[.;\n]|$)"),
    _rule("update_on", r"\bupdate\s+on\s+(.+?)(?=[.;\n]|$)"),
    _rule("go_over", r"\bgo\s+over\s+(.+?)(?=[.;\n]|$)"),
    _rule("talk_about", r"\btalk\s+about\s+(.+?)(?=[.;\n]|$)"),
)
TOPIC_PREFIX = "Discuss"

BRACKET_TAG_RULE = _rule("bracket_tag", r"\[([^\]]+)\]")
HASHTAG_RULE = _rule("hashtag", r"#(\w+)")
DEPARTMENT_TAGS: Tuple[str, ...] = (
    "engineering",
    "product",
    "design",
    "marketing",
    "sales",
    "hr",
    "finance",
    "legal",
    "operations",
    "support",
    "qa",
    "devops",
)
MEETING_TYPE_TAGS: Tuple[str, ...] = (
    "standup",
    "retrospective",
    "planning",
    "review",
    "demo",
    "interview",
    "onboarding",
    "training",
    "brainstorm",
)
URGENT_TAG_RULE = _rule("urgent", r"\b(urgent|high.?priority|important)\b")
QUARTERLY_TAG_RULE = _rule("quarterly", r"\b(quarterly|q[1-4])\b")

PREPARATION_SECTIONS: Tuple[str, ...] = (
    "preparation",
    "prep",
    "before the meeting",
    "please review",
    "background",
    "context",
    "prerequisites",
)

_UUID = r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})"
PREVIOUS_MEETING_RULES: Tuple[PatternRule, ...] = (
    _rule("previous_meeting", r"previous.?meeting:\s*" + _UUID),
    _rule("follow_up_to", r"follow.?up.?to:\s*" + _UUID),
    _rule("continuation_of", r"continuation.?of:\s*" + _UUID),
)


# ---------------------------------------------------------------------------
# Virtual meetings and locations
# ---------------------------------------------------------------------------

PLATFORM_RULES: Tuple[PlatformRule, ...] = (
    PlatformRule(
        platform=VirtualPlatform.ZOOM,
        pattern=_rx(r"(?:https?://)?(?:[\w-]+\.)?zoom\.us/j/(?P<id>\d+)(?:\?pwd=(?P<pwd>[\w-]+(?:\.[\w-]+)*))?"),
    ),
    PlatformRule(
        platform=VirtualPlatform.MEET,
        pattern=_rx(r"(?:https?://)?meet\.google\.com/(?P<id>[a-z0-9]+(?:-[a-z0-9]+)*)"),
    ),
    PlatformRule(
        platform=VirtualPlatform.TEAMS,
        pattern=_rx(r"(?:https?://)?teams\.microsoft\.com/l/meetup-join/\S+"),
        id_pattern=_rx(r"meeting_([\w-]+)"),
        default_meeting_id="teams-meeting",
    ),
    PlatformRule(
        platform=VirtualPlatform.WEBEX,
        pattern=_rx(r"(?:https?://)?[\w-]+\.webex\.com/\S*"),
        id_pattern=_rx(r"(?:MTID=(\w+)|/meet/([\w.-]+))"),
        default_meeting_id="webex-meeting",
    ),
)
DIAL_IN_RULE = _rule("dial_in_number", r"(?:dial.?in|phone)\s*(?:number)?\s*:?\s*(\+?\d[\d\s().-]{6,}\d)")
ACCESS_CODE_RULE = _rule("access_code", r"(?:access|meeting|conference)\s*(?:code|id)\s*:?\s*(\d[\d\s]*\d)")

VIRTUAL_LOCATION_RULE = _rule("virtual_location", r"\b(virtual|online|remote|zoom|teams|meet|webex)\b")
_ROOM_WORD = r"(?:conference\s+room|meeting\s+room|room|conference|meeting)"
CONFERENCE_LOCATION_RULES: Tuple[PatternRule, ...] = (
    _rule(
        "building_then_room",
        r"^(?P<building>.+?)\s*[-,]\s*" + _ROOM_WORD + r"\s+(?P<room>.+?)\s*$",
    ),
    _rule(
        "room_then_building",
        r"^" + _ROOM_WORD + r"\s+(?P<room>[^,\-]+?)(?:\s*[-,]\s*(?P<building>.+?))?\s*$",
    ),
    _rule(
        "named_building",
        r"^(?P<building>.+?\s+building)\s*[-,]\s*(?P<room>.+?)\s*$",
    ),
    # Room word anywhere, e.g. "HQ Conference Room B" or "Building 5 Room 301"
    _rule(
        "embedded_room",
        r"^(?P<building>.*?)\s*\b" + _ROOM_WORD + r"\s+(?P<room>.+?)\s*$",
    ),
)
STREET_ADDRESS_RULE = _rule(
    "street_address",
    r"\d+.*\b(?:street|st|avenue|ave|road|rd|drive|dr|boulevard|blvd|lane|ln|way)\b",
)


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------

URGENT_PRIORITY_RULE = _rule("urgent_priority", r"\b(urgent|asap|emergency|critical|immediate)\b")
HIGH_PRIORITY_RULE = _rule(
    "high_priority", r"\b(high.?priority|important|ceo|vp|director|executive|board)\b"
)
LOW_PRIORITY_RULE = _rule("low_priority", r"\b(low.?priority|optional|fyi|info|social|coffee)\b")

RECORD_REQUEST_RULE = _rule("record_request", r"\b(record|recording|transcript|notes)\b")
RECORDING_MENTION_RULE = _rule("recording_mention", r"\b(record|recording|transcript)\b")
AUTO_RECORD_RULE = _rule("auto_record", r"\b(auto.?record\w*|automatically.?record\w*)\b")
VIDEO_RULE = _rule("video", r"\b(video|camera|screen)\b")
SUMMARY_REQUEST_RULE = _rule(
    "summary_request", r"\b(summary|notes|action.?items?|follow.?up|share.?notes)\b"
)
NO_TRANSCRIPT_RULE = _rule("no_transcript", r"\b(no.?transcript|summary.?only)\b")

AUTO_RECORD_TYPES: Tuple[MeetingType, ...] = (
    MeetingType.INTERVIEW,
    MeetingType.PRESENTATION,
    MeetingType.TRAINING,
    MeetingType.REVIEW,
)


class PatternLibrary(BaseModel):
    """Complete, swappable rule set consumed by every detection component."""

    model_config = ConfigDict(frozen=True)

    title_rules: Tuple[PatternRule, ...] = TITLE_RULES
    description_rules: Tuple[PatternRule, ...] = DESCRIPTION_RULES
    conferencing_url_rules: Tuple[PatternRule, ...] = CONFERENCING_URL_RULES
    generic_virtual_rule: PatternRule = GENERIC_VIRTUAL_RULE

    meeting_type_rules: Tuple[MeetingTypeRule, ...] = MEETING_TYPE_RULES
    team_marker: str = TEAM_MARKER

    presentation_title_rule: PatternRule = PRESENTATION_TITLE_RULE
    presenter_marker_rule: PatternRule = PRESENTER_MARKER_RULE
    resource_keywords: Tuple[str, ...] = RESOURCE_KEYWORDS

    numbered_item_rule: PatternRule = NUMBERED_ITEM_RULE
    bulleted_item_rule: PatternRule = BULLETED_ITEM_RULE
    topic_rules: Tuple[PatternRule, ...] = TOPIC_RULES
    topic_prefix: str = TOPIC_PREFIX
    bracket_tag_rule: PatternRule = BRACKET_TAG_RULE
    hashtag_rule: PatternRule = HASHTAG_RULE
    department_tags: Tuple[str, ...] = DEPARTMENT_TAGS
    meeting_type_tags: Tuple[str, ...] = MEETING_TYPE_TAGS
    urgent_tag_rule: PatternRule = URGENT_TAG_RULE
    quarterly_tag_rule: PatternRule = QUARTERLY_TAG_RULE
    preparation_sections: Tuple[str, ...] = PREPARATION_SECTIONS
    previous_meeting_rules: Tuple[PatternRule, ...] = PREVIOUS_MEETING_RULES

    platform_rules: Tuple[PlatformRule, ...] = PLATFORM_RULES
    dial_in_rule: PatternRule = DIAL_IN_RULE
    access_code_rule: PatternRule = ACCESS_CODE_RULE
    virtual_location_rule: PatternRule = VIRTUAL_LOCATION_RULE
    conference_location_rules: Tuple[PatternRule, ...] = CONFERENCE_LOCATION_RULES
    street_address_rule: PatternRule = STREET_ADDRESS_RULE

    urgent_priority_rule: PatternRule = URGENT_PRIORITY_RULE
    high_priority_rule: PatternRule = HIGH_PRIORITY_RULE
    low_priority_rule: PatternRule = LOW_PRIORITY_RULE
    record_request_rule: PatternRule = RECORD_REQUEST_RULE
    recording_mention_rule: PatternRule = RECORDING_MENTION_RULE
    auto_record_rule: PatternRule = AUTO_RECORD_RULE
    video_rule: PatternRule = VIDEO_RULE
    summary_request_rule: PatternRule = SUMMARY_REQUEST_RULE
    no_transcript_rule: PatternRule = NO_TRANSCRIPT_RULE
    auto_record_types: Tuple[MeetingType, ...] = AUTO_RECORD_TYPES

    def section_pattern(self, section_name: str) -> re.Pattern:
        """Regex capturing the body of a ``<section_name>:`` block."""
        return re.compile(
            SECTION_TEMPLATE.format(name=re.escape(section_name)),
            re.IGNORECASE | re.DOTALL,
        )

    def rule_names(self) -> List[str]:
        """Names of every scoring / matching rule, for inspection."""
        names: List[str] = []
        for value in self.__dict__.values():
            if isinstance(value, PatternRule):
                names.append(value.name)
            elif isinstance(value, tuple):
                names.extend(item.name for item in value if isinstance(item, PatternRule))
        return names


DEFAULT_PATTERN_LIBRARY = PatternLibrary()
