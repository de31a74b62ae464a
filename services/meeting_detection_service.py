"""
MeetingDetectionService: turns calendar events into meeting contexts.

Orchestrates, per event:
    1. Score meeting likelihood with ConfidenceScorer.
    2. Drop malformed events and those under the confidence threshold.
    3. Classify the type, resolve participants and venue.
    4. Extract agenda, tags and notes; apply priority/record/summary policy.
    5. Assemble a MeetingContext.

Batches read one rules snapshot at entry, optionally fan out over a thread
pool, reduce per-event outcomes into a BatchDetectionSummary and hand it to
the stats aggregator. One failing event never fails the batch.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import reduce
from itertools import repeat
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Sequence, Union

import pydantic

from core_detection.engine.classifier import MeetingTypeClassifier
from core_detection.engine.policy import PolicyEngine
from core_detection.engine.scoring import ConfidenceScorer
from core_detection.extractors.agenda import AgendaExtractor, NotesExtractor, TagExtractor
from core_detection.extractors.location import LocationResolver, VirtualMeetingResolver
from core_detection.extractors.participants import ParticipantResolver
from core_detection.patterns.library import DEFAULT_PATTERN_LIBRARY, PatternLibrary
from domain.models import (
    BatchDetectionSummary,
    CalendarEvent,
    MeetingContext,
    MeetingDetectionRules,
    MeetingDetectionStats,
)
from services.stats_aggregator import DetectionStatsAggregator
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import ConfigurationError, ExtractionError
from shared_utils.logging_utils import ContextualLogger, log_execution
from shared_utils.validation import InputValidator


logger = ContextualLogger(scope=LogScope.DETECTION)

EventRecord = Union[CalendarEvent, Mapping[str, Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Outcome(NamedTuple):
    context: Optional[MeetingContext] = None
    failed_event_id: Optional[str] = None

    def summary(self) -> BatchDetectionSummary:
        return BatchDetectionSummary.from_contexts(
            [self.context] if self.context is not None else [],
            events_processed=1,
            failed_event_ids=[self.failed_event_id] if self.failed_event_id else None,
        )


class MeetingDetectionService:
    """Detection orchestrator; implements MeetingDetectionPort."""

    def __init__(
        self,
        *,
        rules: Optional[MeetingDetectionRules] = None,
        patterns: PatternLibrary = DEFAULT_PATTERN_LIBRARY,
        stats_aggregator: Optional[DetectionStatsAggregator] = None,
        clock: Callable[[], datetime] = utc_now,
        max_workers: int = Defaults.MAX_WORKERS,
    ) -> None:
        self._rules = rules or MeetingDetectionRules()
        self._patterns = patterns
        self._stats = stats_aggregator or DetectionStatsAggregator()
        self._clock = clock
        self._max_workers = max(1, max_workers)

        self._scorer = ConfidenceScorer(patterns)
        self._classifier = MeetingTypeClassifier(patterns)
        self._participants = ParticipantResolver(patterns)
        self._agenda = AgendaExtractor(patterns)
        self._tags = TagExtractor(patterns)
        self._notes = NotesExtractor(patterns)
        self._virtual = VirtualMeetingResolver(patterns)
        self._locations = LocationResolver(patterns)
        self._policy = PolicyEngine(patterns)

    @property
    def rules(self) -> MeetingDetectionRules:
        return self._rules

    @property
    def patterns(self) -> PatternLibrary:
        return self._patterns

    @property
    def scorer(self) -> ConfidenceScorer:
        return self._scorer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @log_execution(scope=LogScope.DETECTION)
    def detect_meetings(self, events: Sequence[EventRecord]) -> List[MeetingContext]:
        """Detect meetings across a batch, keeping input order.

        Args:
            events: CalendarEvent models or raw provider mappings.

        Returns:
            Contexts for the events that qualify as meetings.
        """
        rules = self._rules
        events = list(events)

        if self._max_workers > 1 and len(events) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(self._process, events, repeat(rules), range(len(events))))
        else:
            outcomes = [self._process(record, rules, index) for index, record in enumerate(events)]

        summary = reduce(
            BatchDetectionSummary.merge,
            (outcome.summary() for outcome in outcomes),
            BatchDetectionSummary(),
        )
        self._stats.apply(summary, self._clock())

        logger.info(
            "meeting_detection_batch_completed",
            events_processed=summary.events_processed,
            meetings_detected=summary.meetings_detected,
            failed_event_ids=summary.failed_event_ids,
            workers=self._max_workers,
        )
        return [outcome.context for outcome in outcomes if outcome.context is not None]

    def detect_meeting(self, event: CalendarEvent) -> Optional[MeetingContext]:
        """Detect a single event against the active rules.

        Returns:
            MeetingContext, or None for malformed or low-confidence events.

        Raises:
            ExtractionError: If context extraction fails.
        """
        return self._detect(event, self._rules)

    def configure_meeting_rules(
        self, rules: Union[MeetingDetectionRules, Mapping[str, Any]]
    ) -> MeetingDetectionRules:
        """Validate and install new detection rules.

        Raises:
            ConfigurationError: If validation fails; current rules are kept.
        """
        try:
            if isinstance(rules, MeetingDetectionRules):
                validated = MeetingDetectionRules.model_validate(rules.model_dump())
            else:
                validated = MeetingDetectionRules.model_validate(rules)
        except pydantic.ValidationError as exc:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in exc.errors()
            ]
            logger.warning("meeting_rules_rejected", errors=errors)
            raise ConfigurationError(
                "Invalid meeting detection rules",
                context={"errors": errors},
            ) from exc

        self._rules = validated
        logger.info(
            "meeting_rules_configured",
            threshold=validated.minimum_confidence_threshold,
            meeting_keywords=len(validated.meeting_keywords),
            exclude_keywords=len(validated.exclude_keywords),
            detect_virtual_meetings=validated.detect_virtual_meetings,
        )
        return validated

    def get_detection_stats(self) -> MeetingDetectionStats:
        return self._stats.snapshot()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _process(self, record: EventRecord, rules: MeetingDetectionRules, index: int) -> _Outcome:
        # Records without a usable id are reported by batch position
        placeholder_id = f"record[{index}]"

        event = InputValidator.coerce_event(record)
        if event is None:
            record_id = record.get("id") if isinstance(record, Mapping) else None
            return _Outcome(failed_event_id=str(record_id) if record_id else placeholder_id)

        try:
            return _Outcome(context=self._detect(event, rules))
        except ExtractionError as exc:
            logger.error(
                "event_extraction_failed",
                event_id=event.id,
                error_code=exc.error_code,
                message=exc.message,
            )
        except Exception as exc:
            logger.error(
                "event_detection_failed",
                event_id=event.id,
                error_type=type(exc).__name__,
                message=str(exc),
            )
        return _Outcome(failed_event_id=event.id or placeholder_id)

    def _detect(
        self, event: CalendarEvent, rules: MeetingDetectionRules
    ) -> Optional[MeetingContext]:
        breakdown = self._scorer.score_breakdown(event, rules)
        if breakdown.malformed or breakdown.total < rules.minimum_confidence_threshold:
            return None

        try:
            context = self._extract(event, breakdown.total, rules)
        except ExtractionError:
            raise
        except Exception as exc:
            error_msg = f"{type(exc).__name__}: {exc}"
            raise ExtractionError(
                f"Context extraction failed: {error_msg}",
                event_id=event.id,
                context={"error_type": type(exc).__name__},
            ) from exc

        logger.debug(
            "meeting_detected",
            event_id=event.id,
            meeting_type=context.type.value,
            confidence=round(context.detection_confidence, 4),
        )
        return context

    def _extract(
        self, event: CalendarEvent, confidence: float, rules: MeetingDetectionRules
    ) -> MeetingContext:
        participants = self._participants.resolve(event)
        meeting_type = self._classifier.classify(event)

        virtual_info = None
        if rules.detect_virtual_meetings:
            virtual_info = self._virtual.resolve(event)

        return MeetingContext(
            event=event,
            type=meeting_type,
            participants=participants,
            agenda_items=self._agenda.extract(event),
            tags=self._tags.extract(event),
            expected_duration=event.duration,
            priority=self._policy.priority(event, len(participants)),
            should_auto_record=self._policy.should_auto_record(event, confidence, meeting_type),
            virtual_meeting_info=virtual_info,
            location=self._locations.resolve(event),
            recording_preferences=self._policy.recording_preferences(event),
            summary_distribution=self._policy.summary_distribution(event, participants, rules),
            preparation_notes=self._notes.preparation_notes(event),
            previous_meeting_ids=self._notes.previous_meeting_ids(event),
            detection_confidence=confidence,
            extracted_at=self._clock(),
        )
