"""
DetectionStatsAggregator: running statistics across detection batches.

Batches reduce into a BatchDetectionSummary first; the aggregator only
folds finished summaries in, under one lock, and publishes an immutable
MeetingDetectionStats snapshot.
"""

from __future__ import annotations

import threading
from datetime import datetime

from domain.models import BatchDetectionSummary, MeetingDetectionStats
from shared_utils.logging_utils import get_scoped_logger
from shared_utils.constants import LogScope


logger = get_scoped_logger(LogScope.STATS)


class DetectionStatsAggregator:
    """Owns the cumulative counters behind MeetingDetectionStats."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._confidence_sum = 0.0
        self._snapshot = MeetingDetectionStats()

    def apply(self, summary: BatchDetectionSummary, now: datetime) -> MeetingDetectionStats:
        """Fold one batch summary in and return the new snapshot.

        Counts and the confidence average accumulate; the type histogram is
        replaced by the batch's own.
        """
        with self._lock:
            previous = self._snapshot
            self._confidence_sum += summary.confidence_sum
            detected = previous.meetings_detected + summary.meetings_detected

            self._snapshot = MeetingDetectionStats(
                total_events_processed=previous.total_events_processed + summary.events_processed,
                meetings_detected=detected,
                average_confidence=self._confidence_sum / detected if detected else 0.0,
                meeting_type_distribution=dict(summary.type_histogram),
                last_processed_at=now,
            )
            snapshot = self._snapshot

        logger.info(
            "detection_stats_updated",
            batch_events=summary.events_processed,
            batch_meetings=summary.meetings_detected,
            batch_failures=len(summary.failed_event_ids),
            total_events=snapshot.total_events_processed,
            total_meetings=snapshot.meetings_detected,
            average_confidence=round(snapshot.average_confidence, 4),
        )
        return snapshot

    def snapshot(self) -> MeetingDetectionStats:
        return self._snapshot

    def reset(self) -> None:
        with self._lock:
            self._confidence_sum = 0.0
            self._snapshot = MeetingDetectionStats()
