"""
Dependency injection container for managing application dependencies.
Centralizes engine, provider and service creation and lifecycle management.
"""

from typing import List, Optional

from adapters.in_memory_calendar_provider import InMemoryCalendarProviderAdapter
from core_detection.patterns.library import DEFAULT_PATTERN_LIBRARY, PatternLibrary
from ports.calendar_provider import CalendarProviderPort
from services.calendar_integration_service import CalendarIntegrationService
from services.meeting_detection_service import MeetingDetectionService
from services.stats_aggregator import DetectionStatsAggregator
from shared_utils.config_loader import get_settings
from shared_utils.constants import LogScope
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.CONFIG)


class DIContainer:
    """Singleton dependency injection container."""

    _instance: Optional['DIContainer'] = None
    _pattern_library: Optional[PatternLibrary] = None
    _stats_aggregator: Optional[DetectionStatsAggregator] = None
    _detection_service: Optional[MeetingDetectionService] = None
    _calendar_providers: Optional[List[CalendarProviderPort]] = None
    _calendar_service: Optional[CalendarIntegrationService] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def reset(self):
        """Reset container (useful for testing)."""
        self._pattern_library = None
        self._stats_aggregator = None
        self._detection_service = None
        self._calendar_providers = None
        self._calendar_service = None

    def get_pattern_library(self) -> PatternLibrary:
        if self._pattern_library is None:
            self._pattern_library = DEFAULT_PATTERN_LIBRARY
            logger.info("pattern_library_initialized", rule_count=len(self._pattern_library.rule_names()))
        return self._pattern_library

    def get_stats_aggregator(self) -> DetectionStatsAggregator:
        if self._stats_aggregator is None:
            self._stats_aggregator = DetectionStatsAggregator()
        return self._stats_aggregator

    def get_detection_service(self) -> MeetingDetectionService:
        """Get or create MeetingDetectionService (lazy singleton).

        Initial rules come from Settings; a ConfigurationError here means
        the environment carries inconsistent detection settings.
        """
        if self._detection_service is None:
            settings = get_settings()
            self._detection_service = MeetingDetectionService(
                rules=settings.to_detection_rules(),
                patterns=self.get_pattern_library(),
                stats_aggregator=self.get_stats_aggregator(),
                max_workers=settings.detection_max_workers,
            )
            logger.info("detection_service_initialized", max_workers=settings.detection_max_workers)
        return self._detection_service

    def get_calendar_providers(self) -> List[CalendarProviderPort]:
        """Connected calendars. Only the in-memory device calendar ships."""
        if self._calendar_providers is None:
            self._calendar_providers = [InMemoryCalendarProviderAdapter()]
        return self._calendar_providers

    def get_calendar_service(self) -> CalendarIntegrationService:
        if self._calendar_service is None:
            self._calendar_service = CalendarIntegrationService(
                detection=self.get_detection_service(),
                providers=self.get_calendar_providers(),
            )
            logger.info("calendar_service_initialized", providers=len(self.get_calendar_providers()))
        return self._calendar_service


# Global singleton instance
_container = DIContainer()


def get_di_container() -> DIContainer:
    """Get global DI container instance."""
    return _container
