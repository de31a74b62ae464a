"""
Constants management.
Centralized configuration for scoring weights, thresholds, and defaults.
"""

from enum import Enum
from typing import Final, Tuple


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# Default values
class Defaults:
    """Detection defaults.

    The weights and sub-score thresholds are exposed through
    ``MeetingDetectionRules.scoring_weights``; these are only the shipped values.
    """
    # Confidence weights (sum to 1.0)
    TITLE_WEIGHT: Final[float] = 0.40
    DURATION_WEIGHT: Final[float] = 0.20
    ATTENDEE_WEIGHT: Final[float] = 0.25
    DESCRIPTION_WEIGHT: Final[float] = 0.10
    VIRTUAL_WEIGHT: Final[float] = 0.05

    MIN_CONFIDENCE_THRESHOLD: Final[float] = 0.5
    HIGH_CONFIDENCE: Final[float] = 0.8
    AUTO_RECORD_CONFIDENCE: Final[float] = 0.9

    MIN_MEETING_MINUTES: Final[int] = 15
    MAX_MEETING_MINUTES: Final[int] = 8 * 60
    MIN_ATTENDEE_COUNT: Final[int] = 1
    COMMON_MEETING_MINUTES: Final[Tuple[int, ...]] = (15, 30, 60, 90)

    LARGE_MEETING_ATTENDEES: Final[int] = 10
    HIGH_PRIORITY_ATTENDEES: Final[int] = 20
    HIGH_PRIORITY_MINUTES: Final[int] = 120
    LOW_PRIORITY_MINUTES: Final[int] = 15

    SUMMARY_DELAY_MINUTES: Final[int] = 15
    AUDIO_QUALITY: Final[str] = "high"
    DELIVERY_METHOD: Final[str] = "email"

    MAX_WORKERS: Final[int] = 1
    LOG_LEVEL: Final[str] = "INFO"


DEFAULT_MEETING_KEYWORDS: Final[Tuple[str, ...]] = (
    "meeting",
    "call",
    "sync",
    "standup",
    "review",
    "planning",
    "interview",
    "demo",
    "presentation",
    "brainstorm",
    "retrospective",
)

DEFAULT_EXCLUDE_KEYWORDS: Final[Tuple[str, ...]] = (
    "lunch",
    "dinner",
    "vacation",
    "holiday",
    "birthday",
    "personal",
    "appointment",
    "break",
    "block",
)


# Logging scopes
class LogScope:
    """Standardized logging scope names."""
    CONFIG = "config_loader"
    API = "api"
    VALIDATION = "validation"
    ERROR_HANDLER = "error_handler"
    DETECTION = "meeting_detection"
    SCORING = "confidence_scoring"
    EXTRACTION = "context_extraction"
    STATS = "detection_stats"
    CALENDAR = "calendar_integration"
    ADAPTER = "adapter"


# API endpoints and paths
class APIEndpoints:
    """API route definitions."""
    HEALTH = "/health"
    DETECT = "/api/v1/meetings/detect"
    DETECT_ONE = "/api/v1/meetings/detect-one"
    UPCOMING = "/api/v1/meetings/upcoming"
    SEARCH = "/api/v1/meetings/search"
    STATS = "/api/v1/detection/stats"
    RULES = "/api/v1/detection/rules"


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes for consistency."""
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_INPUT = "INVALID_INPUT"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
