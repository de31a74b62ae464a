from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from datetime import timedelta

import pydantic

from domain.models import MeetingDetectionRules
from shared_utils.constants import Defaults, Environment, LogScope
from shared_utils.error_handler import ConfigurationError
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.CONFIG)


class Settings(BaseSettings):
    """Application configuration with environment variable precedence.

    Precedence: 1) Environment Variables > 2) .env file > 3) Class defaults

    Detection defaults here seed the initial MeetingDetectionRules; rules can
    be replaced at runtime through the detection service.
    """
    # Application metadata
    app_name: str = "Meeting Detection Engine"  # Configurable via APP_NAME env var
    app_version: str = "1.0.0"
    app_description: str = "Rule-based meeting detection and context extraction"
    api_version: str = "v1"

    # API Base URL Configuration
    api_host: str = "localhost"  # Host for API (localhost, 0.0.0.0, or domain)
    api_port: int = 8000
    api_protocol: str = "http"  # "http" or "https"
    rate_limit: str = "60/minute"  # slowapi limit string for detection endpoints

    # Detection defaults
    min_confidence_threshold: float = Field(default=Defaults.MIN_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0)
    min_meeting_duration_minutes: int = Field(default=Defaults.MIN_MEETING_MINUTES, ge=0)
    max_meeting_duration_minutes: int = Field(default=Defaults.MAX_MEETING_MINUTES, ge=0)
    min_attendee_count: int = Field(default=Defaults.MIN_ATTENDEE_COUNT, ge=0)
    require_attendees: bool = True
    detect_virtual_meetings: bool = True
    summary_delay_minutes: int = Field(default=Defaults.SUMMARY_DELAY_MINUTES, ge=0)
    detection_max_workers: int = Field(default=Defaults.MAX_WORKERS, ge=1)

    # Environment
    environment: str = Environment.DEVELOPMENT.value
    log_level: str = Defaults.LOG_LEVEL

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is recognized."""
        valid_envs = {e.value for e in Environment}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}, got {v}")
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}, got {v}")
        return v.upper()

    def get_api_base_url(self) -> str:
        """Get full API base URL constructed from host, port and protocol.

        Returns:
            Full API base URL (e.g., "http://localhost:8000")
        """
        # Don't add port if it's standard (80 for http, 443 for https)
        port_str = "" if (
            (self.api_protocol == "http" and self.api_port == 80) or
            (self.api_protocol == "https" and self.api_port == 443)
        ) else f":{self.api_port}"

        return f"{self.api_protocol}://{self.api_host}{port_str}"

    def to_detection_rules(self) -> MeetingDetectionRules:
        """Build the initial detection rules from these settings.

        Raises:
            ConfigurationError: If the combination is inconsistent
                (e.g. minimum duration above maximum).
        """
        try:
            return MeetingDetectionRules(
                minimum_confidence_threshold=self.min_confidence_threshold,
                minimum_meeting_duration=timedelta(minutes=self.min_meeting_duration_minutes),
                maximum_meeting_duration=timedelta(minutes=self.max_meeting_duration_minutes),
                require_attendees=self.require_attendees,
                minimum_attendee_count=self.min_attendee_count,
                detect_virtual_meetings=self.detect_virtual_meetings,
                summary_delay_after_meeting=timedelta(minutes=self.summary_delay_minutes),
            )
        except pydantic.ValidationError as e:
            raise ConfigurationError(
                "Detection settings are inconsistent",
                context={"errors": [err["msg"] for err in e.errors()]},
            ) from e


@lru_cache()
def get_settings() -> Settings:
    """Load and cache application settings.

    Returns:
        Validated Settings instance

    Raises:
        pydantic.ValidationError: If a setting is missing or invalid
    """
    settings = Settings()

    logger.info(
        "configuration_loaded",
        environment=settings.environment,
        log_level=settings.log_level,
        min_confidence_threshold=settings.min_confidence_threshold,
        detection_max_workers=settings.detection_max_workers,
    )

    return settings
