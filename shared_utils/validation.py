"""
Input validation and sanitization utilities.
Checks calendar event records before they reach the detection pipeline.
"""

from typing import Any, List, Mapping, Optional, Union

import pydantic

from domain.models import CalendarEvent
from shared_utils.error_handler import ValidationError
from shared_utils.logging_utils import get_scoped_logger
from shared_utils.constants import LogScope


logger = get_scoped_logger(LogScope.VALIDATION)


class InputValidator:
    """Utility class for input validation."""

    @staticmethod
    def validate_non_empty_string(value: str, field_name: str) -> str:
        """Validate non-empty string.

        Args:
            value: String to validate
            field_name: Name of field for error messages

        Returns:
            Validated string

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")

        if not value or not value.strip():
            raise ValidationError(f"{field_name} cannot be empty")

        return value.strip()

    @staticmethod
    def validate_positive_int(value: int, field_name: str, allow_zero: bool = False) -> int:
        """Validate positive integer.

        Raises:
            ValidationError: If validation fails
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field_name} must be an integer")

        min_val = 0 if allow_zero else 1
        if value < min_val:
            raise ValidationError(f"{field_name} must be >= {min_val}")

        return value

    @staticmethod
    def event_defects(event: CalendarEvent) -> List[str]:
        """List the reasons an event cannot be scored as a meeting.

        A defective event is not an error: the scorer gives it zero
        confidence and the orchestrator skips it.
        """
        defects: List[str] = []
        if not event.id or not event.id.strip():
            defects.append("missing_id")
        if not event.title or not event.title.strip():
            defects.append("missing_title")
        if (event.start_time.tzinfo is None) != (event.end_time.tzinfo is None):
            # model_copy skips the model validator, so this can still reach us
            defects.append("timezone_mismatch")
        elif event.end_time < event.start_time:
            defects.append("ends_before_start")
        return defects

    @staticmethod
    def coerce_event(record: Union[CalendarEvent, Mapping[str, Any]]) -> Optional[CalendarEvent]:
        """Turn a provider record into a CalendarEvent.

        Returns None (and logs) when a raw mapping is missing required
        fields or carries values of the wrong type.
        """
        if isinstance(record, CalendarEvent):
            return record

        try:
            return CalendarEvent.model_validate(record)
        except pydantic.ValidationError as e:
            event_id = record.get("id") if isinstance(record, Mapping) else None
            logger.warning(
                "malformed_event_record_skipped",
                event_id=event_id,
                error_count=e.error_count(),
                fields=sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]}),
            )
            return None
