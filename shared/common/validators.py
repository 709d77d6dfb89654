"""
Shared Validators Module.

Common validation utilities used across all microservices.
"""
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.core.exceptions import ValidationError


# =============================================================================
# DATE/TIME VALIDATORS
# =============================================================================

def validate_time_slot(
    start_time: datetime,
    end_time: datetime,
    max_duration_hours: Optional[int] = 24,
) -> None:
    """Validate a half-open time slot [start_time, end_time)."""
    if start_time >= end_time:
        raise ValidationError("Start time must be before end time")

    if max_duration_hours is not None:
        if end_time - start_time > timedelta(hours=max_duration_hours):
            raise ValidationError(f"Duration cannot exceed {max_duration_hours} hours")


def validate_hour_range(open_hour: int, close_hour: int) -> None:
    """Validate opening hours expressed as whole hours of the day."""
    for hour in (open_hour, close_hour):
        if not isinstance(hour, int) or isinstance(hour, bool):
            raise ValidationError(f"Hour must be an integer, got {hour!r}")
        if hour < 0 or hour > 24:
            raise ValidationError(f"Hour {hour} is outside 0-24")

    if open_hour >= close_hour:
        raise ValidationError("Opening hour must be before closing hour")


# =============================================================================
# NUMERIC VALIDATORS
# =============================================================================

def validate_positive_decimal(
    value: Any,
    field_name: str = "value",
    allow_zero: bool = False
) -> Decimal:
    """Validate and convert to positive Decimal."""
    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid decimal value for {field_name}")

    if not decimal_value.is_finite():
        raise ValidationError(f"Invalid decimal value for {field_name}")

    if allow_zero:
        if decimal_value < 0:
            raise ValidationError(f"{field_name} cannot be negative")
    elif decimal_value <= 0:
        raise ValidationError(f"{field_name} must be positive")

    return decimal_value
