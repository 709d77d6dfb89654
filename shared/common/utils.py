# shared/common/utils.py
"""
Common Utility Functions and Classes
"""

import uuid
from datetime import datetime, date, time
from decimal import Decimal
from typing import Union
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# UUID UTILITIES
# =============================================================================

def is_valid_uuid(value: str) -> bool:
    """Check if string is a valid UUID"""
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, AttributeError):
        return False


# =============================================================================
# DATE/TIME UTILITIES
# =============================================================================

def local_day_bounds(day: date):
    """
    Return the aware [start, end) datetimes of a calendar day in the
    current time zone.
    """
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    next_day = date.fromordinal(day.toordinal() + 1)
    end = timezone.make_aware(datetime.combine(next_day, time.min), tz)
    return start, end


def ensure_aware(dt: datetime) -> datetime:
    """Interpret naive datetimes in the current time zone"""
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


# =============================================================================
# NUMBER UTILITIES
# =============================================================================

def round_decimal(value: Union[Decimal, float, int], places: int = 2) -> Decimal:
    """Round to specified decimal places"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(10) ** -places)


# =============================================================================
# CACHING UTILITIES
# =============================================================================

def make_cache_key(*args, prefix: str = '') -> str:
    """Generate a cache key from arguments"""
    key_parts = [str(arg) for arg in args]
    key = ':'.join(key_parts)
    if prefix:
        key = f"{prefix}:{key}"
    return key
