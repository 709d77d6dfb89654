# services/booking-service/src/apps/core/services/court_allocator.py
"""
Court Allocator

Picks a free court for a window.
"""

import uuid
import logging
from datetime import datetime
from typing import Optional

from apps.core.models import Court
from .availability_service import AvailabilityService

logger = logging.getLogger(__name__)


class CourtAllocator:
    """First-fit court allocation in document order. Read-only."""

    def __init__(self, availability_service: AvailabilityService = None):
        self.availability_service = availability_service or AvailabilityService()

    def find_available_court(
        self,
        tenant_id: uuid.UUID,
        start: datetime,
        end: datetime
    ) -> Optional[Court]:
        """Return the first active court without a conflict, or None."""
        for court in Court.active_for_tenant(tenant_id):
            if not self.availability_service.has_conflict(tenant_id, court.id, start, end):
                return court

        logger.info(
            f"No court available for tenant {tenant_id} between {start.isoformat()} and {end.isoformat()}"
        )
        return None
