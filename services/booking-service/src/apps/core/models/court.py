# services/booking-service/src/apps/core/models/court.py
"""
Court Model

Physical courts rented out by a facility and used by lessons.
"""

import uuid
from decimal import Decimal

from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TenantMixin, ActiveMixin


class Court(UUIDPrimaryKeyMixin, TenantMixin, ActiveMixin):
    """
    A bookable court.

    Courts are read-only for the booking workflow. Document order
    (created_at, name) decides which court the allocator tries first.
    """

    name = models.CharField(max_length=100)
    surface = models.CharField(max_length=50, blank=True, default='')
    hourly_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'courts'
        ordering = ['created_at', 'name']
        indexes = [
            models.Index(fields=['tenant_id', 'is_active']),
        ]

    def __str__(self):
        return self.name

    @classmethod
    def active_for_tenant(cls, tenant_id: uuid.UUID):
        """Active courts of a tenant in allocation order."""
        return cls.objects.filter(
            tenant_id=tenant_id,
            is_active=True
        ).order_by('created_at', 'name', 'id')
