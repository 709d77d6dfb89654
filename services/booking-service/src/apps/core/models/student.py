# services/booking-service/src/apps/core/models/student.py
"""
Student Models

Student registry and per-tenant membership with the cached balance.
"""

import uuid
from decimal import Decimal

from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin


class Student(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """A student known to the platform."""

    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)

    class Meta:
        db_table = 'students'
        ordering = ['name']

    def __str__(self):
        return self.name


class StudentTenant(UUIDPrimaryKeyMixin, ActiveMixin):
    """
    Membership of a student in a tenant.

    `balance` is a cached counter of the ledger balance. It is kept
    reasonably current for fast reads but is never the source of truth.
    """

    student_id = models.UUIDField(db_index=True)
    tenant_id = models.UUIDField(db_index=True)

    balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )

    joined_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'student_tenants'
        constraints = [
            models.UniqueConstraint(
                fields=['student_id', 'tenant_id'],
                name='unique_student_tenant'
            ),
        ]

    def __str__(self):
        return f"{self.student_id} @ {self.tenant_id}: {self.balance}"

    @classmethod
    def get_for(cls, student_id: uuid.UUID, tenant_id: uuid.UUID):
        return cls.objects.filter(student_id=student_id, tenant_id=tenant_id).first()
