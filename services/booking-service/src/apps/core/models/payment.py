# services/booking-service/src/apps/core/models/payment.py
"""
Payment Model

Immutable money movements feeding the balance ledger.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Payment(models.Model):
    """
    A payment by a student.

    A paid payment without a booking is a top-up and adds credit.
    A paid payment with a booking marks that booking as paid for and
    adds no credit.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'
        CANCELLED = 'cancelled', 'Cancelled'

    class Method(models.TextChoices):
        CASH = 'cash', 'Cash'
        TRANSFER = 'transfer', 'Bank Transfer'
        CARD = 'card', 'Card'
        WALLET = 'wallet', 'Wallet'
        OTHER = 'other', 'Other'

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(db_index=True)
    student_id = models.UUIDField(db_index=True)

    booking = models.ForeignKey(
        'core.Booking',
        on_delete=models.PROTECT,
        related_name='payments',
        blank=True,
        null=True
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    method = models.CharField(
        max_length=20,
        choices=Method.choices,
        default=Method.CASH
    )

    payment_date = models.DateTimeField(blank=True, null=True)
    reference = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student_id', 'tenant_id', 'status']),
            models.Index(fields=['booking', 'status']),
        ]

    def __str__(self):
        return f"Payment {self.amount} ({self.status})"

    @property
    def is_top_up(self) -> bool:
        return self.booking_id is None

    @property
    def is_paid(self) -> bool:
        return self.status == self.Status.PAID
