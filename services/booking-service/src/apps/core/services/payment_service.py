# services/booking-service/src/apps/core/services/payment_service.py
"""
Payment Service

Records top-ups and booking settlements and keeps the balance cache
in step with the ledger.
"""

import uuid
import logging
from datetime import datetime
from decimal import Decimal
from typing import List

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from shared.common.validators import validate_positive_decimal

from apps.core.exceptions import NotFoundError, InvalidRequestError
from apps.core.models import Booking, Payment, Student
from .balance_service import BalanceService

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Service for payments.

    A paid top-up adds its amount to the balance. A paid settlement only
    marks its booking as paid for: the booking keeps its price in the
    debt and the balance does not move. Cancelling a paid top-up takes
    its amount back out.
    """

    # ==========================================================================
    # Recording
    # ==========================================================================

    @transaction.atomic
    def record_payment(
        self,
        tenant_id: uuid.UUID,
        student_id: uuid.UUID,
        amount,
        method: str = Payment.Method.CASH,
        booking_id: uuid.UUID = None,
        status: str = Payment.Status.PAID,
        reference: str = None,
        notes: str = None,
        payment_date: datetime = None
    ) -> Payment:
        """Record a payment, applying it to the balance cache when paid."""
        try:
            amount = validate_positive_decimal(amount, 'amount')
        except ValidationError as e:
            raise InvalidRequestError(e.messages[0])

        if method not in Payment.Method.values:
            raise InvalidRequestError(f"Unknown payment method: {method}")

        if status not in (Payment.Status.PENDING, Payment.Status.PAID):
            raise InvalidRequestError(f"Payments cannot be recorded as {status}")

        if not Student.objects.filter(id=student_id).exists():
            raise NotFoundError(f"Student {student_id} not found")

        booking = None
        if booking_id:
            booking = self._get_settleable_booking(
                tenant_id, student_id, booking_id,
                check_settled=status == Payment.Status.PAID
            )

        BalanceService.ensure_membership(student_id, tenant_id, lock=True)

        payment = Payment.objects.create(
            tenant_id=tenant_id,
            student_id=student_id,
            booking=booking,
            amount=amount,
            method=method,
            status=status,
            reference=reference,
            notes=notes,
            payment_date=payment_date or (timezone.now() if status == Payment.Status.PAID else None),
        )

        if payment.is_paid:
            BalanceService.update_balance_cache(student_id, tenant_id, self._paid_delta(payment))

        logger.info(
            f"Recorded {status} payment {payment.id} of {amount} for student {student_id}",
            extra={
                'payment_id': str(payment.id),
                'tenant_id': str(tenant_id),
                'booking_id': str(booking_id) if booking_id else None,
            }
        )

        return payment

    @transaction.atomic
    def mark_paid(self, payment_id: uuid.UUID, tenant_id: uuid.UUID = None) -> Payment:
        """Mark a pending payment as paid."""
        payment = self._get_for_update(payment_id, tenant_id)

        if payment.status != Payment.Status.PENDING:
            raise InvalidRequestError(f"Cannot mark payment as paid: status is {payment.status}")

        if payment.booking_id:
            self._get_settleable_booking(payment.tenant_id, payment.student_id, payment.booking_id)

        BalanceService.ensure_membership(payment.student_id, payment.tenant_id, lock=True)

        payment.status = Payment.Status.PAID
        payment.payment_date = payment.payment_date or timezone.now()
        payment.save(update_fields=['status', 'payment_date', 'updated_at'])

        BalanceService.update_balance_cache(
            payment.student_id, payment.tenant_id, self._paid_delta(payment)
        )

        logger.info(f"Payment {payment.id} marked as paid")
        return payment

    @transaction.atomic
    def cancel_payment(self, payment_id: uuid.UUID, tenant_id: uuid.UUID = None) -> Payment:
        """Cancel a payment, reversing its effect on the balance cache."""
        payment = self._get_for_update(payment_id, tenant_id)

        if payment.status == Payment.Status.CANCELLED:
            raise InvalidRequestError("Payment is already cancelled")

        reversal = -self._paid_delta(payment) if payment.is_paid else Decimal('0')

        payment.status = Payment.Status.CANCELLED
        payment.save(update_fields=['status', 'updated_at'])

        if reversal:
            BalanceService.update_balance_cache(payment.student_id, payment.tenant_id, reversal)

        logger.info(
            f"Cancelled payment {payment.id}",
            extra={'payment_id': str(payment.id), 'reversal': str(reversal)}
        )
        return payment

    # ==========================================================================
    # Queries
    # ==========================================================================

    def get_payment(self, payment_id: uuid.UUID, tenant_id: uuid.UUID = None) -> Payment:
        queryset = Payment.objects.all()
        if tenant_id:
            queryset = queryset.filter(tenant_id=tenant_id)
        try:
            return queryset.get(id=payment_id)
        except Payment.DoesNotExist:
            raise NotFoundError(f"Payment {payment_id} not found")

    def list_payments(
        self,
        tenant_id: uuid.UUID,
        student_id: uuid.UUID = None,
        status: str = None
    ) -> List[Payment]:
        queryset = Payment.objects.filter(tenant_id=tenant_id)
        if student_id:
            queryset = queryset.filter(student_id=student_id)
        if status:
            queryset = queryset.filter(status=status)
        return list(queryset.order_by('-created_at'))

    # ==========================================================================
    # Private Methods
    # ==========================================================================

    def _get_for_update(self, payment_id: uuid.UUID, tenant_id: uuid.UUID = None) -> Payment:
        queryset = Payment.objects.select_for_update()
        if tenant_id:
            queryset = queryset.filter(tenant_id=tenant_id)
        try:
            return queryset.get(id=payment_id)
        except Payment.DoesNotExist:
            raise NotFoundError(f"Payment {payment_id} not found")

    def _get_settleable_booking(
        self,
        tenant_id: uuid.UUID,
        student_id: uuid.UUID,
        booking_id: uuid.UUID,
        check_settled: bool = True
    ) -> Booking:
        """Load a booking that may receive a settlement payment."""
        try:
            booking = Booking.objects.select_for_update().get(id=booking_id, tenant_id=tenant_id)
        except Booking.DoesNotExist:
            raise NotFoundError(f"Booking {booking_id} not found")

        if str(booking.student_id) != str(student_id):
            raise InvalidRequestError(f"Booking {booking_id} belongs to another student")

        if booking.status == Booking.Status.CANCELLED:
            raise InvalidRequestError(f"Booking {booking_id} is cancelled")

        if check_settled and Payment.objects.filter(
            booking_id=booking_id, status=Payment.Status.PAID
        ).exists():
            raise InvalidRequestError(f"Booking {booking_id} is already settled")

        return booking

    @staticmethod
    def _paid_delta(payment: Payment) -> Decimal:
        """Cache movement caused by a payment becoming paid."""
        if payment.booking_id is None:
            return payment.amount
        return Decimal('0')
