# services/booking-service/src/apps/core/services/balance_service.py
"""
Balance Service

Derives student balances from the payment and booking history and
keeps the cached counter on the membership reconciled with it.
"""

import uuid
import logging
from decimal import Decimal
from typing import Optional, Dict, Any

from django.conf import settings
from django.db import transaction
from django.db.models import Sum, F

from shared.common.utils import round_decimal

from apps.core.events import publish_balance_drift
from apps.core.models import Booking, Payment, StudentTenant

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class BalanceService:
    """
    Service for the balance ledger.

    The ledger (payments and bookings) is the source of truth; the
    `StudentTenant.balance` counter is an optimisation that is only
    changed by atomic increments or an explicit sync.
    """

    # ==========================================================================
    # Ledger
    # ==========================================================================

    @staticmethod
    def get_ledger_breakdown(student_id: uuid.UUID, tenant_id: uuid.UUID) -> Dict[str, Any]:
        """
        Compute the ledger components for a student in a tenant.

        Credits are paid top-ups (paid payments without a booking). Every
        non-cancelled booking contributes its price to the debt, settled or
        not; a settlement records that the booking was paid for and never
        adds credit.

        Returns:
            Dict with credits, debt, balance and booking counts
        """
        credits = Payment.objects.filter(
            student_id=student_id,
            tenant_id=tenant_id,
            status=Payment.Status.PAID,
            booking__isnull=True,
        ).aggregate(total=Sum('amount'))['total'] or ZERO

        settled_ids = set(
            Payment.objects.filter(
                student_id=student_id,
                tenant_id=tenant_id,
                status=Payment.Status.PAID,
                booking__isnull=False,
            ).values_list('booking_id', flat=True)
        )

        bookings = Booking.objects.filter(
            student_id=student_id,
            tenant_id=tenant_id,
            status__in=[
                Booking.Status.PENDING,
                Booking.Status.CONFIRMED,
                Booking.Status.COMPLETED,
            ],
        ).values_list('id', 'price')

        debt = ZERO
        settled = 0
        for booking_id, price in bookings:
            debt += price
            if booking_id in settled_ids:
                settled += 1

        return {
            'credits': round_decimal(credits),
            'debt': round_decimal(debt),
            'balance': round_decimal(credits - debt),
            'settled_bookings': settled,
            'unsettled_bookings': len(bookings) - settled,
        }

    @staticmethod
    def calculate_balance(student_id: uuid.UUID, tenant_id: uuid.UUID) -> Decimal:
        """Authoritative balance: credits minus debt."""
        return BalanceService.get_ledger_breakdown(student_id, tenant_id)['balance']

    @staticmethod
    def booking_contribution(booking: Booking) -> Decimal:
        """Amount a booking currently takes from the ledger balance."""
        if booking.status == Booking.Status.CANCELLED:
            return ZERO
        return round_decimal(booking.price)

    # ==========================================================================
    # Cache
    # ==========================================================================

    @staticmethod
    def ensure_membership(
        student_id: uuid.UUID,
        tenant_id: uuid.UUID,
        lock: bool = False
    ) -> StudentTenant:
        """Get the membership record, creating it with a zero balance if absent."""
        membership, created = StudentTenant.objects.get_or_create(
            student_id=student_id,
            tenant_id=tenant_id,
            defaults={'balance': ZERO},
        )
        if created:
            logger.info(f"Created membership for student {student_id} in tenant {tenant_id}")

        if lock:
            membership = StudentTenant.objects.select_for_update().get(pk=membership.pk)

        return membership

    @staticmethod
    def get_cached_balance(student_id: uuid.UUID, tenant_id: uuid.UUID) -> Optional[Decimal]:
        membership = StudentTenant.get_for(student_id, tenant_id)
        return membership.balance if membership else None

    @staticmethod
    @transaction.atomic
    def update_balance_cache(
        student_id: uuid.UUID,
        tenant_id: uuid.UUID,
        delta: Decimal
    ) -> None:
        """Apply an atomic increment to the cached balance."""
        membership = BalanceService.ensure_membership(student_id, tenant_id)
        StudentTenant.objects.filter(pk=membership.pk).update(
            balance=F('balance') + delta
        )

        logger.debug(
            f"Balance cache adjusted by {delta} for student {student_id}",
            extra={
                'student_id': str(student_id),
                'tenant_id': str(tenant_id),
                'delta': str(delta),
            }
        )

    # ==========================================================================
    # Reconciliation
    # ==========================================================================

    @staticmethod
    def get_balance(
        student_id: uuid.UUID,
        tenant_id: uuid.UUID,
        sync_cache: bool = False
    ) -> Decimal:
        """Return the computed balance, optionally writing it to the cache."""
        if sync_cache:
            return BalanceService.sync_balance(student_id, tenant_id)
        return BalanceService.calculate_balance(student_id, tenant_id)

    @staticmethod
    @transaction.atomic
    def sync_balance(student_id: uuid.UUID, tenant_id: uuid.UUID) -> Decimal:
        """
        Recompute the balance and overwrite the cached counter.

        Drift beyond BALANCE_DRIFT_EPSILON is logged and published; it is
        a monitoring signal, not an error.
        """
        membership = BalanceService.ensure_membership(student_id, tenant_id, lock=True)
        computed = BalanceService.calculate_balance(student_id, tenant_id)
        previous = membership.balance

        if abs(computed - previous) > settings.BALANCE_DRIFT_EPSILON:
            logger.warning(
                f"Balance drift for student {student_id}: cached {previous}, computed {computed}",
                extra={
                    'student_id': str(student_id),
                    'tenant_id': str(tenant_id),
                    'cached': str(previous),
                    'computed': str(computed),
                }
            )
            transaction.on_commit(
                lambda: publish_balance_drift(student_id, tenant_id, previous, computed)
            )

        StudentTenant.objects.filter(pk=membership.pk).update(balance=computed)

        return computed

    @staticmethod
    def validate_balance(
        student_id: uuid.UUID,
        tenant_id: uuid.UUID,
        auto_sync: bool = False
    ) -> Dict[str, Any]:
        """
        Compare the cached counter with the computed balance.

        Args:
            student_id: Student UUID
            tenant_id: Tenant UUID
            auto_sync: Overwrite the cache when they disagree

        Returns:
            Dict with is_valid, cached, computed, difference and synced
        """
        cached = BalanceService.get_cached_balance(student_id, tenant_id)
        cached = round_decimal(cached) if cached is not None else ZERO
        computed = BalanceService.calculate_balance(student_id, tenant_id)
        difference = round_decimal(computed - cached)
        is_valid = abs(difference) <= settings.BALANCE_DRIFT_EPSILON

        synced = False
        if not is_valid and auto_sync:
            BalanceService.sync_balance(student_id, tenant_id)
            synced = True

        return {
            'is_valid': is_valid,
            'cached': cached,
            'computed': computed,
            'difference': difference,
            'synced': synced,
        }
