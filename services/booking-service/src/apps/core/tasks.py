# services/booking-service/src/apps/core/tasks.py
"""
Booking Celery Tasks

Background tasks for balance reconciliation.
"""

import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(name='booking.reconcile_balances')
def reconcile_balances(tenant_id: str = None):
    """
    Validate every active membership against the ledger.

    Runs periodically as a consistency check; memberships whose cache
    drifted are synced.
    """
    from .models import StudentTenant
    from .services.balance_service import BalanceService

    memberships = StudentTenant.objects.filter(is_active=True)
    if tenant_id:
        memberships = memberships.filter(tenant_id=tenant_id)

    checked_count = 0
    discrepancy_count = 0
    failed_count = 0

    for membership in memberships.iterator():
        try:
            result = BalanceService.validate_balance(
                membership.student_id,
                membership.tenant_id,
                auto_sync=True
            )
        except Exception as e:
            failed_count += 1
            logger.error(
                f"Failed to reconcile balance for student {membership.student_id}: {e}"
            )
            continue

        checked_count += 1
        if not result['is_valid']:
            discrepancy_count += 1

    logger.info(
        f"Reconciled {checked_count} balances, "
        f"{discrepancy_count} discrepancies found, {failed_count} failures"
    )

    return {
        'checked': checked_count,
        'discrepancies': discrepancy_count,
        'failed': failed_count,
    }
