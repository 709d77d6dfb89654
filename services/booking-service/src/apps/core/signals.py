# services/booking-service/src/apps/core/signals.py
"""
Django Signals for Booking Service

Handles post-save and post-delete signals for event publishing
and cache invalidation.
"""

import logging
from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver

from shared.common.constants import CACHE_PREFIX_OPERATING_HOURS
from shared.common.utils import make_cache_key

from .models import Booking, Payment, OperatingHours
from .events import (
    publish_booking_created,
    publish_booking_cancelled,
    publish_booking_completed,
    publish_payment_recorded,
    publish_payment_cancelled,
)

logger = logging.getLogger(__name__)


# ==========================================================================
# Booking Signals
# ==========================================================================

@receiver(pre_save, sender=Booking)
def booking_pre_save(sender, instance, **kwargs):
    """Track status changes before save."""
    instance._old_status = None
    if instance.pk and not instance._state.adding:
        instance._old_status = (
            Booking.objects.filter(pk=instance.pk)
            .values_list('status', flat=True)
            .first()
        )


@receiver(post_save, sender=Booking)
def booking_post_save(sender, instance, created, **kwargs):
    """Publish booking lifecycle events once the transaction commits."""
    if created:
        transaction.on_commit(lambda: publish_booking_created(instance))
        logger.info(f"Booking created: {instance.id}")
        return

    old_status = getattr(instance, '_old_status', None)
    new_status = instance.status

    if old_status == new_status:
        return

    if new_status == Booking.Status.CANCELLED:
        transaction.on_commit(
            lambda: publish_booking_cancelled(instance, reason=instance.cancellation_reason)
        )
        logger.info(f"Booking cancelled: {instance.id}")

    elif new_status == Booking.Status.COMPLETED:
        transaction.on_commit(lambda: publish_booking_completed(instance))
        logger.info(f"Booking completed: {instance.id}")


# ==========================================================================
# Payment Signals
# ==========================================================================

@receiver(pre_save, sender=Payment)
def payment_pre_save(sender, instance, **kwargs):
    instance._old_status = None
    if instance.pk and not instance._state.adding:
        instance._old_status = (
            Payment.objects.filter(pk=instance.pk)
            .values_list('status', flat=True)
            .first()
        )


@receiver(post_save, sender=Payment)
def payment_post_save(sender, instance, created, **kwargs):
    """Publish payment events when a payment becomes paid or is cancelled."""
    old_status = getattr(instance, '_old_status', None)
    if old_status == instance.status:
        return

    if instance.status == Payment.Status.PAID:
        transaction.on_commit(lambda: publish_payment_recorded(instance))
    elif instance.status == Payment.Status.CANCELLED and not created:
        transaction.on_commit(lambda: publish_payment_cancelled(instance))


# ==========================================================================
# Operating Hours Signals
# ==========================================================================

@receiver(post_save, sender=OperatingHours)
@receiver(post_delete, sender=OperatingHours)
def operating_hours_changed(sender, instance, **kwargs):
    """Drop the cached operating hours of the tenant."""
    cache.delete(make_cache_key(instance.tenant_id, prefix=CACHE_PREFIX_OPERATING_HOURS))
    logger.debug(f"Operating hours cache invalidated for tenant {instance.tenant_id}")
