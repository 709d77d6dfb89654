# shared/common/mixins.py
"""
Reusable Mixins for Models and Views
"""

import uuid
from django.db import models


# =============================================================================
# MODEL MIXINS
# =============================================================================

class UUIDPrimaryKeyMixin(models.Model):
    """
    Mixin that provides UUID as primary key instead of auto-increment integer.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record"
    )

    class Meta:
        abstract = True


class TimestampMixin(models.Model):
    """
    Mixin that provides created_at and updated_at timestamp fields.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When this record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When this record was last updated"
    )

    class Meta:
        abstract = True


class TenantMixin(models.Model):
    """
    Mixin for multi-tenant models that belong to a sports facility.
    """

    tenant_id = models.UUIDField(
        db_index=True,
        help_text="Tenant (facility operator) this record belongs to"
    )

    class Meta:
        abstract = True


class ActiveMixin(models.Model):
    """
    Mixin for models that can be activated/deactivated.
    """

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this record is active"
    )

    class Meta:
        abstract = True


# =============================================================================
# VIEW MIXINS
# =============================================================================

class TenantFilterMixin:
    """
    Scopes the queryset to the tenant resolved for this request.
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        tenant_id = getattr(self, 'tenant_id', None) or getattr(self.request, 'tenant_id', None)
        if not tenant_id:
            return queryset.none()
        return queryset.filter(tenant_id=tenant_id)
