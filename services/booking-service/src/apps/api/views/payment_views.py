# services/booking-service/src/apps/api/views/payment_views.py
"""
Payment API Views

Payments and student balances.
"""

import logging

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend

from shared.common.exceptions import NotFoundException
from shared.common.mixins import TenantFilterMixin
from shared.common.pagination import StandardPagination

from apps.core.models import Payment, Student
from apps.core.services import PaymentService, BalanceService
from apps.api.serializers import (
    PaymentSerializer,
    PaymentCreateSerializer,
    BalanceSerializer,
    BalanceValidationSerializer,
)
from .base import ServiceViewMixin
from .filters import PaymentFilter

logger = logging.getLogger(__name__)

TRUE_VALUES = ('1', 'true', 'yes')


class PaymentViewSet(ServiceViewMixin, TenantFilterMixin, viewsets.ReadOnlyModelViewSet):
    """ViewSet for payments. Payments are cancelled, never deleted."""

    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = PaymentFilter
    ordering_fields = ['created_at', 'payment_date', 'amount']
    ordering = ['-created_at']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.payment_service = PaymentService()

    def create(self, request, *args, **kwargs):
        """Record a top-up or a booking settlement."""
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = self.payment_service.record_payment(
            tenant_id=self.tenant_id,
            **serializer.validated_data
        )

        return Response(
            PaymentSerializer(payment).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        payment = self.payment_service.mark_paid(pk, tenant_id=self.tenant_id)
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        payment = self.payment_service.cancel_payment(pk, tenant_id=self.tenant_id)
        return Response(PaymentSerializer(payment).data)


class StudentBalanceView(ServiceViewMixin, APIView):
    """
    Current balance of a student in the tenant.

    Query params:
        sync: when true, the cached counter is overwritten with the
              computed balance
    """

    def get(self, request, student_id):
        if not Student.objects.filter(id=student_id).exists():
            raise NotFoundException(f"Student {student_id} not found")

        sync = request.query_params.get('sync', '').lower() in TRUE_VALUES
        if sync:
            BalanceService.sync_balance(student_id, self.tenant_id)

        breakdown = BalanceService.get_ledger_breakdown(student_id, self.tenant_id)

        return Response(BalanceSerializer({
            'student_id': student_id,
            'tenant_id': self.tenant_id,
            'balance': breakdown['balance'],
            'cached_balance': BalanceService.get_cached_balance(student_id, self.tenant_id),
            'credits': breakdown['credits'],
            'debt': breakdown['debt'],
        }).data)


class StudentBalanceValidateView(ServiceViewMixin, APIView):
    """Compare the cached balance with the ledger."""

    def get(self, request, student_id):
        if not Student.objects.filter(id=student_id).exists():
            raise NotFoundException(f"Student {student_id} not found")

        auto_sync = request.query_params.get('auto_sync', '').lower() in TRUE_VALUES
        result = BalanceService.validate_balance(student_id, self.tenant_id, auto_sync=auto_sync)

        return Response(BalanceValidationSerializer(result).data)
