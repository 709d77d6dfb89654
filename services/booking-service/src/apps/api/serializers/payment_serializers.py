# services/booking-service/src/apps/api/serializers/payment_serializers.py
"""
Payment and Balance Serializers
"""

from rest_framework import serializers

from apps.core.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    booking_id = serializers.UUIDField(read_only=True)
    is_top_up = serializers.BooleanField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'tenant_id', 'student_id', 'booking_id',
            'amount', 'status', 'method', 'is_top_up',
            'payment_date', 'reference', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """Serializer for recording a payment."""

    student_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    method = serializers.ChoiceField(
        choices=Payment.Method.choices,
        default=Payment.Method.CASH
    )
    booking_id = serializers.UUIDField(required=False, allow_null=True)
    status = serializers.ChoiceField(
        choices=[Payment.Status.PENDING, Payment.Status.PAID],
        default=Payment.Status.PAID
    )
    reference = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    payment_date = serializers.DateTimeField(required=False, allow_null=True)


class BalanceSerializer(serializers.Serializer):
    student_id = serializers.UUIDField()
    tenant_id = serializers.UUIDField()
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    cached_balance = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    credits = serializers.DecimalField(max_digits=12, decimal_places=2)
    debt = serializers.DecimalField(max_digits=12, decimal_places=2)


class BalanceValidationSerializer(serializers.Serializer):
    is_valid = serializers.BooleanField()
    cached = serializers.DecimalField(max_digits=12, decimal_places=2)
    computed = serializers.DecimalField(max_digits=12, decimal_places=2)
    difference = serializers.DecimalField(max_digits=12, decimal_places=2)
    synced = serializers.BooleanField()
