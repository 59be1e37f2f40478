"""
Serializers for APC payments.
"""
from rest_framework import serializers

from apps.users.serializers import UserSummarySerializer
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    submission_title = serializers.CharField(source='submission.title', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'submission', 'submission_title', 'user', 'amount', 'currency',
            'status', 'status_display', 'payment_method', 'proof_url', 'transaction_id',
            'invoice_number', 'notes', 'paid_at', 'refunded_at', 'proof_submitted_at',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PaymentProofSerializer(serializers.Serializer):
    proof_url = serializers.URLField()
    payment_method = serializers.ChoiceField(choices=Payment.PAYMENT_METHOD_CHOICES, required=False, allow_blank=True, default='')
    transaction_id = serializers.CharField(required=False, allow_blank=True, default='', max_length=255)


class MarkPaidSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(required=False, allow_blank=True, default='', max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')
