"""
Payment models for Journal Desk.
Article processing charges raised when a manuscript is accepted.
"""
import uuid
from django.conf import settings
from django.db import models


class Payment(models.Model):
    """
    APC payment for one accepted submission.

    Payments are never deleted; refunds and failures are status changes.
    """
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('PAID', 'Paid'),
        ('REFUNDED', 'Refunded'),
        ('FAILED', 'Failed'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('BANK_TRANSFER', 'Bank Transfer'),
        ('CARD', 'Card'),
        ('UPI', 'UPI'),
        ('PAYPAL', 'PayPal'),
        ('WAIVER', 'Waiver'),
        ('OTHER', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    submission = models.ForeignKey(
        'submissions.Submission',
        on_delete=models.PROTECT,
        related_name='payments'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='payments',
        help_text="Payer, the submitting author"
    )

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')

    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    proof_url = models.URLField(blank=True)
    transaction_id = models.CharField(max_length=255, blank=True)
    invoice_number = models.CharField(max_length=64, unique=True)
    notes = models.TextField(blank=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    proof_submitted_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['submission', 'status'], name='payment_sub_status_idx'),
            models.Index(fields=['status', 'created_at'], name='payment_status_created_idx'),
        ]

    def __str__(self):
        return f"{self.invoice_number} - {self.amount} {self.currency} ({self.status})"

    def delete(self, *args, **kwargs):
        raise PermissionError("Payments cannot be deleted")
