"""
Notification models for Journal Desk.

``Notification`` is the in-app message a user sees in their inbox;
``EmailLog`` is the outbox row for the matching e-mail and records
whether delivery succeeded.
"""
import uuid
from django.conf import settings
from django.db import models


NOTIFICATION_TYPES = [
    # Submission lifecycle
    ('SUBMISSION_RECEIVED', 'Submission Received'),
    ('NEW_SUBMISSION', 'New Submission'),
    ('FORMATTING_REQUESTED', 'Formatting Changes Requested'),
    ('SUBMISSION_REJECTED', 'Submission Rejected'),
    ('REVISION_REQUESTED', 'Revision Requested'),
    ('SUBMISSION_ACCEPTED', 'Submission Accepted'),
    ('REVISION_SUBMITTED', 'Revision Submitted'),
    ('ARTICLE_PUBLISHED', 'Article Published'),
    ('PROOF_CORRECTIONS', 'Proof Corrections Requested'),
    ('EDITOR_ASSIGNED', 'Editor Assigned'),
    # Reviews
    ('REVIEW_INVITATION', 'Review Invitation'),
    ('REVIEW_RESPONSE', 'Review Invitation Response'),
    ('REVIEW_REMINDER', 'Review Reminder'),
    ('REVIEW_ESCALATION', 'Overdue Review Escalation'),
    ('REVIEW_THANK_YOU', 'Review Thank You'),
    ('REVIEW_COMPLETED', 'Review Completed'),
    ('REVIEW_DEADLINE_EXTENDED', 'Review Deadline Extended'),
    # Payments
    ('PAYMENT_REQUESTED', 'Payment Requested'),
    ('PAYMENT_PROOF_SUBMITTED', 'Payment Proof Submitted'),
    ('PAYMENT_RECEIVED', 'Payment Received'),
    ('PAYMENT_REFUNDED', 'Payment Refunded'),
]


class Notification(models.Model):
    """
    In-app notification shown to a single user.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    notification_type = models.CharField(max_length=50, choices=NOTIFICATION_TYPES)
    title = models.CharField(max_length=255)
    message = models.TextField()
    submission = models.ForeignKey(
        'submissions.Submission',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='notifications'
    )

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
            models.Index(fields=['created_at'], name='notif_created_idx'),
        ]

    def __str__(self):
        return f"{self.get_notification_type_display()} for {self.user.email}"


class EmailLog(models.Model):
    """
    Log of all emails sent by the system.
    Rows are written PENDING inside the request and flipped to SENT or
    FAILED by the delivery task. Delivery is attempted once.
    """
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('SENT', 'Sent'),
        ('FAILED', 'Failed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    recipient = models.EmailField(help_text="Recipient email address")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='sent_emails',
        help_text="User this email was sent to"
    )
    notification_type = models.CharField(max_length=50, choices=NOTIFICATION_TYPES)

    subject = models.CharField(max_length=255)
    body_html = models.TextField(blank=True)
    body_text = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING')
    sent_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'status'], name='email_recipient_status_idx'),
            models.Index(fields=['status', 'created_at'], name='email_status_created_idx'),
        ]

    def __str__(self):
        return f"Email to {self.recipient} - {self.status}"
