"""
Review models for Journal Desk.
One review per invited reviewer per submission.
"""
import uuid
from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone

from . import lifecycle


class Review(models.Model):
    """
    Peer review of a submission.

    ``recommendation`` and ``author_comments`` count as final only once the
    review is COMPLETED; after that the row is read-only.
    """
    STATUS_CHOICES = lifecycle.STATUS_CHOICES
    RECOMMENDATION_CHOICES = lifecycle.RECOMMENDATION_CHOICES

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    submission = models.ForeignKey(
        'submissions.Submission',
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='reviews'
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='+'
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=lifecycle.PENDING)

    # Review content
    recommendation = models.CharField(max_length=20, choices=RECOMMENDATION_CHOICES, blank=True)
    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="Overall quality rating (1-5)"
    )
    author_comments = models.TextField(blank=True, help_text="Comments shared with the author")
    confidential_comments = models.TextField(blank=True, help_text="Comments for the editor only")

    # Invitation and deadline
    invitation_message = models.TextField(blank=True)
    due_date = models.DateTimeField()
    invited_at = models.DateTimeField(default=timezone.now)
    accepted_at = models.DateTimeField(null=True, blank=True)
    declined_at = models.DateTimeField(null=True, blank=True)
    decline_reason = models.TextField(blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)

    # Reminders
    reminders_sent = models.PositiveIntegerField(default=0)
    last_reminded_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-invited_at']
        unique_together = ['submission', 'reviewer']
        indexes = [
            models.Index(fields=['reviewer', 'status'], name='review_reviewer_status_idx'),
            models.Index(fields=['status', 'due_date'], name='review_status_due_idx'),
        ]

    def __str__(self):
        return f"Review of {self.submission_id} by {self.reviewer}"

    def is_overdue(self):
        return self.status in (lifecycle.PENDING, lifecycle.IN_PROGRESS) and timezone.now() > self.due_date

    def days_remaining(self):
        if self.status in lifecycle.CLOSED_STATES:
            return None
        return (self.due_date - timezone.now()).days
