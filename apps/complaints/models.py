"""
Complaint and retraction handling for Journal Desk.
Managed entirely by administrators; nothing here changes state on its own.
"""
import uuid
from django.conf import settings
from django.db import models


class Complaint(models.Model):
    """
    Complaint raised about a submission or the editorial process.
    Retraction requests are complaints of type RETRACTION.
    """
    TYPE_CHOICES = [
        ('PLAGIARISM', 'Plagiarism'),
        ('ETHICS', 'Ethics'),
        ('QUALITY', 'Quality'),
        ('PROCESS', 'Editorial Process'),
        ('RETRACTION', 'Retraction Request'),
        ('OTHER', 'Other'),
    ]

    STATUS_CHOICES = [
        ('OPEN', 'Open'),
        ('INVESTIGATING', 'Investigating'),
        ('RESOLVED', 'Resolved'),
        ('DISMISSED', 'Dismissed'),
    ]

    PRIORITY_CHOICES = [
        ('LOW', 'Low'),
        ('MEDIUM', 'Medium'),
        ('HIGH', 'High'),
        ('CRITICAL', 'Critical'),
    ]

    CLOSED_STATUSES = ('RESOLVED', 'DISMISSED')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    complaint_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    submission = models.ForeignKey(
        'submissions.Submission',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='complaints'
    )

    complainant_name = models.CharField(max_length=255)
    complainant_email = models.EmailField()
    subject = models.CharField(max_length=255)
    description = models.TextField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='OPEN')
    priority = models.CharField(max_length=20, choices=PRIORITY_CHOICES, default='MEDIUM')
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_complaints'
    )
    resolution = models.TextField(blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'priority'], name='complaint_status_prio_idx'),
            models.Index(fields=['complaint_type'], name='complaint_type_idx'),
        ]

    def __str__(self):
        return f"{self.get_complaint_type_display()}: {self.subject}"

    @property
    def is_closed(self):
        return self.status in self.CLOSED_STATUSES


class ComplaintNote(models.Model):
    """
    Internal note added by an administrator while handling a complaint.
    """
    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name='notes'
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='+'
    )
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Note on {self.complaint_id}"
