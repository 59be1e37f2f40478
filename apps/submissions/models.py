"""
Submission models for Journal Desk.
Handles manuscripts, their files, co-authors, revisions, editor
assignments and the status timeline.
"""
import uuid
import hashlib
from django.db import models
from django.conf import settings

from . import lifecycle


class Submission(models.Model):
    """
    Main submission model representing manuscript submissions.

    ``status`` only changes through ``apps.submissions.services``; every
    change bumps ``version`` so that two editors acting on the same
    snapshot cannot both win.
    """
    STATUS_CHOICES = lifecycle.STATUS_CHOICES

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=500)
    abstract = models.TextField(help_text="Manuscript abstract")
    keywords = models.JSONField(default=list, blank=True)
    manuscript_type = models.CharField(max_length=100, help_text="e.g. Research Article, Review, Case Study")
    is_double_blind = models.BooleanField(
        default=False,
        help_text="Hide author identities from reviewers"
    )
    suggested_reviewers = models.JSONField(default=list, blank=True)
    excluded_reviewers = models.JSONField(default=list, blank=True)
    comments = models.TextField(blank=True, help_text="Cover letter / comments to the editor")

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='submissions'
    )

    # Workflow
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=lifecycle.DRAFT)
    version = models.PositiveIntegerField(default=0, help_text="Optimistic concurrency counter")

    # Screening record
    scope_check = models.BooleanField(null=True, blank=True)
    format_check = models.BooleanField(null=True, blank=True)
    screening_comments = models.TextField(blank=True)

    # Editorial decision
    decision_type = models.CharField(max_length=20, blank=True)
    decision_comments = models.TextField(blank=True)

    # Final proof
    proof_approved_at = models.DateTimeField(null=True, blank=True)
    proof_corrections = models.TextField(blank=True)

    # Publication
    doi = models.CharField(max_length=255, null=True, blank=True, unique=True)
    issue = models.ForeignKey(
        'journals.Issue',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='articles'
    )
    volume = models.PositiveIntegerField(null=True, blank=True)
    issue_number = models.PositiveIntegerField(null=True, blank=True)
    pages = models.CharField(max_length=50, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    published_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'submitted_at'], name='sub_status_submitted_idx'),
            models.Index(fields=['author', 'status'], name='sub_author_status_idx'),
            models.Index(fields=['published_at'], name='sub_published_idx'),
        ]

    def __str__(self):
        return f"{self.title[:50]} ({self.get_status_display()})"

    @property
    def is_terminal(self):
        return lifecycle.is_terminal(self.status)

    @property
    def is_editable(self):
        return self.status in lifecycle.EDITABLE_STATES


class CoAuthor(models.Model):
    """
    Co-author listed on a submission. Co-authors need no account.
    """
    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name='co_authors'
    )
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField()
    affiliation = models.CharField(max_length=255, blank=True)
    orcid = models.CharField(max_length=19, blank=True)
    is_corresponding = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0, help_text="Author order in the publication")

    class Meta:
        ordering = ['order']

    def __str__(self):
        return f"{self.first_name} {self.last_name} (#{self.order})"

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


def _file_hash(file_field):
    sha256 = hashlib.sha256()
    for chunk in file_field.chunks():
        sha256.update(chunk)
    return sha256.hexdigest()


class SubmissionFile(models.Model):
    """
    Manuscript or supplementary file uploaded with a submission.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name='files'
    )
    file = models.FileField(upload_to='submissions/%Y/%m/%d/')
    original_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, blank=True)
    size = models.PositiveIntegerField(default=0, help_text="File size in bytes")
    file_hash = models.CharField(max_length=64, blank=True, help_text="SHA-256 of the content")
    description = models.CharField(max_length=255, blank=True)
    is_main_file = models.BooleanField(default=False)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='uploaded_files'
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-is_main_file', 'uploaded_at']

    def __str__(self):
        return self.original_name

    def save(self, *args, **kwargs):
        if self.file and not self.file_hash:
            self.file_hash = _file_hash(self.file)
        super().save(*args, **kwargs)


class Revision(models.Model):
    """
    Revised manuscript sent back by the author after a revision request.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name='revisions'
    )
    revision_number = models.PositiveIntegerField()
    revision_letter = models.TextField(blank=True, help_text="Cover letter for this revision")
    response_to_reviewers = models.TextField()
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='submitted_revisions'
    )
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['revision_number']
        unique_together = ['submission', 'revision_number']

    def __str__(self):
        return f"Revision {self.revision_number} of {self.submission_id}"


class RevisionFile(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    revision = models.ForeignKey(
        Revision,
        on_delete=models.CASCADE,
        related_name='files'
    )
    file = models.FileField(upload_to='revisions/%Y/%m/%d/')
    original_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, blank=True)
    size = models.PositiveIntegerField(default=0)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.original_name


class EditorAssignment(models.Model):
    """
    Editor responsible for handling a submission.
    """
    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name='editor_assignments'
    )
    editor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='editor_assignments'
    )
    is_chief = models.BooleanField(default=False)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='+'
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['submission', 'editor']
        ordering = ['assigned_at']

    def __str__(self):
        return f"{self.editor} on {self.submission_id}"


class SubmissionTimeline(models.Model):
    """
    Audit trail of a submission's status changes and notable events.
    """
    submission = models.ForeignKey(
        Submission,
        on_delete=models.CASCADE,
        related_name='timeline'
    )
    event = models.CharField(max_length=50)
    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20, blank=True)
    description = models.TextField(blank=True)
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['submission', 'created_at'], name='timeline_sub_created_idx'),
        ]

    def __str__(self):
        return f"{self.event}: {self.from_status} -> {self.to_status}"
