"""
Serializers for submissions and the editorial workflow.
"""
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from apps.common.utils import FileValidator
from apps.users.serializers import UserSummarySerializer
from . import lifecycle
from .models import (
    CoAuthor,
    EditorAssignment,
    Revision,
    RevisionFile,
    Submission,
    SubmissionFile,
    SubmissionTimeline,
)


class CoAuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = CoAuthor
        fields = ['id', 'first_name', 'last_name', 'email', 'affiliation', 'orcid', 'is_corresponding', 'order']
        read_only_fields = ['id']


class SubmissionFileSerializer(serializers.ModelSerializer):
    """Uploaded manuscript file."""

    class Meta:
        model = SubmissionFile
        fields = [
            'id', 'file', 'original_name', 'content_type', 'size', 'file_hash',
            'description', 'is_main_file', 'uploaded_at'
        ]
        read_only_fields = ['id', 'original_name', 'content_type', 'size', 'file_hash', 'uploaded_at']

    def validate_file(self, value):
        is_valid, message = FileValidator.validate_file(value)
        if not is_valid:
            raise serializers.ValidationError(message)
        return value


class RevisionFileSerializer(serializers.ModelSerializer):
    class Meta:
        model = RevisionFile
        fields = ['id', 'file', 'original_name', 'content_type', 'size', 'uploaded_at']
        read_only_fields = fields


class RevisionSerializer(serializers.ModelSerializer):
    files = RevisionFileSerializer(many=True, read_only=True)

    class Meta:
        model = Revision
        fields = [
            'id', 'revision_number', 'revision_letter', 'response_to_reviewers',
            'files', 'submitted_at'
        ]
        read_only_fields = fields


class RevisionCreateSerializer(serializers.Serializer):
    """Input for ``POST /submissions/{id}/revisions/``."""

    response_to_reviewers = serializers.CharField()
    revision_letter = serializers.CharField(required=False, allow_blank=True, default='')
    files = serializers.ListField(child=serializers.FileField(), required=False, default=list)

    def validate_files(self, value):
        for upload in value:
            is_valid, message = FileValidator.validate_file(upload)
            if not is_valid:
                raise serializers.ValidationError(message)
        return value


class SubmissionTimelineSerializer(serializers.ModelSerializer):
    performed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = SubmissionTimeline
        fields = ['id', 'event', 'from_status', 'to_status', 'description', 'performed_by', 'created_at']
        read_only_fields = fields


class EditorAssignmentSerializer(serializers.ModelSerializer):
    editor = UserSummarySerializer(read_only=True)

    class Meta:
        model = EditorAssignment
        fields = ['id', 'editor', 'is_chief', 'assigned_at']
        read_only_fields = fields


class SubmissionListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    author = UserSummarySerializer(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Submission
        fields = [
            'id', 'title', 'manuscript_type', 'status', 'status_display', 'author',
            'keywords', 'created_at', 'submitted_at', 'updated_at'
        ]
        read_only_fields = fields


class SubmissionSerializer(serializers.ModelSerializer):
    """
    Full submission representation; also used by authors to create and
    edit drafts. Co-authors are replaced as a whole on update.
    """

    author = UserSummarySerializer(read_only=True)
    co_authors = CoAuthorSerializer(many=True, required=False)
    files = SubmissionFileSerializer(many=True, read_only=True)
    revisions = RevisionSerializer(many=True, read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    available_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = [
            'id', 'title', 'abstract', 'keywords', 'manuscript_type', 'is_double_blind',
            'suggested_reviewers', 'excluded_reviewers', 'comments',
            'author', 'co_authors', 'files', 'revisions',
            'status', 'status_display', 'version', 'available_transitions',
            'scope_check', 'format_check', 'screening_comments',
            'decision_type', 'decision_comments',
            'proof_approved_at', 'proof_corrections',
            'doi', 'volume', 'issue', 'issue_number', 'pages',
            'created_at', 'updated_at', 'submitted_at', 'accepted_at', 'published_at',
        ]
        read_only_fields = [
            'id', 'author', 'status', 'version',
            'scope_check', 'format_check', 'screening_comments',
            'decision_type', 'decision_comments',
            'proof_approved_at', 'proof_corrections',
            'doi', 'volume', 'issue', 'issue_number', 'pages',
            'created_at', 'updated_at', 'submitted_at', 'accepted_at', 'published_at',
        ]

    def get_available_transitions(self, obj):
        request = self.context.get('request')
        if not request or not request.user.is_authenticated:
            return []
        return lifecycle.available_transitions(obj.status, request.user.role)

    def validate_keywords(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Keywords must be a list of strings.")
        return [item.strip() for item in value if item.strip()]

    def validate(self, attrs):
        if self.instance is not None and not self.instance.is_editable:
            raise serializers.ValidationError(
                f"A submission in {self.instance.status} can no longer be edited."
            )
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        co_authors = validated_data.pop('co_authors', [])
        submission = Submission.objects.create(**validated_data)
        for position, co_author in enumerate(co_authors):
            co_author.setdefault('order', position)
            CoAuthor.objects.create(submission=submission, **co_author)
        return submission

    @transaction.atomic
    def update(self, instance, validated_data):
        co_authors = validated_data.pop('co_authors', None)
        # Only the edited columns, and only if no transition happened since the read
        updated = Submission.objects.filter(
            pk=instance.pk,
            status=instance.status,
            version=instance.version,
            status__in=lifecycle.EDITABLE_STATES,
        ).update(updated_at=timezone.now(), **validated_data)
        if not updated:
            raise lifecycle.StaleTransition(
                detail='the submission was changed by another request, reload and retry'
            )
        instance.refresh_from_db()

        if co_authors is not None:
            instance.co_authors.all().delete()
            for position, co_author in enumerate(co_authors):
                co_author.setdefault('order', position)
                CoAuthor.objects.create(submission=instance, **co_author)
        return instance


# Workflow action inputs

class WithdrawSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class ProofApprovalSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class ScreeningDecisionSerializer(serializers.Serializer):
    """
    ``decision`` is kept as free text; unknown values are refused by the
    lifecycle with "unknown decision".
    """
    decision = serializers.CharField()
    scope_check = serializers.BooleanField(required=False, default=False)
    format_check = serializers.BooleanField(required=False, default=False)
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class EditorialDecisionSerializer(serializers.Serializer):
    decision = serializers.CharField()
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class PublishSerializer(serializers.Serializer):
    issue_id = serializers.IntegerField()
    pages = serializers.CharField(required=False, allow_blank=True, default='')


class AssignEditorSerializer(serializers.Serializer):
    editor_id = serializers.UUIDField()
    is_chief = serializers.BooleanField(required=False, default=False)


class InviteReviewerSerializer(serializers.Serializer):
    reviewer_id = serializers.UUIDField()
    due_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    message = serializers.CharField(required=False, allow_blank=True, default='')
