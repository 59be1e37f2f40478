"""
Serializers for peer reviews.
"""
from rest_framework import serializers

from apps.common.permissions import has_capability
from apps.submissions.lifecycle import EDITOR_CAPABILITY
from apps.submissions.models import SubmissionFile
from apps.users.serializers import UserSummarySerializer
from . import lifecycle
from .models import Review


class ReviewFileSerializer(serializers.ModelSerializer):
    """
    Manuscript file as listed to a reviewer. Content is served by the
    review's ``files/<id>/download/`` action, not by a storage URL.
    """

    class Meta:
        model = SubmissionFile
        fields = ['id', 'original_name', 'content_type', 'size', 'description', 'is_main_file', 'uploaded_at']
        read_only_fields = fields


class ReviewSubmissionSerializer(serializers.Serializer):
    """
    The manuscript as a reviewer sees it. Author details are hidden for
    double-blind submissions.
    """
    id = serializers.UUIDField(read_only=True)
    title = serializers.CharField(read_only=True)
    abstract = serializers.CharField(read_only=True)
    keywords = serializers.JSONField(read_only=True)
    manuscript_type = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    is_double_blind = serializers.BooleanField(read_only=True)
    author = serializers.SerializerMethodField()
    files = ReviewFileSerializer(many=True, read_only=True)

    def get_author(self, obj):
        request = self.context.get('request')
        viewer_is_editor = request is not None and has_capability(request.user, EDITOR_CAPABILITY)
        if obj.is_double_blind and not viewer_is_editor:
            return None
        return UserSummarySerializer(obj.author).data


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = UserSummarySerializer(read_only=True)
    submission = ReviewSubmissionSerializer(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    is_overdue = serializers.SerializerMethodField()
    days_remaining = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            'id', 'submission', 'reviewer', 'status', 'status_display',
            'recommendation', 'rating', 'author_comments', 'confidential_comments',
            'invitation_message', 'due_date', 'invited_at', 'accepted_at',
            'declined_at', 'decline_reason', 'submitted_at',
            'reminders_sent', 'last_reminded_at', 'is_overdue', 'days_remaining',
        ]
        read_only_fields = fields

    def get_is_overdue(self, obj):
        return obj.is_overdue()

    def get_days_remaining(self, obj):
        return obj.days_remaining()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # Confidential comments are for the reviewer and the editors only
        request = self.context.get('request')
        if request is not None:
            is_reviewer = instance.reviewer_id == request.user.id
            if not is_reviewer and not has_capability(request.user, EDITOR_CAPABILITY):
                data.pop('confidential_comments', None)
        return data


class ReviewDraftSerializer(serializers.Serializer):
    """Fields a reviewer may save before submitting."""

    recommendation = serializers.ChoiceField(choices=lifecycle.RECOMMENDATION_CHOICES, required=False, allow_blank=True)
    rating = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=5)
    author_comments = serializers.CharField(required=False, allow_blank=True)
    confidential_comments = serializers.CharField(required=False, allow_blank=True)


class ReviewSubmitSerializer(ReviewDraftSerializer):
    """
    Same fields as a draft. Missing values are taken from the stored draft
    and checked by the lifecycle.
    """


class ReviewResponseSerializer(serializers.Serializer):
    accept = serializers.BooleanField()
    decline_reason = serializers.CharField(required=False, allow_blank=True, default='')


class DeadlineExtensionSerializer(serializers.Serializer):
    due_date = serializers.DateTimeField()
