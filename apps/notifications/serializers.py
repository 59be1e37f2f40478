"""
Serializers for notifications.
"""
from rest_framework import serializers
from apps.notifications.models import Notification, EmailLog


class NotificationSerializer(serializers.ModelSerializer):
    """In-app notification as shown in the user's inbox."""

    notification_type_display = serializers.CharField(
        source='get_notification_type_display',
        read_only=True
    )
    submission_title = serializers.CharField(source='submission.title', read_only=True, default=None)

    class Meta:
        model = Notification
        fields = [
            'id',
            'notification_type',
            'notification_type_display',
            'title',
            'message',
            'submission',
            'submission_title',
            'is_read',
            'read_at',
            'created_at',
        ]
        read_only_fields = fields


class EmailLogSerializer(serializers.ModelSerializer):
    """Serializer for email log records."""

    user_email = serializers.CharField(source='user.email', read_only=True, default=None)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = EmailLog
        fields = [
            'id',
            'recipient',
            'user_email',
            'notification_type',
            'subject',
            'status',
            'status_display',
            'sent_at',
            'error_message',
            'created_at',
        ]
        read_only_fields = fields
