"""
Serializers for complaints and retraction requests.
"""
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import serializers

from apps.users.serializers import UserSummarySerializer
from .models import Complaint, ComplaintNote


class ComplaintNoteSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)

    class Meta:
        model = ComplaintNote
        fields = ['id', 'author', 'text', 'created_at']
        read_only_fields = ['id', 'author', 'created_at']


class ComplaintSerializer(serializers.ModelSerializer):
    notes = ComplaintNoteSerializer(many=True, read_only=True)
    assigned_to = UserSummarySerializer(read_only=True)
    assigned_to_id = serializers.PrimaryKeyRelatedField(
        source='assigned_to',
        queryset=get_user_model().objects.filter(role='ADMIN'),
        write_only=True,
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Complaint
        fields = [
            'id', 'complaint_type', 'submission', 'complainant_name', 'complainant_email',
            'subject', 'description', 'status', 'priority', 'assigned_to', 'assigned_to_id',
            'resolution', 'resolved_at', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'resolved_at', 'created_at', 'updated_at']

    def _stamp_resolution(self, validated_data, instance=None):
        new_status = validated_data.get('status', instance.status if instance else 'OPEN')
        if new_status in Complaint.CLOSED_STATUSES:
            if instance is None or not instance.is_closed:
                validated_data['resolved_at'] = timezone.now()
        else:
            validated_data['resolved_at'] = None
        return validated_data

    def create(self, validated_data):
        return super().create(self._stamp_resolution(validated_data))

    def update(self, instance, validated_data):
        return super().update(instance, self._stamp_resolution(validated_data, instance))
