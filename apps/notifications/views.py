"""
API views for in-app notifications and the e-mail log.
"""
from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone
from drf_spectacular.utils import extend_schema

from apps.common.permissions import IsAdmin
from apps.notifications.models import Notification, EmailLog
from apps.notifications.serializers import NotificationSerializer, EmailLogSerializer


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    The current user's notifications.

    Endpoints:
    - GET  /api/v1/notifications/                 - list (filter with ?is_read=false)
    - POST /api/v1/notifications/{id}/read/       - mark one as read
    - POST /api/v1/notifications/read-all/        - mark every unread one as read
    - GET  /api/v1/notifications/unread-count/    - number of unread notifications
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['is_read', 'notification_type']
    ordering = ['-created_at']

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user).select_related('submission')

    @extend_schema(request=None, responses=NotificationSerializer)
    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        notification = self.get_object()
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=['is_read', 'read_at'])
        return Response(self.get_serializer(notification).data)

    @extend_schema(request=None, responses=None)
    @action(detail=False, methods=['post'], url_path='read-all')
    def read_all(self, request):
        updated = self.get_queryset().filter(is_read=False).update(is_read=True, read_at=timezone.now())
        return Response({'success': True, 'data': {'updated': updated}, 'message': f'{updated} notifications marked as read'})

    @extend_schema(responses=None)
    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        return Response({'count': self.get_queryset().filter(is_read=False).count()})


class EmailLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Outbox e-mail log for administrators.
    """

    queryset = EmailLog.objects.select_related('user')
    serializer_class = EmailLogSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['recipient', 'subject']
    filterset_fields = ['status', 'notification_type']
    ordering_fields = ['created_at', 'sent_at']
    ordering = ['-created_at']
