from django.contrib import admin
from .models import Notification, EmailLog


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['user', 'notification_type', 'title', 'is_read', 'created_at']
    list_filter = ['notification_type', 'is_read']
    search_fields = ['user__email', 'title']
    ordering = ['-created_at']


@admin.register(EmailLog)
class EmailLogAdmin(admin.ModelAdmin):
    """Read-only view of the e-mail outbox."""
    list_display = ['recipient', 'notification_type', 'subject', 'status', 'sent_at', 'created_at']
    list_filter = ['status', 'notification_type']
    search_fields = ['recipient', 'subject']
    readonly_fields = [
        'id', 'recipient', 'user', 'notification_type', 'subject', 'body_text',
        'body_html', 'status', 'sent_at', 'error_message', 'created_at', 'updated_at'
    ]
    ordering = ['-created_at']

    def has_add_permission(self, request):
        return False
