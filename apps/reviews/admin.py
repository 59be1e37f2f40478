from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('submission', 'reviewer', 'status', 'recommendation', 'due_date', 'reminders_sent')
    list_filter = ('status', 'recommendation')
    search_fields = ('submission__title', 'reviewer__email')
    readonly_fields = ('status', 'invited_at', 'accepted_at', 'declined_at', 'submitted_at', 'reminders_sent')
