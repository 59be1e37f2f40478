from django.contrib import admin
from .models import Complaint, ComplaintNote


class ComplaintNoteInline(admin.TabularInline):
    model = ComplaintNote
    extra = 0


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ('subject', 'complaint_type', 'status', 'priority', 'assigned_to', 'created_at')
    list_filter = ('status', 'priority', 'complaint_type')
    search_fields = ('subject', 'complainant_email')
    readonly_fields = ('resolved_at',)
    inlines = [ComplaintNoteInline]
