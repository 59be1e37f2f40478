from django.contrib import admin
from .models import (
    CoAuthor,
    EditorAssignment,
    Revision,
    RevisionFile,
    Submission,
    SubmissionFile,
    SubmissionTimeline,
)


class CoAuthorInline(admin.TabularInline):
    model = CoAuthor
    extra = 0


class SubmissionFileInline(admin.TabularInline):
    model = SubmissionFile
    extra = 0
    readonly_fields = ('file_hash', 'size', 'uploaded_at')


class EditorAssignmentInline(admin.TabularInline):
    model = EditorAssignment
    extra = 0
    fk_name = 'submission'


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('title', 'author', 'status', 'version', 'doi', 'submitted_at', 'created_at')
    list_filter = ('status', 'manuscript_type', 'created_at')
    search_fields = ('title', 'abstract', 'doi', 'author__email')
    date_hierarchy = 'created_at'
    # Status only moves through the lifecycle manager
    readonly_fields = ('status', 'version', 'doi', 'submitted_at', 'accepted_at', 'published_at')
    inlines = [CoAuthorInline, SubmissionFileInline, EditorAssignmentInline]


class RevisionFileInline(admin.TabularInline):
    model = RevisionFile
    extra = 0


@admin.register(Revision)
class RevisionAdmin(admin.ModelAdmin):
    list_display = ('submission', 'revision_number', 'submitted_by', 'submitted_at')
    search_fields = ('submission__title',)
    inlines = [RevisionFileInline]


@admin.register(SubmissionTimeline)
class SubmissionTimelineAdmin(admin.ModelAdmin):
    list_display = ('submission', 'event', 'from_status', 'to_status', 'performed_by', 'created_at')
    list_filter = ('event',)
    search_fields = ('submission__title',)

    def has_change_permission(self, request, obj=None):
        return False
