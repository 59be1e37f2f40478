from django.contrib import admin
from .models import Issue


@admin.register(Issue)
class IssueAdmin(admin.ModelAdmin):
    list_display = ('volume', 'number', 'title', 'is_current', 'published_at')
    list_filter = ('is_current', 'volume')
    search_fields = ('title',)
