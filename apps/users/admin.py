from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """Admin interface for Journal Desk accounts."""
    list_display = ['email', 'first_name', 'last_name', 'role', 'account_status', 'created_at']
    list_filter = ['role', 'account_status', 'is_staff']
    search_fields = ['email', 'first_name', 'last_name', 'affiliation']
    ordering = ['-created_at']
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('title', 'first_name', 'last_name', 'affiliation', 'country', 'orcid', 'bio')}),
        ('Role', {'fields': ('role', 'account_status', 'is_staff', 'is_superuser')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'password1', 'password2', 'role')}),
    )
