"""
Integrations Admin Configuration

Django admin interface for calendar provider credentials.
"""

from django.contrib import admin

from .models import CalendarCredential


@admin.register(CalendarCredential)
class CalendarCredentialAdmin(admin.ModelAdmin):
    """Admin for calendar credentials. Secrets are never listed."""
    list_display = ['type', 'client_id', 'has_refresh_token', 'tenant_id', 'updated_at']
    readonly_fields = ['id', 'created_at', 'updated_at']
    fieldsets = (
        ('Provider', {
            'fields': ('type', 'tenant_id'),
        }),
        ('OAuth Application', {
            'fields': ('client_id', 'client_secret', 'redirect_uri', 'refresh_token'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('id', 'created_at', 'updated_at'),
        }),
    )

    def has_refresh_token(self, obj):
        return bool(obj.refresh_token)
    has_refresh_token.boolean = True
    has_refresh_token.short_description = 'Refresh token'
