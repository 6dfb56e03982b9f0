"""
Integrations API Serializers

Serializers for the calendar credential admin API.
Secrets are write-only and never echoed back.
"""

from rest_framework import serializers

from .models import CalendarCredential


# =============================================================================
# CREDENTIAL SERIALIZERS
# =============================================================================

class CalendarCredentialSerializer(serializers.ModelSerializer):
    """
    Serializer for calendar credentials.
    Sensitive fields are write-only for security.
    """
    client_secret = serializers.CharField(write_only=True)
    refresh_token = serializers.CharField(write_only=True, required=False, allow_blank=True)
    has_refresh_token = serializers.SerializerMethodField()

    class Meta:
        model = CalendarCredential
        fields = [
            'id',
            'type',
            'client_id',
            'client_secret',
            'redirect_uri',
            'refresh_token',
            'tenant_id',
            'has_refresh_token',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'has_refresh_token', 'created_at', 'updated_at']
        # Upserts are keyed by type; the store replaces the existing record
        extra_kwargs = {'type': {'validators': []}}

    def get_has_refresh_token(self, obj) -> bool:
        return bool(obj.refresh_token)

    def validate(self, attrs):
        if attrs.get('type') == CalendarCredential.ProviderType.MICROSOFT and not attrs.get('tenant_id'):
            raise serializers.ValidationError({'tenant_id': 'Tenant ID is required for Microsoft credentials.'})
        return attrs
