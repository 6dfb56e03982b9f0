"""
Calendar Credential Store

Persists the global OAuth application credentials used by the calendar
adapters and hands them out on demand. Stored records win; when no record
exists for a provider type, process-level settings (`GOOGLE_CLIENT_ID`,
`MICROSOFT_TENANT_ID`, ...) are used instead.

Nothing is cached: every lookup hits the database so a rotated secret is
picked up by the very next invite.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction

from api.exceptions import InvalidInputError, ResourceNotFoundError
from integrations.models import CalendarCredential

logger = logging.getLogger(__name__)

CREDENTIAL_FIELDS = ('client_id', 'client_secret', 'redirect_uri', 'refresh_token', 'tenant_id')


class CredentialsNotFound(ResourceNotFoundError):
    """Raised when no stored credentials exist for a provider type."""

    default_code = "CREDENTIALS_NOT_FOUND"

    def __init__(self, provider_type: str):
        self.provider_type = provider_type
        super().__init__(
            resource_type='Calendar credentials',
            detail=f"Calendar credentials for type {provider_type} not found",
        )


@dataclass(frozen=True)
class ProviderCredentials:
    """Credentials resolved for one adapter call."""
    type: str
    client_id: str
    client_secret: str = ''
    redirect_uri: str = ''
    refresh_token: str = ''
    tenant_id: str = ''
    source: str = 'stored'

    @classmethod
    def from_record(cls, record: CalendarCredential) -> 'ProviderCredentials':
        return cls(
            type=record.type,
            client_id=record.client_id,
            client_secret=record.client_secret or '',
            redirect_uri=record.redirect_uri or '',
            refresh_token=record.refresh_token or '',
            tenant_id=record.tenant_id or '',
            source='stored',
        )

    @classmethod
    def from_settings(cls, provider_type: str) -> 'ProviderCredentials':
        prefix = provider_type.upper()
        return cls(
            type=provider_type,
            client_id=getattr(settings, f'{prefix}_CLIENT_ID', '') or '',
            client_secret=getattr(settings, f'{prefix}_CLIENT_SECRET', '') or '',
            redirect_uri=getattr(settings, f'{prefix}_REDIRECT_URI', '') or '',
            refresh_token=getattr(settings, f'{prefix}_REFRESH_TOKEN', '') or '',
            tenant_id=getattr(settings, f'{prefix}_TENANT_ID', '') or '',
            source='settings',
        )


class CalendarCredentialStore:
    """Read/write access to `CalendarCredential` records."""

    def list(self) -> List[CalendarCredential]:
        return list(CalendarCredential.objects.all())

    def find(self, provider_type: str) -> CalendarCredential:
        """
        Return the stored record for `provider_type`.

        Raises:
            CredentialsNotFound: If no record exists.
        """
        try:
            return CalendarCredential.objects.get(type=provider_type)
        except CalendarCredential.DoesNotExist:
            raise CredentialsNotFound(provider_type)

    @transaction.atomic
    def save(self, data: Dict[str, Any]) -> CalendarCredential:
        """
        Create or replace the record for `data['type']`.

        `client_id` and `client_secret` are required; the optional fields are
        reset to empty when omitted so the record mirrors the submitted form.
        """
        provider_type = data.get('type')
        if provider_type not in CalendarCredential.ProviderType.values:
            raise InvalidInputError(
                f"Unsupported calendar provider type: {provider_type}",
                field_name='type',
            )
        for required in ('client_id', 'client_secret'):
            if not data.get(required):
                raise InvalidInputError(f"{required} is required", field_name=required)

        defaults = {name: data.get(name) or '' for name in CREDENTIAL_FIELDS}
        record, created = CalendarCredential.objects.update_or_create(
            type=provider_type,
            defaults=defaults,
        )
        logger.info(
            f"Calendar credentials for {provider_type} {'created' if created else 'updated'}"
        )
        return record

    def delete(self, provider_type: str) -> None:
        deleted, _ = CalendarCredential.objects.filter(type=provider_type).delete()
        if not deleted:
            raise CredentialsNotFound(provider_type)
        logger.info(f"Calendar credentials for {provider_type} deleted")

    def resolve(self, provider_type: str) -> Optional[ProviderCredentials]:
        """
        Credentials an adapter should use, or None when the provider is not
        configured at all (no stored record and no client id in settings).
        """
        try:
            return ProviderCredentials.from_record(self.find(provider_type))
        except CredentialsNotFound:
            logger.debug(f"No stored {provider_type} credentials, trying settings")

        fallback = ProviderCredentials.from_settings(provider_type)
        if not fallback.client_id:
            return None
        return fallback
