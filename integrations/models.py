"""
Integrations Models - Calendar Provider Credentials

This module implements:
- EncryptedTextField: Fernet encryption at rest for secrets
- CalendarCredential: One global credential record per calendar provider type
"""

import base64
import logging

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.db.models import BaseModel

logger = logging.getLogger(__name__)


def get_encryption_key():
    """
    Generate encryption key from Django SECRET_KEY.
    Uses PBKDF2 to derive a Fernet-compatible key.
    """
    password = settings.SECRET_KEY.encode()
    salt = b'careers_platform_calendar_salt_v1'
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=100000,
    )
    return base64.urlsafe_b64encode(kdf.derive(password))


class EncryptedTextField(models.TextField):
    """
    Text field that encrypts data at rest using Fernet symmetric encryption.
    """
    description = "Encrypted text field"

    def __init__(self, *args, **kwargs):
        kwargs['blank'] = kwargs.get('blank', True)
        super().__init__(*args, **kwargs)

    def get_fernet(self):
        return Fernet(get_encryption_key())

    def from_db_value(self, value, expression, connection):
        if not value:
            return value
        try:
            return self.get_fernet().decrypt(value.encode()).decode()
        except InvalidToken:
            # Rows written before encryption was enabled hold plain text
            logger.warning("Stored calendar secret is not encrypted; returning raw value")
            return value

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        if not value:
            return value
        return self.get_fernet().encrypt(value.encode()).decode()


class CalendarCredential(BaseModel):
    """
    Global (not per-user) OAuth application credentials for a calendar provider.

    At most one record exists per provider type. Adapters re-read the record on
    every invite so that rotated secrets take effect immediately.
    """

    class ProviderType(models.TextChoices):
        GOOGLE = 'google', _('Google Calendar')
        MICROSOFT = 'microsoft', _('Microsoft Outlook')

    type = models.CharField(
        max_length=20,
        choices=ProviderType.choices,
        unique=True,
        verbose_name=_('Provider type'),
    )
    client_id = models.CharField(max_length=255, verbose_name=_('Client ID'))
    client_secret = EncryptedTextField(verbose_name=_('Client secret'))
    redirect_uri = models.URLField(max_length=500, blank=True, default='')
    refresh_token = EncryptedTextField(default='', verbose_name=_('Refresh token'))
    tenant_id = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text=_('Azure AD tenant (Microsoft only).'),
    )

    class Meta:
        verbose_name = _('Calendar Credential')
        verbose_name_plural = _('Calendar Credentials')
        ordering = ['type']

    def __str__(self):
        return f"{self.get_type_display()} credentials"
