"""
Base Calendar Provider

Abstract base class, errors and result type shared by the calendar
adapters. Implements OAuth token acquisition and the authenticated,
time-bounded HTTP call used to create remote events.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from integrations.credentials import CalendarCredentialStore, ProviderCredentials
from integrations.ics import CalendarEvent, CalendarInvite

logger = logging.getLogger(__name__)


class IntegrationError(Exception):
    """Base exception for integration errors."""
    pass


class AuthenticationError(IntegrationError):
    """Raised when authentication fails."""
    pass


class RateLimitError(IntegrationError):
    """Raised when rate limit is exceeded."""
    def __init__(self, message, retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


class ConfigurationError(IntegrationError):
    """Raised when integration is misconfigured."""
    pass


class ProviderTimeoutError(IntegrationError):
    """Raised when the provider does not answer within the request timeout."""
    pass


class RemoteAPIError(IntegrationError):
    """Raised when the provider rejects a request."""
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class CalendarProviderType(str, Enum):
    """Calendar backends a company can be configured with."""
    GOOGLE = 'google'
    MICROSOFT = 'microsoft'
    OTHER = 'other'

    @classmethod
    def from_value(cls, value) -> 'CalendarProviderType':
        """Unknown or empty values map to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class InviteResult:
    """
    Outcome of a provider `create_event()` call.

    Exactly one of `invite` / `error` is set.
    """
    invite: Optional[CalendarInvite] = None
    error: Optional[IntegrationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, invite: CalendarInvite) -> 'InviteResult':
        return cls(invite=invite)

    @classmethod
    def failure(cls, error: IntegrationError) -> 'InviteResult':
        return cls(error=error)


def get_request_timeout() -> float:
    return float(getattr(settings, 'CALENDAR_PROVIDER_TIMEOUT', 5))


class OAuthMixin:
    """
    Mixin providing OAuth 2.0 token acquisition.
    """

    oauth_token_url: str = ''
    oauth_scopes = []

    def get_token_url(self, credentials: ProviderCredentials) -> str:
        return self.oauth_token_url

    def request_token(self, credentials: ProviderCredentials, data: Dict[str, str]) -> str:
        """
        POST a token request and return the access token.

        Raises:
            AuthenticationError: On a non-200 answer or a missing access token.
            ProviderTimeoutError: If the token endpoint times out.
        """
        payload = {
            'client_id': credentials.client_id,
            'client_secret': credentials.client_secret,
        }
        payload.update(data)

        try:
            response = requests.post(
                self.get_token_url(credentials),
                data=payload,
                headers={'Accept': 'application/json'},
                timeout=get_request_timeout(),
            )
        except requests.Timeout as e:
            raise ProviderTimeoutError(f"Token request timed out: {e}")
        except requests.RequestException as e:
            raise IntegrationError(f"Token request failed: {e}")

        if response.status_code != 200:
            logger.error(f"Token request failed for {self.provider_name}: {response.text}")
            raise AuthenticationError(f"Failed to obtain access token: {response.status_code}")

        access_token = response.json().get('access_token')
        if not access_token:
            raise AuthenticationError("Token response did not include an access token")
        return access_token

    def refresh_access_token(self, credentials: ProviderCredentials) -> str:
        """Exchange the stored refresh token for a fresh access token."""
        data = {
            'grant_type': 'refresh_token',
            'refresh_token': credentials.refresh_token,
        }
        if self.oauth_scopes:
            data['scope'] = ' '.join(self.oauth_scopes)
        return self.request_token(credentials, data)


class BaseCalendarProvider(ABC, OAuthMixin):
    """
    Abstract base class for calendar providers.

    Subclasses implement `create_event()`, which must never raise: every
    failure comes back as `InviteResult.failure(...)`.
    """

    provider_type: CalendarProviderType = CalendarProviderType.OTHER
    provider_name: str = ''
    display_name: str = ''

    api_base_url: str = ''

    def __init__(self, credential_store: CalendarCredentialStore = None):
        self.credential_store = credential_store or CalendarCredentialStore()
        self._session = None

    @property
    def session(self) -> requests.Session:
        """Get or create requests session with default configuration."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                'User-Agent': f'CareersPlatform/{getattr(settings, "VERSION", "1.0")}',
                'Accept': 'application/json',
            })
        return self._session

    @property
    def request_timeout(self) -> float:
        return get_request_timeout()

    def make_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        data: Dict = None,
        params: Dict = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated API request and return the decoded JSON body.

        Raises:
            ProviderTimeoutError: If the call exceeds `request_timeout`.
            RateLimitError: On HTTP 429.
            AuthenticationError: On HTTP 401.
            RemoteAPIError: On any other non-2xx answer.
        """
        url = f"{self.api_base_url}/{endpoint.lstrip('/')}"

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params,
                headers={'Authorization': f'Bearer {access_token}'},
                timeout=self.request_timeout,
            )
        except requests.Timeout as e:
            raise ProviderTimeoutError(f"{self.display_name} request timed out: {e}")
        except requests.RequestException as e:
            logger.error(f"API request failed: {e}")
            raise IntegrationError(f"Request failed: {e}")

        if response.status_code == 429:
            retry_after = response.headers.get('Retry-After', 60)
            raise RateLimitError("Rate limit exceeded", retry_after=int(retry_after))

        if response.status_code == 401:
            raise AuthenticationError("Authentication failed")

        if response.status_code not in (200, 201):
            raise RemoteAPIError(
                f"Failed to create event: {response.text}",
                status_code=response.status_code,
            )

        return response.json()

    def get_credentials(self) -> ProviderCredentials:
        """
        Resolve credentials for this provider.

        Raises:
            ConfigurationError: If neither a stored record nor settings exist.
        """
        credentials = self.credential_store.resolve(self.provider_type.value)
        if credentials is None:
            raise ConfigurationError(f"{self.display_name} credentials are not configured")
        return credentials

    def create_event(self, event: CalendarEvent) -> InviteResult:
        """
        Create the event remotely and build the branded invite.
        """
        try:
            return InviteResult.success(self.create_remote_event(event))
        except IntegrationError as e:
            logger.warning(f"{self.display_name} event creation failed: {e}")
            return InviteResult.failure(e)
        except Exception as e:
            logger.exception(f"Unexpected error in {self.display_name} adapter")
            return InviteResult.failure(IntegrationError(f"Unexpected error: {e}"))

    @abstractmethod
    def create_remote_event(self, event: CalendarEvent) -> CalendarInvite:
        """Provider-specific implementation; may raise IntegrationError."""
        pass
