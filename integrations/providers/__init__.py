# Calendar Providers Package
# Contains the calendar adapters used to generate interview invites

from .base import (
    AuthenticationError,
    BaseCalendarProvider,
    CalendarProviderType,
    ConfigurationError,
    IntegrationError,
    InviteResult,
    ProviderTimeoutError,
    RateLimitError,
    RemoteAPIError,
)
from .calendar import (
    GoogleCalendarProvider,
    IcsCalendarProvider,
    MicrosoftCalendarProvider,
    get_provider,
)

__all__ = [
    'AuthenticationError',
    'BaseCalendarProvider',
    'CalendarProviderType',
    'ConfigurationError',
    'GoogleCalendarProvider',
    'IcsCalendarProvider',
    'IntegrationError',
    'InviteResult',
    'MicrosoftCalendarProvider',
    'ProviderTimeoutError',
    'RateLimitError',
    'RemoteAPIError',
    'get_provider',
]
