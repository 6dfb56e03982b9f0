"""
Calendar Invite Router

Chooses the calendar adapter configured for a company and turns its
result into an invite. Invite generation is a side effect of scheduling:
whatever happens in an adapter, callers always receive a usable
`text/calendar` document.
"""

import logging
from typing import Optional

from integrations.credentials import CalendarCredentialStore
from integrations.ics import CalendarEvent, CalendarInvite, build_fallback_invite
from integrations.providers.base import (
    AuthenticationError,
    CalendarProviderType,
    ConfigurationError,
    IntegrationError,
    ProviderTimeoutError,
    RateLimitError,
)
from integrations.providers.calendar import get_provider

logger = logging.getLogger(__name__)


class CalendarInviteRouter:
    """
    Dispatches invite generation to the provider configured for a company.

    Two layers guard the caller: adapters report failures as
    `InviteResult.failure()`, and anything an adapter raises anyway is caught
    here. Both paths end in the plain iCalendar invite.
    """

    def __init__(self, credential_store: CalendarCredentialStore = None):
        self.credential_store = credential_store or CalendarCredentialStore()

    @staticmethod
    def resolve_provider_type(company=None) -> CalendarProviderType:
        return CalendarProviderType.from_value(getattr(company, 'calendar_provider', None))

    def generate_invite(self, event: CalendarEvent, company=None) -> CalendarInvite:
        """
        Build the invite for `event` using the company's calendar provider.

        Companies without a connected calendar resolve to `IcsCalendarProvider`,
        which renders the plain invite. Never raises for integration failures.
        """
        provider_type = self.resolve_provider_type(company)

        try:
            provider = get_provider(provider_type, credential_store=self.credential_store)
            result = provider.create_event(event)
        except Exception:
            logger.exception(
                f"Calendar provider {provider_type.value} raised while creating event {event.uid}"
            )
            return build_fallback_invite(event)

        if result.ok and result.invite and result.invite.content:
            return result.invite

        self._log_failure(provider_type, event, result.error)
        return build_fallback_invite(event)

    def _log_failure(
        self,
        provider_type: CalendarProviderType,
        event: CalendarEvent,
        error: Optional[IntegrationError],
    ) -> None:
        name = provider_type.value

        if isinstance(error, ConfigurationError):
            logger.info(f"{name} calendar not configured ({error}); sending plain invite for {event.uid}")
        elif isinstance(error, ProviderTimeoutError):
            logger.warning(f"{name} calendar timed out for {event.uid}: {error}")
        elif isinstance(error, RateLimitError):
            logger.warning(
                f"{name} calendar rate limited for {event.uid}; retry after {error.retry_after}s"
            )
        elif isinstance(error, AuthenticationError):
            logger.warning(f"{name} calendar rejected credentials for {event.uid}: {error}")
        else:
            logger.error(f"{name} calendar failed for {event.uid}: {error}")
