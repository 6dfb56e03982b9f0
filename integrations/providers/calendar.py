"""
Calendar Integration Providers

Implements invite generation for:
- Google Calendar (Calendar API v3, Google Meet conference)
- Microsoft Outlook Calendar (Graph API, Teams online meeting)
- Plain iCalendar (no remote calendar)
"""

import logging
import uuid
from dataclasses import replace
from typing import Dict, Optional

from django.conf import settings

from integrations.credentials import ProviderCredentials
from integrations.ics import (
    CalendarEvent,
    CalendarInvite,
    DescriptionLink,
    build_fallback_invite,
    build_ics,
    to_utc,
)
from integrations.providers.base import (
    BaseCalendarProvider,
    CalendarProviderType,
    ConfigurationError,
)

logger = logging.getLogger(__name__)


def isoformat_utc(value) -> str:
    return to_utc(value).strftime('%Y-%m-%dT%H:%M:%S')


class GoogleCalendarProvider(BaseCalendarProvider):
    """
    Google Calendar integration provider.
    Uses Google Calendar API v3.
    """

    provider_type = CalendarProviderType.GOOGLE
    provider_name = 'google_calendar'
    display_name = 'Google Calendar'

    api_base_url = 'https://www.googleapis.com/calendar/v3'
    oauth_token_url = 'https://oauth2.googleapis.com/token'

    prodid = '-//Google Inc//Google Calendar 70.9054//EN'
    filename = 'google_calendar_invite.ics'
    calendar_id = 'primary'

    def get_credentials(self) -> ProviderCredentials:
        credentials = super().get_credentials()
        if not credentials.refresh_token:
            raise ConfigurationError("Google Calendar refresh token is not configured")
        return credentials

    def create_remote_event(self, event: CalendarEvent) -> CalendarInvite:
        credentials = self.get_credentials()
        access_token = self.refresh_access_token(credentials)

        created = self.make_request(
            'POST',
            f'calendars/{self.calendar_id}/events',
            access_token,
            data=self._prepare_event_data(event),
            params={'conferenceDataVersion': 1, 'sendUpdates': 'all'},
        )

        event_link = created.get('htmlLink', '')
        meet_link = self._extract_conference_url(created)
        conference_id = created.get('conferenceData', {}).get('conferenceId')

        logger.info(f"Google Calendar event {created.get('id')} created for {event.uid}")

        branded = replace(
            event,
            online_meeting_url=meet_link or event.online_meeting_url,
            meeting_id=conference_id or event.meeting_id,
        )
        return CalendarInvite(
            content=build_ics(
                branded,
                prodid=self.prodid,
                links=[DescriptionLink('View in Google Calendar', event_link)],
            ),
            filename=self.filename,
            provider=self.provider_type.value,
            event_link=event_link or None,
            meeting_link=meet_link,
        )

    def _prepare_event_data(self, event: CalendarEvent) -> Dict:
        """Convert the event to Google Calendar format."""
        google_event = {
            'summary': event.title,
            'description': event.description,
            'start': {'dateTime': isoformat_utc(event.start), 'timeZone': 'UTC'},
            'end': {'dateTime': isoformat_utc(event.end), 'timeZone': 'UTC'},
            'attendees': [
                {
                    'email': attendee.email,
                    'displayName': attendee.name,
                    'responseStatus': 'needsAction',
                }
                for attendee in event.attendees
            ],
            'conferenceData': {
                'createRequest': {
                    'requestId': f"meet-{uuid.uuid4().hex}",
                    'conferenceSolutionKey': {'type': 'hangoutsMeet'},
                }
            },
            'reminders': {
                'useDefault': False,
                'overrides': [
                    {'method': 'email', 'minutes': 24 * 60},
                    {'method': 'popup', 'minutes': 15},
                ],
            },
        }

        if event.location:
            google_event['location'] = event.location

        return google_event

    def _extract_conference_url(self, google_event: Dict) -> Optional[str]:
        """Extract video conference URL from event."""
        conf_data = google_event.get('conferenceData', {})
        for entry_point in conf_data.get('entryPoints', []):
            if entry_point.get('entryPointType') == 'video':
                return entry_point.get('uri')
        return None


class MicrosoftCalendarProvider(BaseCalendarProvider):
    """
    Microsoft Outlook Calendar integration provider.
    Uses Microsoft Graph API.

    Authenticates with the stored refresh token when one is present, and with
    the client-credentials grant otherwise. App-only tokens cannot address
    `/me`, so `MICROSOFT_CALENDAR_USER` selects the mailbox in that case.
    """

    provider_type = CalendarProviderType.MICROSOFT
    provider_name = 'outlook_calendar'
    display_name = 'Outlook Calendar'

    api_base_url = 'https://graph.microsoft.com/v1.0'
    oauth_token_url = 'https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token'
    oauth_scopes = [
        'offline_access',
        'https://graph.microsoft.com/Calendars.ReadWrite',
    ]
    app_scope = 'https://graph.microsoft.com/.default'

    prodid = '-//Microsoft Corporation//Outlook 16.0 MIMEDIR//EN'
    filename = 'microsoft_calendar_invite.ics'

    def get_credentials(self) -> ProviderCredentials:
        credentials = super().get_credentials()
        missing = [
            name for name in ('tenant_id', 'client_id', 'client_secret')
            if not getattr(credentials, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Microsoft Calendar credentials incomplete: missing {', '.join(missing)}"
            )
        return credentials

    def get_token_url(self, credentials: ProviderCredentials) -> str:
        return self.oauth_token_url.format(tenant=credentials.tenant_id)

    def get_access_token(self, credentials: ProviderCredentials) -> str:
        if credentials.refresh_token:
            return self.refresh_access_token(credentials)
        return self.request_token(credentials, {
            'grant_type': 'client_credentials',
            'scope': self.app_scope,
        })

    def get_events_endpoint(self) -> str:
        mailbox = getattr(settings, 'MICROSOFT_CALENDAR_USER', '')
        if mailbox:
            return f'users/{mailbox}/events'
        return 'me/events'

    def create_remote_event(self, event: CalendarEvent) -> CalendarInvite:
        credentials = self.get_credentials()
        access_token = self.get_access_token(credentials)

        created = self.make_request(
            'POST',
            self.get_events_endpoint(),
            access_token,
            data=self._prepare_event_data(event),
        )

        web_link = created.get('webLink', '')
        teams_link = (created.get('onlineMeeting') or {}).get('joinUrl', '')

        logger.info(f"Outlook event {created.get('id')} created for {event.uid}")

        return CalendarInvite(
            content=build_ics(
                event,
                prodid=self.prodid,
                links=[
                    DescriptionLink('View in Outlook', web_link),
                    DescriptionLink('Join Microsoft Teams Meeting', teams_link),
                ],
                url=teams_link or None,
            ),
            filename=self.filename,
            provider=self.provider_type.value,
            event_link=web_link or None,
            meeting_link=teams_link or None,
        )

    def _prepare_event_data(self, event: CalendarEvent) -> Dict:
        """Convert the event to Outlook format."""
        outlook_event = {
            'subject': event.title,
            'body': {
                'contentType': 'text',
                'content': event.description,
            },
            'start': {'dateTime': isoformat_utc(event.start), 'timeZone': 'UTC'},
            'end': {'dateTime': isoformat_utc(event.end), 'timeZone': 'UTC'},
            'attendees': [
                {
                    'emailAddress': {'address': attendee.email, 'name': attendee.name},
                    'type': 'required',
                }
                for attendee in event.attendees
            ],
            'isOnlineMeeting': True,
            'onlineMeetingProvider': 'teamsForBusiness',
        }

        if event.location:
            outlook_event['location'] = {'displayName': event.location}

        return outlook_event


class IcsCalendarProvider(BaseCalendarProvider):
    """
    Provider for companies without a connected calendar.
    Always returns the plain iCalendar invite.
    """

    provider_type = CalendarProviderType.OTHER
    provider_name = 'ics'
    display_name = 'iCalendar'

    def create_remote_event(self, event: CalendarEvent) -> CalendarInvite:
        return build_fallback_invite(event)


PROVIDER_CLASSES = {
    CalendarProviderType.GOOGLE: GoogleCalendarProvider,
    CalendarProviderType.MICROSOFT: MicrosoftCalendarProvider,
    CalendarProviderType.OTHER: IcsCalendarProvider,
}


def get_provider(provider_type, credential_store=None) -> BaseCalendarProvider:
    """Instantiate the adapter registered for `provider_type`."""
    provider_class = PROVIDER_CLASSES[CalendarProviderType.from_value(provider_type)]
    return provider_class(credential_store=credential_store)
