"""
iCalendar Invite Formatting

Helpers turning a calendar event value into an RFC 5545 `VEVENT` document
with the `icalendar` library. Every invite produced by the platform (plain
fallback or provider-branded) goes through `build_ics()` so the base layout
never diverges between call sites.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional, Sequence, Tuple

from icalendar import Alarm, Calendar, Event, vCalAddress, vText


DEFAULT_PRODID = '-//Careers Platform//Interview//EN'
ICS_CONTENT_TYPE = 'text/calendar'
DEFAULT_FILENAME = 'interview_invite.ics'
DEFAULT_ATTENDEE_ROLE = 'REQ-PARTICIPANT'
REMINDER_OFFSET = timedelta(minutes=-15)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class Attendee:
    """Invite participant."""
    email: str
    name: str = ''
    role: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    """Abstract calendar event handed to the formatter and to providers."""
    uid: str
    title: str
    description: str
    start: datetime
    end: datetime
    attendees: Tuple[Attendee, ...] = ()
    location: Optional[str] = None
    online_meeting_url: Optional[str] = None
    meeting_id: Optional[str] = None
    meeting_password: Optional[str] = None


@dataclass(frozen=True)
class CalendarInvite:
    """Downloadable invite document."""
    content: str
    filename: str = DEFAULT_FILENAME
    content_type: str = ICS_CONTENT_TYPE
    provider: str = 'other'
    event_link: Optional[str] = None
    meeting_link: Optional[str] = None

    def to_dict(self):
        return {
            'content': self.content,
            'content_type': self.content_type,
            'filename': self.filename,
            'provider': self.provider,
        }


@dataclass(frozen=True)
class DescriptionLink:
    """Labelled link appended to the event description."""
    label: str
    url: str


# =============================================================================
# FORMATTING
# =============================================================================

def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)


def compose_description(
    event: CalendarEvent,
    links: Sequence[DescriptionLink] = (),
) -> str:
    """
    Build the free-text description: the event text, provider links, then
    meeting URL, ID and password when present.
    """
    description = event.description or ''

    for link in links:
        if link.url:
            description += f"\n\n{link.label}: {link.url}"

    if event.online_meeting_url:
        description += f"\n\nMeeting URL: {event.online_meeting_url}"
    if event.meeting_id:
        description += f"\n\nMeeting ID: {event.meeting_id}"
    if event.meeting_password:
        description += f"\n\nPassword: {event.meeting_password}"

    return description


def make_attendee(attendee: Attendee) -> vCalAddress:
    address = vCalAddress(f"mailto:{attendee.email}")
    address.params['cn'] = vText(attendee.name or attendee.email)
    address.params['role'] = vText(attendee.role or DEFAULT_ATTENDEE_ROLE)
    address.params['partstat'] = vText('NEEDS-ACTION')
    address.params['rsvp'] = vText('TRUE')
    return address


def make_reminder() -> Alarm:
    alarm = Alarm()
    alarm.add('action', 'DISPLAY')
    alarm.add('description', 'Reminder')
    alarm.add('trigger', REMINDER_OFFSET)
    return alarm


def build_ics(
    event: CalendarEvent,
    prodid: str = DEFAULT_PRODID,
    links: Sequence[DescriptionLink] = (),
    url: Optional[str] = None,
    dtstamp: Optional[datetime] = None,
) -> str:
    """
    Render `event` as an iCalendar document.

    Args:
        event: Event to render.
        prodid: PRODID identifying the producer of the invite.
        links: Extra labelled links inserted into DESCRIPTION ahead of the
            meeting details (provider deep links).
        url: Optional value for the `URL` property.
        dtstamp: Timestamp for `DTSTAMP`; defaults to now.

    Returns:
        Serialized calendar (CRLF lines, folded at 75 octets). Text values
        are escaped by icalendar, so user input cannot start a new line.
    """
    if dtstamp is None:
        dtstamp = datetime.now(dt_timezone.utc)

    cal = Calendar()
    cal.add('prodid', prodid)
    cal.add('version', '2.0')
    cal.add('method', 'REQUEST')

    ical_event = Event()
    ical_event.add('uid', event.uid)
    ical_event.add('dtstamp', to_utc(dtstamp))
    ical_event.add('dtstart', to_utc(event.start))
    ical_event.add('dtend', to_utc(event.end))
    ical_event.add('summary', event.title)

    description = compose_description(event, links)
    if description:
        ical_event.add('description', description)
    if event.location:
        ical_event.add('location', event.location)
    if url:
        ical_event.add('url', url)

    ical_event.add('status', 'CONFIRMED')
    ical_event.add('sequence', 0)

    for attendee in event.attendees:
        ical_event.add('attendee', make_attendee(attendee), encode=0)

    ical_event.add_component(make_reminder())
    cal.add_component(ical_event)

    return cal.to_ical().decode('utf-8')


def build_fallback_invite(event: CalendarEvent, dtstamp: Optional[datetime] = None) -> CalendarInvite:
    """Plain invite used for the `other` provider and whenever a provider fails."""
    return CalendarInvite(
        content=build_ics(event, dtstamp=dtstamp),
        filename=DEFAULT_FILENAME,
        provider='other',
    )
