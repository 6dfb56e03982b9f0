"""
ATS Interview Scheduling

This module owns the interviews embedded in candidate applications:
- InterviewLifecycleManager: schedule, cancel, reschedule, interviewer and
  detail updates, read projections across applications
- Invite generation through the calendar provider router

Every mutation is a read-modify-write of the owning application saved with
optimistic locking (see `ats.stores.save_with_retry`). Invite generation
runs after the change is persisted and can never undo or fail it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from django.conf import settings
from django.utils import timezone

from api.exceptions import InvalidInputError, ResourceNotFoundError
from ats.directory import UserDirectory
from ats.interviews import Interview, Interviewer, dump_interviews, load_interviews
from ats.stores import ApplicationStore, DjangoApplicationStore, save_with_retry
from integrations.ics import Attendee, CalendarEvent, CalendarInvite
from integrations.services import CalendarInviteRouter

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class SchedulingResult:
    """Result of a scheduling operation."""
    success: bool
    interview: Optional[Interview] = None
    application_id: Optional[str] = None
    message: str = ''
    invite: Optional[CalendarInvite] = None


@dataclass(frozen=True)
class InterviewListing:
    """Interview joined with the candidate details shown in lists."""
    interview: Interview
    application_id: str
    candidate_name: str
    candidate_email: str
    job_title: str

    @classmethod
    def build(cls, application, interview: Interview) -> 'InterviewListing':
        return cls(
            interview=interview,
            application_id=str(application.pk),
            candidate_name=application.full_name,
            candidate_email=application.email,
            job_title=application.job_title or 'Unknown Position',
        )


def get_max_interviewers() -> int:
    return int(getattr(settings, 'INTERVIEW_MAX_INTERVIEWERS', 10))


def get_default_duration() -> timedelta:
    return timedelta(minutes=int(getattr(settings, 'INTERVIEW_DEFAULT_DURATION_MINUTES', 60)))


def normalize_interviewers(interviewers: Iterable) -> List[Interviewer]:
    """
    Accept `Interviewer` values or `{'user_id', 'name'}` dicts and reject
    duplicate participants.
    """
    normalized = []
    seen = set()
    for item in interviewers or []:
        if not isinstance(item, Interviewer):
            item = Interviewer(participant_id=str(item['user_id']), display_name=item.get('name', ''))
        if item.participant_id in seen:
            raise InvalidInputError(
                f"Interviewer {item.participant_id} is listed more than once",
                field_name='interviewers',
            )
        seen.add(item.participant_id)
        normalized.append(item)
    return normalized


# =============================================================================
# LIFECYCLE MANAGER
# =============================================================================

class InterviewLifecycleManager:
    """
    Entry point for all interview mutations and interview read projections.
    """

    def __init__(
        self,
        store: ApplicationStore = None,
        invite_router: CalendarInviteRouter = None,
        directory: UserDirectory = None,
    ):
        self.store = store or DjangoApplicationStore()
        self.invite_router = invite_router or CalendarInviteRouter()
        self.directory = directory or UserDirectory()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def schedule_interview(
        self,
        application_id,
        scheduled_date: datetime,
        title: str,
        interviewers: Iterable,
        description: str = '',
        process_id: Optional[str] = None,
        location: Optional[str] = None,
        online_meeting_url: Optional[str] = None,
        meeting_id: Optional[str] = None,
        meeting_password: Optional[str] = None,
        send_invite: bool = True,
    ) -> SchedulingResult:
        """
        Schedule an interview on an application.

        The interview's stage and status are snapshotted from the
        application's current status and the title is prefixed with it
        (e.g. "Screening - Technical Interview"). The application's own
        status is left untouched.

        Raises:
            InvalidInputError: If there are no interviewers, more than the
                allowed maximum, duplicates, or no title.
            ResourceNotFoundError: If the application does not exist.
        """
        interviewers = normalize_interviewers(interviewers)
        if not interviewers:
            raise InvalidInputError("At least one interviewer is required", field_name='interviewers')
        max_interviewers = get_max_interviewers()
        if len(interviewers) > max_interviewers:
            raise InvalidInputError(
                f"An interview can have at most {max_interviewers} interviewers",
                field_name='interviewers',
            )
        if not title or not title.strip():
            raise InvalidInputError("Interview title is required", field_name='title')

        def change(application):
            interview = Interview.create(
                application,
                scheduled_date=scheduled_date,
                title=title.strip(),
                interviewers=interviewers,
                description=description,
                process_id=process_id,
                location=location,
                online_meeting_url=online_meeting_url,
                meeting_id=meeting_id,
                meeting_password=meeting_password,
            )
            interviews = load_interviews(application)
            interviews.append(interview)
            dump_interviews(application, interviews)
            return interview

        application, interview = save_with_retry(
            self.store,
            lambda: self.store.find_by_id(application_id),
            change,
        )
        logger.info(f"Interview {interview.id} scheduled for application {application.pk}")

        return SchedulingResult(
            success=True,
            interview=interview,
            application_id=str(application.pk),
            message='Interview scheduled successfully',
            invite=self._invite_after_change(application, interview, send_invite),
        )

    def cancel_interview(self, interview_id, reason: str = '') -> SchedulingResult:
        """
        Cancel an interview and record the reason.

        Cancelling an already cancelled interview overwrites the reason.
        """
        application, interview = self._update_interview(
            interview_id,
            lambda interview: interview.cancel(reason),
        )
        logger.info(f"Interview {interview.id} cancelled")

        return SchedulingResult(
            success=True,
            interview=interview,
            application_id=str(application.pk),
            message='Interview cancelled successfully',
        )

    def reschedule_interview(
        self,
        interview_id,
        new_date: datetime,
        send_invite: bool = True,
    ) -> SchedulingResult:
        """
        Move an interview to `new_date`. Past instants are accepted.
        """
        application, interview = self._update_interview(
            interview_id,
            lambda interview: interview.reschedule(new_date),
        )
        logger.info(f"Interview {interview.id} rescheduled to {new_date.isoformat()}")

        return SchedulingResult(
            success=True,
            interview=interview,
            application_id=str(application.pk),
            message='Interview rescheduled successfully',
            invite=self._invite_after_change(application, interview, send_invite),
        )

    def update_interviewers(self, interview_id, interviewers: Iterable) -> SchedulingResult:
        """
        Replace the interviewer list wholesale.

        The creation-time maximum is not applied here; coordinators may
        extend a panel after scheduling.
        """
        interviewers = normalize_interviewers(interviewers)
        if not interviewers:
            raise InvalidInputError("At least one interviewer is required", field_name='interviewers')

        application, interview = self._update_interview(
            interview_id,
            lambda interview: interview.replace_interviewers(interviewers),
        )
        logger.info(f"Interview {interview.id} now has {len(interviewers)} interviewers")

        return SchedulingResult(
            success=True,
            interview=interview,
            application_id=str(application.pk),
            message='Interviewers updated successfully',
        )

    def update_interview(self, interview_id, changes: Dict[str, Any]) -> SchedulingResult:
        """
        Update title, description, location or meeting details.

        Date, status and stage are not reachable through this path.
        """
        if 'title' in changes and not (changes['title'] or '').strip():
            raise InvalidInputError("Interview title is required", field_name='title')

        application, interview = self._update_interview(
            interview_id,
            lambda interview: interview.update_details(changes),
        )

        return SchedulingResult(
            success=True,
            interview=interview,
            application_id=str(application.pk),
            message='Interview updated successfully',
        )

    def set_interviewer_visibility(self, application_id, visible: bool):
        """
        Toggle whether interviewers without a hiring role may read the
        application's feedback debrief.
        """
        def change(application):
            application.interviewer_visibility = bool(visible)

        application, _ = save_with_retry(
            self.store,
            lambda: self.store.find_by_id(application_id),
            change,
        )
        logger.info(
            f"Interviewer visibility for application {application.pk} "
            f"set to {application.interviewer_visibility}"
        )
        return application

    def _update_interview(self, interview_id, mutate: Callable[[Interview], None]):
        interview_id = str(interview_id)

        def change(application):
            interviews = load_interviews(application)
            interview = find_interview(interviews, interview_id)
            mutate(interview)
            dump_interviews(application, interviews)
            return interview

        return save_with_retry(
            self.store,
            lambda: self.store.find_application_containing(interview_id),
            change,
        )

    # -------------------------------------------------------------------------
    # Read projections
    # -------------------------------------------------------------------------

    def get_interview_by_id(self, interview_id) -> InterviewListing:
        application = self.store.find_application_containing(interview_id)
        interview = find_interview(load_interviews(application), str(interview_id))
        return InterviewListing.build(application, interview)

    def list_interviews_for_application(self, application_id) -> List[Interview]:
        return load_interviews(self.store.find_by_id(application_id))

    def list_active_interviews(self) -> List[InterviewListing]:
        """Interviews on applications not hired or rejected, newest first."""
        listings = [
            InterviewListing.build(application, interview)
            for application in self.store.iter_with_interviews(exclude_terminal=True)
            for interview in load_interviews(application)
        ]
        return sorted(listings, key=lambda item: item.interview.scheduled_date, reverse=True)

    def list_upcoming_interviews(self, now: Optional[datetime] = None) -> List[InterviewListing]:
        """Interviews scheduled from the start of today onwards, soonest first."""
        now = timezone.localtime(now or timezone.now())
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)

        listings = [
            InterviewListing.build(application, interview)
            for application in self.store.iter_with_interviews()
            for interview in load_interviews(application)
            if interview.scheduled_date >= start_of_today
        ]
        return sorted(listings, key=lambda item: item.interview.scheduled_date)

    def list_interviewer_interviews(self, user_id) -> List[InterviewListing]:
        """Interviews where `user_id` is on the panel, newest first."""
        listings = [
            InterviewListing.build(application, interview)
            for application in self.store.iter_with_interviews()
            for interview in load_interviews(application)
            if interview.has_interviewer(user_id)
        ]
        return sorted(listings, key=lambda item: item.interview.scheduled_date, reverse=True)

    # -------------------------------------------------------------------------
    # Invites
    # -------------------------------------------------------------------------

    def generate_interview_invite(self, application_id, interview_id) -> CalendarInvite:
        """
        Calendar invite for a stored interview.

        Raises:
            ResourceNotFoundError: If the application or interview is missing.
        """
        application = self.store.find_by_id(application_id)
        interview = find_interview(load_interviews(application), str(interview_id))
        return self.invite_router.generate_invite(
            self.build_calendar_event(application, interview),
            company=application.company,
        )

    def build_calendar_event(self, application, interview: Interview) -> CalendarEvent:
        """
        Calendar event for an interview.

        The UID is stable per interview so re-downloaded invites update the
        same calendar entry.
        """
        directory = self.directory.resolve(i.participant_id for i in interview.interviewers)
        panel = [
            (interviewer.display_name, getattr(directory.get(interviewer.participant_id), 'email', ''))
            for interviewer in interview.interviewers
        ]

        description = interview.description or f"Interview for {application.full_name}"
        description += f"\n\nCandidate Email: {application.email}"
        if panel:
            description += '\n\nInterviewers:'
            for name, email in panel:
                description += f"\n- {name} ({email})" if email else f"\n- {name}"

        attendees = [Attendee(email=application.email, name=application.full_name)]
        attendees.extend(Attendee(email=email, name=name) for name, email in panel if email)

        domain = getattr(settings, 'CALENDAR_INVITE_UID_DOMAIN', 'careers-platform')
        return CalendarEvent(
            uid=f"interview-{interview.id}@{domain}",
            title=f"Interview: {interview.title}",
            description=description,
            start=interview.scheduled_date,
            end=interview.scheduled_date + get_default_duration(),
            attendees=tuple(attendees),
            location=interview.location,
            online_meeting_url=interview.online_meeting_url,
            meeting_id=interview.meeting_id,
            meeting_password=interview.meeting_password,
        )

    def _invite_after_change(self, application, interview: Interview, send_invite: bool):
        if not send_invite:
            return None
        try:
            return self.invite_router.generate_invite(
                self.build_calendar_event(application, interview),
                company=application.company,
            )
        except Exception:
            # The interview change is already saved; the invite can be downloaded later
            logger.exception(f"Invite generation failed for interview {interview.id}")
            return None


def find_interview(interviews: List[Interview], interview_id: str) -> Interview:
    for interview in interviews:
        if interview.id == interview_id:
            return interview
    raise ResourceNotFoundError(resource_type='Interview', resource_id=interview_id)
