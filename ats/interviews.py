"""
Interview Records

Value types for the interviews embedded in `Application.interviews`:
- PipelineSnapshot: application stage/status frozen when the interview is created
- Interviewer: participant reference
- FeedbackEntry: one interviewer's evaluation
- Interview: the embedded record and the only mutations allowed on it

Records are converted to and from plain dicts for JSON storage.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone as dt_timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from django.utils import timezone
from django.utils.dateparse import parse_datetime


class InterviewStatus(str, Enum):
    """Lifecycle status values owned by the interview itself."""
    SCHEDULED = 'scheduled'
    CANCELLED = 'cancelled'


class FeedbackDecision(str, Enum):
    """Hiring recommendation recorded with feedback."""
    DEFINITELY_NO = 'definitely_no'
    NO = 'no'
    YES = 'yes'
    DEFINITELY_YES = 'definitely_yes'

    @property
    def is_positive(self) -> bool:
        return self in (FeedbackDecision.YES, FeedbackDecision.DEFINITELY_YES)


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    parsed = parse_datetime(value)
    return ensure_aware(parsed)


def ensure_aware(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value is not None and timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def new_interview_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# VALUE OBJECTS
# =============================================================================

@dataclass(frozen=True)
class PipelineSnapshot:
    """
    Application pipeline position captured once, at interview creation.

    Never re-derived from the application afterwards.
    """
    stage: str
    status: str

    @classmethod
    def capture(cls, application) -> 'PipelineSnapshot':
        return cls(stage=application.status, status=application.status)

    @property
    def label(self) -> str:
        return self.status.capitalize()


@dataclass(frozen=True)
class Interviewer:
    participant_id: str
    display_name: str

    def to_dict(self) -> Dict[str, str]:
        return {'user_id': self.participant_id, 'name': self.display_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Interviewer':
        return cls(participant_id=str(data['user_id']), display_name=data.get('name', ''))


@dataclass
class FeedbackEntry:
    """Structured evaluation from a single interviewer."""
    interviewer_id: str
    interviewer_name: str
    rating: float
    comments: str = ''
    decision: Optional[FeedbackDecision] = None
    considerations: Dict[str, float] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'interviewer_id': self.interviewer_id,
            'interviewer_name': self.interviewer_name,
            'rating': self.rating,
            'comments': self.comments,
            'decision': self.decision.value if self.decision else None,
            'considerations': dict(self.considerations),
            'created_at': _format_datetime(self.created_at),
            'updated_at': _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedbackEntry':
        decision = data.get('decision')
        return cls(
            interviewer_id=str(data['interviewer_id']),
            interviewer_name=data.get('interviewer_name', ''),
            rating=data.get('rating'),
            comments=data.get('comments', ''),
            decision=FeedbackDecision(decision) if decision else None,
            considerations=dict(data.get('considerations') or {}),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )


# =============================================================================
# INTERVIEW
# =============================================================================

DETAIL_FIELDS = (
    'title',
    'description',
    'location',
    'online_meeting_url',
    'meeting_id',
    'meeting_password',
)


@dataclass
class Interview:
    """
    Interview embedded in an application.

    `snapshot` is immutable; `status` starts as the snapshot status and is
    only ever changed by `cancel()`, and `scheduled_date` only by
    `reschedule()`.
    """
    id: str
    scheduled_date: datetime
    title: str
    snapshot: PipelineSnapshot
    status: str
    interviewers: List[Interviewer]
    description: str = ''
    cancellation_reason: Optional[str] = None
    location: Optional[str] = None
    online_meeting_url: Optional[str] = None
    meeting_id: Optional[str] = None
    meeting_password: Optional[str] = None
    process_id: Optional[str] = None
    feedback: List[FeedbackEntry] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        application,
        scheduled_date: datetime,
        title: str,
        interviewers: List[Interviewer],
        description: str = '',
        process_id: Optional[str] = None,
        location: Optional[str] = None,
        online_meeting_url: Optional[str] = None,
        meeting_id: Optional[str] = None,
        meeting_password: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> 'Interview':
        """New interview snapshotting the application's current status."""
        now = now or timezone.now()
        snapshot = PipelineSnapshot.capture(application)
        return cls(
            id=new_interview_id(),
            scheduled_date=ensure_aware(scheduled_date),
            title=f"{snapshot.label} - {title}",
            snapshot=snapshot,
            status=snapshot.status,
            interviewers=list(interviewers),
            description=description or '',
            location=location,
            online_meeting_url=online_meeting_url,
            meeting_id=meeting_id,
            meeting_password=meeting_password,
            process_id=str(process_id) if process_id else None,
            created_at=now,
            updated_at=now,
        )

    @property
    def stage(self) -> str:
        return self.snapshot.stage

    @property
    def is_cancelled(self) -> bool:
        return self.status == InterviewStatus.CANCELLED.value

    def has_interviewer(self, participant_id) -> bool:
        return any(i.participant_id == str(participant_id) for i in self.interviewers)

    def get_interviewer(self, participant_id) -> Optional[Interviewer]:
        for interviewer in self.interviewers:
            if interviewer.participant_id == str(participant_id):
                return interviewer
        return None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or timezone.now()

    def cancel(self, reason: str, now: Optional[datetime] = None) -> None:
        self.status = InterviewStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.touch(now)

    def reschedule(self, scheduled_date: datetime, now: Optional[datetime] = None) -> None:
        self.scheduled_date = ensure_aware(scheduled_date)
        self.touch(now)

    def replace_interviewers(self, interviewers: List[Interviewer], now: Optional[datetime] = None) -> None:
        self.interviewers = list(interviewers)
        self.touch(now)

    def update_details(self, changes: Dict[str, Any], now: Optional[datetime] = None) -> None:
        """Apply free-text detail changes; other keys are ignored."""
        for name in DETAIL_FIELDS:
            if name in changes:
                setattr(self, name, changes[name])
        self.touch(now)

    def find_feedback(self, interviewer_id) -> Optional[FeedbackEntry]:
        for entry in self.feedback:
            if entry.interviewer_id == str(interviewer_id):
                return entry
        return None

    def upsert_feedback(self, entry: FeedbackEntry, now: Optional[datetime] = None) -> FeedbackEntry:
        """
        Store `entry`, replacing any entry by the same interviewer in place.

        A replaced entry keeps its original `created_at`.
        """
        now = now or timezone.now()
        for index, existing in enumerate(self.feedback):
            if existing.interviewer_id == entry.interviewer_id:
                stored = replace(entry, created_at=existing.created_at or now, updated_at=now)
                self.feedback[index] = stored
                break
        else:
            stored = replace(entry, created_at=now, updated_at=now)
            self.feedback.append(stored)

        self.touch(now)
        return stored

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'scheduled_date': _format_datetime(self.scheduled_date),
            'title': self.title,
            'description': self.description,
            'stage': self.snapshot.stage,
            'snapshot_status': self.snapshot.status,
            'status': self.status,
            'interviewers': [i.to_dict() for i in self.interviewers],
            'cancellation_reason': self.cancellation_reason,
            'location': self.location,
            'online_meeting_url': self.online_meeting_url,
            'meeting_id': self.meeting_id,
            'meeting_password': self.meeting_password,
            'process_id': self.process_id,
            'feedback': [entry.to_dict() for entry in self.feedback],
            'created_at': _format_datetime(self.created_at),
            'updated_at': _format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Interview':
        status = data.get('status') or InterviewStatus.SCHEDULED.value
        snapshot = PipelineSnapshot(
            stage=data.get('stage') or '',
            status=data.get('snapshot_status') or status,
        )
        return cls(
            id=data['id'],
            scheduled_date=_parse_datetime(data.get('scheduled_date')),
            title=data.get('title', ''),
            description=data.get('description') or '',
            snapshot=snapshot,
            status=status,
            interviewers=[Interviewer.from_dict(i) for i in data.get('interviewers') or []],
            cancellation_reason=data.get('cancellation_reason'),
            location=data.get('location'),
            online_meeting_url=data.get('online_meeting_url'),
            meeting_id=data.get('meeting_id'),
            meeting_password=data.get('meeting_password'),
            process_id=data.get('process_id'),
            feedback=[FeedbackEntry.from_dict(f) for f in data.get('feedback') or []],
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )


def load_interviews(application) -> List[Interview]:
    return [Interview.from_dict(data) for data in application.interviews or []]


def dump_interviews(application, interviews: List[Interview]) -> None:
    application.interviews = [interview.to_dict() for interview in interviews]
