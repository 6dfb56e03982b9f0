"""
Interview Feedback Collection

FeedbackCollector stores one feedback entry per interviewer on an
interview (resubmitting replaces the previous entry) and aggregates the
entries into a debrief summary.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from api.exceptions import InvalidInputError, PermissionDeniedError, ResourceNotFoundError
from ats.interviews import FeedbackDecision, FeedbackEntry, Interview, dump_interviews, load_interviews
from ats.notifications import FeedbackReminderNotifier
from ats.scheduling import find_interview
from ats.stores import ApplicationStore, DjangoApplicationStore, save_with_retry

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
MAX_CONSIDERATION_SCORE = 5

RECOMMENDATION_NONE = 'No decisions yet'
RECOMMENDATION_DO_NOT_PROCEED = 'Do Not Proceed'
RECOMMENDATION_LIKELY_NO = 'Likely No'
RECOMMENDATION_STRONG_YES = 'Strong Yes'
RECOMMENDATION_LIKELY_YES = 'Likely Yes'
RECOMMENDATION_MIXED = 'Mixed Feedback'


def round_one_decimal(value) -> float:
    return float(Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


@dataclass
class FeedbackSummary:
    """Debrief aggregate over a set of feedback entries."""
    feedback_count: int = 0
    average_rating: float = 0.0
    consideration_averages: Dict[str, float] = field(default_factory=dict)
    decision_counts: Dict[str, int] = field(default_factory=dict)
    recommendation: str = RECOMMENDATION_NONE
    pending_interviewers: List[str] = field(default_factory=list)


def overall_recommendation(decisions: Iterable[Optional[FeedbackDecision]]) -> str:
    """
    Reduce interviewer decisions to a single recommendation.

    Any "definitely no" vetoes; otherwise majority-no, strong-yes and
    likely-yes thresholds are checked in that order.
    """
    counts = Counter(decision for decision in decisions if decision)
    total = sum(counts.values())
    if not total:
        return RECOMMENDATION_NONE

    yes_share = (counts[FeedbackDecision.YES] + counts[FeedbackDecision.DEFINITELY_YES]) / total * 100
    no_share = (counts[FeedbackDecision.NO] + counts[FeedbackDecision.DEFINITELY_NO]) / total * 100

    if counts[FeedbackDecision.DEFINITELY_NO]:
        return RECOMMENDATION_DO_NOT_PROCEED
    if no_share >= 50:
        return RECOMMENDATION_LIKELY_NO
    if yes_share >= 80 and counts[FeedbackDecision.DEFINITELY_YES]:
        return RECOMMENDATION_STRONG_YES
    if yes_share >= 70:
        return RECOMMENDATION_LIKELY_YES
    return RECOMMENDATION_MIXED


def summarize_entries(entries: List[FeedbackEntry]) -> FeedbackSummary:
    summary = FeedbackSummary(feedback_count=len(entries))
    if not entries:
        return summary

    summary.average_rating = round_one_decimal(
        sum(entry.rating for entry in entries) / len(entries)
    )

    # Unscored criteria (0) do not drag averages down
    scores: Dict[str, List[float]] = {}
    for entry in entries:
        for criterion, score in entry.considerations.items():
            scores.setdefault(criterion, [])
            if score and score > 0:
                scores[criterion].append(score)
    summary.consideration_averages = {
        criterion: round_one_decimal(sum(values) / len(values)) if values else 0.0
        for criterion, values in scores.items()
    }

    decisions = [entry.decision for entry in entries]
    summary.decision_counts = {
        decision.value: count
        for decision, count in Counter(d for d in decisions if d).items()
    }
    summary.recommendation = overall_recommendation(decisions)
    return summary


class FeedbackCollector:
    """
    Per-interviewer feedback on interviews.

    Entries are keyed by interviewer id; writes by someone not on the
    interview panel are rejected before anything is saved.
    """

    def __init__(self, store: ApplicationStore = None, notifier: FeedbackReminderNotifier = None):
        self.store = store or DjangoApplicationStore()
        self.notifier = notifier or FeedbackReminderNotifier()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def submit_feedback(self, interview_id, data: Dict[str, Any]) -> FeedbackEntry:
        """
        Create or replace the caller's feedback entry.

        Raises:
            ResourceNotFoundError: If the interview does not exist.
            PermissionDeniedError: If `interviewer_id` is not on the panel.
            InvalidInputError: If rating, decision or scores are out of range.
        """
        entry = self.build_entry(data)
        return self._store_entry(interview_id, entry, require_existing=False)

    def update_feedback(self, interview_id, interviewer_id, data: Dict[str, Any]) -> FeedbackEntry:
        """
        Replace an existing entry; never creates one.

        Raises:
            ResourceNotFoundError: If the interviewer has no entry yet.
            PermissionDeniedError: If the payload targets another interviewer.
        """
        submitted_id = data.get('interviewer_id')
        if submitted_id is not None and str(submitted_id) != str(interviewer_id):
            raise PermissionDeniedError("You cannot update another interviewer's feedback")

        entry = self.build_entry(dict(data, interviewer_id=interviewer_id))
        return self._store_entry(interview_id, entry, require_existing=True)

    def _store_entry(self, interview_id, entry: FeedbackEntry, require_existing: bool) -> FeedbackEntry:
        interview_id = str(interview_id)

        def change(application):
            interviews = load_interviews(application)
            interview = find_interview(interviews, interview_id)

            interviewer = interview.get_interviewer(entry.interviewer_id)
            if interviewer is None:
                raise PermissionDeniedError("Only assigned interviewers can submit feedback")
            if require_existing and interview.find_feedback(entry.interviewer_id) is None:
                raise ResourceNotFoundError(
                    detail=f"Feedback from interviewer {entry.interviewer_id} not found",
                    resource_type='Feedback',
                )

            named = entry
            if not entry.interviewer_name:
                named = replace(entry, interviewer_name=interviewer.display_name)

            stored = interview.upsert_feedback(named)
            dump_interviews(application, interviews)
            return stored

        _, stored = save_with_retry(
            self.store,
            lambda: self.store.find_application_containing(interview_id),
            change,
        )
        logger.info(f"Feedback from {stored.interviewer_id} stored on interview {interview_id}")
        return stored

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _load_interview(self, interview_id):
        application = self.store.find_application_containing(interview_id)
        return application, find_interview(load_interviews(application), str(interview_id))

    def get_feedback(self, interview_id) -> List[FeedbackEntry]:
        _, interview = self._load_interview(interview_id)
        return list(interview.feedback)

    def get_feedback_by_interviewer(self, interview_id, interviewer_id) -> FeedbackEntry:
        _, interview = self._load_interview(interview_id)
        entry = interview.find_feedback(interviewer_id)
        if entry is None:
            raise ResourceNotFoundError(
                detail=f"Feedback from interviewer {interviewer_id} not found",
                resource_type='Feedback',
            )
        return entry

    def get_application(self, application_id):
        return self.store.find_by_id(application_id)

    def get_interview_application(self, interview_id):
        return self.store.find_application_containing(interview_id)

    def summarize_feedback(self, interview_id) -> FeedbackSummary:
        _, interview = self._load_interview(interview_id)
        return self._summarize_interviews([interview])

    def summarize_application(self, application_id) -> FeedbackSummary:
        """Debrief across every interview of an application."""
        application = self.store.find_by_id(application_id)
        return self._summarize_interviews(load_interviews(application))

    def _summarize_interviews(self, interviews: List[Interview]) -> FeedbackSummary:
        entries = [entry for interview in interviews for entry in interview.feedback]
        summary = summarize_entries(entries)

        pending = []
        for interview in interviews:
            if interview.is_cancelled:
                continue
            for interviewer in interview.interviewers:
                if interview.find_feedback(interviewer.participant_id) is None:
                    if interviewer.participant_id not in pending:
                        pending.append(interviewer.participant_id)
        summary.pending_interviewers = pending
        return summary

    # -------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------

    def send_feedback_reminder(self, interview_id, interviewer_id) -> Dict[str, Any]:
        """
        Remind an interviewer to submit feedback.

        Raises:
            ResourceNotFoundError: If the interviewer is not on the interview.
        """
        application, interview = self._load_interview(interview_id)

        if not interview.has_interviewer(interviewer_id):
            raise ResourceNotFoundError(
                detail=f"Interviewer {interviewer_id} not found for this interview",
                resource_type='Interviewer',
            )

        if interview.find_feedback(interviewer_id) is not None:
            return {
                'success': False,
                'message': 'Feedback has already been submitted by this interviewer',
            }

        queued = self.notifier.send_reminder(interviewer_id, interview, application.full_name)
        if not queued:
            return {'success': False, 'message': 'Reminder could not be queued'}

        return {
            'success': True,
            'message': f"Reminder sent to interviewer {interviewer_id}",
        }

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def build_entry(data: Dict[str, Any]) -> FeedbackEntry:
        interviewer_id = data.get('interviewer_id')
        if interviewer_id in (None, ''):
            raise InvalidInputError("interviewer_id is required", field_name='interviewer_id')

        rating = data.get('rating')
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            raise InvalidInputError("rating must be a number", field_name='rating')
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidInputError(
                f"rating must be between {MIN_RATING} and {MAX_RATING}",
                field_name='rating',
            )

        decision = data.get('decision')
        if decision:
            try:
                decision = FeedbackDecision(decision)
            except ValueError:
                raise InvalidInputError(f"Unknown decision: {decision}", field_name='decision')
        else:
            decision = None

        considerations = {}
        for criterion, score in (data.get('considerations') or {}).items():
            if isinstance(score, bool) or not isinstance(score, (int, float)):
                raise InvalidInputError(f"Score for {criterion} must be a number", field_name='considerations')
            if not 0 <= score <= MAX_CONSIDERATION_SCORE:
                raise InvalidInputError(
                    f"Score for {criterion} must be between 0 and {MAX_CONSIDERATION_SCORE}",
                    field_name='considerations',
                )
            considerations[str(criterion)] = score

        return FeedbackEntry(
            interviewer_id=str(interviewer_id),
            interviewer_name=data.get('interviewer_name') or '',
            rating=rating,
            comments=data.get('comments') or '',
            decision=decision,
            considerations=considerations,
        )
