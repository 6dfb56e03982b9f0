"""
Notification dispatch for interview feedback.

Reminders are queued on Celery and delivered by `ats.tasks`.
"""

import logging

from kombu.exceptions import OperationalError

logger = logging.getLogger(__name__)


class FeedbackReminderNotifier:
    """Fire-and-forget feedback reminder dispatch."""

    def send_reminder(self, interviewer_id, interview, candidate_name: str) -> bool:
        """
        Queue a reminder. Returns False when the broker refused the message.
        """
        from ats.tasks import send_feedback_reminder

        try:
            send_feedback_reminder.delay(
                str(interviewer_id),
                interview.id,
                interview.title,
                candidate_name,
            )
        except OperationalError as e:
            logger.error(f"Could not queue feedback reminder for interview {interview.id}: {e}")
            return False
        return True
