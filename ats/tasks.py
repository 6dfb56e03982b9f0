"""
Celery Tasks for the ATS App

This module contains async tasks for interview operations:
- Feedback reminder emails to interviewers
"""

import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


# ==================== FEEDBACK REMINDERS ====================

@shared_task(
    bind=True,
    name='ats.tasks.send_feedback_reminder',
    max_retries=3,
    default_retry_delay=300,
)
def send_feedback_reminder(self, interviewer_id, interview_id, interview_title, candidate_name):
    """
    Email an interviewer a reminder to submit interview feedback.

    Args:
        interviewer_id: User id of the interviewer
        interview_id: Interview the feedback is for
        interview_title: Title shown in the email
        candidate_name: Candidate being evaluated

    Returns:
        dict: Delivery summary.
    """
    from ats.directory import UserDirectory

    entry = UserDirectory().get(interviewer_id)
    if entry is None or not entry.email:
        logger.warning(f"No email on file for interviewer {interviewer_id}; reminder skipped")
        return {'status': 'skipped', 'interviewer_id': str(interviewer_id)}

    subject = f"Feedback reminder: {interview_title}"
    base_url = getattr(settings, 'FRONTEND_URL', '').rstrip('/')
    message = (
        f"Hi {entry.name},\n\n"
        f"Please submit your feedback for {candidate_name} ({interview_title}).\n\n"
        f"{base_url}/interviews/{interview_id}/feedback"
    )

    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[entry.email],
        )
    except Exception as e:
        logger.error(f"Error sending feedback reminder for interview {interview_id}: {e}")
        raise self.retry(exc=e)

    logger.info(f"Feedback reminder sent to {entry.email} for interview {interview_id}")
    return {'status': 'success', 'interviewer_id': str(interviewer_id)}
