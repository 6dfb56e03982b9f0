"""
ATS Models - Interview Scheduling Persistence

This module implements:
- Company: calendar provider configuration read when generating invites
- Application: candidate application aggregate with embedded interviews
- InterviewProcess / InterviewStage: reusable interview process templates

Interviews and their feedback are stored inside `Application.interviews`
(a JSON list) and are only ever read and written together with the owning
application. Writes go through `Application.save_versioned()` so concurrent
changes to the same application are detected instead of overwritten.
"""

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.db.models import BaseModel, VersionedModel


class Company(BaseModel):
    """Hiring company and its calendar integration setting."""

    class CalendarProvider(models.TextChoices):
        GOOGLE = 'google', _('Google Calendar')
        MICROSOFT = 'microsoft', _('Microsoft Outlook')
        OTHER = 'other', _('Other (iCalendar file)')

    name = models.CharField(max_length=255)
    calendar_provider = models.CharField(
        max_length=20,
        choices=CalendarProvider.choices,
        default=CalendarProvider.OTHER,
        verbose_name=_('Email calendar provider'),
    )

    class Meta:
        verbose_name = _('Company')
        verbose_name_plural = _('Companies')
        ordering = ['name']

    def __str__(self):
        return self.name


class Application(VersionedModel):
    """
    Candidate application.

    `interviews` holds the serialized interview records (see
    `ats.interviews.Interview`) in creation order.
    """

    class ApplicationStatus(models.TextChoices):
        NEW = 'new', _('New')
        REVIEWED = 'reviewed', _('Reviewed')
        CONTACTED = 'contacted', _('Contacted')
        SCREENING = 'screening', _('Screening')
        INTERVIEWING = 'interviewing', _('Interviewing')
        OFFERED = 'offered', _('Offered')
        HIRED = 'hired', _('Hired')
        REJECTED = 'rejected', _('Rejected')

    TERMINAL_STATUSES = (ApplicationStatus.HIRED, ApplicationStatus.REJECTED)

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='applications',
        null=True,
        blank=True,
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField()
    job_title = models.CharField(max_length=255, blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.NEW,
        db_index=True,
    )
    interviews = models.JSONField(
        default=list,
        blank=True,
        encoder=DjangoJSONEncoder,
        help_text=_('Embedded interview records with their feedback.'),
    )
    interviewer_visibility = models.BooleanField(
        default=False,
        help_text=_('Let interviewers without a hiring role read the feedback debrief.'),
    )

    class Meta:
        verbose_name = _('Application')
        verbose_name_plural = _('Applications')
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} - {self.job_title}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES


class InterviewProcess(BaseModel):
    """Interview process template for a job role."""

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='interview_processes',
    )
    job_role_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text=_('Identifier of the job role this process applies to.'),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='interview_processes_created',
    )

    class Meta:
        verbose_name = _('Interview Process')
        verbose_name_plural = _('Interview Processes')
        ordering = ['-created_at']

    def __str__(self):
        return f"Interview process for job role {self.job_role_id}"


class InterviewStage(models.Model):
    """One ordered stage of an interview process."""

    process = models.ForeignKey(
        InterviewProcess,
        on_delete=models.CASCADE,
        related_name='stages',
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    considerations = models.JSONField(
        default=list,
        blank=True,
        help_text=_('Ordered list of {"title", "description"} feedback criteria.'),
    )
    email_template = models.TextField(blank=True, default='')
    order = models.PositiveIntegerField(default=0)
    duration_minutes = models.PositiveIntegerField(
        default=60,
        validators=[MinValueValidator(15)],
    )

    class Meta:
        verbose_name = _('Interview Stage')
        verbose_name_plural = _('Interview Stages')
        ordering = ['process', 'order']

    def __str__(self):
        return f"{self.order}. {self.title}"
