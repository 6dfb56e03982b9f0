"""
Application Store

Persistence boundary for the application aggregate. Interviews and their
feedback are read and written only as part of the owning application, and
every write is a compare-and-swap on `Application.version`.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Tuple, TypeVar

from django.conf import settings
from django.core.exceptions import ValidationError

from api.exceptions import ResourceNotFoundError
from ats.interviews import load_interviews
from ats.models import Application
from core.db.exceptions import ConcurrentModificationError, StaleObjectError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Fields owned by the aggregate; the rest of the row is edited elsewhere.
AGGREGATE_FIELDS = ['interviews', 'interviewer_visibility']


class ApplicationStore(ABC):
    """Interface used by the interview and feedback services."""

    @abstractmethod
    def find_by_id(self, application_id) -> Application:
        """Raises ResourceNotFoundError when absent."""

    @abstractmethod
    def find_application_containing(self, interview_id) -> Application:
        """Raises ResourceNotFoundError when no application holds the interview."""

    @abstractmethod
    def save(self, application: Application) -> None:
        """Raises ConcurrentModificationError when the stored version moved on."""

    @abstractmethod
    def iter_with_interviews(self, exclude_terminal: bool = False) -> Iterable[Application]:
        """Applications that hold at least one interview."""


class DjangoApplicationStore(ApplicationStore):
    """ORM-backed store."""

    def find_by_id(self, application_id) -> Application:
        try:
            return Application.objects.select_related('company').get(pk=application_id)
        except (Application.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundError(
                resource_type='Job application',
                resource_id=application_id,
            )

    def find_application_containing(self, interview_id) -> Application:
        interview_id = str(interview_id)
        candidates = Application.objects.select_related('company').filter(
            interviews__icontains=interview_id,
        )
        for application in candidates:
            if any(interview.id == interview_id for interview in load_interviews(application)):
                return application
        raise ResourceNotFoundError(resource_type='Interview', resource_id=interview_id)

    def save(self, application: Application) -> None:
        application.save_versioned(AGGREGATE_FIELDS)

    def iter_with_interviews(self, exclude_terminal: bool = False) -> Iterable[Application]:
        queryset = Application.objects.select_related('company')
        if exclude_terminal:
            queryset = queryset.exclude(status__in=Application.TERMINAL_STATUSES)
        return (application for application in queryset if application.interviews)


def get_max_retries() -> int:
    return int(getattr(settings, 'INTERVIEW_SAVE_MAX_RETRIES', 3))


def save_with_retry(
    store: ApplicationStore,
    load: Callable[[], Application],
    change: Callable[[Application], T],
) -> Tuple[Application, T]:
    """
    Read-modify-write an application, retrying on version conflicts.

    `load` fetches a fresh copy on every attempt and `change` applies the
    mutation to it (raising domain errors aborts without writing).

    Raises:
        StaleObjectError: When every attempt lost the race.
    """
    attempts = get_max_retries()
    last_error = None

    for attempt in range(1, attempts + 1):
        application = load()
        result = change(application)
        try:
            store.save(application)
            return application, result
        except ConcurrentModificationError as e:
            last_error = e
            logger.info(
                f"Version conflict saving application {application.pk} "
                f"(attempt {attempt}/{attempts}), retrying"
            )

    logger.warning(f"Giving up after {attempts} conflicting writes: {last_error}")
    raise StaleObjectError.from_conflict(last_error, attempts)
