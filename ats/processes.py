"""
Interview Process Templates

CRUD for reusable interview processes. A process belongs to one company
and one job role and owns an ordered list of stages; stage `order`
defaults to the stage's position in the submitted list.
"""

import logging
from typing import Any, Dict, List

from django.core.exceptions import ValidationError
from django.db import transaction

from api.exceptions import InvalidInputError, ResourceNotFoundError
from ats.models import InterviewProcess, InterviewStage

logger = logging.getLogger(__name__)

DURATION_STEP_MINUTES = 15


class InterviewProcessService:

    @staticmethod
    def _queryset():
        return InterviewProcess.objects.select_related('company', 'created_by').prefetch_related('stages')

    def list(self, company=None) -> List[InterviewProcess]:
        queryset = self._queryset()
        if company is not None:
            queryset = queryset.filter(company=company)
        return list(queryset)

    def list_by_job_role(self, job_role_id) -> List[InterviewProcess]:
        return list(self._queryset().filter(job_role_id=str(job_role_id)))

    def get(self, process_id) -> InterviewProcess:
        try:
            return self._queryset().get(pk=process_id)
        except (InterviewProcess.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundError(resource_type='Interview process', resource_id=process_id)

    @transaction.atomic
    def create(self, data: Dict[str, Any], company, created_by=None) -> InterviewProcess:
        if not data.get('job_role_id'):
            raise InvalidInputError("job_role_id is required", field_name='job_role_id')

        process = InterviewProcess.objects.create(
            company=company,
            job_role_id=str(data['job_role_id']),
            created_by=created_by,
        )
        self._replace_stages(process, data.get('stages') or [])
        logger.info(f"Interview process {process.pk} created for job role {process.job_role_id}")
        return self.get(process.pk)

    @transaction.atomic
    def update(self, process_id, data: Dict[str, Any]) -> InterviewProcess:
        process = self.get(process_id)

        if data.get('job_role_id'):
            process.job_role_id = str(data['job_role_id'])
            process.save(update_fields=['job_role_id', 'updated_at'])
        if 'stages' in data:
            self._replace_stages(process, data['stages'] or [])

        return self.get(process.pk)

    def delete(self, process_id) -> None:
        process = self.get(process_id)
        process.delete()
        logger.info(f"Interview process {process_id} deleted")

    def _replace_stages(self, process: InterviewProcess, stages: List[Dict[str, Any]]) -> None:
        process.stages.all().delete()

        objects = []
        for index, stage in enumerate(stages):
            if not stage.get('title'):
                raise InvalidInputError(f"Stage {index + 1} needs a title", field_name='stages')

            duration = stage.get('duration_minutes') or 60
            if duration < DURATION_STEP_MINUTES or duration % DURATION_STEP_MINUTES:
                raise InvalidInputError(
                    f"Stage duration must be a positive multiple of {DURATION_STEP_MINUTES} minutes",
                    field_name='stages',
                )

            order = stage.get('order')
            objects.append(InterviewStage(
                process=process,
                title=stage['title'],
                description=stage.get('description') or '',
                considerations=[
                    {'title': c.get('title', ''), 'description': c.get('description', '')}
                    for c in stage.get('considerations') or []
                ],
                email_template=stage.get('email_template') or '',
                order=index if order is None else order,
                duration_minutes=duration,
            ))

        InterviewStage.objects.bulk_create(objects)
