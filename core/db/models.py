"""
Base Models for the Careers Platform

This module provides abstract base model classes:
- BaseModel: UUID primary key and timestamps
- VersionedModel: Compare-and-swap saves guarded by a version counter
"""

import uuid

from django.db import models
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.db.exceptions import ConcurrentModificationError


# =============================================================================
# BASE MODEL
# =============================================================================

class BaseModel(models.Model):
    """
    Abstract base model with UUID primary key and timestamps.

    Example:
        class MyModel(BaseModel):
            name = models.CharField(max_length=100)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name=_('ID')
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        verbose_name=_('Created at')
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name=_('Updated at')
    )

    class Meta:
        abstract = True
        ordering = ['-created_at']
        get_latest_by = 'created_at'

    def __str__(self):
        return str(self.id)


# =============================================================================
# OPTIMISTIC LOCKING
# =============================================================================

class VersionedModel(BaseModel):
    """
    Abstract model whose writes are guarded by a version counter.

    `save_versioned()` issues a single conditional UPDATE
    (`WHERE pk = ? AND version = ?`) that increments the version. When no
    row matches, another writer got there first and
    ConcurrentModificationError is raised; nothing is written.
    """

    version = models.PositiveIntegerField(
        default=1,
        verbose_name=_('Version'),
        help_text=_('Record version for optimistic locking.')
    )

    class Meta:
        abstract = True

    def save_versioned(self, update_fields):
        """
        Persist `update_fields` only if the stored version still matches.

        Args:
            update_fields: Names of the concrete fields to write.

        Raises:
            ConcurrentModificationError: If the record was modified by another
                process since it was read.
        """
        model_class = self.__class__
        expected_version = self.version
        now = timezone.now()

        values = {name: getattr(self, name) for name in update_fields}
        values['updated_at'] = now
        values['version'] = F('version') + 1

        updated = model_class.objects.filter(
            pk=self.pk,
            version=expected_version,
        ).update(**values)

        if not updated:
            actual_version = model_class.objects.filter(pk=self.pk).values_list(
                'version', flat=True
            ).first()
            raise ConcurrentModificationError(
                model_name=model_class.__name__,
                object_id=self.pk,
                expected_version=expected_version,
                actual_version=actual_version,
            )

        self.version = expected_version + 1
        self.updated_at = now
