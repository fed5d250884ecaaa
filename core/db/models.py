"""
Base Models for the recruiter backend

This module provides abstract base model classes:
- TimestampedModel: UUID primary key plus created/updated timestamps
- UndeletableQuerySet: QuerySet refusing bulk delete
- AppendOnlyQuerySet: QuerySet refusing bulk update and delete

These models standardize data patterns across the master and tenant
databases.
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.db.exceptions import ImmutableRecordError


# =============================================================================
# BASE MODEL
# =============================================================================

class TimestampedModel(models.Model):
    """
    Abstract base model with UUID primary key and timestamps.

    UUID keys are safe to expose in tokens and URLs and stay unique across
    tenant databases.
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


# =============================================================================
# APPEND-ONLY RECORDS
# =============================================================================

class UndeletableQuerySet(models.QuerySet):
    """QuerySet for records that are never hard-deleted."""

    def delete(self):
        raise ImmutableRecordError(self.model._meta.label, 'delete')


class AppendOnlyQuerySet(UndeletableQuerySet):
    """QuerySet for audit-style records: inserts only."""

    def update(self, **kwargs):
        raise ImmutableRecordError(self.model._meta.label, 'update')
