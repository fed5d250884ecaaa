"""
Tenants Signals - keep the tenant alias cache in step with the registry.
"""

import logging

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .connections import invalidate_tenant_cache
from .models import Tenant

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Tenant)
def remember_previous_tenant_key(sender, instance, **kwargs):
    """Remember the stored key so that a renamed tenant drops its old cache entry."""
    instance._previous_key = None
    if instance._state.adding or instance.pk is None:
        return

    instance._previous_key = (
        sender.objects.using(instance._state.db or 'default')
        .filter(pk=instance.pk)
        .values_list('key', flat=True)
        .first()
    )


@receiver(post_save, sender=Tenant)
def invalidate_tenant_cache_on_save(sender, instance, created, **kwargs):
    invalidate_tenant_cache(instance.key)

    previous_key = getattr(instance, '_previous_key', None)
    if previous_key and previous_key != instance.key:
        invalidate_tenant_cache(previous_key)

    logger.debug(f"Tenant cache invalidated for {instance.key}")


@receiver(post_delete, sender=Tenant)
def invalidate_tenant_cache_on_delete(sender, instance, **kwargs):
    invalidate_tenant_cache(instance.key)
