"""
Tenants Database Router - database-per-tenant routing.

This module decides which database a model lives in:
- Master models (tenant registry, super admins, Django auth/contenttypes)
  always use the master alias
- Tenant models use the alias their instance was loaded from, then the
  alias bound to the current request context
- Migrations create master tables on the master database only and tenant
  tables on tenant databases only

Application code queries tenant data through ``tenants.repositories``,
which always passes ``.using(alias)``; the request-context fallback covers
framework-internal queries such as validators and related lookups.
"""

import logging
from typing import Optional, Type

from django.conf import settings

from .connections import get_master_connection
from .context import get_current_db_alias

logger = logging.getLogger(__name__)


# Apps whose every model lives in the master database
MASTER_APP_LABELS = getattr(settings, 'TENANT_MASTER_APP_LABELS', [
    'auth',
    'contenttypes',
    'sessions',
    'admin',
    'tenants',
])

# Individual master models inside otherwise tenant-scoped apps
MASTER_MODELS = getattr(settings, 'TENANT_MASTER_MODELS', [
    'core_identity.superadmin',
])


def is_master_model(app_label: str, model_name: Optional[str] = None) -> bool:
    if app_label in MASTER_APP_LABELS:
        return True
    if model_name:
        return f"{app_label}.{model_name.lower()}" in MASTER_MODELS
    return False


class TenantDatabaseRouter:
    """
    Database router for database-per-tenant isolation.

    This router ensures that:
    1. Master models are always routed to the master database
    2. Tenant models stay on the database of the instance they relate to
    3. Migrations run on the appropriate database
    """

    def _is_master_model(self, model: Type) -> bool:
        return is_master_model(model._meta.app_label, model._meta.model_name)

    def _route(self, model: Type, **hints) -> Optional[str]:
        if self._is_master_model(model):
            return get_master_connection()

        instance = hints.get('instance')
        if instance is not None and instance._state.db:
            return instance._state.db

        alias = get_current_db_alias()
        if alias is None:
            logger.warning(
                f"No tenant database bound for {model._meta.label}; "
                f"Django will fall back to the default connection"
            )
        return alias

    def db_for_read(self, model: Type, **hints) -> Optional[str]:
        return self._route(model, **hints)

    def db_for_write(self, model: Type, **hints) -> Optional[str]:
        return self._route(model, **hints)

    def allow_relation(self, obj1, obj2, **hints) -> Optional[bool]:
        """
        Relations never cross databases; master models only relate to each other.
        """
        is_obj1_master = self._is_master_model(type(obj1))
        is_obj2_master = self._is_master_model(type(obj2))

        if is_obj1_master != is_obj2_master:
            return False

        if obj1._state.db and obj2._state.db:
            return obj1._state.db == obj2._state.db

        return None

    def allow_migrate(self, db: str, app_label: str, model_name: str = None, **hints) -> Optional[bool]:
        master = is_master_model(app_label, model_name)

        if db == get_master_connection():
            return master

        return not master
