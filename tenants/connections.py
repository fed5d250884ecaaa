"""
Tenants Connections - Registry lookups and lazy database registration.

This module is the only place that turns a tenant key into a database alias:
- get_master_connection(): alias of the master database
- resolve_tenant(key): active Tenant for a key (cached)
- get_tenant_db(key): alias of the tenant's database, registered on demand
- register_tenant_connection(): adds an alias to ``django.db.connections``

Tenant lookups are cached in the Django cache under ``tenant:key:<key>``
for ``TENANT_CACHE_TIMEOUT`` seconds; ``tenants.signals`` invalidates the
entry whenever the Tenant row changes.
"""

import copy
import logging
import threading
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.cache import cache
from django.db import connections

from api.exceptions import UnknownTenantError

from .models import Tenant

logger = logging.getLogger(__name__)


MASTER_DB_ALIAS = 'default'

TENANT_CACHE_PREFIX = 'tenant:key:'
TENANT_CACHE_TIMEOUT = getattr(settings, 'TENANT_CACHE_TIMEOUT', 300)
_NOT_FOUND = '__NOT_FOUND__'

_registration_lock = threading.Lock()


def get_master_connection() -> str:
    return MASTER_DB_ALIAS


def normalize_tenant_key(key: Optional[str]) -> str:
    return (key or '').strip().lower()


def tenant_cache_key(key: str) -> str:
    return f"{TENANT_CACHE_PREFIX}{normalize_tenant_key(key)}"


def invalidate_tenant_cache(key: str) -> None:
    cache.delete(tenant_cache_key(key))


# =============================================================================
# CONNECTION REGISTRATION
# =============================================================================

def register_tenant_connection(db_alias: str, db_name: str) -> bool:
    """
    Make ``db_alias`` usable through ``django.db.connections``.

    The tenant connection copies the master connection parameters and swaps
    the database NAME. Aliases that are already configured are left alone.

    Returns:
        True if the alias was added by this call.
    """
    if db_alias in connections.settings:
        return False

    with _registration_lock:
        if db_alias in connections.settings:
            return False

        config = copy.deepcopy(connections.settings[MASTER_DB_ALIAS])
        config['NAME'] = db_name
        config['TEST'] = {**config.get('TEST', {}), 'NAME': None}
        connections.settings[db_alias] = config

    logger.info(f"Registered tenant database connection {db_alias} -> {db_name}")
    return True


# =============================================================================
# TENANT LOOKUP
# =============================================================================

def _serialize_tenant_for_cache(tenant: Tenant) -> Dict[str, Any]:
    return {
        'id': tenant.pk,
        'key': tenant.key,
        'company_name': tenant.company_name,
        'db_alias': tenant.db_alias,
        'db_name': tenant.db_name,
        'status': tenant.status,
        'branding': tenant.branding,
    }


def _deserialize_tenant_from_cache(data: Dict[str, Any]) -> Tenant:
    tenant = Tenant(**data)
    tenant._state.adding = False
    tenant._state.db = MASTER_DB_ALIAS
    return tenant


def _lookup_tenant(key: str) -> Optional[Tenant]:
    return (
        Tenant.objects.using(MASTER_DB_ALIAS)
        .filter(key=key, status=Tenant.TenantStatus.ACTIVE)
        .first()
    )


def resolve_tenant(key: Optional[str]) -> Tenant:
    """
    Return the active tenant for ``key``.

    Raises:
        UnknownTenantError: no active tenant has this key.
    """
    key = normalize_tenant_key(key)
    if not key:
        raise UnknownTenantError(tenant_key=key)

    cache_key = tenant_cache_key(key)
    cached_data = cache.get(cache_key)
    if cached_data == _NOT_FOUND:
        raise UnknownTenantError(tenant_key=key)
    if isinstance(cached_data, dict):
        return _deserialize_tenant_from_cache(cached_data)

    tenant = _lookup_tenant(key)
    if tenant is None:
        cache.set(cache_key, _NOT_FOUND, TENANT_CACHE_TIMEOUT // 2)
        logger.warning(f"Tenant lookup failed for key '{key}'")
        raise UnknownTenantError(tenant_key=key)

    cache.set(cache_key, _serialize_tenant_for_cache(tenant), TENANT_CACHE_TIMEOUT)
    return tenant


def ensure_tenant_connection(tenant: Tenant) -> str:
    register_tenant_connection(tenant.db_alias, tenant.db_name)
    return tenant.db_alias


def get_tenant_db(key: Optional[str]) -> str:
    """
    Resolve a tenant key to a ready-to-use database alias.

    Raises:
        UnknownTenantError: no active tenant has this key.
    """
    return ensure_tenant_connection(resolve_tenant(key))
