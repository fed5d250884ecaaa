"""
Core Identity Resolver - which database and which identity model a token
belongs to.

Resolution order, first match wins:
1. ``role == super_admin``: master database, SuperAdmin. Tenant claims and
   tenant headers are ignored.
2. Tenant key from the ``tenant`` claim, else from the tenant header.
   Neither present: MissingTenantError.
3. Tenant key to database alias via ``tenants.connections``.
4. ``type == candidate``: Candidate; anything else: StaffUser.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from django.conf import settings

from api.exceptions import MissingTenantError
from tenants.connections import get_master_connection, get_tenant_db
from tenants.repositories import EntityKind, Repository, RepositoryFactory, Scope

from .models import IdentityType
from .tokens import Claims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityBinding:
    """Database binding of one authenticated request."""

    db_alias: str
    user_type: str
    identity_kind: EntityKind
    repositories: RepositoryFactory
    tenant_key: Optional[str] = None

    @property
    def identity_repository(self) -> Repository:
        return self.repositories.get(self.identity_kind)

    @property
    def is_master(self) -> bool:
        return self.repositories.scope == Scope.MASTER


def _header_value(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None

    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
    return value


def resolve_identity_binding(claims: Claims, headers: Optional[Mapping[str, str]] = None) -> IdentityBinding:
    """
    Bind decoded claims to a database and an identity repository.

    Raises:
        MissingTenantError: tenant-scoped identity without a tenant key.
        UnknownTenantError: tenant key without an active tenant.
    """
    if claims.is_super_admin:
        return IdentityBinding(
            db_alias=get_master_connection(),
            user_type=IdentityType.SUPER_ADMIN,
            identity_kind=EntityKind.SUPER_ADMIN,
            repositories=RepositoryFactory.for_master(),
        )

    header_name = getattr(settings, 'TENANT_HEADER_NAME', 'X-Tenant-ID')
    tenant_key = (claims.tenant_key or _header_value(headers, header_name) or '').strip().lower()
    if not tenant_key:
        raise MissingTenantError()

    db_alias = get_tenant_db(tenant_key)

    if claims.user_type == IdentityType.CANDIDATE:
        user_type, identity_kind = IdentityType.CANDIDATE, EntityKind.CANDIDATE
    else:
        user_type, identity_kind = IdentityType.USER, EntityKind.STAFF_USER

    return IdentityBinding(
        db_alias=db_alias,
        user_type=user_type,
        identity_kind=identity_kind,
        repositories=RepositoryFactory(db_alias, Scope.TENANT, tenant_key=tenant_key),
        tenant_key=tenant_key,
    )
