"""
Tenants Repositories - capability-indexed data access bound to one database.

A request resolves its database binding once, then asks a
``RepositoryFactory`` for the repository of each entity kind it needs:

    repositories = RepositoryFactory.for_tenant('acme')
    job = repositories.jobs.get_or_none(pk=job_id)

Every query issued through a ``Repository`` carries ``.using(alias)``, so
tenant data can only be read from or written to the bound database.
Asking a tenant factory for a master-only kind (or the reverse) raises
``ImproperlyConfigured``.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from django.apps import apps
from django.core.exceptions import ImproperlyConfigured, ObjectDoesNotExist, ValidationError
from django.utils import timezone

from .connections import ensure_tenant_connection, get_master_connection, get_tenant_db

logger = logging.getLogger(__name__)


class Scope(str, Enum):
    MASTER = 'master'
    TENANT = 'tenant'


class EntityKind(str, Enum):
    SUPER_ADMIN = 'super_admin'
    STAFF_USER = 'staff_user'
    CANDIDATE = 'candidate'
    JOB_DESCRIPTION = 'job_description'
    APPLICATION = 'application'


ENTITY_REGISTRY: Dict[EntityKind, Tuple[str, Scope]] = {
    EntityKind.SUPER_ADMIN: ('core_identity.SuperAdmin', Scope.MASTER),
    EntityKind.STAFF_USER: ('core_identity.StaffUser', Scope.TENANT),
    EntityKind.CANDIDATE: ('ats.Candidate', Scope.TENANT),
    EntityKind.JOB_DESCRIPTION: ('ats.JobDescription', Scope.TENANT),
    EntityKind.APPLICATION: ('ats.Application', Scope.TENANT),
}


class Repository:
    """Data access for one model on one database alias."""

    def __init__(self, model, db_alias: str, kind: EntityKind):
        self.model = model
        self.db_alias = db_alias
        self.kind = kind

    def __repr__(self):
        return f"<Repository {self.kind.value}@{self.db_alias}>"

    def all(self):
        return self.model._default_manager.using(self.db_alias)

    def filter(self, *args, **kwargs):
        return self.all().filter(*args, **kwargs)

    def exists(self, *args, **kwargs) -> bool:
        return self.filter(*args, **kwargs).exists()

    def get(self, *args, **kwargs):
        return self.all().get(*args, **kwargs)

    def get_or_none(self, *args, **kwargs):
        """``get`` that answers None for a missing row or a malformed key."""
        try:
            return self.get(*args, **kwargs)
        except (ObjectDoesNotExist, ValidationError, ValueError):
            return None

    def create(self, **kwargs):
        return self.all().create(**kwargs)

    def update_fields(self, pk, **fields) -> int:
        """Field-level update of one row; returns the number of rows changed."""
        if 'updated_at' not in fields and any(f.name == 'updated_at' for f in self.model._meta.fields):
            fields['updated_at'] = timezone.now()
        return self.all().filter(pk=pk).update(**fields)


class RepositoryFactory:
    """
    Per-request factory of repositories bound to one database.

    Repositories are created on first use and cached for the lifetime of the
    factory.
    """

    def __init__(self, db_alias: str, scope: Scope, tenant_key: Optional[str] = None):
        self.db_alias = db_alias
        self.scope = scope
        self.tenant_key = tenant_key
        self._repositories: Dict[EntityKind, Repository] = {}

    def __repr__(self):
        return f"<RepositoryFactory {self.scope.value}@{self.db_alias}>"

    @classmethod
    def for_master(cls) -> 'RepositoryFactory':
        return cls(get_master_connection(), Scope.MASTER)

    @classmethod
    def for_tenant(cls, tenant_key: str) -> 'RepositoryFactory':
        return cls(get_tenant_db(tenant_key), Scope.TENANT, tenant_key=tenant_key)

    @classmethod
    def for_tenant_instance(cls, tenant) -> 'RepositoryFactory':
        return cls(ensure_tenant_connection(tenant), Scope.TENANT, tenant_key=tenant.key)

    def get(self, kind: EntityKind) -> Repository:
        kind = EntityKind(kind)
        repository = self._repositories.get(kind)
        if repository is not None:
            return repository

        model_label, scope = ENTITY_REGISTRY[kind]
        if scope != self.scope:
            raise ImproperlyConfigured(
                f"{kind.value} lives in the {scope.value} database; "
                f"this factory is bound to the {self.scope.value} database {self.db_alias}"
            )

        repository = Repository(apps.get_model(model_label), self.db_alias, kind)
        self._repositories[kind] = repository
        return repository

    @property
    def super_admins(self) -> Repository:
        return self.get(EntityKind.SUPER_ADMIN)

    @property
    def staff_users(self) -> Repository:
        return self.get(EntityKind.STAFF_USER)

    @property
    def candidates(self) -> Repository:
        return self.get(EntityKind.CANDIDATE)

    @property
    def jobs(self) -> Repository:
        return self.get(EntityKind.JOB_DESCRIPTION)

    @property
    def applications(self) -> Repository:
        return self.get(EntityKind.APPLICATION)
