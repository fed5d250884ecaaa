"""
Tenants Mixins - DRF view mixins that hand views their database binding.

- PublicTenantMixin: public routes; the tenant comes from the header or
  subdomain and the view works on that tenant's repositories
- IdentityBindingMixin: authenticated routes; the binding was resolved by
  ``TenantJWTAuthentication`` and travels on ``request.auth``
"""

import logging

from .context import set_request_context
from .repositories import RepositoryFactory
from .utils import resolve_request_tenant

logger = logging.getLogger(__name__)


class PublicTenantMixin:
    """
    Resolve the request tenant once per request.

    The tenant key is attached to the request (``request.tenant_id``) and to
    the logging context.
    """

    _tenant = None
    _repositories = None

    def get_tenant(self):
        if self._tenant is None:
            tenant = resolve_request_tenant(self.request)
            self._repositories = RepositoryFactory.for_tenant_instance(tenant)
            self._tenant = tenant

            self.request.tenant_id = tenant.key
            set_request_context(tenant_key=tenant.key, db_alias=tenant.db_alias)
        return self._tenant

    def get_repositories(self) -> RepositoryFactory:
        self.get_tenant()
        return self._repositories


class IdentityBindingMixin:
    """Access the binding resolved by the authentication gate."""

    def get_identity(self):
        return self.request.user

    def get_binding(self):
        return self.request.auth.binding

    def get_repositories(self) -> RepositoryFactory:
        return self.request.auth.binding.repositories
