"""
Tenants Middleware - request-scoped tenant context.

Tenant resolution itself happens in the authentication gate
(``core_identity.authentication``) for protected routes and in
``tenants.mixins.PublicTenantMixin`` for public routes. This middleware
guarantees that whatever they bound is gone once the response leaves, so a
worker thread never carries one request's tenant into the next.
"""

import logging

from .context import clear_tenant_context

logger = logging.getLogger(__name__)


class TenantContextMiddleware:
    """Clear the tenant context around every request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        clear_tenant_context()
        try:
            return self.get_response(request)
        finally:
            clear_tenant_context()
