"""
Tenants Utils - resolving the tenant of a public (unauthenticated) request.

Public candidate routes (register, login, apply) carry no token, so the
tenant comes from the request itself:
1. The tenant header (``TENANT_HEADER_NAME``, default ``X-Tenant-ID``)
2. The subdomain of the request host under ``TENANT_BASE_DOMAIN``
"""

import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest

from api.exceptions import MissingTenantError

from .connections import normalize_tenant_key, resolve_tenant
from .models import Tenant

logger = logging.getLogger(__name__)


RESERVED_SUBDOMAINS = ('www', 'api', 'admin')


def get_tenant_header_name() -> str:
    return getattr(settings, 'TENANT_HEADER_NAME', 'X-Tenant-ID')


def extract_subdomain(hostname: str) -> Optional[str]:
    """
    Extract the tenant subdomain from hostname.

    Examples:
        acme.recruiter.local -> acme
        app.acme.recruiter.local -> acme
        recruiter.local -> None
    """
    hostname = (hostname or '').split(':')[0].lower()
    base_domain = getattr(settings, 'TENANT_BASE_DOMAIN', '').lower()

    if not base_domain or hostname == base_domain:
        return None

    if hostname.endswith(f'.{base_domain}'):
        subdomain = hostname[:-len(f'.{base_domain}')]
        subdomain = subdomain.split('.')[-1] if '.' in subdomain else subdomain
        if subdomain in RESERVED_SUBDOMAINS:
            return None
        return subdomain

    return None


def get_request_tenant_key(request: HttpRequest) -> Optional[str]:
    """Tenant key from the header, else from the host subdomain."""
    header_value = normalize_tenant_key(request.headers.get(get_tenant_header_name()))
    if header_value:
        return header_value

    return extract_subdomain(request.get_host())


def resolve_request_tenant(request: HttpRequest) -> Tenant:
    """
    Resolve the tenant of a public request.

    Raises:
        MissingTenantError: neither the header nor the host names a tenant.
        UnknownTenantError: the key does not match an active tenant.
    """
    tenant_key = get_request_tenant_key(request)
    if not tenant_key:
        raise MissingTenantError(detail="Tenant is required for this request")

    return resolve_tenant(tenant_key)
