"""
Tenants Context - Per-request tenant context management.

This module carries the resolved tenant binding for the current unit of work:
- HTTP requests (set by the authentication gate or public tenant lookup,
  cleared by TenantContextMiddleware)
- Celery tasks and management commands (via ``tenant_context``)
- Logging filters that stamp records with the tenant key

The context lives in a ContextVar so that nothing leaks between requests
served by the same worker thread.

Usage:
    from tenants.context import tenant_context, get_current_tenant_key

    with tenant_context('acme', 'tenant_acme'):
        do_something()

    tenant_key = get_current_tenant_key()
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Snapshot of the tenant binding for the current unit of work."""

    tenant_key: Optional[str] = None
    db_alias: Optional[str] = None
    user_type: Optional[str] = None
    identity_id: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return self.db_alias is not None


_EMPTY_CONTEXT = RequestContext()

_request_context_var: ContextVar[Optional[RequestContext]] = ContextVar(
    'request_context', default=None
)


def get_request_context() -> RequestContext:
    """Return the current context, or an empty one outside any binding."""
    return _request_context_var.get() or _EMPTY_CONTEXT


def get_current_tenant_key() -> Optional[str]:
    return get_request_context().tenant_key


def get_current_db_alias() -> Optional[str]:
    return get_request_context().db_alias


def set_request_context(**fields) -> RequestContext:
    """
    Merge ``fields`` into the current context.

    Args:
        **fields: Any of tenant_key, db_alias, user_type, identity_id.

    Returns:
        The new context.
    """
    ctx = replace(get_request_context(), **fields)
    _request_context_var.set(ctx)
    return ctx


def clear_tenant_context() -> None:
    """
    Clear the context.

    Call this after processing a request or task to prevent context leaks.
    """
    _request_context_var.set(None)


@contextmanager
def tenant_context(tenant_key: Optional[str], db_alias: str, **fields):
    """
    Context manager for executing code bound to one tenant database.

    Supports nesting; the previous binding is restored on exit.

    Example:
        with tenant_context(tenant.key, tenant.db_alias):
            send_reminders()
    """
    token = _request_context_var.set(
        replace(_EMPTY_CONTEXT, tenant_key=tenant_key, db_alias=db_alias, **fields)
    )
    try:
        logger.debug(f"Entered tenant context: {tenant_key or db_alias}")
        yield get_request_context()
    finally:
        _request_context_var.reset(token)
        logger.debug("Exited tenant context")
