"""
Tenants Logging - Tenant-aware logging filters, formatters and audit trail.

This module provides logging components that include request context:
- TenantContextFilter: Adds tenant key, identity type and id to log records
- TenantFormatter: Formatter with a ``[tenant:<key>]`` prefix
- TenantAuditLogger: Security audit events under ``recruiter.audit``

Usage in settings.py:
    LOGGING = {
        'filters': {
            'tenant_context': {
                '()': 'tenants.logging.TenantContextFilter',
            },
        },
        'handlers': {
            'console': {
                'filters': ['tenant_context'],
                ...
            },
        },
    }
"""

import logging
from typing import Optional

from .context import get_request_context

MASTER_LABEL = 'master'
PUBLIC_LABEL = 'public'


def _tenant_label() -> str:
    ctx = get_request_context()
    if ctx.tenant_key:
        return ctx.tenant_key
    if ctx.is_bound:
        return MASTER_LABEL
    return PUBLIC_LABEL


class TenantContextFilter(logging.Filter):
    """
    Logging filter that adds request context to log records.

    Adds the following attributes to log records:
    - tenant: Tenant key, 'master' for super-admin requests or 'public'
    - tenant_db: Database alias or None
    - user_type: Identity type of the caller or None
    - identity_id: Identity id of the caller or None
    """

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_request_context()

        record.tenant = _tenant_label()
        record.tenant_db = ctx.db_alias
        record.user_type = ctx.user_type
        record.identity_id = ctx.identity_id

        return True


class TenantFormatter(logging.Formatter):
    """
    Custom formatter that includes tenant context.

    Default format:
        [{asctime}] [{levelname}] [tenant:{tenant}] {name}: {message}
    """

    default_format = '[{asctime}] [{levelname}] [tenant:{tenant}] {name}: {message}'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, style: str = '{'):
        if fmt is None:
            fmt = self.default_format
        super().__init__(fmt, datefmt, style)

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'tenant'):
            record.tenant = _tenant_label()

        return super().format(record)


class TenantAuditLogger:
    """
    Specialized logger for security audit events.

    Every event carries the tenant key and the acting identity so that the
    audit sink can be shipped separately from application logs.
    """

    def __init__(self, name: str = 'recruiter.audit'):
        self.logger = logging.getLogger(name)

    def log_action(
        self,
        action: str,
        resource_type: str,
        resource_id: str = '',
        identity=None,
        details: dict = None,
        level: int = logging.INFO
    ):
        """
        Log an audit event.

        Args:
            action: Action performed (login_failed, status_change, ...)
            resource_type: Type of resource affected
            resource_id: ID of affected resource
            identity: Identity who performed the action (optional)
            details: Additional details dict
            level: Log level (default INFO)
        """
        ctx = get_request_context()
        email = getattr(identity, 'email', None) if identity is not None else None

        extra = {
            'audit_tenant': ctx.tenant_key,
            'action': action,
            'resource_type': resource_type,
            'resource_id': resource_id,
            'actor_id': str(identity.pk) if identity is not None else None,
            'actor_email': email,
            'details': details or {},
        }

        message = f"[AUDIT] {action} on {resource_type}"
        if resource_id:
            message += f" ({resource_id})"
        if identity is not None:
            message += f" by {email or identity.pk}"

        self.logger.log(level, message, extra=extra)

    def log_login(self, identity, success: bool = True, ip_address: str = None):
        action = 'login_success' if success else 'login_failed'
        self.log_action(
            action=action,
            resource_type='auth',
            identity=identity,
            details={'ip_address': ip_address},
            level=logging.INFO if success else logging.WARNING,
        )

    def log_lockout(self, identity, lock_until):
        self.log_action(
            action='account_locked',
            resource_type='auth',
            identity=identity,
            details={'lock_until': lock_until.isoformat() if lock_until else None},
            level=logging.WARNING,
        )

    def log_status_change(self, application, old_status: str, new_status: str, identity=None):
        self.log_action(
            action='status_change',
            resource_type='application',
            resource_id=str(application.pk),
            identity=identity,
            details={'old_status': old_status, 'new_status': new_status},
        )

    def log_document_upload(self, candidate, document_type: str, public_id: str):
        self.log_action(
            action='document_upload',
            resource_type='candidate_document',
            resource_id=public_id,
            identity=candidate,
            details={'document_type': document_type},
        )


# Module-level audit logger instance
audit_logger = TenantAuditLogger()
