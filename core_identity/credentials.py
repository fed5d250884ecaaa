"""
Core Identity Credentials - password login with account lockout.

The check order is fixed:
1. unknown email -> InvalidCredentialsError (401)
2. locked account -> AccountLockedError (423); the password is not checked
3. inactive account -> AccountInactiveError (401, "Account is deactivated")
4. wrong password -> count the failure, InvalidCredentialsError (401)
5. success -> reset the failure count, stamp ``last_login``
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist

from api.exceptions import AccountInactiveError, AccountLockedError, InvalidCredentialsError
from tenants.logging import audit_logger
from tenants.repositories import Repository

from .models import normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockoutPolicy:
    max_attempts: int = 5
    lock_duration: timedelta = timedelta(hours=2)


def get_lockout_policy() -> LockoutPolicy:
    config = getattr(settings, 'ACCOUNT_LOCKOUT', {}) or {}
    defaults = LockoutPolicy()
    return LockoutPolicy(
        max_attempts=int(config.get('MAX_ATTEMPTS', defaults.max_attempts)),
        lock_duration=config.get('LOCK_DURATION', defaults.lock_duration),
    )


def find_identity_for_login(repository: Repository, email: str):
    return repository.all().for_login().filter(email=normalize_email(email)).first()


def authenticate_credentials(repository: Repository, email: str, password: str,
                             policy: LockoutPolicy = None, ip_address: str = None):
    """
    Authenticate ``email``/``password`` against the identities of ``repository``.

    Returns:
        The authenticated identity.

    Raises:
        InvalidCredentialsError, AccountLockedError, AccountInactiveError
    """
    policy = policy or get_lockout_policy()

    identity = find_identity_for_login(repository, email)
    if identity is None:
        raise InvalidCredentialsError()

    try:
        credentials = identity.credentials
    except ObjectDoesNotExist:
        logger.warning(f"{repository.kind.value} {identity.pk} has no login account")
        raise InvalidCredentialsError()

    if credentials.is_locked:
        audit_logger.log_login(identity, success=False, ip_address=ip_address)
        raise AccountLockedError(lock_until=credentials.lock_until)

    if not identity.account_is_active:
        raise AccountInactiveError(detail="Account is deactivated")

    if not credentials.check_password(password):
        locked_now = credentials.register_failed_login(policy)
        audit_logger.log_login(identity, success=False, ip_address=ip_address)
        if locked_now:
            audit_logger.log_lockout(identity, credentials.lock_until)
        raise InvalidCredentialsError()

    credentials.register_successful_login()
    audit_logger.log_login(identity, success=True, ip_address=ip_address)
    return identity
