"""
Core Identity Authentication - the request gate.

``TenantJWTAuthentication`` chains, for every protected request:
bearer header -> token codec -> tenant/model resolver -> identity loader.

On success DRF sees ``request.user`` = the identity and ``request.auth`` =
``RequestIdentity`` (claims + database binding). The tenant key and the
identity type are attached to the request and to the logging context.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from api.exceptions import (
    AccountInactiveError,
    AuthenticationFailedError,
    IdentityNotFoundError,
    InvalidTokenError,
    RecruiterAPIException,
    UnknownTenantError,
)
from tenants.context import set_request_context
from tenants.repositories import Repository, RepositoryFactory

from .resolver import IdentityBinding, resolve_identity_binding
from .tokens import Claims, decode_claims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestIdentity:
    """What ``request.auth`` holds for an authenticated request."""

    claims: Claims
    binding: IdentityBinding

    @property
    def tenant_key(self) -> Optional[str]:
        return self.binding.tenant_key

    @property
    def user_type(self) -> str:
        return self.binding.user_type

    @property
    def repositories(self) -> RepositoryFactory:
        return self.binding.repositories


def load_identity(repository: Repository, subject_id: str):
    """
    Load the identity named by a token, credentials deferred.

    Raises:
        IdentityNotFoundError: no such identity in the bound database.
    """
    queryset = repository.all()
    if hasattr(queryset, 'without_credentials'):
        queryset = queryset.without_credentials()

    try:
        identity = queryset.filter(pk=subject_id).first()
    except (DjangoValidationError, ValueError, TypeError):
        identity = None

    if identity is None:
        raise IdentityNotFoundError()
    return identity


def ensure_identity_active(identity) -> None:
    """
    Raises:
        AccountInactiveError: the identity (or candidate account) is disabled.
    """
    if not identity.account_is_active:
        raise AccountInactiveError()


class TenantJWTAuthentication(BaseAuthentication):
    """
    Bearer-token authentication bound to the token's tenant database.

    A request without a bearer header is left anonymous, and the permission
    layer answers 401 "Token missing". Any failure while
    resolving the tenant database answers 401 "Authentication failed",
    except a missing tenant key, which is the caller's fault (400).
    """

    keyword = 'Bearer'

    def get_raw_token(self, request) -> Optional[str]:
        header = get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None

        if len(header) != 2:
            raise InvalidTokenError()

        try:
            return header[1].decode()
        except UnicodeError:
            raise InvalidTokenError()

    def authenticate(self, request):
        raw_token = self.get_raw_token(request)
        if raw_token is None:
            return None

        claims = decode_claims(raw_token)

        try:
            binding = resolve_identity_binding(claims, request.headers)
            identity = load_identity(binding.identity_repository, claims.subject_id)
        except UnknownTenantError as e:
            logger.warning(f"Token references unknown tenant '{e.tenant_key}'")
            raise AuthenticationFailedError() from e
        except RecruiterAPIException:
            raise
        except Exception as e:
            logger.exception(f"Authentication gate failure: {e}")
            raise AuthenticationFailedError() from e

        ensure_identity_active(identity)

        request.tenant_id = binding.tenant_key
        request.user_type = binding.user_type
        set_request_context(
            tenant_key=binding.tenant_key,
            db_alias=binding.db_alias,
            user_type=binding.user_type,
            identity_id=str(identity.pk),
        )

        return identity, RequestIdentity(claims=claims, binding=binding)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
