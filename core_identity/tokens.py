"""
Core Identity Tokens - signed identity claims.

Tokens carry ``{id, type, tenant?, role?}`` plus ``iat``/``exp`` and are
signed with the ``SIMPLE_JWT`` settings (HS256 by default) through
simplejwt's ``TokenBackend``.

Usage:
    token = issue_identity_token(candidate, tenant_key='acme', user_type='candidate')
    claims = decode_claims(token)
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional

from django.utils import timezone
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.utils import datetime_to_epoch

from api.exceptions import InvalidTokenError

from .models import IdentityType

logger = logging.getLogger(__name__)


SUBJECT_CLAIM = 'id'
TYPE_CLAIM = 'type'
ROLE_CLAIM = 'role'
TENANT_CLAIM = 'tenant'


@dataclass(frozen=True)
class Claims:
    """Decoded identity token payload."""

    subject_id: str
    user_type: Optional[str] = None
    role: Optional[str] = None
    tenant_key: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'Claims':
        subject_id = payload.get(SUBJECT_CLAIM)
        if not subject_id:
            raise InvalidTokenError()

        return cls(
            subject_id=str(subject_id),
            user_type=payload.get(TYPE_CLAIM),
            role=payload.get(ROLE_CLAIM),
            tenant_key=payload.get(TENANT_CLAIM) or None,
            payload=dict(payload),
        )

    @property
    def is_super_admin(self) -> bool:
        return self.role == IdentityType.SUPER_ADMIN

    def as_payload(self) -> Dict[str, Any]:
        payload = {SUBJECT_CLAIM: self.subject_id}
        if self.user_type:
            payload[TYPE_CLAIM] = self.user_type
        if self.role:
            payload[ROLE_CLAIM] = self.role
        if self.tenant_key:
            payload[TENANT_CLAIM] = self.tenant_key
        return payload


def get_token_backend() -> TokenBackend:
    """Backend built from the current ``SIMPLE_JWT`` settings."""
    return TokenBackend(
        algorithm=api_settings.ALGORITHM,
        signing_key=api_settings.SIGNING_KEY,
        verifying_key=api_settings.VERIFYING_KEY,
        audience=api_settings.AUDIENCE,
        issuer=api_settings.ISSUER,
        jwk_url=api_settings.JWK_URL,
        leeway=api_settings.LEEWAY,
    )


def encode_claims(claims: Claims, lifetime: Optional[timedelta] = None) -> str:
    issued_at = timezone.now()
    lifetime = lifetime if lifetime is not None else api_settings.ACCESS_TOKEN_LIFETIME

    payload = {
        **claims.as_payload(),
        'iat': datetime_to_epoch(issued_at),
        'exp': datetime_to_epoch(issued_at + lifetime),
    }
    return get_token_backend().encode(payload)


def decode_claims(token: str) -> Claims:
    """
    Verify signature and expiry.

    Raises:
        InvalidTokenError: for any malformed, tampered or expired token.
    """
    try:
        payload = get_token_backend().decode(token, verify=True)
    except TokenBackendError as e:
        logger.info(f"Rejected identity token: {e}")
        raise InvalidTokenError() from e

    return Claims.from_payload(payload)


def issue_identity_token(identity, tenant_key: Optional[str], user_type: str,
                         lifetime: Optional[timedelta] = None) -> str:
    """
    Token for a freshly authenticated identity.

    Candidates get ``{id, tenant, type}``; staff and super admins also carry
    their ``role``.
    """
    role = None
    if user_type != IdentityType.CANDIDATE:
        role = getattr(identity, 'role', None)

    claims = Claims(
        subject_id=str(identity.pk),
        user_type=str(user_type),
        role=str(role) if role else None,
        tenant_key=tenant_key,
    )
    return encode_claims(claims, lifetime=lifetime)
