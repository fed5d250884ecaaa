"""
Identity token tests: signing, claims and rejection of bad tokens.
"""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from rest_framework_simplejwt.settings import api_settings

from api.exceptions import InvalidTokenError
from core_identity.models import IdentityType
from core_identity.tokens import Claims, decode_claims, encode_claims, issue_identity_token


def make_identity(pk='8c1f6f0e-1111-4a2b-9c3d-000000000001', role=None):
    return SimpleNamespace(pk=pk, role=role)


class TestIssueIdentityToken:

    def test_candidate_token_has_no_role(self):
        token = issue_identity_token(make_identity(role='recruiter'), 'acme', IdentityType.CANDIDATE)

        claims = decode_claims(token)
        assert claims.subject_id == '8c1f6f0e-1111-4a2b-9c3d-000000000001'
        assert claims.user_type == 'candidate'
        assert claims.tenant_key == 'acme'
        assert claims.role is None

    def test_staff_token_carries_role(self):
        token = issue_identity_token(make_identity(role='hiring_manager'), 'acme', IdentityType.USER)

        claims = decode_claims(token)
        assert claims.user_type == 'user'
        assert claims.role == 'hiring_manager'
        assert claims.is_super_admin is False

    def test_super_admin_token_has_no_tenant(self):
        token = issue_identity_token(make_identity(role='super_admin'), None, IdentityType.SUPER_ADMIN)

        claims = decode_claims(token)
        assert claims.tenant_key is None
        assert claims.is_super_admin is True
        assert 'tenant' not in claims.payload

    def test_payload_has_issue_and_expiry(self):
        token = issue_identity_token(make_identity(), 'acme', IdentityType.CANDIDATE)

        payload = decode_claims(token).payload
        assert payload['exp'] - payload['iat'] == int(api_settings.ACCESS_TOKEN_LIFETIME.total_seconds())


class TestDecodeClaims:

    def test_tampered_token(self):
        token = issue_identity_token(make_identity(), 'acme', IdentityType.CANDIDATE)
        header, payload, signature = token.split('.')
        tampered = '.'.join([header, payload, signature[::-1]])

        with pytest.raises(InvalidTokenError):
            decode_claims(tampered)

    def test_expired_token(self):
        token = encode_claims(Claims(subject_id='abc', user_type='candidate', tenant_key='acme'),
                              lifetime=timedelta(seconds=-5))

        with pytest.raises(InvalidTokenError):
            decode_claims(token)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_claims('not-a-token')

    def test_token_without_subject(self):
        token = encode_claims(Claims(subject_id='', user_type='candidate', tenant_key='acme'))

        with pytest.raises(InvalidTokenError):
            decode_claims(token)
