"""
Identity resolver tests: claims to database binding.
"""

import pytest

from api.exceptions import MissingTenantError, UnknownTenantError
from core_identity.resolver import resolve_identity_binding
from core_identity.tokens import Claims
from tenants.repositories import EntityKind, Scope

pytestmark = pytest.mark.django_db(databases='__all__')


class TestResolveIdentityBinding:

    def test_super_admin_binds_to_master(self, acme_tenant):
        claims = Claims(subject_id='1', user_type='super_admin', role='super_admin', tenant_key='acme')

        binding = resolve_identity_binding(claims, {'X-Tenant-ID': 'acme'})

        assert binding.db_alias == 'default'
        assert binding.is_master is True
        assert binding.identity_kind == EntityKind.SUPER_ADMIN
        assert binding.tenant_key is None

    def test_candidate_binds_to_tenant(self, acme_tenant):
        claims = Claims(subject_id='1', user_type='candidate', tenant_key='acme')

        binding = resolve_identity_binding(claims)

        assert binding.db_alias == 'tenant_acme'
        assert binding.user_type == 'candidate'
        assert binding.identity_kind == EntityKind.CANDIDATE
        assert binding.repositories.scope == Scope.TENANT
        assert binding.identity_repository.db_alias == 'tenant_acme'

    @pytest.mark.parametrize('user_type', ['user', None, 'recruiter'])
    def test_anything_else_is_staff(self, acme_tenant, user_type):
        claims = Claims(subject_id='1', user_type=user_type, role='recruiter', tenant_key='acme')

        binding = resolve_identity_binding(claims)

        assert binding.user_type == 'user'
        assert binding.identity_kind == EntityKind.STAFF_USER

    def test_tenant_header_fallback(self, globex_tenant):
        claims = Claims(subject_id='1', user_type='user')

        binding = resolve_identity_binding(claims, {'x-tenant-id': ' GLOBEX '})

        assert binding.tenant_key == 'globex'
        assert binding.db_alias == 'tenant_globex'

    def test_claim_wins_over_header(self, acme_tenant, globex_tenant):
        claims = Claims(subject_id='1', user_type='user', tenant_key='acme')

        binding = resolve_identity_binding(claims, {'X-Tenant-ID': 'globex'})

        assert binding.db_alias == 'tenant_acme'

    def test_missing_tenant(self):
        with pytest.raises(MissingTenantError) as exc_info:
            resolve_identity_binding(Claims(subject_id='1', user_type='candidate'))

        assert exc_info.value.status_code == 400
        assert str(exc_info.value.detail) == 'Tenant is required for this user type'

    def test_blank_tenant_header_is_missing(self, acme_tenant):
        with pytest.raises(MissingTenantError):
            resolve_identity_binding(
                Claims(subject_id='1', user_type='user'),
                headers={'X-Tenant-ID': '   '},
            )

    def test_unknown_tenant(self, acme_tenant):
        with pytest.raises(UnknownTenantError):
            resolve_identity_binding(Claims(subject_id='1', user_type='candidate', tenant_key='initech'))

    def test_suspended_tenant(self, acme_tenant):
        acme_tenant.status = 'suspended'
        acme_tenant.save()

        with pytest.raises(UnknownTenantError):
            resolve_identity_binding(Claims(subject_id='1', user_type='candidate', tenant_key='acme'))
