"""
provision_tenant management command.
"""

from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from core_identity.models import StaffUser
from tenants.models import Tenant

pytestmark = pytest.mark.django_db(databases='__all__')


@pytest.fixture
def migrate():
    with mock.patch('tenants.management.commands.provision_tenant.call_command') as patched:
        yield patched


def provision(*args, **kwargs):
    out = StringIO()
    call_command('provision_tenant', *args, stdout=out, **kwargs)
    return out.getvalue()


class TestProvisionTenant:

    def test_registers_and_migrates(self, migrate, settings):
        settings.TENANT_DB_NAME_TEMPLATE = 'recruiter_{key}'

        output = provision('Globex', 'Globex Corporation', '--db-alias', 'tenant_globex')

        tenant = Tenant.objects.using('default').get(key='globex')
        assert tenant.company_name == 'Globex Corporation'
        assert tenant.db_alias == 'tenant_globex'
        assert tenant.db_name == 'recruiter_globex'
        assert tenant.is_active

        migrate.assert_called_once_with('migrate', database='tenant_globex', interactive=False, verbosity=1)
        assert 'Tenant provisioned successfully!' in output

    def test_skip_migrate(self, migrate):
        provision('globex', 'Globex', '--db-alias', 'tenant_globex', '--skip-migrate')

        migrate.assert_not_called()

    def test_db_name_option(self, migrate):
        provision('globex', 'Globex', '--db-alias', 'tenant_globex', '--db-name', 'globex_main', '--skip-migrate')

        assert Tenant.objects.using('default').get(key='globex').db_name == 'globex_main'

    def test_creates_admin(self, migrate):
        provision(
            'globex', 'Globex', '--db-alias', 'tenant_globex',
            '--admin-email', 'Hank@Globex.example.com', '--admin-password', 'scorpio-rising',
        )

        admin = StaffUser.objects.using('tenant_globex').get(email='hank@globex.example.com')
        assert admin.role == StaffUser.Role.ADMIN
        assert admin.check_password('scorpio-rising')
        assert not StaffUser.objects.using('tenant_acme').filter(email='hank@globex.example.com').exists()

    def test_admin_email_requires_password(self, migrate):
        with pytest.raises(CommandError):
            provision('globex', 'Globex', '--admin-email', 'hank@globex.example.com')

        assert not Tenant.objects.using('default').filter(key='globex').exists()

    def test_duplicate_key(self, migrate, acme_tenant):
        with pytest.raises(CommandError, match="Tenant 'acme' already exists"):
            provision('acme', 'Acme Again')

        migrate.assert_not_called()

    def test_invalid_key(self, migrate):
        with pytest.raises(CommandError, match='Invalid tenant key'):
            provision('bad key!', 'Broken')
