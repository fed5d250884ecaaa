"""
Request context, middleware and tenant-aware logging.
"""

import logging

import pytest
from django.test import RequestFactory

from tenants.context import (
    clear_tenant_context,
    get_current_db_alias,
    get_current_tenant_key,
    get_request_context,
    set_request_context,
    tenant_context,
)
from tenants.logging import TenantAuditLogger, TenantContextFilter, TenantFormatter
from tenants.middleware import TenantContextMiddleware


def make_record(message='hello'):
    return logging.LogRecord('recruiter.test', logging.INFO, __file__, 1, message, None, None)


class TestRequestContext:

    def test_empty_by_default(self):
        ctx = get_request_context()

        assert ctx.tenant_key is None
        assert ctx.is_bound is False

    def test_set_merges_fields(self):
        set_request_context(tenant_key='acme', db_alias='tenant_acme')
        set_request_context(user_type='candidate')

        ctx = get_request_context()
        assert (ctx.tenant_key, ctx.db_alias, ctx.user_type) == ('acme', 'tenant_acme', 'candidate')

        clear_tenant_context()
        assert get_current_tenant_key() is None

    def test_tenant_context_nests_and_restores(self):
        with tenant_context('acme', 'tenant_acme'):
            with tenant_context('globex', 'tenant_globex', user_type='user'):
                assert get_current_db_alias() == 'tenant_globex'
                assert get_request_context().user_type == 'user'
            assert get_current_db_alias() == 'tenant_acme'
            assert get_request_context().user_type is None

        assert get_current_db_alias() is None

    def test_tenant_context_restores_after_error(self):
        with pytest.raises(RuntimeError):
            with tenant_context('acme', 'tenant_acme'):
                raise RuntimeError('boom')

        assert get_current_db_alias() is None


class TestTenantContextMiddleware:

    def test_clears_context_before_and_after(self):
        seen = {}

        def view(request):
            seen['before'] = get_current_tenant_key()
            set_request_context(tenant_key='acme', db_alias='tenant_acme')
            return 'response'

        set_request_context(tenant_key='stale', db_alias='tenant_stale')
        middleware = TenantContextMiddleware(view)

        assert middleware(RequestFactory().get('/')) == 'response'
        assert seen['before'] is None
        assert get_current_tenant_key() is None

    def test_clears_context_on_error(self):
        def view(request):
            set_request_context(tenant_key='acme', db_alias='tenant_acme')
            raise ValueError('failure')

        with pytest.raises(ValueError):
            TenantContextMiddleware(view)(RequestFactory().get('/'))

        assert get_current_tenant_key() is None


class TestTenantLogging:

    def test_filter_public(self):
        record = make_record()

        assert TenantContextFilter().filter(record) is True
        assert record.tenant == 'public'
        assert record.tenant_db is None

    def test_filter_tenant(self):
        with tenant_context('acme', 'tenant_acme', user_type='user', identity_id='42'):
            record = make_record()
            TenantContextFilter().filter(record)

        assert record.tenant == 'acme'
        assert record.tenant_db == 'tenant_acme'
        assert record.user_type == 'user'
        assert record.identity_id == '42'

    def test_filter_master(self):
        with tenant_context(None, 'default', user_type='super_admin'):
            record = make_record()
            TenantContextFilter().filter(record)

        assert record.tenant == 'master'

    def test_formatter_prefix(self):
        formatter = TenantFormatter('[tenant:{tenant}] {message}')

        with tenant_context('globex', 'tenant_globex'):
            output = formatter.format(make_record('job created'))

        assert output == '[tenant:globex] job created'

    def test_audit_event(self, caplog):
        audit = TenantAuditLogger('tests.audit')

        class Identity:
            pk = 'abc'
            email = 'rita@acme.example.com'

        with caplog.at_level(logging.INFO, logger='tests.audit'):
            with tenant_context('acme', 'tenant_acme'):
                audit.log_action('status_change', 'application', 'app-1', identity=Identity())

        record = caplog.records[-1]
        assert record.getMessage() == '[AUDIT] status_change on application (app-1) by rita@acme.example.com'
        assert record.audit_tenant == 'acme'
        assert record.actor_id == 'abc'

    def test_failed_login_is_warning(self, caplog):
        audit = TenantAuditLogger('tests.audit')

        class Identity:
            pk = 'abc'
            email = 'rita@acme.example.com'

        with caplog.at_level(logging.INFO, logger='tests.audit'):
            audit.log_login(Identity(), success=False, ip_address='10.0.0.1')

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.details == {'ip_address': '10.0.0.1'}
