"""
Recruiter Test Configuration - pytest fixtures and factories

This module provides:
- factory_boy factories for the master and tenant models
- Tenant rows bound to the ``tenant_acme`` and ``tenant_globex`` test databases
- API clients carrying identity tokens

Tenant factories write to ``tenant_acme`` unless told otherwise; the
``Globex*`` variants write to ``tenant_globex`` for isolation tests.

RUNNING TESTS:
# Run all tests
pytest -v

# Run by app
pytest ats/tests -v
pytest tests/test_ats_flows.py -v
"""

import uuid
from datetime import timedelta

import factory
import pytest
from django.core.cache import cache
from django.utils import timezone
from factory.django import DjangoModelFactory

from ats.lifecycle import ApplicationStatus
from ats.models import CandidateAccount
from core_identity.models import IdentityType
from core_identity.tokens import issue_identity_token
from tenants.context import clear_tenant_context
from tenants.repositories import RepositoryFactory

DEFAULT_PASSWORD = 'testpass123'

ACME_ALIAS = 'tenant_acme'
GLOBEX_ALIAS = 'tenant_globex'


# ============================================================================
# MASTER FACTORIES
# ============================================================================

class TenantFactory(DjangoModelFactory):
    """Factory for tenant registry rows (master database)."""

    class Meta:
        model = 'tenants.Tenant'
        database = 'default'
        django_get_or_create = ('key',)

    key = factory.Sequence(lambda n: f"tenant{n}")
    company_name = factory.Faker('company')
    db_alias = factory.LazyAttribute(lambda o: f"tenant_{o.key}")
    db_name = factory.LazyAttribute(lambda o: f"recruiter_{o.key}")
    status = 'active'
    branding = factory.LazyFunction(lambda: {'primary_color': '#3B82F6'})


class CredentialFactoryMixin:
    """Hash ``password`` instead of storing it as given."""

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        password = kwargs.pop('password', DEFAULT_PASSWORD)
        instance = model_class(*args, **kwargs)
        instance.set_password(password)
        instance.save(using=cls._meta.database)
        return instance


class SuperAdminFactory(CredentialFactoryMixin, DjangoModelFactory):

    class Meta:
        model = 'core_identity.SuperAdmin'
        database = 'default'

    email = factory.Sequence(lambda n: f"admin{n}@platform.example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = DEFAULT_PASSWORD
    is_active = True


# ============================================================================
# TENANT FACTORIES
# ============================================================================

class StaffUserFactory(CredentialFactoryMixin, DjangoModelFactory):
    """Factory for staff users of the acme tenant."""

    class Meta:
        model = 'core_identity.StaffUser'
        database = ACME_ALIAS

    email = factory.Sequence(lambda n: f"recruiter{n}@acme.example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = DEFAULT_PASSWORD
    role = 'recruiter'
    is_active = True


class CandidateFactory(DjangoModelFactory):
    """
    Factory for candidates with a login account.

    Account options go through ``account__``:
        CandidateFactory(account__password='secret', account__is_active=False)
    """

    class Meta:
        model = 'ats.Candidate'
        database = ACME_ALIAS
        skip_postgeneration_save = True

    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    email = factory.Sequence(lambda n: f"candidate{n}@example.com")
    phone = factory.Faker('numerify', text='+1555#######')
    professional_info = factory.LazyFunction(lambda: {'headline': 'Software Engineer'})

    @factory.post_generation
    def account(obj, create, extracted, **kwargs):
        if not create or extracted is False:
            return
        account = CandidateAccount(
            candidate=obj,
            is_active=kwargs.get('is_active', True),
            is_email_verified=kwargs.get('is_email_verified', False),
        )
        account.set_password(kwargs.get('password', DEFAULT_PASSWORD))
        account.save(using=obj._state.db)


class JobDescriptionFactory(DjangoModelFactory):

    class Meta:
        model = 'ats.JobDescription'
        database = ACME_ALIAS

    title = factory.Faker('job')
    description = factory.Faker('paragraph', nb_sentences=5)
    location = factory.Faker('city')
    employment_type = 'full_time'
    status = 'published'
    is_active = True
    application_deadline = None
    allow_multiple_applications = False


class ApplicationFactory(DjangoModelFactory):

    class Meta:
        model = 'ats.Application'
        database = ACME_ALIAS

    job = factory.SubFactory(JobDescriptionFactory)
    candidate = factory.SubFactory(CandidateFactory)
    status = ApplicationStatus.SUBMITTED
    cover_letter = factory.Faker('paragraph', nb_sentences=3)
    skills = factory.LazyFunction(lambda: ['python', 'django'])


class InterviewFactory(DjangoModelFactory):

    class Meta:
        model = 'ats.Interview'
        database = ACME_ALIAS

    application = factory.SubFactory(ApplicationFactory)
    sequence = factory.Sequence(lambda n: n + 1)
    interview_type = 'video'
    scheduled_at = factory.LazyFunction(lambda: timezone.now() + timedelta(days=2))
    duration_minutes = 60
    status = 'scheduled'


class GlobexStaffUserFactory(StaffUserFactory):

    class Meta:
        database = GLOBEX_ALIAS

    email = factory.Sequence(lambda n: f"recruiter{n}@globex.example.com")


class GlobexCandidateFactory(CandidateFactory):

    class Meta:
        database = GLOBEX_ALIAS


class GlobexJobDescriptionFactory(JobDescriptionFactory):

    class Meta:
        database = GLOBEX_ALIAS


# ============================================================================
# PYTEST FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def _clear_tenant_state():
    """Fresh tenant cache and request context for every test."""
    cache.clear()
    clear_tenant_context()
    yield
    clear_tenant_context()
    cache.clear()


@pytest.fixture
def api_client():
    """Provide a DRF API test client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def acme_tenant(db):
    return TenantFactory(
        key='acme',
        company_name='Acme Corp',
        db_alias=ACME_ALIAS,
        db_name='recruiter_acme',
        branding={'primary_color': '#FF5500', 'logo_url': 'https://cdn.example.com/acme.png'},
    )


@pytest.fixture
def globex_tenant(db):
    return TenantFactory(
        key='globex',
        company_name='Globex Corporation',
        db_alias=GLOBEX_ALIAS,
        db_name='recruiter_globex',
    )


@pytest.fixture
def acme_repositories(acme_tenant):
    return RepositoryFactory.for_tenant_instance(acme_tenant)


@pytest.fixture
def super_admin(db):
    return SuperAdminFactory(email='root@platform.example.com')


@pytest.fixture
def staff_user(acme_tenant):
    return StaffUserFactory(email='recruiter@acme.example.com', first_name='Rita', last_name='Recruiter')


@pytest.fixture
def candidate(acme_tenant):
    return CandidateFactory(email='jane.doe@example.com', first_name='Jane', last_name='Doe')


@pytest.fixture
def job(acme_tenant, staff_user):
    return JobDescriptionFactory(title='Backend Engineer', created_by=staff_user)


@pytest.fixture
def application(job, candidate):
    return ApplicationFactory(job=job, candidate=candidate)


# ============================================================================
# TOKEN HELPERS
# ============================================================================

def staff_token(staff_user, tenant_key='acme'):
    return issue_identity_token(staff_user, tenant_key, IdentityType.USER)


def candidate_token(candidate, tenant_key='acme'):
    return issue_identity_token(candidate, tenant_key, IdentityType.CANDIDATE)


def super_admin_token(super_admin):
    return issue_identity_token(super_admin, None, IdentityType.SUPER_ADMIN)


@pytest.fixture
def client_with_token(api_client):
    """Return a callable that authenticates ``api_client`` with a bearer token."""
    def _client_with_token(token):
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return api_client
    return _client_with_token


@pytest.fixture
def staff_client(client_with_token, staff_user):
    return client_with_token(staff_token(staff_user))


@pytest.fixture
def candidate_client(client_with_token, candidate):
    return client_with_token(candidate_token(candidate))


@pytest.fixture
def super_admin_client(client_with_token, super_admin):
    return client_with_token(super_admin_token(super_admin))


@pytest.fixture
def unique_email():
    return f"{uuid.uuid4().hex[:10]}@example.com"
