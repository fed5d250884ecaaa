"""
Credential checks and account lockout.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from api.exceptions import AccountInactiveError, AccountLockedError, InvalidCredentialsError
from conftest import CandidateFactory, StaffUserFactory
from core_identity.credentials import LockoutPolicy, authenticate_credentials, get_lockout_policy
from core_identity.models import StaffUser

pytestmark = pytest.mark.django_db(databases='__all__')


def fail_login(repository, email, times):
    for _ in range(times):
        with pytest.raises((InvalidCredentialsError, AccountLockedError)):
            authenticate_credentials(repository, email, 'wrong-password')


class TestAuthenticateCredentials:

    def test_success_resets_counter(self, acme_repositories, staff_user):
        fail_login(acme_repositories.staff_users, staff_user.email, 2)

        identity = authenticate_credentials(acme_repositories.staff_users, 'RECRUITER@acme.example.com', 'testpass123')

        assert identity.pk == staff_user.pk
        stored = StaffUser.objects.using('tenant_acme').get(pk=staff_user.pk)
        assert stored.login_attempts == 0
        assert stored.last_login is not None

    def test_unknown_email(self, acme_repositories):
        with pytest.raises(InvalidCredentialsError):
            authenticate_credentials(acme_repositories.staff_users, 'ghost@example.com', 'testpass123')

    def test_wrong_password_counts(self, acme_repositories, staff_user):
        fail_login(acme_repositories.staff_users, staff_user.email, 3)

        stored = StaffUser.objects.using('tenant_acme').get(pk=staff_user.pk)
        assert stored.login_attempts == 3
        assert stored.lock_until is None

    def test_fifth_failure_locks(self, acme_repositories, staff_user):
        fail_login(acme_repositories.staff_users, staff_user.email, 5)

        stored = StaffUser.objects.using('tenant_acme').get(pk=staff_user.pk)
        assert stored.login_attempts == 5
        assert stored.is_locked

        with pytest.raises(AccountLockedError) as exc_info:
            authenticate_credentials(acme_repositories.staff_users, staff_user.email, 'testpass123')
        assert exc_info.value.status_code == 423
        assert 'lock_until' in exc_info.value.extra_data

    def test_expired_lock_restarts_count(self, acme_repositories, acme_tenant):
        staff_user = StaffUserFactory(login_attempts=5, lock_until=timezone.now() - timedelta(minutes=1))

        with pytest.raises(InvalidCredentialsError):
            authenticate_credentials(acme_repositories.staff_users, staff_user.email, 'wrong-password')

        stored = StaffUser.objects.using('tenant_acme').get(pk=staff_user.pk)
        assert stored.login_attempts == 1
        assert stored.lock_until is None

    def test_expired_lock_allows_login(self, acme_repositories, acme_tenant):
        staff_user = StaffUserFactory(login_attempts=5, lock_until=timezone.now() - timedelta(minutes=1))

        authenticate_credentials(acme_repositories.staff_users, staff_user.email, 'testpass123')

        stored = StaffUser.objects.using('tenant_acme').get(pk=staff_user.pk)
        assert (stored.login_attempts, stored.lock_until) == (0, None)

    def test_custom_policy(self, acme_repositories, staff_user):
        policy = LockoutPolicy(max_attempts=2, lock_duration=timedelta(minutes=10))

        for _ in range(2):
            with pytest.raises(InvalidCredentialsError):
                authenticate_credentials(acme_repositories.staff_users, staff_user.email, 'nope', policy=policy)

        stored = StaffUser.objects.using('tenant_acme').get(pk=staff_user.pk)
        assert stored.lock_until is not None
        assert stored.lock_until - timezone.now() <= timedelta(minutes=10)

    def test_inactive_account(self, acme_repositories, acme_tenant):
        inactive = StaffUserFactory(is_active=False)

        with pytest.raises(AccountInactiveError) as exc_info:
            authenticate_credentials(acme_repositories.staff_users, inactive.email, 'testpass123')

        assert str(exc_info.value.detail) == 'Account is deactivated'

    def test_candidate_lockout_lives_on_account(self, acme_repositories, candidate):
        fail_login(acme_repositories.candidates, candidate.email, 5)

        candidate.account.refresh_from_db()
        assert candidate.account.is_locked

    def test_candidate_without_account(self, acme_repositories, acme_tenant):
        candidate = CandidateFactory(account=False)

        with pytest.raises(InvalidCredentialsError):
            authenticate_credentials(acme_repositories.candidates, candidate.email, 'testpass123')


def test_lockout_policy_from_settings(settings):
    settings.ACCOUNT_LOCKOUT = {'MAX_ATTEMPTS': 3, 'LOCK_DURATION': timedelta(minutes=30)}

    policy = get_lockout_policy()

    assert policy == LockoutPolicy(max_attempts=3, lock_duration=timedelta(minutes=30))
