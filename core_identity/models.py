"""
Core Identity Models

Identities that can authenticate against the API:
- SuperAdmin: platform operator, MASTER database
- StaffUser: recruiter-side user of one tenant, TENANT database
- Candidates live in ``ats.models`` and share the mixins defined here

Shared building blocks:
- IdentityType: the ``type`` claim carried by identity tokens
- CredentialMixin: password hash plus the login lockout counters
- IdentityMixin: what DRF expects from ``request.user``
"""

from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.db.models import TimestampedModel


class IdentityType(models.TextChoices):
    SUPER_ADMIN = 'super_admin', _('Super admin')
    CANDIDATE = 'candidate', _('Candidate')
    USER = 'user', _('Staff user')


# =============================================================================
# MIXINS
# =============================================================================

class CredentialMixin(models.Model):
    """
    Password hash and login lockout state.

    The lockout counters are written with field-level updates so that two
    concurrent failed logins both count.
    """

    password = models.CharField(_('password'), max_length=128)
    login_attempts = models.PositiveIntegerField(default=0)
    lock_until = models.DateTimeField(null=True, blank=True)
    last_login = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    def set_password(self, raw_password):
        """Hash ``raw_password``; None stores an unusable password."""
        self.password = make_password(raw_password)

    def set_unusable_password(self):
        self.password = make_password(None)

    def check_password(self, raw_password) -> bool:
        return check_password(raw_password, self.password)

    @property
    def is_locked(self) -> bool:
        return bool(self.lock_until and self.lock_until > timezone.now())

    def _row(self):
        return type(self)._default_manager.using(self._state.db).filter(pk=self.pk)

    def register_failed_login(self, policy, now=None) -> bool:
        """
        Count one failed login.

        An expired lock restarts the count at 1. Otherwise the count grows by
        one and reaching ``policy.max_attempts`` locks the account for
        ``policy.lock_duration``.

        Returns:
            True if this failure locked the account.
        """
        now = now or timezone.now()

        if self.lock_until and self.lock_until <= now:
            self._row().update(login_attempts=1, lock_until=None)
            self.login_attempts = 1
            self.lock_until = None
            return False

        self._row().update(login_attempts=F('login_attempts') + 1)
        self.refresh_from_db(using=self._state.db, fields=['login_attempts'])

        if self.login_attempts >= policy.max_attempts and not self.is_locked:
            self.lock_until = now + policy.lock_duration
            self._row().update(lock_until=self.lock_until)
            return True

        return False

    def register_successful_login(self, now=None):
        now = now or timezone.now()
        update_fields = ['last_login']

        if self.login_attempts > 0 or self.lock_until is not None:
            self.login_attempts = 0
            self.lock_until = None
            update_fields += ['login_attempts', 'lock_until']

        self.last_login = now
        self.save(using=self._state.db, update_fields=update_fields)


class IdentityMixin:
    """
    Makes a model usable as DRF's ``request.user``.

    Subclasses set ``identity_type``; ``credentials`` is the object holding
    the password and lockout state.
    """

    identity_type = None

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_anonymous(self) -> bool:
        return False

    @property
    def credentials(self):
        return self

    @property
    def account_is_active(self) -> bool:
        return self.is_active

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class IdentityQuerySet(models.QuerySet):

    def without_credentials(self):
        """Load identities for request authentication; the hash is never read."""
        return self.defer('password')

    def for_login(self):
        return self

    def active(self):
        return self.filter(is_active=True)


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


# =============================================================================
# IDENTITIES
# =============================================================================

class SuperAdmin(IdentityMixin, CredentialMixin, TimestampedModel):
    """
    Platform operator. Lives in the master database and is never bound to a
    tenant.
    """

    identity_type = IdentityType.SUPER_ADMIN
    role = 'super_admin'

    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)

    objects = IdentityQuerySet.as_manager()

    class Meta:
        verbose_name = _('Super admin')
        verbose_name_plural = _('Super admins')
        ordering = ['email']

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)


class StaffUser(IdentityMixin, CredentialMixin, TimestampedModel):
    """
    Recruiter-side user of one tenant.

    Email is unique within the tenant database only.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', _('Administrator')
        RECRUITER = 'recruiter', _('Recruiter')
        HIRING_MANAGER = 'hiring_manager', _('Hiring manager')
        INTERVIEWER = 'interviewer', _('Interviewer')

    identity_type = IdentityType.USER

    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.RECRUITER,
        db_index=True
    )
    is_active = models.BooleanField(default=True)

    objects = IdentityQuerySet.as_manager()

    class Meta:
        verbose_name = _('Staff user')
        verbose_name_plural = _('Staff users')
        ordering = ['email']

    def __str__(self):
        return f"{self.full_name or self.email} ({self.get_role_display()})"

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)
