"""
Tenants Models - Tenant registry for the recruiter platform

This module defines the master-database registry of tenants:
- Tenant: a customer organization and the database that holds its data

Tenant data (staff, candidates, jobs, applications) never lives in the
master database. Each tenant row names the connection alias and database
that ``tenants.connections`` registers on first use.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.db.models import TimestampedModel


class Tenant(TimestampedModel):
    """
    Customer organization with its own database.

    The ``key`` doubles as the subdomain and as the ``tenant`` claim in
    identity tokens.
    """

    class TenantStatus(models.TextChoices):
        ACTIVE = 'active', _('Active')
        SUSPENDED = 'suspended', _('Suspended')

    key = models.SlugField(
        max_length=63,
        unique=True,
        help_text=_('Tenant key, also used as the subdomain')
    )
    company_name = models.CharField(max_length=255)
    db_alias = models.CharField(
        max_length=100,
        unique=True,
        help_text=_('Connection alias registered in django.db.connections')
    )
    db_name = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=TenantStatus.choices,
        default=TenantStatus.ACTIVE,
        db_index=True
    )
    branding = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name = _('Tenant')
        verbose_name_plural = _('Tenants')
        ordering = ['company_name']

    def __str__(self):
        return f"{self.company_name} ({self.key})"

    @property
    def is_active(self) -> bool:
        return self.status == self.TenantStatus.ACTIVE

    @property
    def subdomain(self) -> str:
        return self.key

    def public_profile(self) -> dict:
        """Tenant block returned to candidates on register and login."""
        return {
            'company_name': self.company_name,
            'branding': self.branding or {},
            'subdomain': self.subdomain,
        }
