"""
Tenants Serializers - DRF serializers for the super-admin tenant registry.

Connection details (``db_name``) stay on the server; the alias is shown so
that operators can match log lines to tenants.
"""

from rest_framework import serializers

from .models import Tenant


class TenantSerializer(serializers.ModelSerializer):
    """
    Tenant registry row as seen by super admins.
    """

    subdomain = serializers.ReadOnlyField()
    is_active = serializers.ReadOnlyField()

    class Meta:
        model = Tenant
        fields = [
            'id', 'key', 'company_name', 'subdomain',
            'status', 'is_active', 'db_alias', 'branding',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields
