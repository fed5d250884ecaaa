"""
Core Identity Serializers

Login payloads and the public shape of staff users and super admins.
Password hashes are never serialized.
"""

from rest_framework import serializers

from .models import StaffUser, SuperAdmin


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class StaffUserSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = StaffUser
        fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name',
            'role', 'is_active', 'last_login', 'created_at',
        ]
        read_only_fields = fields


class SuperAdminSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    role = serializers.CharField(read_only=True)

    class Meta:
        model = SuperAdmin
        fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name',
            'role', 'is_active', 'last_login', 'created_at',
        ]
        read_only_fields = fields


class IdentitySummarySerializer(serializers.Serializer):
    """Minimal identity block for any identity type."""

    id = serializers.CharField(source='pk', read_only=True)
    email = serializers.EmailField(read_only=True)
    full_name = serializers.CharField(read_only=True)
