"""
Core Identity Views - staff and super-admin login, current identity.

Endpoints:
- POST /api/users/login         staff login (tenant from header or subdomain)
- POST /api/super-admin/login   super-admin login (master database)
- GET  /api/auth/me             the identity behind the bearer token
"""

import logging

from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from api.base import APIResponse
from tenants.mixins import IdentityBindingMixin, PublicTenantMixin
from tenants.repositories import RepositoryFactory

from .credentials import authenticate_credentials
from .models import IdentityType
from .serializers import (
    IdentitySummarySerializer,
    LoginSerializer,
    StaffUserSerializer,
    SuperAdminSerializer,
)
from .tokens import issue_identity_token

logger = logging.getLogger(__name__)


def client_ip(request):
    return request.META.get('REMOTE_ADDR')


class StaffLoginView(PublicTenantMixin, APIView):
    """Staff login; the token carries ``type=user`` and the staff role."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        tenant = self.get_tenant()
        staff_user = authenticate_credentials(
            self.get_repositories().staff_users,
            serializer.validated_data['email'],
            serializer.validated_data['password'],
            ip_address=client_ip(request),
        )
        token = issue_identity_token(staff_user, tenant.key, IdentityType.USER)

        logger.info(f"Staff user {staff_user.pk} logged in")
        return APIResponse.success(
            data={
                'user': StaffUserSerializer(staff_user).data,
                'token': token,
                'tenant': tenant.public_profile(),
            },
            message='Login successful',
        )


class SuperAdminLoginView(APIView):
    """Super-admin login against the master database."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        super_admin = authenticate_credentials(
            RepositoryFactory.for_master().super_admins,
            serializer.validated_data['email'],
            serializer.validated_data['password'],
            ip_address=client_ip(request),
        )
        token = issue_identity_token(super_admin, None, IdentityType.SUPER_ADMIN)

        logger.info(f"Super admin {super_admin.pk} logged in")
        return APIResponse.success(
            data={
                'user': SuperAdminSerializer(super_admin).data,
                'token': token,
            },
            message='Login successful',
        )


class CurrentIdentityView(IdentityBindingMixin, APIView):
    """Who am I: identity type, tenant and identity summary."""

    def get(self, request):
        binding = self.get_binding()
        return APIResponse.success(data={
            'user_type': binding.user_type,
            'tenant': binding.tenant_key,
            'database': 'master' if binding.is_master else 'tenant',
            'identity': IdentitySummarySerializer(self.get_identity()).data,
        })
