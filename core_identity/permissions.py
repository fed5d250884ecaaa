"""
Core Identity Permissions - identity-type gates for DRF views.

Usage:
    class CandidateProfileView(APIView):
        permission_classes = [allow_types(IdentityType.CANDIDATE)]

    class TenantViewSet(ReadOnlyModelViewSet):
        permission_classes = [IsSuperAdmin]
"""

from rest_framework.permissions import BasePermission

from api.exceptions import IdentityTypeForbiddenError, SuperAdminOnlyError, TokenMissingError

from .models import IdentityType


def get_request_user_type(request):
    """Identity type bound by the gate, falling back to the identity's role."""
    user_type = getattr(request, 'user_type', None)
    if user_type:
        return user_type
    return getattr(request.user, 'role', None)


class IsAuthenticatedIdentity(BasePermission):
    """Default permission: a token-authenticated identity is required."""

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            raise TokenMissingError()
        return True


class IdentityTypePermission(IsAuthenticatedIdentity):
    """Admit only the identity types listed in ``allowed_types``."""

    allowed_types = ()

    def has_permission(self, request, view):
        super().has_permission(request, view)

        user_type = get_request_user_type(request)
        if user_type not in self.allowed_types:
            raise IdentityTypeForbiddenError(user_type=user_type)
        return True


def allow_types(*allowed_types):
    """Build a permission class admitting only ``allowed_types``."""
    names = '_'.join(str(t) for t in allowed_types)
    return type(
        f'Allow_{names}',
        (IdentityTypePermission,),
        {'allowed_types': tuple(str(t) for t in allowed_types)},
    )


class IsSuperAdmin(IsAuthenticatedIdentity):

    def has_permission(self, request, view):
        super().has_permission(request, view)

        if get_request_user_type(request) != IdentityType.SUPER_ADMIN:
            raise SuperAdminOnlyError()
        return True


IsCandidate = allow_types(IdentityType.CANDIDATE)
IsStaffUser = allow_types(IdentityType.USER)
