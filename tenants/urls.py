"""
Tenants URLs - super-admin routing for the tenant registry.

This module defines URL patterns for:
- /tenants/ - Tenant list
- /tenants/<key>/ - Tenant detail
"""

from rest_framework.routers import DefaultRouter

from .views import TenantViewSet

app_name = 'tenants'

router = DefaultRouter()
router.register(r'tenants', TenantViewSet, basename='tenant')

urlpatterns = router.urls
