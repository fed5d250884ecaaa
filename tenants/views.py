"""
Tenants Views - super-admin access to the tenant registry.

This module provides:
- TenantViewSet: list and retrieve tenants by key (master database)
"""

import logging

from rest_framework import filters, viewsets

from api.base import APIResponse
from core_identity.permissions import IsSuperAdmin

from .connections import get_master_connection
from .models import Tenant
from .serializers import TenantSerializer

logger = logging.getLogger(__name__)


class TenantViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for the tenant registry.
    Super-admin access only.

    list: All tenants, suspended ones included
    retrieve: One tenant by key
    """

    serializer_class = TenantSerializer
    permission_classes = [IsSuperAdmin]
    lookup_field = 'key'
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['key', 'company_name']
    ordering_fields = ['company_name', 'created_at', 'key']
    ordering = ['company_name']

    def get_queryset(self):
        queryset = Tenant.objects.using(get_master_connection()).all()

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance)
        return APIResponse.success(data=serializer.data)
