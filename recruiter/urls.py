"""
URL configuration for the recruiter backend.

All endpoints live under ``/api/``:
- ``core_identity``: staff, super-admin login and the current identity
- ``ats``: candidate-facing and staff-facing recruiting endpoints
- ``tenants``: super-admin tenant registry
"""
import time

from django.conf import settings
from django.db import connections
from django.http import JsonResponse
from django.urls import include, path

from tenants.connections import get_master_connection


def health_check(request):
    """
    Health check endpoint for load balancers and monitoring.

    Only the master database is probed; tenant databases are connected lazily.
    """
    health_status = {
        'status': 'healthy',
        'timestamp': time.time(),
        'version': getattr(settings, 'APP_VERSION', '1.0.0'),
    }

    try:
        with connections[get_master_connection()].cursor() as cursor:
            cursor.execute('SELECT 1')
        health_status['database'] = 'connected'
    except Exception as e:
        health_status['database'] = 'error'
        health_status['status'] = 'degraded'
        health_status['database_error'] = str(e)

    status_code = 200 if health_status['status'] == 'healthy' else 503
    return JsonResponse(health_status, status=status_code)


urlpatterns = [
    path('health/', health_check, name='health_check'),
    path('api/', include('core_identity.urls')),
    path('api/', include('ats.urls')),
    path('api/super-admin/', include('tenants.urls')),
]
