"""
Django settings for the recruiter backend.

Multi-tenant recruiting platform: one master database holding the tenant
registry and super administrators, plus one database per tenant holding
staff, candidates, jobs and applications. Tenant databases are registered
lazily into ``django.db.connections`` by ``tenants.connections``.

Every deploy-specific value is read from the environment.
"""

import os
import re
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _parse_lifetime(value, default=timedelta(days=7)):
    """Parse ``7d`` / ``12h`` / ``30m`` / ``45s`` style lifetimes."""
    if not value:
        return default
    match = re.fullmatch(r'\s*(\d+)\s*([dhms]?)\s*', value)
    if not match:
        return default
    amount, unit = int(match.group(1)), match.group(2) or 's'
    return {
        'd': timedelta(days=amount),
        'h': timedelta(hours=amount),
        'm': timedelta(minutes=amount),
        's': timedelta(seconds=amount),
    }[unit]


# ============================================
# CORE
# ============================================

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-development-key-change-me')

DEBUG = _env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,.recruiter.local').split(',')
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',

    'rest_framework',
    'rest_framework_simplejwt',
    'django_filters',

    'tenants',
    'core_identity',
    'ats',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'tenants.middleware.TenantContextMiddleware',
]

ROOT_URLCONF = 'recruiter.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [],
        },
    },
]

WSGI_APPLICATION = 'recruiter.wsgi.application'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# ============================================
# DATABASES
# ============================================

# Only the master database is declared here. Tenant databases inherit
# these connection parameters with their own NAME.
DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.postgresql'),
        'NAME': os.environ.get('DB_NAME', 'recruiter_master'),
        'USER': os.environ.get('DB_USER', 'postgres'),
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'CONN_MAX_AGE': int(os.environ.get('DB_CONN_MAX_AGE', '60')),
    }
}

DATABASE_ROUTERS = ['tenants.router.TenantDatabaseRouter']

# ============================================
# TENANTS
# ============================================

TENANT_HEADER_NAME = os.environ.get('TENANT_HEADER_NAME', 'X-Tenant-ID')
TENANT_BASE_DOMAIN = os.environ.get('TENANT_BASE_DOMAIN', 'recruiter.local')
TENANT_DB_NAME_TEMPLATE = os.environ.get('TENANT_DB_NAME_TEMPLATE', 'recruiter_{key}')
TENANT_CACHE_TIMEOUT = int(os.environ.get('TENANT_CACHE_TIMEOUT', '300'))

# ============================================
# CACHE
# ============================================

REDIS_URL = os.environ.get('REDIS_URL')

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.redis.RedisCache',
            'LOCATION': REDIS_URL,
            'KEY_PREFIX': 'recruiter',
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'recruiter-default',
        }
    }

# ============================================
# REST FRAMEWORK / JWT
# ============================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'core_identity.authentication.TenantJWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'core_identity.permissions.IsAuthenticatedIdentity',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.MultiPartParser',
        'rest_framework.parsers.FormParser',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
        'rest_framework.filters.OrderingFilter',
    ],
    'DEFAULT_PAGINATION_CLASS': 'api.base.StandardPagination',
    'PAGE_SIZE': 10,
    'EXCEPTION_HANDLER': 'api.exceptions.recruiter_exception_handler',
}

SIMPLE_JWT = {
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': os.environ.get('JWT_SECRET', SECRET_KEY),
    'ACCESS_TOKEN_LIFETIME': _parse_lifetime(os.environ.get('JWT_EXPIRE', '7d')),
    'LEEWAY': 0,
}

# ============================================
# ACCOUNT SECURITY
# ============================================

ACCOUNT_LOCKOUT = {
    'MAX_ATTEMPTS': int(os.environ.get('ACCOUNT_LOCKOUT_MAX_ATTEMPTS', '5')),
    'LOCK_DURATION': timedelta(minutes=int(os.environ.get('ACCOUNT_LOCKOUT_MINUTES', '120'))),
}

# ============================================
# ATS
# ============================================

# Off: any status may move to any status. On: ats.lifecycle.ALLOWED_TRANSITIONS applies.
ATS_ENFORCE_STATUS_TRANSITIONS = _env_bool('ATS_ENFORCE_STATUS_TRANSITIONS', False)

CANDIDATE_DOCUMENT_FOLDER = 'recruiter-ai/candidates'
CANDIDATE_DOCUMENT_MAX_SIZE = 5 * 1024 * 1024
CANDIDATE_DOCUMENT_MIME_TYPES = [
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'image/jpeg',
    'image/png',
]

# ============================================
# STORAGE
# ============================================

MEDIA_ROOT = os.environ.get('MEDIA_ROOT', str(BASE_DIR / 'media'))
MEDIA_URL = '/media/'

AWS_STORAGE_BUCKET_NAME = os.environ.get('AWS_STORAGE_BUCKET_NAME', '')
AWS_S3_REGION_NAME = os.environ.get('AWS_S3_REGION_NAME', 'us-east-1')

if AWS_STORAGE_BUCKET_NAME:
    DOCUMENT_STORAGE = {
        'BACKEND': 'core.storage.DocumentS3Storage',
        'OPTIONS': {
            'bucket_name': AWS_STORAGE_BUCKET_NAME,
            'region_name': AWS_S3_REGION_NAME,
            'file_overwrite': False,
        },
    }
else:
    DOCUMENT_STORAGE = {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
        'OPTIONS': {
            'location': os.path.join(MEDIA_ROOT, 'documents'),
            'base_url': MEDIA_URL + 'documents/',
        },
    }

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
    'documents': DOCUMENT_STORAGE,
}

# ============================================
# EMAIL
# ============================================

EMAIL_BACKEND = os.environ.get('EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = os.environ.get('EMAIL_HOST', 'localhost')
EMAIL_PORT = int(os.environ.get('EMAIL_PORT', '25'))
EMAIL_HOST_USER = os.environ.get('EMAIL_HOST_USER', '')
EMAIL_HOST_PASSWORD = os.environ.get('EMAIL_HOST_PASSWORD', '')
EMAIL_USE_TLS = _env_bool('EMAIL_USE_TLS', False)
DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', 'no-reply@recruiter.local')

# ============================================
# CELERY
# ============================================

CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', CELERY_BROKER_URL)
CELERY_TASK_ALWAYS_EAGER = _env_bool('CELERY_TASK_ALWAYS_EAGER', False)

# ============================================
# LOGGING
# ============================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'tenant_format': {
            '()': 'tenants.logging.TenantFormatter',
        },
    },
    'filters': {
        'tenant_context': {
            '()': 'tenants.logging.TenantContextFilter',
        },
    },
    'handlers': {
        'console': {
            'level': os.environ.get('LOG_LEVEL', 'INFO'),
            'class': 'logging.StreamHandler',
            'formatter': 'tenant_format',
            'filters': ['tenant_context'],
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'tenants': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'core_identity': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'ats': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'api': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'recruiter.audit': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
