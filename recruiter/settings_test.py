"""
Django Test Settings for the recruiter backend

Overrides the main settings for fast, isolated test runs: sqlite databases
for the master and two tenants, in-memory cache and mail, eager Celery and
filesystem document storage in a temporary directory.

Usage:
    pytest --ds=recruiter.settings_test
"""

import tempfile

from .settings import *  # noqa: F401, F403

# =============================================================================
# TEST ENVIRONMENT CONFIGURATION
# =============================================================================

DEBUG = False
TESTING = True

SECRET_KEY = 'test-secret-key'

ALLOWED_HOSTS = ['testserver', 'localhost', '.recruiter.local']

# Use a faster password hasher for tests
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

# Two tenant aliases are declared up front so that the test runner creates
# their databases. Tenant rows in tests point at these aliases.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
    'tenant_acme': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
    'tenant_globex': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

TENANT_DB_NAME_TEMPLATE = ':memory:'

# =============================================================================
# CACHING CONFIGURATION
# =============================================================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'recruiter-tests',
    }
}

# =============================================================================
# JWT
# =============================================================================

SIMPLE_JWT = {
    **SIMPLE_JWT,
    'SIGNING_KEY': 'test-jwt-secret',
}

# =============================================================================
# EMAIL / CELERY
# =============================================================================

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

# =============================================================================
# STORAGE
# =============================================================================

MEDIA_ROOT = tempfile.mkdtemp(prefix='recruiter-tests-')

STORAGES = {
    **STORAGES,
    'documents': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
        'OPTIONS': {
            'location': MEDIA_ROOT,
            'base_url': '/media/',
        },
    },
}

# =============================================================================
# ACCOUNT SECURITY
# =============================================================================

ACCOUNT_LOCKOUT = {
    'MAX_ATTEMPTS': 5,
    'LOCK_DURATION': timedelta(hours=2),  # noqa: F405
}

ATS_ENFORCE_STATUS_TRANSITIONS = False

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

# Minimal logging during tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
    'loggers': {
        'django': {
            'handlers': ['null'],
            'level': 'CRITICAL',
            'propagate': False,
        },
        'django.request': {
            'handlers': ['null'],
            'level': 'CRITICAL',
            'propagate': False,
        },
    },
}

# =============================================================================
# REST FRAMEWORK TEST SETTINGS
# =============================================================================

REST_FRAMEWORK['TEST_REQUEST_DEFAULT_FORMAT'] = 'json'  # noqa: F405
