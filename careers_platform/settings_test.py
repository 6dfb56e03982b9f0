"""
Django Test Settings for the Careers Platform

This module contains test-specific settings that override the main settings
for faster and more isolated test execution.

Usage:
    pytest --ds=careers_platform.settings_test
    python manage.py test --settings=careers_platform.settings_test
"""

from .settings import *  # noqa: F401, F403

# =============================================================================
# TEST ENVIRONMENT CONFIGURATION
# =============================================================================

DEBUG = False
TESTING = True
SECRET_KEY = 'test-secret-key-for-calendar-credential-encryption'

# Use a faster password hasher for tests
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# =============================================================================
# CACHING CONFIGURATION
# =============================================================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'unique-snowflake',
    },
}

# =============================================================================
# CELERY CONFIGURATION
# =============================================================================

# Execute tasks synchronously during tests
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

# =============================================================================
# EMAIL CONFIGURATION
# =============================================================================

# Use in-memory email backend for tests
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
DEFAULT_FROM_EMAIL = 'no-reply@careers-platform.test'
FRONTEND_URL = 'https://careers.test'

# =============================================================================
# CALENDAR INTEGRATIONS
# =============================================================================

# No process-level fallback credentials unless a test sets them
GOOGLE_CLIENT_ID = ''
GOOGLE_CLIENT_SECRET = ''
GOOGLE_REFRESH_TOKEN = ''
MICROSOFT_CLIENT_ID = ''
MICROSOFT_CLIENT_SECRET = ''
MICROSOFT_TENANT_ID = ''
MICROSOFT_REFRESH_TOKEN = ''
MICROSOFT_CALENDAR_USER = ''

CALENDAR_PROVIDER_TIMEOUT = 5
INTERVIEW_SAVE_MAX_RETRIES = 3

# =============================================================================
# REST FRAMEWORK
# =============================================================================

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}

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
