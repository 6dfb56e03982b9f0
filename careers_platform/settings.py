"""
Django Settings for the Careers Platform

Interview scheduling, feedback and calendar invite services.
Every deployment-specific value is read from the environment (or a `.env`
file next to `manage.py`) through django-environ.
"""

from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve().parent.parent

env = environ.Env(
    DEBUG=(bool, False),
)
environ.Env.read_env(BASE_DIR / '.env')

VERSION = '1.0.0'

# =============================================================================
# CORE
# =============================================================================

SECRET_KEY = env('SECRET_KEY', default='django-insecure-change-me')
DEBUG = env('DEBUG')
ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['localhost', '127.0.0.1'])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party
    'rest_framework',
    'rest_framework_simplejwt',
    'django_filters',
    'drf_spectacular',

    # Platform apps
    'ats',
    'integrations',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'careers_platform.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'careers_platform.wsgi.application'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# =============================================================================
# DATABASE
# =============================================================================

DATABASES = {
    'default': env.db('DATABASE_URL', default=f'sqlite:///{BASE_DIR / "db.sqlite3"}'),
}

# =============================================================================
# INTERNATIONALIZATION
# =============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = env('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# =============================================================================
# REST FRAMEWORK
# =============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'api.exceptions.careers_exception_handler',
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Careers Platform API',
    'DESCRIPTION': 'Interview scheduling, feedback and calendar invites',
    'VERSION': VERSION,
    'SERVE_INCLUDE_SCHEMA': False,
}

# =============================================================================
# CELERY
# =============================================================================

REDIS_URL = env('REDIS_URL', default='redis://localhost:6379')

CELERY_BROKER_URL = env('CELERY_BROKER_URL', default=f'{REDIS_URL}/0')
CELERY_RESULT_BACKEND = env('CELERY_RESULT_BACKEND', default=f'{REDIS_URL}/1')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE

# =============================================================================
# EMAIL
# =============================================================================

EMAIL_BACKEND = env('EMAIL_BACKEND', default='django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = env('EMAIL_HOST', default='localhost')
EMAIL_PORT = env.int('EMAIL_PORT', default=25)
DEFAULT_FROM_EMAIL = env('DEFAULT_FROM_EMAIL', default='no-reply@careers-platform.local')

FRONTEND_URL = env('FRONTEND_URL', default='http://localhost:3000')

# =============================================================================
# CALENDAR INTEGRATIONS
# =============================================================================

# Used only when no CalendarCredential record exists for the provider
GOOGLE_CLIENT_ID = env('GOOGLE_CLIENT_ID', default='')
GOOGLE_CLIENT_SECRET = env('GOOGLE_CLIENT_SECRET', default='')
GOOGLE_REDIRECT_URI = env('GOOGLE_REDIRECT_URI', default='')
GOOGLE_REFRESH_TOKEN = env('GOOGLE_REFRESH_TOKEN', default='')

MICROSOFT_CLIENT_ID = env('MICROSOFT_CLIENT_ID', default='')
MICROSOFT_CLIENT_SECRET = env('MICROSOFT_CLIENT_SECRET', default='')
MICROSOFT_TENANT_ID = env('MICROSOFT_TENANT_ID', default='')
MICROSOFT_REFRESH_TOKEN = env('MICROSOFT_REFRESH_TOKEN', default='')
# Mailbox used for app-only Graph calls
MICROSOFT_CALENDAR_USER = env('MICROSOFT_CALENDAR_USER', default='')

CALENDAR_PROVIDER_TIMEOUT = env.float('CALENDAR_PROVIDER_TIMEOUT', default=5)
CALENDAR_INVITE_UID_DOMAIN = env('CALENDAR_INVITE_UID_DOMAIN', default='careers-platform')

# =============================================================================
# INTERVIEWS
# =============================================================================

INTERVIEW_DEFAULT_DURATION_MINUTES = env.int('INTERVIEW_DEFAULT_DURATION_MINUTES', default=60)
INTERVIEW_MAX_INTERVIEWERS = env.int('INTERVIEW_MAX_INTERVIEWERS', default=10)
INTERVIEW_SAVE_MAX_RETRIES = env.int('INTERVIEW_SAVE_MAX_RETRIES', default=3)

# =============================================================================
# LOGGING
# =============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{asctime}] [{levelname}] {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'ats': {
            'handlers': ['console'],
            'level': env('ATS_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'integrations': {
            'handlers': ['console'],
            'level': env('INTEGRATIONS_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'api': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
