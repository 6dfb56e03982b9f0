"""
WSGI config for the Careers Platform.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'careers_platform.settings')

application = get_wsgi_application()
