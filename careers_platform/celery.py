"""
Celery configuration for the Careers Platform.

Tasks are auto-discovered from the installed Django apps; feedback
reminder emails run on the `ats` queue.
"""

import os

from celery import Celery
from kombu import Exchange, Queue

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'careers_platform.settings')

app = Celery('careers_platform')

# namespace='CELERY' means all celery-related configuration keys
# should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()


# ==================== QUEUE CONFIGURATION ====================

default_exchange = Exchange('default', type='direct')
ats_exchange = Exchange('ats', type='direct')

app.conf.task_queues = (
    Queue('default', default_exchange, routing_key='default'),
    Queue('ats', ats_exchange, routing_key='ats'),
)

app.conf.task_default_queue = 'default'
app.conf.task_default_exchange = 'default'
app.conf.task_default_routing_key = 'default'

app.conf.task_routes = {
    'ats.tasks.*': {'queue': 'ats', 'routing_key': 'ats'},
}
