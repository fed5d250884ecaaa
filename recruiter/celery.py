"""
Celery configuration for the recruiter backend.

Tasks are auto-discovered from every installed Django app. Email delivery
goes to its own queue so that slow SMTP relays never hold up other work.
"""

import os

from celery import Celery
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'recruiter.settings')

app = Celery('recruiter')

# All celery-related configuration keys carry a `CELERY_` prefix in settings.
app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()


# ==================== QUEUE CONFIGURATION ====================

default_exchange = Exchange('default', type='direct')
emails_exchange = Exchange('emails', type='direct')

app.conf.task_queues = (
    Queue('default', default_exchange, routing_key='default'),
    Queue('emails', emails_exchange, routing_key='emails'),
)

app.conf.task_default_queue = 'default'
app.conf.task_default_exchange = 'default'
app.conf.task_default_routing_key = 'default'

app.conf.task_routes = {
    'ats.tasks.send_*': {'queue': 'emails', 'routing_key': 'emails'},
}


# ==================== SERIALIZATION ====================

app.conf.task_serializer = 'json'
app.conf.result_serializer = 'json'
app.conf.accept_content = ['json']
app.conf.timezone = 'UTC'
app.conf.enable_utc = True
