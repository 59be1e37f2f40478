"""
Celery application for journal_desk.

Notification e-mails are delivered through tasks registered here; in
development and tests CELERY_TASK_ALWAYS_EAGER runs them inline.
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'journal_desk.settings')

app = Celery('journal_desk')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
