"""
WSGI config for journal_desk project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'journal_desk.settings')

application = get_wsgi_application()
