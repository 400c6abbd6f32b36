"""WSGI config for the faculty_connect project."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'faculty_connect.settings')

application = get_wsgi_application()
