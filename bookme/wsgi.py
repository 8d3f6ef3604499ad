"""
WSGI config for the BookMe project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'bookme.settings.production')

application = get_wsgi_application()
