"""WSGI entry point for the Shepherd Connect project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'shepherd.settings')

application = get_wsgi_application()
