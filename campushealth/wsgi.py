"""
WSGI entry point for the campus health backend.

Plain HTTP deployments (gunicorn, uWSGI) load ``application`` from
here; WebSocket support needs the ASGI entry point in ``asgi.py``.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campushealth.settings')

application = get_wsgi_application()
