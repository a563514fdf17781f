"""
WSGI config for the xvo project.

Exposes the WSGI callable as a module-level variable named ``application``;
gunicorn loads it through ``xvo.wsgi:application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'xvo.settings')

application = get_wsgi_application()
