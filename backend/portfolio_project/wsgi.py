"""WSGI config for the portfolio backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "portfolio_project.settings.production")

application = get_wsgi_application()
