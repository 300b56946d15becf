"""ASGI config for the portfolio backend."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "portfolio_project.settings.production")

application = get_asgi_application()
