"""Operational endpoints."""

from __future__ import annotations

from django.conf import settings
from django.urls import path
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

app_name = "core"

SERVICE_VERSION = "1.0.0"


class HealthView(APIView):
    """Report which optional integrations are configured."""

    def get(self, request, *args, **kwargs):
        email_mode = (
            "configured"
            if settings.SENDGRID_API_KEY or settings.RESEND_API_KEY
            else "django-mail"
        )
        return Response(
            {
                "status": "healthy",
                "timestamp": timezone.now().isoformat(),
                "version": SERVICE_VERSION,
                "services": {
                    "contact": "operational",
                    "chat": "operational",
                    "email": email_mode,
                    "ai": "remote" if settings.OPENAI_API_KEY else "local",
                },
            }
        )


urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
]
