"""URL configuration for the portfolio backend."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.core.api", namespace="core")),
    path("api/", include("apps.chat.api", namespace="chat")),
    path("api/", include("apps.contact.api", namespace="contact")),
]
