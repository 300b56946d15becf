"""Admin registrations for contact submissions."""

from django.contrib import admin

from . import models


@admin.register(models.ContactSubmission)
class ContactSubmissionAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "read", "ip_address", "created_at")
    search_fields = ("name", "email", "message")
    list_filter = ("read",)
    ordering = ("-created_at",)
    readonly_fields = ("id", "name", "email", "message", "ip_address", "read", "created_at")
    actions = ["mark_selected_as_read"]

    @admin.action(description="Mark selected submissions as read")
    def mark_selected_as_read(self, request, queryset):
        updated = queryset.filter(read=False).update(read=True)
        self.message_user(request, f"{updated} submission(s) marked as read.")
