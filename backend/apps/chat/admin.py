"""Admin registrations for chat models."""

from django.contrib import admin

from . import models


class ChatMessageInline(admin.TabularInline):
    model = models.ChatMessage
    fields = ("role", "content", "created_at")
    readonly_fields = ("role", "content", "created_at")
    extra = 0
    can_delete = False


@admin.register(models.ChatSession)
class ChatSessionAdmin(admin.ModelAdmin):
    list_display = ("session_id", "ip_address", "created_at", "updated_at")
    search_fields = ("session_id", "ip_address")
    ordering = ("-updated_at",)
    inlines = [ChatMessageInline]


@admin.register(models.ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ("session", "role", "created_at")
    search_fields = ("session__session_id", "content")
    list_filter = ("role",)
    ordering = ("created_at",)
    raw_id_fields = ("session",)
