"""Models for contact form submissions."""

from __future__ import annotations

import uuid

from django.db import models


class ContactSubmission(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    email = models.CharField(max_length=255)
    message = models.TextField()
    ip_address = models.CharField(max_length=64, blank=True, null=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "contact_submissions"
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["read", "created_at"], name="contact_read_created_idx")]

    def mark_as_read(self) -> bool:
        """Flag the submission as read; returns ``True`` only on the first transition."""

        updated = ContactSubmission.objects.filter(pk=self.pk, read=False).update(read=True)
        self.read = True
        return updated > 0

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"ContactSubmission {self.id} from {self.email}"
